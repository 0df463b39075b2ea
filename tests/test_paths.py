import os

from cabalflags.paths import drop_extension, equal_paths, module_path, relativize


def test_relativize_returns_suffix_under_root():
    result = relativize("src", os.path.join("src", "Foo", "Bar.hs"))

    assert result == os.path.join("Foo", "Bar.hs")


def test_relativize_normalizes_both_sides():
    result = relativize("src/", os.path.join("src", ".", "Foo.hs"))

    assert result == "Foo.hs"


def test_relativize_rejects_sibling_with_common_prefix():
    assert relativize("src", os.path.join("src2", "Foo", "Bar.hs")) is None


def test_relativize_rejects_root_itself():
    assert relativize("src", "src") is None


def test_relativize_current_directory_root():
    path = os.path.join("Foo", "Bar.hs")

    assert relativize(".", path) == path
    assert relativize(".", os.path.join("..", "Foo.hs")) is None
    assert relativize(".", ".") is None


def test_relativize_nested_root():
    result = relativize("lib/src", os.path.join("lib", "src", "A", "B.hs"))

    assert result == os.path.join("A", "B.hs")


def test_equal_paths_ignores_redundant_segments():
    assert equal_paths("Foo/./Bar", os.path.join("Foo", "Bar"))
    assert not equal_paths("Foo/Bar", "Foo/Baz")


def test_drop_extension_only_removes_last_suffix():
    assert drop_extension(os.path.join("Foo", "Bar.hs")) == os.path.join("Foo", "Bar")
    assert drop_extension("Foo.y.hs") == "Foo.y"


def test_module_path_splits_on_dots():
    assert module_path("Data.Map.Strict") == os.path.join("Data", "Map", "Strict")
    assert module_path("Main") == "Main"
