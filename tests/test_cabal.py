from pathlib import Path

import pytest

from cabalflags.cabal import (
    BuildInfo,
    Detailed,
    ExitcodeStdio,
    UnsupportedInterface,
    flatten_package_description,
    parse_package_description,
)
from cabalflags.errors import ManifestParseError
from cabalflags.extensions import (
    DisableExtension,
    EnableExtension,
    KnownExtension,
    KnownLanguage,
    UnknownExtension,
    UnknownLanguage,
)


FIXTURE = Path(__file__).resolve().parent / "fixtures" / "demo" / "demo.cabal"


def _flatten(text: str):
    return flatten_package_description(parse_package_description(text))


def test_parse_fixture_components():
    description = _flatten(FIXTURE.read_text(encoding="utf-8"))

    assert description.name == "demo"
    assert description.version == "0.1.0.0"
    assert description.library is not None
    assert [exe.name for exe in description.executables] == ["demo"]
    assert [suite.name for suite in description.test_suites] == ["spec", "doctests"]
    assert [bench.name for bench in description.benchmarks] == ["bench"]


def test_library_joins_common_stanza_and_all_branches():
    description = _flatten(FIXTURE.read_text(encoding="utf-8"))
    library = description.library

    assert library.exposed_modules == ("Demo", "Demo.Internal")
    assert library.build_info.other_modules == ("Demo.Util",)
    assert library.build_info.hs_source_dirs == ("src",)
    assert library.build_info.default_language == KnownLanguage.Haskell2010
    assert library.build_info.default_extensions == (
        EnableExtension(KnownExtension.OverloadedStrings),
        EnableExtension(KnownExtension.CPP),
        DisableExtension(KnownExtension.ImplicitPrelude),
    )


def test_test_suite_and_benchmark_interfaces():
    description = _flatten(FIXTURE.read_text(encoding="utf-8"))
    spec, doctests = description.test_suites

    assert spec.interface == ExitcodeStdio("Spec.hs")
    assert doctests.interface == Detailed("DocTests")
    assert description.benchmarks[0].interface == ExitcodeStdio("Bench.hs")
    assert description.benchmarks[0].build_info.default_extensions[-1] == (
        UnknownExtension("Experimental")
    )


def test_missing_source_dirs_default_to_package_directory():
    description = _flatten("name: x\nexecutable x\n  main-is: Main.hs\n")

    assert description.executables[0].build_info == BuildInfo()
    assert description.executables[0].build_info.hs_source_dirs == (".",)


def test_field_names_are_case_insensitive_and_lists_accept_commas():
    text = (
        "Name: x\n"
        "Library\n"
        "  Exposed-Modules: A, B,C\n"
        '  HS-Source-Dirs: src "other dir"\n'
        "  Default-Language: GHC2021\n"
    )

    library = _flatten(text).library

    assert library.exposed_modules == ("A", "B", "C")
    assert library.build_info.hs_source_dirs == ("src", "other dir")
    assert library.build_info.default_language == KnownLanguage.GHC2021


def test_unknown_language_is_kept_verbatim():
    text = "name: x\nlibrary\n  default-language: Haskell3000\n"

    library = _flatten(text).library

    assert library.build_info.default_language == UnknownLanguage("Haskell3000")


def test_elif_chain_is_flattened_in_order():
    text = (
        "name: x\n"
        "library\n"
        "  if os(windows)\n"
        "    other-modules: Win\n"
        "  elif os(darwin)\n"
        "    other-modules: Mac\n"
        "  else\n"
        "    other-modules: Posix\n"
    )

    library = _flatten(text).library

    assert library.build_info.other_modules == ("Win", "Mac", "Posix")


def test_branch_value_overrides_unconditional_scalar():
    text = (
        "name: x\n"
        "executable x\n"
        "  main-is: Main.hs\n"
        "  if flag(other)\n"
        "    main-is: Other.hs\n"
    )

    assert _flatten(text).executables[0].main_is == "Other.hs"


def test_component_language_overrides_common_stanza():
    text = (
        "name: x\n"
        "common shared\n"
        "  default-language: Haskell2010\n"
        "  default-extensions: OverloadedStrings\n"
        "library\n"
        "  import: shared\n"
        "  exposed-modules: A\n"
        "  default-language: Haskell98\n"
    )

    build_info = _flatten(text).library.build_info

    assert build_info.default_language == KnownLanguage.Haskell98
    assert build_info.default_extensions == (
        EnableExtension(KnownExtension.OverloadedStrings),
    )


def test_top_level_build_fields_form_the_library():
    text = (
        "name: legacy\n"
        "version: 0.1\n"
        "exposed-modules: Legacy.Core\n"
        "hs-source-dirs: src\n"
        "extensions: CPP, NoImplicitPrelude\n"
        "executable tool\n"
        "  main-is: Main.hs\n"
    )

    description = _flatten(text)

    assert description.library.exposed_modules == ("Legacy.Core",)
    assert description.library.build_info.hs_source_dirs == ("src",)
    assert description.library.build_info.default_extensions == (
        EnableExtension(KnownExtension.CPP),
        DisableExtension(KnownExtension.ImplicitPrelude),
    )
    assert [exe.name for exe in description.executables] == ["tool"]


def test_library_section_takes_precedence_over_top_level_fields():
    text = (
        "name: x\n"
        "exposed-modules: Old\n"
        "library\n"
        "  exposed-modules: New\n"
    )

    assert _flatten(text).library.exposed_modules == ("New",)


def test_test_suite_type_is_inferred_when_omitted():
    text = (
        "name: x\n"
        "test-suite a\n"
        "  main-is: A.hs\n"
        "test-suite b\n"
        "  test-module: B\n"
        "test-suite c\n"
        "  hs-source-dirs: test\n"
        "test-suite d\n"
        "  type: exitcode-stdio-2.0\n"
    )

    interfaces = [suite.interface for suite in _flatten(text).test_suites]

    assert interfaces == [
        ExitcodeStdio("A.hs"),
        Detailed("B"),
        UnsupportedInterface(None),
        UnsupportedInterface("exitcode-stdio-2.0"),
    ]


def test_named_libraries_are_kept_apart_from_the_main_library():
    text = (
        "name: x\n"
        "library\n"
        "  exposed-modules: A\n"
        "library internal\n"
        "  exposed-modules: B\n"
    )

    description = _flatten(text)

    assert description.library.exposed_modules == ("A",)
    assert [lib.name for lib in description.sub_libraries] == ["internal"]


def test_comments_and_blank_lines_are_ignored():
    text = (
        "-- leading comment\n"
        "name: x\n"
        "\n"
        "library\n"
        "  -- indented comment\n"
        "  exposed-modules: A\n"
        "\n"
        "  hs-source-dirs: src\n"
    )

    library = _flatten(text).library

    assert library.exposed_modules == ("A",)
    assert library.build_info.hs_source_dirs == ("src",)


def test_byte_order_mark_is_tolerated():
    description = _flatten("\ufeffname: x\nlibrary\n  exposed-modules: A\n")

    assert description.name == "x"


def test_unknown_top_level_sections_are_skipped():
    text = "name: x\ncustom-setup\n  setup-depends: base\nlibrary\n  exposed-modules: A\n"

    assert _flatten(text).library.exposed_modules == ("A",)


@pytest.mark.parametrize(
    "text, message",
    [
        ("name: x\nlibrary\n\ths-source-dirs: src\n", "tab"),
        ("version: 1\nlibrary\n  exposed-modules: A\n", "missing 'name'"),
        ("name: x\nlibrary\n    exposed-modules: A\n  other-modules: B\n", "indentation"),
        ("name: x\nlibrary\n  else\n    exposed-modules: A\n", "'else' without 'if'"),
        ("name: x\nif flag(a)\n  ghc-options: -Wall\n", "outside of a component"),
        ("name: x\nlibrary\n  import: missing\n", "unknown common stanza"),
        ("name: x\nlibrary {\n  exposed-modules: A\n}\n", "cannot parse"),
        ("name: x\nlibrary\nlibrary\n", "duplicate main library"),
        ("name: x\nexecutable\n  main-is: Main.hs\n", "needs a name"),
        ("name: x\nlibrary\n  if\n    exposed-modules: A\n", "needs a condition"),
    ],
)
def test_parse_failures(text, message):
    with pytest.raises(ManifestParseError, match=message):
        parse_package_description(text)


def test_parse_failure_reports_line_number():
    with pytest.raises(ManifestParseError) as excinfo:
        parse_package_description("name: x\nlibrary\n\ths-source-dirs: src\n")

    assert excinfo.value.line == 3


@pytest.mark.parametrize(
    "text",
    [
        "name: x\nexecutable x\n  hs-source-dirs: app\n",
        "name: x\ntest-suite t\n  type: exitcode-stdio-1.0\n",
        "name: x\ntest-suite t\n  type: detailed-0.9\n",
    ],
)
def test_flatten_rejects_components_missing_their_entry_point(text):
    with pytest.raises(ManifestParseError, match="needs"):
        _flatten(text)
