"""Reader for Cabal package description files.

Only what is needed to place a source file inside a component and to learn
that component's language settings is interpreted. Every other field is kept
as raw text on the generic description.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from cabalflags.errors import ManifestParseError
from cabalflags.extensions import (
    Extension,
    Language,
    classify_extension,
    classify_language,
)


COMPONENT_KEYWORDS = ("library", "executable", "test-suite", "benchmark")
CONDITIONAL_KEYWORDS = ("if", "elif", "else")
DEFAULT_SOURCE_DIR = "."
EXITCODE_STDIO = "exitcode-stdio-1.0"
DETAILED = "detailed-0.9"

_FIELD_RE = re.compile(r"^([A-Za-z0-9_-]+)\s*:(.*)$")
_SECTION_RE = re.compile(r"^([A-Za-z][A-Za-z0-9_-]*)(?:\s+(.*))?$")
_LIST_TOKEN_RE = re.compile(r'"([^"]*)"|([^,\s]+)')


@dataclass
class Field:
    name: str
    value: str
    line: int


@dataclass
class Section:
    keyword: str
    args: str
    line: int
    body: list["Field | Section"]


type Item = Field | Section


@dataclass
class CondTree:
    fields: list[Field] = field(default_factory=list)
    branches: list["CondBranch"] = field(default_factory=list)


@dataclass
class CondBranch:
    condition: str
    then_tree: CondTree
    else_tree: Optional[CondTree] = None


@dataclass
class GenericComponent:
    kind: str
    name: Optional[str]
    tree: CondTree
    line: int


@dataclass
class GenericPackageDescription:
    fields: dict[str, str]
    components: list[GenericComponent]


@dataclass(frozen=True)
class BuildInfo:
    hs_source_dirs: tuple[str, ...] = (DEFAULT_SOURCE_DIR,)
    default_language: Optional[Language] = None
    default_extensions: tuple[Extension, ...] = ()
    other_modules: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExitcodeStdio:
    main_is: str


@dataclass(frozen=True)
class Detailed:
    test_module: str


@dataclass(frozen=True)
class UnsupportedInterface:
    type_name: Optional[str]


type TestInterface = ExitcodeStdio | Detailed | UnsupportedInterface
type BenchmarkInterface = ExitcodeStdio | UnsupportedInterface


@dataclass(frozen=True)
class Library:
    name: Optional[str]
    exposed_modules: tuple[str, ...]
    build_info: BuildInfo


@dataclass(frozen=True)
class Executable:
    name: str
    main_is: str
    build_info: BuildInfo


@dataclass(frozen=True)
class TestSuite:
    name: str
    interface: TestInterface
    build_info: BuildInfo


@dataclass(frozen=True)
class Benchmark:
    name: str
    interface: BenchmarkInterface
    build_info: BuildInfo


@dataclass(frozen=True)
class PackageDescription:
    name: str
    version: Optional[str]
    library: Optional[Library]
    sub_libraries: tuple[Library, ...]
    executables: tuple[Executable, ...]
    test_suites: tuple[TestSuite, ...]
    benchmarks: tuple[Benchmark, ...]


@dataclass
class _Line:
    number: int
    indent: int
    text: str


def _logical_lines(text: str) -> list[_Line]:
    lines = []
    for number, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("--"):
            continue
        leading = raw[: len(raw) - len(raw.lstrip())]
        if "\t" in leading:
            raise ManifestParseError("tab character used for indentation", number)
        lines.append(_Line(number, len(leading), stripped))
    return lines


def _parse_items(
    lines: list[_Line], index: int, parent_indent: int
) -> tuple[list[Item], int]:
    items: list[Item] = []
    block_indent: Optional[int] = None
    while index < len(lines):
        line = lines[index]
        if line.indent <= parent_indent:
            break
        if block_indent is None:
            block_indent = line.indent
        elif line.indent != block_indent:
            raise ManifestParseError("inconsistent indentation", line.number)

        field_match = _FIELD_RE.match(line.text)
        if field_match:
            parts = [field_match.group(2).strip()]
            index += 1
            while index < len(lines) and lines[index].indent > line.indent:
                parts.append(lines[index].text)
                index += 1
            value = "\n".join(part for part in parts if part)
            items.append(Field(field_match.group(1).lower(), value, line.number))
            continue

        section_match = _SECTION_RE.match(line.text)
        if not section_match or "{" in line.text or "}" in line.text:
            raise ManifestParseError(f"cannot parse '{line.text}'", line.number)
        body, index = _parse_items(lines, index + 1, line.indent)
        items.append(
            Section(
                section_match.group(1).lower(),
                (section_match.group(2) or "").strip(),
                line.number,
                body,
            )
        )
    return items, index


def _list_tokens(value: str) -> list[str]:
    tokens = (bare or quoted for quoted, bare in _LIST_TOKEN_RE.findall(value))
    return [token for token in tokens if token]


def _build_tree(items: Iterable[Item], commons: dict[str, CondTree]) -> CondTree:
    tree = CondTree()
    open_branch: Optional[CondBranch] = None
    for item in items:
        if isinstance(item, Field):
            open_branch = None
            if item.name != "import":
                tree.fields.append(item)
                continue
            for name in _list_tokens(item.value):
                common = commons.get(name)
                if common is None:
                    raise ManifestParseError(
                        f"unknown common stanza '{name}'", item.line
                    )
                tree.fields.extend(common.fields)
                tree.branches.extend(common.branches)
            continue

        if item.keyword in {"if", "elif"} and not item.args:
            raise ManifestParseError(f"'{item.keyword}' needs a condition", item.line)
        if item.keyword == "if":
            open_branch = CondBranch(item.args, _build_tree(item.body, commons))
            tree.branches.append(open_branch)
        elif item.keyword == "elif":
            if open_branch is None:
                raise ManifestParseError("'elif' without 'if'", item.line)
            nested = CondBranch(item.args, _build_tree(item.body, commons))
            open_branch.else_tree = CondTree(branches=[nested])
            open_branch = nested
        elif item.keyword == "else":
            if open_branch is None:
                raise ManifestParseError("'else' without 'if'", item.line)
            open_branch.else_tree = _build_tree(item.body, commons)
            open_branch = None
        else:
            raise ManifestParseError(f"unexpected section '{item.keyword}'", item.line)
    return tree


def parse_package_description(text: str) -> GenericPackageDescription:
    """Parse manifest text, keeping conditional blocks intact.

    Raises ManifestParseError when the layout cannot be understood.
    Sections other than components and common stanzas (flags, source
    repositories, custom setup, foreign libraries) are accepted and skipped.
    Build fields at the top level with no `library` section describe the main
    library, as in old manifests.
    """
    items, _ = _parse_items(_logical_lines(text.lstrip("\ufeff")), 0, -1)
    fields: dict[str, str] = {}
    top_level: list[Field] = []
    commons: dict[str, CondTree] = {}
    components: list[GenericComponent] = []
    has_main_library = False
    for item in items:
        if isinstance(item, Field):
            fields.setdefault(item.name, item.value)
            top_level.append(item)
            continue
        if item.keyword in CONDITIONAL_KEYWORDS:
            raise ManifestParseError(
                f"'{item.keyword}' outside of a component", item.line
            )
        if item.keyword == "common":
            if not item.args:
                raise ManifestParseError("common stanza needs a name", item.line)
            commons[item.args] = _build_tree(item.body, commons)
        elif item.keyword in COMPONENT_KEYWORDS:
            name = item.args or None
            if name is None and item.keyword != "library":
                raise ManifestParseError(f"{item.keyword} needs a name", item.line)
            if item.keyword == "library" and name is None:
                if has_main_library:
                    raise ManifestParseError("duplicate main library", item.line)
                has_main_library = True
            components.append(
                GenericComponent(
                    item.keyword, name, _build_tree(item.body, commons), item.line
                )
            )
    if not fields.get("name"):
        raise ManifestParseError("missing 'name' field")
    if not has_main_library and "exposed-modules" in fields:
        # Pre-1.2 layout: build fields at the top level describe the library.
        line = next(f.line for f in top_level if f.name == "exposed-modules")
        components.insert(
            0, GenericComponent("library", None, CondTree(fields=top_level), line)
        )
    return GenericPackageDescription(fields, components)


def _flatten_tree(tree: CondTree) -> list[Field]:
    fields = list(tree.fields)
    for branch in tree.branches:
        fields.extend(_flatten_tree(branch.then_tree))
        if branch.else_tree is not None:
            fields.extend(_flatten_tree(branch.else_tree))
    return fields


def _scalar(fields: list[Field], *names: str) -> Optional[str]:
    for entry in reversed(fields):
        if entry.name in names and entry.value:
            return entry.value
    return None


def _tokens(fields: list[Field], *names: str) -> list[str]:
    values = []
    for entry in fields:
        if entry.name in names:
            values.extend(_list_tokens(entry.value))
    return values


def _build_info(fields: list[Field]) -> BuildInfo:
    language = _scalar(fields, "default-language")
    source_dirs = _tokens(fields, "hs-source-dirs", "hs-source-dir")
    return BuildInfo(
        hs_source_dirs=tuple(source_dirs) or (DEFAULT_SOURCE_DIR,),
        default_language=classify_language(language) if language else None,
        default_extensions=tuple(
            classify_extension(name)
            for name in _tokens(fields, "default-extensions", "extensions")
        ),
        other_modules=tuple(_tokens(fields, "other-modules")),
    )


def _interface(
    component: GenericComponent, fields: list[Field], allow_detailed: bool
) -> TestInterface:
    type_name = _scalar(fields, "type")
    main_is = _scalar(fields, "main-is")
    test_module = _scalar(fields, "test-module") if allow_detailed else None
    if type_name is None:
        if main_is:
            return ExitcodeStdio(main_is)
        if test_module:
            return Detailed(test_module)
        return UnsupportedInterface(None)
    if type_name == EXITCODE_STDIO:
        if not main_is:
            raise ManifestParseError(
                f"{component.kind} '{component.name}' needs 'main-is'", component.line
            )
        return ExitcodeStdio(main_is)
    if type_name == DETAILED and allow_detailed:
        if not test_module:
            raise ManifestParseError(
                f"{component.kind} '{component.name}' needs 'test-module'",
                component.line,
            )
        return Detailed(test_module)
    return UnsupportedInterface(type_name)


def flatten_package_description(
    description: GenericPackageDescription,
) -> PackageDescription:
    """Join every conditional branch into its component unconditionally.

    List fields from all branches are concatenated. For single-valued fields
    the last declaration wins, so a component overrides its imported common
    stanzas and a branch overrides the unconditional value.
    """
    library = None
    sub_libraries = []
    executables = []
    test_suites = []
    benchmarks = []
    for component in description.components:
        fields = _flatten_tree(component.tree)
        build_info = _build_info(fields)
        if component.kind == "library":
            parsed = Library(
                component.name,
                tuple(_tokens(fields, "exposed-modules")),
                build_info,
            )
            if component.name is None:
                library = parsed
            else:
                sub_libraries.append(parsed)
        elif component.kind == "executable":
            main_is = _scalar(fields, "main-is")
            if not main_is:
                raise ManifestParseError(
                    f"executable '{component.name}' needs 'main-is'", component.line
                )
            executables.append(Executable(component.name, main_is, build_info))
        elif component.kind == "test-suite":
            test_suites.append(
                TestSuite(
                    component.name,
                    _interface(component, fields, allow_detailed=True),
                    build_info,
                )
            )
        elif component.kind == "benchmark":
            benchmarks.append(
                Benchmark(
                    component.name,
                    _interface(component, fields, allow_detailed=False),
                    build_info,
                )
            )
    return PackageDescription(
        name=description.fields["name"],
        version=description.fields.get("version"),
        library=library,
        sub_libraries=tuple(sub_libraries),
        executables=tuple(executables),
        test_suites=tuple(test_suites),
        benchmarks=tuple(benchmarks),
    )
