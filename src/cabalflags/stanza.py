"""Build targets of a package and the source files each one owns."""

from dataclasses import dataclass
from typing import Optional

from cabalflags.cabal import (
    Benchmark,
    BuildInfo,
    Detailed,
    Executable,
    ExitcodeStdio,
    Library,
    PackageDescription,
    TestSuite,
)
from cabalflags.paths import (
    PathLike,
    drop_extension,
    equal_paths,
    module_path,
    relativize,
)


LIBRARY = "library"
EXECUTABLE = "executable"
TEST_SUITE = "test-suite"
BENCHMARK = "benchmark"


@dataclass(frozen=True)
class Stanza:
    kind: str
    name: Optional[str]
    build_info: BuildInfo
    module_names: tuple[str, ...] = ()
    file_paths: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return f"{self.kind} '{self.name}'" if self.name else self.kind


def stanza_contains(stanza: Stanza, path: PathLike) -> bool:
    """Check whether ``path``, relative to the manifest directory, is a member.

    A file belongs to the stanza when, under one of its source directories,
    it spells one of the stanza's modules (extension ignored) or one of its
    literal files.
    """
    module_paths = [
        module_path(name)
        for name in stanza.build_info.other_modules + stanza.module_names
    ]
    for source_dir in stanza.build_info.hs_source_dirs:
        relative = relativize(source_dir, path)
        if relative is None:
            continue
        without_extension = drop_extension(relative)
        if any(equal_paths(without_extension, mod) for mod in module_paths):
            return True
        if any(equal_paths(relative, file_path) for file_path in stanza.file_paths):
            return True
    return False


def _library_stanza(library: Library) -> Stanza:
    return Stanza(LIBRARY, library.name, library.build_info, library.exposed_modules)


def _executable_stanza(executable: Executable) -> Stanza:
    return Stanza(
        EXECUTABLE,
        executable.name,
        executable.build_info,
        file_paths=(executable.main_is,),
    )


def _test_stanza(test_suite: TestSuite) -> Stanza:
    interface = test_suite.interface
    if isinstance(interface, Detailed):
        return Stanza(
            TEST_SUITE,
            test_suite.name,
            test_suite.build_info,
            module_names=(interface.test_module,),
        )
    if isinstance(interface, ExitcodeStdio):
        return Stanza(
            TEST_SUITE,
            test_suite.name,
            test_suite.build_info,
            file_paths=(interface.main_is,),
        )
    return Stanza(TEST_SUITE, test_suite.name, test_suite.build_info)


def _benchmark_stanza(benchmark: Benchmark) -> Stanza:
    file_paths = ()
    if isinstance(benchmark.interface, ExitcodeStdio):
        file_paths = (benchmark.interface.main_is,)
    return Stanza(
        BENCHMARK, benchmark.name, benchmark.build_info, file_paths=file_paths
    )


def package_stanzas(description: PackageDescription) -> list[Stanza]:
    """List the package's stanzas in matching order.

    The public library comes first, then executables, test suites and
    benchmarks, each group in declaration order.
    """
    stanzas = []
    if description.library is not None:
        stanzas.append(_library_stanza(description.library))
    stanzas.extend(_executable_stanza(exe) for exe in description.executables)
    stanzas.extend(_test_stanza(suite) for suite in description.test_suites)
    stanzas.extend(_benchmark_stanza(bench) for bench in description.benchmarks)
    return stanzas
