import os
from pathlib import Path
from typing import NamedTuple, Optional


DEFAULT_MANIFEST_SUFFIX = ".cabal"


class ManifestLocation(NamedTuple):
    manifest_paths: list[Path]
    relative_path: Path


def _manifest_names(directory: Path, suffix: str) -> list[str]:
    return [
        name
        for name in sorted(os.listdir(directory))
        if name.endswith(suffix) and (directory / name).is_file()
    ]


def find_manifest_files(
    directory: Path,
    relative_path: Path,
    suffix: str = DEFAULT_MANIFEST_SUFFIX,
) -> Optional[ManifestLocation]:
    """Walk up from ``directory`` until a directory holds manifest files.

    ``relative_path`` is the part of the original path below ``directory``;
    every step up prepends the name of the directory being left. All
    manifests in the first directory that has any are returned, and the walk
    stops there. Returns None once the filesystem root has been searched.
    """
    current = Path(directory)
    relative = Path(relative_path)
    while True:
        names = _manifest_names(current, suffix)
        if names:
            return ManifestLocation([current / name for name in names], relative)
        if current.parent == current:
            return None
        relative = Path(current.name) / relative
        current = current.parent
