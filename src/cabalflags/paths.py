"""Lexical path helpers used when matching files against manifest stanzas."""

import os
from typing import Optional


type PathLike = os.PathLike[str] | str


def _normalize_path_spelling(path: PathLike) -> str:
    return os.path.normcase(os.path.normpath(str(path)))


def relativize(root: PathLike, path: PathLike) -> Optional[str]:
    """Return ``path`` relative to ``root`` if it lies strictly under it.

    Purely lexical: nothing is looked up on disk. A root of ``.`` contains
    every relative path that does not climb out of it.
    """
    root_norm = os.path.normpath(str(root))
    path_norm = os.path.normpath(str(path))
    if root_norm == os.curdir:
        if os.path.isabs(path_norm) or path_norm == os.curdir:
            return None
        if path_norm == os.pardir or path_norm.startswith(os.pardir + os.sep):
            return None
        return path_norm
    prefix = root_norm if root_norm.endswith(os.sep) else root_norm + os.sep
    if not os.path.normcase(path_norm).startswith(os.path.normcase(prefix)):
        return None
    relative = path_norm[len(prefix):]
    return relative or None


def equal_paths(first: PathLike, second: PathLike) -> bool:
    return _normalize_path_spelling(first) == _normalize_path_spelling(second)


def drop_extension(path: str) -> str:
    return os.path.splitext(path)[0]


def module_path(module_name: str) -> str:
    """``Data.Map.Strict`` -> ``Data/Map/Strict``."""
    return os.path.join(*module_name.split("."))
