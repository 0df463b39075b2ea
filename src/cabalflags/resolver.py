"""Find the manifest stanza that owns a source file."""

import logging
from pathlib import Path
from typing import Iterator, NamedTuple, Optional

from cabalflags.cabal import flatten_package_description, parse_package_description
from cabalflags.errors import ManifestParseError
from cabalflags.extensions import DEFAULT_LANGUAGE, Extension, Language
from cabalflags.locator import DEFAULT_MANIFEST_SUFFIX, find_manifest_files
from cabalflags.paths import PathLike
from cabalflags.stanza import Stanza, package_stanzas, stanza_contains


logger = logging.getLogger(__name__)


class StanzaMatch(NamedTuple):
    manifest_path: Path
    stanza: Stanza


def _read_stanzas(manifest_path: Path) -> list[Stanza]:
    try:
        text = manifest_path.read_text(encoding="utf-8")
        description = parse_package_description(text)
        return package_stanzas(flatten_package_description(description))
    except (ManifestParseError, UnicodeDecodeError) as exc:
        logger.warning("skipping unparseable manifest %s: %s", manifest_path, exc)
        return []


def _candidate_stanzas(
    manifest_paths: list[Path],
) -> Iterator[tuple[Path, Stanza]]:
    for manifest_path in manifest_paths:
        for stanza in _read_stanzas(manifest_path):
            yield manifest_path, stanza


def find_stanza(
    src_path: PathLike, manifest_suffix: str = DEFAULT_MANIFEST_SUFFIX
) -> Optional[StanzaMatch]:
    """Return the first stanza, across all candidate manifests, owning ``src_path``.

    Manifests are tried in directory listing order and stanzas in package
    order. Manifests that fail to parse are skipped. Returns None when there
    is no manifest above the file or nothing in them claims it.
    """
    absolute = Path(src_path).resolve()
    location = find_manifest_files(
        absolute.parent, Path(absolute.name), manifest_suffix
    )
    if location is None:
        logger.debug("no manifest above %s", absolute)
        return None
    for manifest_path, stanza in _candidate_stanzas(location.manifest_paths):
        if stanza_contains(stanza, location.relative_path):
            logger.debug("%s belongs to %s in %s", absolute, stanza.label, manifest_path)
            return StanzaMatch(manifest_path, stanza)
    logger.debug("no stanza in %s claims %s", location.manifest_paths, absolute)
    return None


def get_manifest_stanza(
    src_path: PathLike, manifest_suffix: str = DEFAULT_MANIFEST_SUFFIX
) -> Optional[Stanza]:
    match = find_stanza(src_path, manifest_suffix)
    return match.stanza if match is not None else None


def get_manifest_extensions(
    src_path: PathLike,
    manifest_suffix: str = DEFAULT_MANIFEST_SUFFIX,
    default_language: Language = DEFAULT_LANGUAGE,
) -> tuple[Language, tuple[Extension, ...]]:
    """Language and extensions the manifest declares for ``src_path``."""
    stanza = get_manifest_stanza(src_path, manifest_suffix)
    if stanza is None:
        return default_language, ()
    build_info = stanza.build_info
    return (
        build_info.default_language or default_language,
        build_info.default_extensions,
    )
