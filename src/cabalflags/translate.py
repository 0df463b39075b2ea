"""Translate manifest languages and extensions into the formatter's vocabulary."""

from typing import Optional, Sequence

from cabalflags import formatter
from cabalflags.errors import UnknownDialectError
from cabalflags.extensions import (
    DEFAULT_LANGUAGE,
    EnableExtension,
    Extension,
    KnownExtension,
    KnownLanguage,
    Language,
    UnknownExtension,
)
from cabalflags.locator import DEFAULT_MANIFEST_SUFFIX
from cabalflags.paths import PathLike
from cabalflags.resolver import get_manifest_extensions


LANGUAGE_TABLE: dict[KnownLanguage, formatter.Language] = {
    KnownLanguage.Haskell98: formatter.Language.Haskell98,
    KnownLanguage.Haskell2010: formatter.Language.Haskell2010,
}

EXTENSION_TABLE: dict[KnownExtension, formatter.KnownExtension] = {
    extension: formatter.KnownExtension[extension.name]
    for extension in KnownExtension
    if extension.name in formatter.KnownExtension.__members__
}


def convert_language(language: Language) -> formatter.Language:
    """Raises UnknownDialectError for languages the formatter cannot parse."""
    if isinstance(language, KnownLanguage) and language in LANGUAGE_TABLE:
        return LANGUAGE_TABLE[language]
    raise UnknownDialectError(str(language))


def convert_extension(extension: Extension) -> Optional[formatter.Extension]:
    """Keep polarity; None for Cabal extensions the formatter has no name for."""
    if isinstance(extension, UnknownExtension):
        return formatter.UnknownExtension(extension.name)
    known = EXTENSION_TABLE.get(extension.extension)
    if known is None:
        return None
    if isinstance(extension, EnableExtension):
        return formatter.EnableExtension(known)
    return formatter.DisableExtension(known)


def translate_build_flags(
    language: Language, extensions: Sequence[Extension]
) -> tuple[formatter.Language, list[formatter.Extension]]:
    converted = (convert_extension(extension) for extension in extensions)
    return (
        convert_language(language),
        [extension for extension in converted if extension is not None],
    )


def extensions_for_source_path(
    src_path: PathLike,
    manifest_suffix: str = DEFAULT_MANIFEST_SUFFIX,
    default_language: Language = DEFAULT_LANGUAGE,
    extra_extensions: Sequence[Extension] = (),
) -> list[str]:
    """Names of the extensions the formatter should enable for ``src_path``.

    ``extra_extensions`` are applied after the ones the manifest declares.
    """
    language, extensions = get_manifest_extensions(
        src_path, manifest_suffix, default_language
    )
    target_language, target_extensions = translate_build_flags(
        language, tuple(extensions) + tuple(extra_extensions)
    )
    return [
        extension.name
        for extension in formatter.to_extension_list(
            target_language, target_extensions
        )
    ]
