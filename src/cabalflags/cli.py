#!/usr/bin/env python3
"""Report the Haskell language extensions a Cabal manifest enables for a file."""

import importlib.metadata
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional, Sequence, TypedDict

from cabalflags.errors import CabalFlagsError
from cabalflags.extensions import (
    DEFAULT_LANGUAGE,
    Extension,
    Language,
    classify_extension,
    classify_language,
)
from cabalflags.locator import DEFAULT_MANIFEST_SUFFIX
from cabalflags.resolver import StanzaMatch, find_stanza
from cabalflags.translate import LANGUAGE_TABLE, extensions_for_source_path


DEFAULT_CONFIG_FILE_NAME = "cabalflags.json"
CONFIG_FILE_ENV = "CABALFLAGS_CONFIG_FILE"
MANIFEST_SUFFIX_ENV = "CABALFLAGS_MANIFEST_SUFFIX"
DEFAULT_LANGUAGE_ENV = "CABALFLAGS_DEFAULT_LANGUAGE"
EXTENSIONS_ENV = "CABALFLAGS_EXTENSIONS"


class Config(TypedDict):
    manifest_suffix: str
    default_language: str
    extra_extensions: list[str]
    config_path: Optional[Path]


class ResolvedConfig(TypedDict):
    manifest_suffix: str
    default_language: Language
    extra_extensions: list[Extension]


type StringValidationResult = tuple[int, Optional[str]]
type ListValidationResult = tuple[int, Optional[list[str]]]


class ConfigManager:
    def __init__(
        self,
        manifest_suffix: str = DEFAULT_MANIFEST_SUFFIX,
        default_language: str = DEFAULT_LANGUAGE.value,
        extra_extensions: Optional[list[str]] = None,
        config_path: Optional[Path] = None,
    ):
        self._manifest_suffix = manifest_suffix
        self._default_language = default_language
        self._extra_extensions = (
            extra_extensions if extra_extensions is not None else []
        )
        self._config_path = config_path

    @property
    def manifest_suffix(self) -> str:
        return self._manifest_suffix

    @property
    def default_language(self) -> str:
        return self._default_language

    @property
    def extra_extensions(self) -> list[str]:
        return self._extra_extensions

    @property
    def config_path(self) -> Optional[Path]:
        return self._config_path

    def set_manifest_suffix(self, value: str) -> None:
        self._manifest_suffix = value

    def set_default_language(self, value: str) -> None:
        self._default_language = value

    def set_extra_extensions(self, value: list[str]) -> None:
        self._extra_extensions = value

    def set_config_path(self, value: Optional[Path]) -> None:
        self._config_path = value

    def to_dict(self) -> Config:
        data: Config = {
            "manifest_suffix": self._manifest_suffix,
            "default_language": self._default_language,
            "extra_extensions": self._extra_extensions,
            "config_path": self._config_path,
        }
        return data

    @classmethod
    def from_dict(cls, config: Config) -> "ConfigManager":
        return cls(
            manifest_suffix=config["manifest_suffix"],
            default_language=config["default_language"],
            extra_extensions=config["extra_extensions"],
            config_path=config["config_path"],
        )


def info(message: str) -> None:
    """Print a standard informational message."""
    print(f"[cabalflags] {message}")


def error(message: str) -> None:
    """Print a standardized error message to stderr."""
    print(f"error: {message}", file=sys.stderr)


# Active configuration
config_manager = ConfigManager()


def _resolve_config(
    config_manager: Optional[ConfigManager] = None,
) -> ResolvedConfig:
    manager = (
        config_manager if config_manager is not None else globals()["config_manager"]
    )
    return {
        "manifest_suffix": manager.manifest_suffix,
        "default_language": classify_language(manager.default_language),
        "extra_extensions": [
            classify_extension(name) for name in manager.extra_extensions
        ],
    }


def _validate_non_empty_string(value: Any, field_name: str) -> StringValidationResult:
    """Validate value is a non-empty string.

    Returns (0, stripped_string) if valid, (0, None) if value is None,
    or (1, None) if invalid with error message printed.
    """
    if value is None:
        return (0, None)
    if isinstance(value, str) and value.strip():
        return (0, value.strip())
    error(f"config {field_name} must be a non-empty string")
    return (1, None)


def _validate_string_list(value: Any, field_name: str) -> ListValidationResult:
    if value is None:
        return (0, None)
    if not isinstance(value, list):
        error(f"config {field_name} must be a list of strings")
        return (1, None)
    normalized = []
    for entry in value:
        if not isinstance(entry, str) or not entry.strip():
            error(f"config {field_name} must be a list of non-empty strings")
            return (1, None)
        normalized.append(entry.strip())
    return (0, normalized)


def _validate_language(value: Any, field_name: str) -> StringValidationResult:
    result, validated = _validate_non_empty_string(value, field_name)
    if result or validated is None:
        return (result, None)
    if classify_language(validated) not in LANGUAGE_TABLE:
        known = ", ".join(language.value for language in LANGUAGE_TABLE)
        error(f"config {field_name} must be one of: {known}")
        return (1, None)
    return (0, validated)


def _apply_config_data(data: dict, manager: ConfigManager) -> int:
    """Validate and apply configuration fields.

    Returns 0 on success, 1 on validation error.
    """
    result, validated = _validate_non_empty_string(
        data.get("manifest_suffix"), "manifest_suffix"
    )
    if result:
        return 1
    if validated is not None:
        manager.set_manifest_suffix(validated)

    result, validated = _validate_language(
        data.get("default_language"), "default_language"
    )
    if result:
        return 1
    if validated is not None:
        manager.set_default_language(validated)

    result, validated_list = _validate_string_list(
        data.get("extensions"), "extensions"
    )
    if result:
        return 1
    if validated_list is not None:
        manager.set_extra_extensions(validated_list)

    return 0


def _apply_config_file(path: Path) -> int:
    """Load and validate a JSON config file into config_manager."""
    manager = globals()["config_manager"]
    try:
        contents = path.read_text(encoding="utf-8")
    except OSError as exc:
        error(f"failed to read config file {path}: {exc}")
        return 1
    try:
        data = json.loads(contents)
    except json.JSONDecodeError as exc:
        error(f"invalid JSON in {path}: {exc}")
        return 1
    if not isinstance(data, dict):
        error(f"config file {path} must contain a JSON object")
        return 1
    return _apply_config_data(data, manager)


def _apply_env_overrides() -> int:
    manager = globals()["config_manager"]
    suffix_override = os.environ.get(MANIFEST_SUFFIX_ENV, "").strip()
    if suffix_override:
        manager.set_manifest_suffix(suffix_override)
    language_override = os.environ.get(DEFAULT_LANGUAGE_ENV)
    if language_override:
        result, validated = _validate_language(language_override, DEFAULT_LANGUAGE_ENV)
        if result or validated is None:
            return 1
        manager.set_default_language(validated)
    extensions_override = os.environ.get(EXTENSIONS_ENV)
    if extensions_override:
        manager.set_extra_extensions(
            [
                entry.strip()
                for entry in extensions_override.split(",")
                if entry.strip()
            ]
        )
    return 0


def _discover_config_path(start_dir: Path, names: Sequence[str]) -> Optional[Path]:
    current = Path(start_dir).resolve()
    while True:
        for name in names:
            candidate = current / name
            if candidate.exists():
                return candidate
        if current.parent == current:
            break
        current = current.parent
    return None


def _load_config(config_path: Optional[str]) -> int:
    config_env = os.environ.get(CONFIG_FILE_ENV)
    if config_path:
        candidate: Optional[Path] = Path(config_path).expanduser()
    elif config_env:
        candidate = Path(config_env).expanduser()
    else:
        candidate = _discover_config_path(Path.cwd(), [DEFAULT_CONFIG_FILE_NAME])

    if candidate is not None:
        if not candidate.exists():
            error(f"config file {candidate} not found")
            return 2
        globals()["config_manager"].set_config_path(candidate)
        result = _apply_config_file(candidate)
        if result != 0:
            return result

    return _apply_env_overrides()


def usage() -> None:
    print("usage: cabalflags <command> [options] <file>...")
    print("")
    print("commands:")
    print("  extensions (e)   print the extensions enabled for each Haskell file")
    print("  stanza (s)       show which manifest and component own each file")
    print("  help (h)         show this help text")
    print("")
    print("options:")
    print("  --config <path>  load defaults from a JSON file")
    print("  --json           print results as JSON")
    print("  --verbose        log how manifests are located and parsed")
    print("")
    print("examples:")
    print("  cabalflags extensions src/Data/Tree.hs")
    print("  cabalflags e --json app/Main.hs test/Spec.hs")
    print("  cabalflags stanza src/Data/Tree.hs")
    print(f"  cabalflags e --config {DEFAULT_CONFIG_FILE_NAME} src/Lib.hs")


def show_extensions(
    config: ResolvedConfig, paths: Sequence[str], as_json: bool
) -> int:
    results: dict[str, list[str]] = {}
    for path in paths:
        try:
            results[path] = extensions_for_source_path(
                path,
                manifest_suffix=config["manifest_suffix"],
                default_language=config["default_language"],
                extra_extensions=config["extra_extensions"],
            )
        except (CabalFlagsError, OSError) as exc:
            error(f"{path}: {exc}")
            return 1

    if as_json:
        print(json.dumps(results, indent=2))
    elif len(paths) == 1:
        for name in results[paths[0]]:
            print(name)
    else:
        for path, names in results.items():
            print(f"{path}: {' '.join(names)}")
    return 0


def _stanza_summary(match: StanzaMatch) -> dict[str, Any]:
    build_info = match.stanza.build_info
    language = build_info.default_language
    return {
        "manifest": str(match.manifest_path),
        "kind": match.stanza.kind,
        "name": match.stanza.name,
        "language": str(language) if language is not None else None,
        "extensions": [str(ext) for ext in build_info.default_extensions],
    }


def show_stanzas(config: ResolvedConfig, paths: Sequence[str], as_json: bool) -> int:
    matches: dict[str, Optional[StanzaMatch]] = {}
    for path in paths:
        try:
            matches[path] = find_stanza(path, manifest_suffix=config["manifest_suffix"])
        except OSError as exc:
            error(f"{path}: {exc}")
            return 1

    if as_json:
        summaries = {
            path: _stanza_summary(match) if match is not None else None
            for path, match in matches.items()
        }
        print(json.dumps(summaries, indent=2))
        return 0
    for path, match in matches.items():
        if match is None:
            info(f"{path}: no stanza found")
        else:
            info(f"{path}: {match.stanza.label} in {match.manifest_path}")
    return 0


def main() -> int:
    if len(sys.argv) < 2:
        usage()
        return 2

    command = sys.argv[1]
    if command in {"-v", "--version"}:
        try:
            version = importlib.metadata.version("cabalflags")
        except importlib.metadata.PackageNotFoundError:
            version = "0.1.0"
        print(f"cabalflags {version}")
        return 0
    args = sys.argv[2:]

    aliases = {
        "e": "extensions",
        "s": "stanza",
        "h": "help",
    }
    command = aliases.get(command, command)
    if command in {"help", "-h", "--help"}:
        usage()
        return 0
    if command not in {"extensions", "stanza"}:
        error(f"unknown command '{command}'")
        usage()
        return 2

    config_path = None
    as_json = False
    verbose = False
    paths = []
    index = 0
    while index < len(args):
        arg = args[index]
        if arg == "--":
            paths.extend(args[index + 1 :])
            break
        if arg == "--config":
            if index + 1 >= len(args):
                error("usage: --config <path>")
                return 2
            config_path = args[index + 1]
            index += 2
            continue
        if arg.startswith("--config="):
            config_path = arg.split("=", 1)[1]
            if not config_path:
                error("usage: --config <path>")
                return 2
            index += 1
            continue
        if arg == "--json":
            as_json = True
        elif arg == "--verbose":
            verbose = True
        elif arg.startswith("--"):
            error(f"unknown option '{arg}'")
            return 2
        else:
            paths.append(arg)
        index += 1

    if not paths:
        error(f"usage: cabalflags {command} <file>...")
        return 2

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="warning: %(message)s")

    result = _load_config(config_path)
    if result != 0:
        return result
    resolved_config = _resolve_config()

    if command == "extensions":
        return show_extensions(resolved_config, paths, as_json)
    return show_stanzas(resolved_config, paths, as_json)


if __name__ == "__main__":
    raise SystemExit(main())
