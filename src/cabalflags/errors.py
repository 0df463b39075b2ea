from typing import Optional


class CabalFlagsError(Exception):
    """Base class for errors raised by cabalflags."""


class ManifestParseError(CabalFlagsError):
    def __init__(self, message: str, line: Optional[int] = None):
        self.message = message
        self.line = line
        location = f"line {line}: " if line is not None else ""
        super().__init__(f"{location}{message}")


class UnknownDialectError(CabalFlagsError):
    def __init__(self, language: str):
        self.language = language
        super().__init__(f"unsupported language '{language}'")
