"""Exception types raised by the extraction engine."""

from __future__ import annotations


class CodeChunkError(Exception):
    """Base class for every error raised by codechunk."""


class UnsupportedLanguage(CodeChunkError):
    """A language id or alias that has no registered grammar."""

    def __init__(self, language: str) -> None:
        super().__init__(f"Unsupported language: {language}")
        self.language = language


class QueryCompilationError(CodeChunkError):
    """A registered query string does not compile against its grammar.

    This is a bug in the language definition, never a property of the
    file being processed, so the pipeline lets it propagate.
    """

    def __init__(self, language: str, kind: str, message: str) -> None:
        super().__init__(f"Failed to compile {kind} query for {language}: {message}")
        self.language = language
        self.kind = kind
        self.message = message


class ExtractionFailed(CodeChunkError):
    """A single file could not be turned into chunks."""


class NoSupportedFiles(CodeChunkError):
    """An extraction run produced no chunks at all."""

    def __init__(self, message: str = "No supported files found") -> None:
        super().__init__(message)


class ExtractionCancelled(CodeChunkError):
    """The caller cancelled an extraction run before it finished."""
