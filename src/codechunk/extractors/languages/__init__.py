"""Built-in language capabilities and the extension/alias tables built from them."""

from __future__ import annotations

from pathlib import PurePath

from ...errors import UnsupportedLanguage
from ..base import LanguageCapability
from .c_family import CCapability, CppCapability, CSharpCapability
from .dart import DartCapability
from .go import GoCapability
from .java import JavaCapability
from .javascript import JavaScriptCapability, TypeScriptCapability
from .kotlin import KotlinCapability
from .php import PhpCapability
from .python import PythonCapability
from .ruby import RubyCapability
from .rust import RustCapability
from .scala import ScalaCapability
from .swift import SwiftCapability

__all__ = [
    "ALL_CAPABILITIES",
    "all_file_patterns",
    "file_patterns",
    "get_capability",
    "language_for_path",
    "resolve_language",
    "supported_languages",
]

ALL_CAPABILITIES: tuple[LanguageCapability, ...] = (
    CCapability(),
    CppCapability(),
    CSharpCapability(),
    DartCapability(),
    GoCapability(),
    JavaCapability(),
    JavaScriptCapability(),
    KotlinCapability(),
    PhpCapability(),
    PythonCapability(),
    RubyCapability(),
    RustCapability(),
    ScalaCapability(),
    SwiftCapability(),
    TypeScriptCapability(),
)

_BY_NAME: dict[str, LanguageCapability] = {cap.name: cap for cap in ALL_CAPABILITIES}

# Extension (no dot, lowercase) -> language id.
_EXTENSION_MAP: dict[str, str] = {
    ext: cap.name for cap in ALL_CAPABILITIES for ext in cap.extensions
}

# Alias (lowercase) -> language id.  Canonical ids resolve to themselves.
_ALIASES: dict[str, str] = {
    alias.lower(): cap.name for cap in ALL_CAPABILITIES for alias in cap.aliases
}
_ALIASES.update({name: name for name in _BY_NAME})


def supported_languages() -> list[str]:
    """Return the canonical language ids, sorted."""
    return sorted(_BY_NAME)


def resolve_language(name: str) -> str:
    """Map a language id or alias (case-insensitive) to its canonical id."""
    key = name.strip().lower()
    if key not in _ALIASES:
        raise UnsupportedLanguage(name)
    return _ALIASES[key]


def get_capability(name: str) -> LanguageCapability:
    return _BY_NAME[resolve_language(name)]


def language_for_path(path: str | PurePath) -> str | None:
    """Guess the language of *path* from its extension, or ``None``."""
    suffix = PurePath(path).suffix
    if not suffix:
        return None
    return _EXTENSION_MAP.get(suffix[1:].lower())


def file_patterns(language: str) -> list[str]:
    """Glob patterns matching source files of *language*."""
    return get_capability(language).file_patterns()


def all_file_patterns() -> list[str]:
    """Glob patterns for every supported language, in language order."""
    return [pattern for cap in ALL_CAPABILITIES for pattern in cap.file_patterns()]
