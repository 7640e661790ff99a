"""Process-wide registry of grammars, compiled queries and per-thread parsers."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Literal

from tree_sitter import Language, Parser, Query, QueryError

from ..errors import QueryCompilationError, UnsupportedLanguage
from .base import LanguageCapability
from .languages import ALL_CAPABILITIES, resolve_language

if TYPE_CHECKING:
    from tree_sitter import Tree

logger = logging.getLogger(__name__)

QueryKind = Literal["primary", "middle", "comment"]
QUERY_KINDS: tuple[QueryKind, ...] = ("primary", "middle", "comment")


class ParserRegistry:
    """Maps language ids to capabilities, grammars and compiled queries.

    Grammars and queries are built the first time they are asked for and
    cached for the life of the registry.  Everything handed out is safe to
    share between threads except :class:`tree_sitter.Parser`, which carries
    state between calls; use :func:`parse` to get a per-thread instance.
    """

    def __init__(self, capabilities: tuple[LanguageCapability, ...] = ALL_CAPABILITIES) -> None:
        self._capabilities: dict[str, LanguageCapability] = {
            cap.name: cap for cap in capabilities
        }
        self._grammars: dict[str, Language] = {}
        self._queries: dict[tuple[str, str], Query | None] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def supported_languages(self) -> list[str]:
        return sorted(self._capabilities)

    def _canonical(self, language: str) -> str:
        if language in self._capabilities:
            return language
        name = resolve_language(language)
        if name not in self._capabilities:
            raise UnsupportedLanguage(language)
        return name

    def get_capability(self, language: str) -> LanguageCapability:
        """Return the capability for *language* (id or alias)."""
        return self._capabilities[self._canonical(language)]

    def grammar(self, language: str) -> Language:
        name = self._canonical(language)
        cached = self._grammars.get(name)
        if cached is not None:
            return cached
        with self._lock:
            if name not in self._grammars:
                logger.debug("Loading tree-sitter grammar for %s", name)
                self._grammars[name] = self._capabilities[name].grammar()
            return self._grammars[name]

    def create_parser(self, language: str) -> Parser:
        """Return a new parser bound to *language*'s grammar."""
        return Parser(self.grammar(language))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def compile_query(self, language: str, kind: QueryKind) -> Query | None:
        """Compile and cache one of *language*'s queries.

        Returns ``None`` when the language defines no query of that kind.
        Raises :class:`QueryCompilationError` when the pattern is malformed.
        """
        name = self._canonical(language)
        key = (name, kind)
        if key in self._queries:
            return self._queries[key]

        cap = self._capabilities[name]
        if kind == "primary":
            source = cap.primary_query
        elif kind == "middle":
            source = cap.middle_query
        elif kind == "comment":
            source = cap.comment_query
        else:
            raise ValueError(f"Unknown query kind: {kind!r}")

        grammar = self.grammar(name)
        with self._lock:
            if key not in self._queries:
                if not source.strip():
                    self._queries[key] = None
                else:
                    try:
                        self._queries[key] = Query(grammar, source)
                    except QueryError as exc:
                        raise QueryCompilationError(name, kind, str(exc)) from exc
            return self._queries[key]

    def validate(self) -> None:
        """Compile every query of every registered language."""
        for name in self.supported_languages():
            for kind in QUERY_KINDS:
                self.compile_query(name, kind)
        logger.debug("Validated queries for %d languages", len(self._capabilities))


# ----------------------------------------------------------------------
# Process-wide singleton
# ----------------------------------------------------------------------

_registry: ParserRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> ParserRegistry:
    """Return the shared registry, building it on first use."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = ParserRegistry()
    return _registry


# Parsers keep internal state between calls, so each thread owns its own.
_local = threading.local()


def _thread_parser(language: str) -> Parser:
    parsers: dict[str, Parser] | None = getattr(_local, "parsers", None)
    if parsers is None:
        parsers = {}
        _local.parsers = parsers
    parser = parsers.get(language)
    if parser is None:
        parser = get_registry().create_parser(language)
        parsers[language] = parser
    return parser


def parse(language: str, source: bytes) -> "Tree | None":
    """Parse *source* with this thread's parser for *language*."""
    name = get_registry().get_capability(language).name
    return _thread_parser(name).parse(source)
