"""Extraction engine: language capabilities, the parser registry and the
per-file chunk pipeline."""

from __future__ import annotations

from .base import LanguageCapability
from .chunk_extractor import SourceText, build_file_chunk, deduplicate, extract_chunks
from .languages import (
    file_patterns,
    language_for_path,
    resolve_language,
    supported_languages,
)
from .registry import ParserRegistry, get_registry, parse

__all__ = [
    "LanguageCapability",
    "ParserRegistry",
    "SourceText",
    "build_file_chunk",
    "deduplicate",
    "extract_chunks",
    "file_patterns",
    "get_registry",
    "language_for_path",
    "parse",
    "resolve_language",
    "supported_languages",
]
