"""Turn one source file into a list of :class:`CodeChunk` values.

The flow for a file is: parse, collect comment ranges, run the primary and
middle queries, rebuild each capture as a chunk with its original
indentation restored, append the whole-file chunk, then sort and collapse
chunks that cover the same lines.

Tree-sitter reports byte offsets and byte columns; chunks carry character
offsets.  :class:`SourceText` does the conversion.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from itertools import accumulate
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator

from tree_sitter import QueryCursor

from ..errors import ExtractionFailed
from ..models import ChunkType, CodeChunk, type_priority
from .base import IDENTIFIER_TYPES, LanguageCapability, first_child_text
from .registry import get_registry, parse

if TYPE_CHECKING:
    from tree_sitter import Node, Query, Tree

logger = logging.getLogger(__name__)

# Primary chunks shorter than this (in bytes) are noise.
MIN_PRIMARY_BYTES = 10

# Middle chunks must span at least two lines and fall inside this size band.
MIN_MIDDLE_LINES = 2
MIN_MIDDLE_CHARS = 30
MAX_MIDDLE_CHARS = 2000

FILE_CHUNK_NAME = "entire_file"

_NAMED_MIDDLE_TYPES = frozenset({
    ChunkType.function, ChunkType.class_, ChunkType.method, ChunkType.struct,
})


class SourceText:
    """A source buffer with byte/character/line lookups."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.data = text.encode("utf-8")
        self._ascii = len(self.data) == len(text)
        self._char_starts: list[int] | None = None
        self._line_starts: list[int] | None = None

    def char_offset(self, byte_offset: int) -> int:
        """Character index of *byte_offset* (clamped to the buffer)."""
        if byte_offset <= 0:
            return 0
        if byte_offset >= len(self.data):
            return len(self.text)
        if self._ascii:
            return byte_offset
        if self._char_starts is None:
            # Byte offset at which each character starts.
            self._char_starts = list(
                accumulate((len(ch.encode("utf-8")) for ch in self.text), initial=0)
            )
        return bisect_left(self._char_starts, byte_offset)

    def line_start(self, row: int) -> int:
        """Byte offset of the first byte of 0-based *row*."""
        if self._line_starts is None:
            starts = [0]
            pos = self.data.find(b"\n")
            while pos != -1:
                starts.append(pos + 1)
                pos = self.data.find(b"\n", pos + 1)
            self._line_starts = starts
        if row >= len(self._line_starts):
            return len(self.data)
        return self._line_starts[row]

    def indentation(self, row: int, byte_column: int) -> str:
        """Leading whitespace of *row* up to *byte_column*, as characters."""
        start = self.line_start(row)
        prefix = self.data[start:start + byte_column].decode("utf-8", errors="replace")
        return prefix[:len(prefix) - len(prefix.lstrip())]

    def line_count(self) -> int:
        """Number of rows as tree-sitter counts them (only ``\\n`` breaks a line)."""
        if not self.text:
            return 1
        return self.text.count("\n") + (not self.text.endswith("\n"))


# ----------------------------------------------------------------------
# Comments
# ----------------------------------------------------------------------

def extract_comment_ranges(
    tree: "Tree", source: SourceText, capability: LanguageCapability
) -> list[tuple[int, int]]:
    """Character ranges of every comment in the file, sorted by start."""
    query = get_registry().compile_query(capability.name, "comment")
    if query is None:
        return []
    spans: set[tuple[int, int]] = set()
    for node, _capture in _captures(query, tree.root_node):
        if not capability.is_comment_node(node):
            continue
        spans.add((source.char_offset(node.start_byte), source.char_offset(node.end_byte)))
    return sorted(spans)


def _relative_comments(
    comments: list[tuple[int, int]], start_char: int, end_char: int, shift: int
) -> list[tuple[int, int]]:
    return [
        (cs - start_char + shift, ce - start_char + shift)
        for cs, ce in comments
        if cs >= start_char and ce <= end_char
    ]


# ----------------------------------------------------------------------
# Query helpers
# ----------------------------------------------------------------------

def _captures(query: "Query", root: "Node") -> Iterator[tuple["Node", str]]:
    for _pattern, captures in QueryCursor(query).matches(root):
        for capture_name, nodes in captures.items():
            for node in nodes:
                yield node, capture_name


def _display_path(file_path: str | Path, root: str | Path | None) -> str:
    path = Path(file_path)
    if root is not None:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            pass
    return path.as_posix()


# ----------------------------------------------------------------------
# Chunk building
# ----------------------------------------------------------------------

class _FileContext:
    """State shared by every chunk built from one file."""

    def __init__(
        self,
        source: SourceText,
        display_path: str,
        capability: LanguageCapability,
        comments: list[tuple[int, int]],
    ) -> None:
        self.source = source
        self.display_path = display_path
        self.capability = capability
        self.comments = comments

    def name_for(self, node: "Node", capture_name: str) -> str:
        name = self.capability.extract_name(node, self.source.data, capture_name)
        if not name:
            name = first_child_text(node, self.source.data, IDENTIFIER_TYPES)
        return name or "unknown"

    def build(
        self, node: "Node", chunk_type: ChunkType, name: str, text: str
    ) -> CodeChunk:
        start_char = self.source.char_offset(node.start_byte)
        end_char = self.source.char_offset(node.end_byte)
        row, column = node.start_point
        indent = self.source.indentation(row, column)
        return CodeChunk(
            content=indent + text,
            file_path=self.display_path,
            start_line=row + 1,
            end_line=node.end_point[0] + 1,
            language=self.capability.name,
            chunk_type=chunk_type,
            name=name,
            comment_ranges=_relative_comments(self.comments, start_char, end_char, len(indent)),
            original_indentation=len(indent),
        )

    def node_text(self, node: "Node") -> str:
        return self.source.text[
            self.source.char_offset(node.start_byte):self.source.char_offset(node.end_byte)
        ]


def _primary_chunks(ctx: _FileContext, tree: "Tree") -> list[CodeChunk]:
    query = get_registry().compile_query(ctx.capability.name, "primary")
    if query is None:
        return []
    chunks: list[CodeChunk] = []
    for node, capture_name in _captures(query, tree.root_node):
        chunk_type = ctx.capability.capture_to_chunk_type(capture_name)
        if chunk_type is None:
            continue
        text = ctx.node_text(node)
        if not text.strip() or len(text.encode("utf-8")) < MIN_PRIMARY_BYTES:
            continue
        chunks.append(ctx.build(node, chunk_type, ctx.name_for(node, capture_name), text))
    return chunks


def _middle_chunks(ctx: _FileContext, tree: "Tree") -> list[CodeChunk]:
    query = get_registry().compile_query(ctx.capability.name, "middle")
    if query is None:
        return []
    chunks: list[CodeChunk] = []
    seen: set[tuple[int, int, str]] = set()
    for node, capture_name in _captures(query, tree.root_node):
        chunk_type = ctx.capability.middle_capture_to_chunk_type(capture_name)
        if chunk_type is None:
            continue
        if node.end_point[0] - node.start_point[0] + 1 < MIN_MIDDLE_LINES:
            continue
        text = ctx.node_text(node)
        if not MIN_MIDDLE_CHARS <= len(text) <= MAX_MIDDLE_CHARS:
            continue
        # Nested declarations keep their real names; other blocks are named
        # after the construct that produced them.
        if chunk_type in _NAMED_MIDDLE_TYPES:
            name = ctx.name_for(node, capture_name)
        else:
            name = capture_name
        chunk = ctx.build(node, chunk_type, name, text)
        key = (chunk.start_line, chunk.end_line, chunk.content)
        if key in seen:
            continue
        seen.add(key)
        chunks.append(chunk)
    return chunks


def build_file_chunk(
    source: SourceText,
    display_path: str,
    language: str,
    comments: list[tuple[int, int]],
) -> CodeChunk:
    """The whole-file chunk used by "type the entire file" mode."""
    return CodeChunk(
        content=source.text,
        file_path=display_path,
        start_line=1,
        end_line=source.line_count(),
        language=language,
        chunk_type=ChunkType.file,
        name=FILE_CHUNK_NAME,
        comment_ranges=list(comments),
        original_indentation=0,
    )


def deduplicate(chunks: Iterable[CodeChunk]) -> list[CodeChunk]:
    """Sort by span and keep the most specific chunk for each span.

    File chunks sort last within their span and are never collapsed.
    """
    ordered = sorted(
        chunks,
        key=lambda c: (c.start_line, c.end_line, type_priority(c.chunk_type)),
    )
    result: list[CodeChunk] = []
    kept: CodeChunk | None = None
    for chunk in ordered:
        if chunk.chunk_type is ChunkType.file:
            result.append(chunk)
            continue
        if (
            kept is not None
            and kept.start_line == chunk.start_line
            and kept.end_line == chunk.end_line
        ):
            continue
        result.append(chunk)
        kept = chunk
    return result


# ----------------------------------------------------------------------
# Entry points
# ----------------------------------------------------------------------

def extract_chunks_from_tree(
    tree: "Tree",
    source: SourceText,
    file_path: str | Path,
    language: str,
    root: str | Path | None = None,
) -> list[CodeChunk]:
    capability = get_registry().get_capability(language)
    comments = extract_comment_ranges(tree, source, capability)
    ctx = _FileContext(source, _display_path(file_path, root), capability, comments)

    chunks = _primary_chunks(ctx, tree)
    chunks.extend(_middle_chunks(ctx, tree))
    chunks.append(build_file_chunk(source, ctx.display_path, capability.name, comments))
    return deduplicate(chunks)


def extract_chunks(
    source_text: str,
    file_path: str | Path,
    language: str,
    root: str | Path | None = None,
) -> list[CodeChunk]:
    """Extract every chunk from *source_text*.

    Raises :class:`ExtractionFailed` when the parser produces no tree and
    :class:`~codechunk.errors.QueryCompilationError` when one of the
    language's queries is malformed.
    """
    source = SourceText(source_text)
    tree = parse(language, source.data)
    if tree is None or tree.root_node is None:
        raise ExtractionFailed(f"Failed to parse file: {file_path}")
    chunks = extract_chunks_from_tree(tree, source, file_path, language, root)
    logger.debug("Extracted %d chunks from %s", len(chunks), file_path)
    return chunks
