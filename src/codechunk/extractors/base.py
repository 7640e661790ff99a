"""Base class for per-language tree-sitter capabilities."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from ..models import ChunkType

if TYPE_CHECKING:
    from tree_sitter import Language, Node


# Node kinds that usually hold a declaration's name.
IDENTIFIER_TYPES: frozenset[str] = frozenset({
    "identifier",
    "type_identifier",
    "property_identifier",
    "field_identifier",
    "constant",
    "simple_identifier",
    "name",
})


def node_text(node: "Node", source: bytes) -> str:
    """Decode the source bytes covered by *node*."""
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def first_child_text(
    node: "Node", source: bytes, types: frozenset[str] | set[str]
) -> str | None:
    """Return the text of the first direct child whose kind is in *types*."""
    for child in node.children:
        if child.type in types:
            return node_text(child, source)
    return None


def first_child_of_type(node: "Node", kind: str) -> "Node | None":
    for child in node.children:
        if child.type == kind:
            return child
    return None


class LanguageCapability:
    """Everything the extraction pipeline needs to know about one language.

    Subclasses are stateless: the queries and mappings are class attributes
    and every method is a pure function of its arguments, so one instance
    can be shared by any number of worker threads.

    Queries use tree-sitter S-expression syntax.  Each capture name that
    appears in ``chunk_types`` (or ``middle_chunk_types`` for the middle
    query) turns into a chunk; other captures, such as the ``@name``
    helpers, are ignored.
    """

    name: ClassVar[str] = ""
    display_name: ClassVar[str] = ""
    extensions: ClassVar[tuple[str, ...]] = ()
    aliases: ClassVar[tuple[str, ...]] = ()

    primary_query: ClassVar[str] = ""
    middle_query: ClassVar[str] = ""
    comment_query: ClassVar[str] = "(comment) @comment"

    # Grammars disagree on what a comment node is called.
    comment_node_types: ClassVar[frozenset[str]] = frozenset({"comment"})

    chunk_types: ClassVar[dict[str, ChunkType]] = {}
    middle_chunk_types: ClassVar[dict[str, ChunkType]] = {}

    name_node_types: ClassVar[frozenset[str]] = IDENTIFIER_TYPES

    def grammar(self) -> "Language":
        """Load the tree-sitter grammar for this language."""
        raise NotImplementedError

    def file_patterns(self) -> list[str]:
        return [f"**/*.{ext}" for ext in self.extensions]

    def capture_to_chunk_type(self, capture_name: str) -> ChunkType | None:
        return self.chunk_types.get(capture_name)

    def middle_capture_to_chunk_type(self, capture_name: str) -> ChunkType | None:
        return self.middle_chunk_types.get(capture_name)

    def is_comment_node(self, node: "Node") -> bool:
        return node.type in self.comment_node_types

    def extract_name(
        self, node: "Node", source: bytes, capture_name: str
    ) -> str | None:
        """Best-effort name of the construct captured as *capture_name*.

        The default looks for the ``name`` field and then for the first
        identifier-like child.
        """
        named = node.child_by_field_name("name")
        if named is not None:
            return node_text(named, source)
        return first_child_text(node, source, self.name_node_types)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
