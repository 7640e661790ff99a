"""Swift grammar and queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import ChunkType
from ..base import LanguageCapability

if TYPE_CHECKING:
    from tree_sitter import Language


class SwiftCapability(LanguageCapability):
    name = "swift"
    display_name = "Swift"
    extensions = ("swift",)

    # class_declaration covers class, struct, enum, extension and actor.
    primary_query = """
        (function_declaration) @function
        (init_declaration) @method
        (class_declaration) @class
        (protocol_declaration) @interface
        (typealias_declaration) @type_alias
    """

    middle_query = """
        (for_statement) @for_loop
        (while_statement) @while_loop
        (repeat_while_statement) @while_loop
        (if_statement) @if_block
        (guard_statement) @guard_block
        (switch_statement) @switch_block
        (do_statement) @do_block
        (call_expression) @function_call
        (lambda_literal) @lambda
    """

    comment_query = "[(comment) (multiline_comment)] @comment"
    comment_node_types = frozenset({"comment", "multiline_comment"})

    chunk_types = {
        "function": ChunkType.function,
        "method": ChunkType.method,
        "class": ChunkType.class_,
        "interface": ChunkType.interface,
        "type_alias": ChunkType.type_alias,
    }

    middle_chunk_types = {
        "for_loop": ChunkType.loop,
        "while_loop": ChunkType.loop,
        "if_block": ChunkType.conditional,
        "guard_block": ChunkType.conditional,
        "switch_block": ChunkType.conditional,
        "do_block": ChunkType.error_handling,
        "function_call": ChunkType.function_call,
        "lambda": ChunkType.lambda_,
    }

    name_node_types = frozenset({"simple_identifier", "type_identifier"})

    def extract_name(self, node, source, capture_name):
        if node.type == "init_declaration":
            return "init"
        return super().extract_name(node, source, capture_name)

    def grammar(self) -> "Language":
        import tree_sitter_swift
        from tree_sitter import Language

        return Language(tree_sitter_swift.language())
