"""Kotlin grammar and queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import ChunkType
from ..base import LanguageCapability, first_child_of_type, first_child_text

if TYPE_CHECKING:
    from tree_sitter import Language


class KotlinCapability(LanguageCapability):
    name = "kotlin"
    display_name = "Kotlin"
    extensions = ("kt", "kts")
    aliases = ("kt",)

    primary_query = """
        (function_declaration) @function
        (anonymous_function) @function
        (class_declaration) @class
        (object_declaration) @object
        (companion_object) @companion
        (property_declaration) @property
        (type_alias) @type_alias
    """

    middle_query = """
        (for_statement) @for_loop
        (while_statement) @while_loop
        (do_while_statement) @while_loop
        (if_expression) @if_block
        (when_expression) @when_block
        (try_expression) @try_block
        (call_expression) @function_call
        (lambda_literal) @lambda
    """

    comment_query = "[(line_comment) (block_comment)] @comment"
    comment_node_types = frozenset({"line_comment", "block_comment"})

    chunk_types = {
        "function": ChunkType.function,
        "class": ChunkType.class_,
        "object": ChunkType.class_,
        "companion": ChunkType.class_,
        "property": ChunkType.variable,
        "type_alias": ChunkType.type_alias,
    }

    middle_chunk_types = {
        "for_loop": ChunkType.loop,
        "while_loop": ChunkType.loop,
        "if_block": ChunkType.conditional,
        "when_block": ChunkType.conditional,
        "try_block": ChunkType.error_handling,
        "function_call": ChunkType.function_call,
        "lambda": ChunkType.lambda_,
    }

    name_node_types = frozenset({"simple_identifier", "type_identifier", "identifier"})

    def extract_name(self, node, source, capture_name):
        if capture_name == "companion":
            return first_child_text(node, source, self.name_node_types) or "companion object"
        if capture_name == "property":
            declaration = first_child_of_type(node, "variable_declaration")
            if declaration is not None:
                name = first_child_text(declaration, source, self.name_node_types)
                if name:
                    return name
        return first_child_text(node, source, self.name_node_types)

    def grammar(self) -> "Language":
        import tree_sitter_kotlin
        from tree_sitter import Language

        return Language(tree_sitter_kotlin.language())
