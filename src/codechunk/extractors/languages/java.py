"""Java grammar and queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import ChunkType
from ..base import LanguageCapability, node_text

if TYPE_CHECKING:
    from tree_sitter import Language


class JavaCapability(LanguageCapability):
    name = "java"
    display_name = "Java"
    extensions = ("java",)

    primary_query = """
        (class_declaration name: (identifier) @name) @class
        (interface_declaration name: (identifier) @name) @interface
        (method_declaration name: (identifier) @name) @method
        (constructor_declaration name: (identifier) @name) @method
        (enum_declaration name: (identifier) @name) @enum
        (record_declaration name: (identifier) @name) @class
        (annotation_type_declaration name: (identifier) @name) @interface
        (field_declaration declarator: (variable_declarator name: (identifier) @name)) @field
    """

    middle_query = """
        (for_statement) @for_loop
        (enhanced_for_statement) @enhanced_for
        (while_statement) @while_loop
        (if_statement) @if_block
        (try_statement) @try_block
        (switch_expression) @switch_block
        (method_invocation) @method_call
        (lambda_expression) @lambda
        (block) @code_block
    """

    comment_query = """
        (line_comment) @comment
        (block_comment) @comment
    """
    comment_node_types = frozenset({"line_comment", "block_comment"})

    chunk_types = {
        "class": ChunkType.class_,
        "interface": ChunkType.interface,
        "method": ChunkType.method,
        "enum": ChunkType.enum,
        "field": ChunkType.variable,
    }

    middle_chunk_types = {
        "for_loop": ChunkType.loop,
        "enhanced_for": ChunkType.loop,
        "while_loop": ChunkType.loop,
        "if_block": ChunkType.conditional,
        "switch_block": ChunkType.conditional,
        "try_block": ChunkType.error_handling,
        "method_call": ChunkType.function_call,
        "lambda": ChunkType.lambda_,
        "code_block": ChunkType.code_block,
    }

    def extract_name(self, node, source, capture_name):
        if capture_name == "field":
            declarator = node.child_by_field_name("declarator")
            if declarator is not None:
                named = declarator.child_by_field_name("name")
                if named is not None:
                    return node_text(named, source)
        return super().extract_name(node, source, capture_name)

    def grammar(self) -> "Language":
        import tree_sitter_java
        from tree_sitter import Language

        return Language(tree_sitter_java.language())
