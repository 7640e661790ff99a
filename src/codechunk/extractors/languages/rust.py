"""Rust grammar and queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import ChunkType
from ..base import LanguageCapability, node_text

if TYPE_CHECKING:
    from tree_sitter import Language


class RustCapability(LanguageCapability):
    name = "rust"
    display_name = "Rust"
    extensions = ("rs",)
    aliases = ("rs",)

    primary_query = """
        (function_item name: (identifier) @name) @function
        (impl_item type: (type_identifier) @name) @impl
        (struct_item name: (type_identifier) @name) @struct
        (enum_item name: (type_identifier) @name) @enum
        (trait_item name: (type_identifier) @name) @trait
        (mod_item name: (identifier) @name) @module
        (type_item name: (type_identifier) @name) @type_alias
    """

    middle_query = """
        (for_expression) @for_loop
        (while_expression) @while_loop
        (loop_expression) @loop
        (if_expression) @if_block
        (match_expression) @match_expr
        (closure_expression) @closure
        (call_expression) @function_call
        (macro_invocation) @macro_call
        (block) @code_block
    """

    comment_query = "[(line_comment) (block_comment)] @comment"
    comment_node_types = frozenset({"line_comment", "block_comment"})

    chunk_types = {
        "function": ChunkType.function,
        "impl": ChunkType.class_,
        "struct": ChunkType.struct,
        "enum": ChunkType.enum,
        "trait": ChunkType.trait,
        "module": ChunkType.module,
        "type_alias": ChunkType.type_alias,
    }

    middle_chunk_types = {
        "for_loop": ChunkType.loop,
        "while_loop": ChunkType.loop,
        "loop": ChunkType.loop,
        "if_block": ChunkType.conditional,
        "match_expr": ChunkType.conditional,
        "closure": ChunkType.lambda_,
        "function_call": ChunkType.function_call,
        "macro_call": ChunkType.function_call,
        "code_block": ChunkType.code_block,
    }

    def extract_name(self, node, source, capture_name):
        # impl blocks have no name field; the implemented type stands in.
        if capture_name == "impl":
            target = node.child_by_field_name("type")
            if target is not None:
                return node_text(target, source)
        return super().extract_name(node, source, capture_name)

    def grammar(self) -> "Language":
        import tree_sitter_rust
        from tree_sitter import Language

        return Language(tree_sitter_rust.language())
