"""PHP grammar and queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import ChunkType
from ..base import LanguageCapability

if TYPE_CHECKING:
    from tree_sitter import Language


class PhpCapability(LanguageCapability):
    name = "php"
    display_name = "PHP"
    extensions = ("php", "phtml", "php3", "php4", "php5")

    primary_query = """
        (function_definition name: (name) @name) @function
        (method_declaration name: (name) @name) @method
        (class_declaration name: (name) @name) @class
        (interface_declaration name: (name) @name) @interface
        (trait_declaration name: (name) @name) @trait
        (enum_declaration name: (name) @name) @enum
        (namespace_definition name: (namespace_name) @name) @namespace
    """

    middle_query = """
        (for_statement) @for_loop
        (foreach_statement) @foreach_loop
        (while_statement) @while_loop
        (if_statement) @if_block
        (try_statement) @try_block
        (switch_statement) @switch_block
        (function_call_expression) @function_call
        (anonymous_function) @closure
        (arrow_function) @closure
        (compound_statement) @code_block
    """

    chunk_types = {
        "function": ChunkType.function,
        "method": ChunkType.method,
        "class": ChunkType.class_,
        "interface": ChunkType.interface,
        "trait": ChunkType.trait,
        "enum": ChunkType.enum,
        "namespace": ChunkType.module,
    }

    middle_chunk_types = {
        "for_loop": ChunkType.loop,
        "foreach_loop": ChunkType.loop,
        "while_loop": ChunkType.loop,
        "if_block": ChunkType.conditional,
        "switch_block": ChunkType.conditional,
        "try_block": ChunkType.error_handling,
        "function_call": ChunkType.function_call,
        "closure": ChunkType.lambda_,
        "code_block": ChunkType.code_block,
    }

    # Every declaration keeps its (name) node in the `name` field.
    name_node_types = frozenset({"name"})

    def grammar(self) -> "Language":
        import tree_sitter_php
        from tree_sitter import Language

        return Language(tree_sitter_php.language_php())
