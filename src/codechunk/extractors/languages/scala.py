"""Scala grammar and queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import ChunkType
from ..base import LanguageCapability

if TYPE_CHECKING:
    from tree_sitter import Language


class ScalaCapability(LanguageCapability):
    name = "scala"
    display_name = "Scala"
    extensions = ("scala", "sc")

    primary_query = """
        (function_definition) @function
        (class_definition) @class
        (object_definition) @object
        (trait_definition) @trait
        (enum_definition) @enum
        (type_definition) @type
        (package_object) @package_object
        (given_definition) @given
        (extension_definition) @extension
    """

    middle_query = """
        (for_expression) @for_loop
        (while_expression) @while_loop
        (if_expression) @if_block
        (try_expression) @try_block
        (match_expression) @match_block
        (call_expression) @function_call
        (lambda_expression) @lambda
        (block) @code_block
    """

    comment_query = "[(comment) (block_comment)] @comment"
    comment_node_types = frozenset({"comment", "block_comment"})

    chunk_types = {
        "function": ChunkType.function,
        "class": ChunkType.class_,
        "object": ChunkType.class_,
        "trait": ChunkType.trait,
        "enum": ChunkType.enum,
        "type": ChunkType.type_alias,
        "package_object": ChunkType.module,
        "given": ChunkType.function,
        "extension": ChunkType.function,
    }

    middle_chunk_types = {
        "for_loop": ChunkType.loop,
        "while_loop": ChunkType.loop,
        "if_block": ChunkType.conditional,
        "match_block": ChunkType.conditional,
        "try_block": ChunkType.error_handling,
        "function_call": ChunkType.function_call,
        "lambda": ChunkType.lambda_,
        "code_block": ChunkType.code_block,
    }

    name_node_types = frozenset({"identifier", "type_identifier"})

    def grammar(self) -> "Language":
        import tree_sitter_scala
        from tree_sitter import Language

        return Language(tree_sitter_scala.language())
