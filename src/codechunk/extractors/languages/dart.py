"""Dart grammar and queries.

There is no standalone Dart wheel on PyPI, so the grammar comes from
``tree-sitter-language-pack``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import ChunkType
from ..base import LanguageCapability, node_text

if TYPE_CHECKING:
    from tree_sitter import Language, Node

# Wrappers the name identifier can be nested in.
_NAME_CONTAINERS = frozenset({"function_signature", "initialized_variable_definition"})


def _nested_identifier(node: "Node", source: bytes) -> str | None:
    for child in node.children:
        if child.type == "identifier":
            return node_text(child, source)
        if child.type in _NAME_CONTAINERS:
            found = _nested_identifier(child, source)
            if found:
                return found
    return None


class DartCapability(LanguageCapability):
    name = "dart"
    display_name = "Dart"
    extensions = ("dart",)

    primary_query = """
        (class_definition (identifier) @name) @class
        (enum_declaration (identifier) @name) @enum
        (mixin_declaration (identifier) @name) @mixin
        (extension_declaration (identifier) @name) @extension
        (lambda_expression (function_signature (identifier) @name)) @function
        (method_signature (function_signature (identifier) @name)) @method
        (local_variable_declaration (initialized_variable_definition (identifier) @name)) @variable
    """

    comment_query = "[(comment) (documentation_comment)] @comment"
    comment_node_types = frozenset({"comment", "documentation_comment"})

    chunk_types = {
        "class": ChunkType.class_,
        "enum": ChunkType.enum,
        "mixin": ChunkType.class_,
        "extension": ChunkType.class_,
        "function": ChunkType.function,
        "method": ChunkType.method,
        "variable": ChunkType.variable,
    }

    def extract_name(self, node, source, capture_name):
        return _nested_identifier(node, source)

    def grammar(self) -> "Language":
        from tree_sitter_language_pack import get_language

        return get_language("dart")
