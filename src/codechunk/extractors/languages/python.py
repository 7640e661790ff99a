"""Python grammar and queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import ChunkType
from ..base import LanguageCapability

if TYPE_CHECKING:
    from tree_sitter import Language


class PythonCapability(LanguageCapability):
    name = "python"
    display_name = "Python"
    extensions = ("py", "pyi")
    aliases = ("py",)

    primary_query = """
        (function_definition name: (identifier) @name) @function
        (class_definition name: (identifier) @name) @class
    """

    middle_query = """
        (for_statement) @for_loop
        (while_statement) @while_loop
        (if_statement) @if_block
        (try_statement) @try_block
        (with_statement) @with_block
        (function_definition) @nested_function
        (class_definition) @nested_class
        (list_comprehension) @list_comp
        (dictionary_comprehension) @dict_comp
        (call) @function_call
    """

    chunk_types = {
        "function": ChunkType.function,
        "class": ChunkType.class_,
    }

    middle_chunk_types = {
        "for_loop": ChunkType.loop,
        "while_loop": ChunkType.loop,
        "if_block": ChunkType.conditional,
        "try_block": ChunkType.error_handling,
        "with_block": ChunkType.special_block,
        "nested_function": ChunkType.function,
        "nested_class": ChunkType.class_,
        "list_comp": ChunkType.comprehension,
        "dict_comp": ChunkType.comprehension,
        "function_call": ChunkType.function_call,
    }

    name_node_types = frozenset({"identifier"})

    def grammar(self) -> "Language":
        import tree_sitter_python
        from tree_sitter import Language

        return Language(tree_sitter_python.language())
