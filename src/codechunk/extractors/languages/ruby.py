"""Ruby grammar and queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import ChunkType
from ..base import LanguageCapability, first_child_text, node_text

if TYPE_CHECKING:
    from tree_sitter import Language


class RubyCapability(LanguageCapability):
    name = "ruby"
    display_name = "Ruby"
    extensions = ("rb",)
    aliases = ("rb",)

    primary_query = """
        (method name: (_) @name) @method
        (singleton_method name: (_) @name) @method
        (class name: (_) @name) @class
        (module name: (_) @name) @module
        (singleton_class) @singleton_class
    """

    middle_query = """
        (for) @for_loop
        (while) @while_loop
        (until) @until_loop
        (if) @if_block
        (unless) @unless_block
        (case) @case_block
        (begin) @begin_block
        (call) @function_call
        (lambda) @lambda
        (do_block) @do_block
    """

    chunk_types = {
        "method": ChunkType.method,
        "class": ChunkType.class_,
        "module": ChunkType.module,
        "singleton_class": ChunkType.class_,
    }

    middle_chunk_types = {
        "for_loop": ChunkType.loop,
        "while_loop": ChunkType.loop,
        "until_loop": ChunkType.loop,
        "if_block": ChunkType.conditional,
        "unless_block": ChunkType.conditional,
        "case_block": ChunkType.conditional,
        "begin_block": ChunkType.error_handling,
        "function_call": ChunkType.function_call,
        "lambda": ChunkType.lambda_,
        "do_block": ChunkType.code_block,
    }

    name_node_types = frozenset({"identifier", "constant", "scope_resolution"})

    def extract_name(self, node, source, capture_name):
        if capture_name == "singleton_class":
            target = node.child_by_field_name("value")
            return f"<< {node_text(target, source)}" if target is not None else "singleton"
        if node.type == "singleton_method":
            obj = node.child_by_field_name("object")
            name = node.child_by_field_name("name")
            if obj is not None and name is not None:
                return f"{node_text(obj, source)}.{node_text(name, source)}"
        named = node.child_by_field_name("name")
        if named is not None:
            return node_text(named, source)
        return first_child_text(node, source, self.name_node_types)

    def grammar(self) -> "Language":
        import tree_sitter_ruby
        from tree_sitter import Language

        return Language(tree_sitter_ruby.language())
