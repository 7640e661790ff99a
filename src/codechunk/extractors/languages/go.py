"""Go grammar and queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import ChunkType
from ..base import LanguageCapability, node_text

if TYPE_CHECKING:
    from tree_sitter import Language, Node


def _spec_names(node: "Node", source: bytes, keyword: str) -> str:
    """Summarise the identifiers declared by a ``const (...)``/``var (...)`` block."""
    names: list[str] = []
    specs = [c for c in node.children if c.type in ("const_spec", "var_spec")]
    # Parenthesised blocks nest their specs one level deeper.
    for child in node.children:
        if child.type in ("const_spec_list", "var_spec_list"):
            specs.extend(c for c in child.children if c.type in ("const_spec", "var_spec"))
    for spec in specs:
        for part in spec.children:
            if part.type == "identifier":
                names.append(node_text(part, source))
                break
    if not names:
        return f"{keyword}_block"
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names)} ({len(names)})"


class GoCapability(LanguageCapability):
    name = "go"
    display_name = "Go"
    extensions = ("go",)
    aliases = ("golang",)

    primary_query = """
        (function_declaration name: (identifier) @name) @function
        (method_declaration name: (field_identifier) @name) @method
        (type_spec name: (type_identifier) @name type: (struct_type)) @struct
        (type_spec name: (type_identifier) @name type: (interface_type)) @interface
        (type_spec name: (type_identifier) @name type: (function_type)) @type_alias
        (type_spec name: (type_identifier) @name type: (map_type)) @type_alias
        (type_spec name: (type_identifier) @name type: (slice_type)) @type_alias
        (const_declaration) @const_block
        (var_declaration) @var_block
    """

    middle_query = """
        (for_statement) @for_loop
        (if_statement) @if_block
        (expression_switch_statement) @switch_block
        (type_switch_statement) @type_switch_block
        (select_statement) @select_block
        (func_literal) @closure
        (call_expression) @function_call
        (block) @code_block
    """

    chunk_types = {
        "function": ChunkType.function,
        "method": ChunkType.method,
        "struct": ChunkType.struct,
        "interface": ChunkType.interface,
        "type_alias": ChunkType.type_alias,
        "const_block": ChunkType.const,
        "var_block": ChunkType.variable,
    }

    middle_chunk_types = {
        "for_loop": ChunkType.loop,
        "if_block": ChunkType.conditional,
        "switch_block": ChunkType.conditional,
        "type_switch_block": ChunkType.conditional,
        "select_block": ChunkType.conditional,
        "closure": ChunkType.lambda_,
        "function_call": ChunkType.function_call,
        "code_block": ChunkType.code_block,
    }

    def extract_name(self, node, source, capture_name):
        if capture_name == "const_block":
            return _spec_names(node, source, "const")
        if capture_name == "var_block":
            return _spec_names(node, source, "var")
        return super().extract_name(node, source, capture_name)

    def grammar(self) -> "Language":
        import tree_sitter_go
        from tree_sitter import Language

        return Language(tree_sitter_go.language())
