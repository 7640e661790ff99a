"""JavaScript and TypeScript grammars and queries.

TypeScript files are parsed with the TSX grammar so JSX components in
``.tsx`` files are recognised alongside plain TypeScript.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import ChunkType
from ..base import LanguageCapability, first_child_text, node_text

if TYPE_CHECKING:
    from tree_sitter import Language, Node


_JS_MIDDLE_QUERY = """
    (for_statement) @for_loop
    (for_in_statement) @for_in_loop
    (while_statement) @while_loop
    (do_statement) @do_loop
    (if_statement) @if_block
    (switch_statement) @switch_block
    (try_statement) @try_block
    (call_expression) @function_call
    (arrow_function) @arrow_function
    (statement_block) @code_block
"""

_JS_MIDDLE_CHUNK_TYPES = {
    "for_loop": ChunkType.loop,
    "for_in_loop": ChunkType.loop,
    "while_loop": ChunkType.loop,
    "do_loop": ChunkType.loop,
    "if_block": ChunkType.conditional,
    "switch_block": ChunkType.conditional,
    "try_block": ChunkType.error_handling,
    "function_call": ChunkType.function_call,
    "arrow_function": ChunkType.lambda_,
    "code_block": ChunkType.code_block,
}

_DECLARATOR_CAPTURES = frozenset({
    "arrow_function", "function_expression", "generator_function_expression",
})
_JSX_CAPTURES = frozenset({"jsx_element", "jsx_self_closing_element"})


def _jsx_tag_name(node: "Node", source: bytes) -> str | None:
    tag = node
    if node.type == "jsx_element":
        tag = node.child_by_field_name("open_tag") or node
    named = tag.child_by_field_name("name")
    if named is not None:
        return node_text(named, source)
    return first_child_text(tag, source, {"identifier", "jsx_identifier"})


def _assigned_member_name(node: "Node", source: bytes) -> str | None:
    """Property name in ``Foo.prototype.bar = function () {}``."""
    left = node.child_by_field_name("left")
    if left is None or left.type != "member_expression":
        return None
    prop = left.child_by_field_name("property")
    return node_text(prop, source) if prop is not None else None


class JavaScriptCapability(LanguageCapability):
    name = "javascript"
    display_name = "JavaScript"
    extensions = ("js", "jsx", "mjs", "cjs")
    aliases = ("js", "jsx", "node")

    primary_query = """
        (function_declaration name: (identifier) @name) @function
        (generator_function_declaration name: (identifier) @name) @generator_function
        (method_definition name: (property_identifier) @name) @method
        (assignment_expression left: (member_expression) right: (function_expression)) @method
        (assignment_expression left: (member_expression) right: (arrow_function)) @method
        (class_declaration name: (identifier) @name) @class
        (variable_declarator name: (identifier) value: (arrow_function)) @arrow_function
        (variable_declarator name: (identifier) value: (function_expression)) @function_expression
        (variable_declarator name: (identifier) value: (generator_function)) @generator_function_expression
        (jsx_element open_tag: (jsx_opening_element name: (identifier) @name)) @jsx_element
        (jsx_self_closing_element name: (identifier) @name) @jsx_self_closing_element
    """

    middle_query = _JS_MIDDLE_QUERY

    chunk_types = {
        "function": ChunkType.function,
        "generator_function": ChunkType.function,
        "generator_function_expression": ChunkType.function,
        "method": ChunkType.method,
        "class": ChunkType.class_,
        "arrow_function": ChunkType.function,
        "function_expression": ChunkType.function,
        "jsx_element": ChunkType.component,
        "jsx_self_closing_element": ChunkType.component,
    }

    middle_chunk_types = _JS_MIDDLE_CHUNK_TYPES

    def extract_name(self, node, source, capture_name):
        if capture_name in _DECLARATOR_CAPTURES:
            named = node.child_by_field_name("name")
            return node_text(named, source) if named is not None else None
        if capture_name in _JSX_CAPTURES:
            return _jsx_tag_name(node, source)
        if capture_name == "method" and node.type == "assignment_expression":
            return _assigned_member_name(node, source)
        return super().extract_name(node, source, capture_name)

    def grammar(self) -> "Language":
        import tree_sitter_javascript
        from tree_sitter import Language

        return Language(tree_sitter_javascript.language())


class TypeScriptCapability(JavaScriptCapability):
    name = "typescript"
    display_name = "TypeScript"
    extensions = ("ts", "tsx", "mts", "cts")
    aliases = ("ts", "tsx")

    primary_query = """
        (function_declaration name: (identifier) @name) @function
        (method_definition name: (property_identifier) @name) @method
        (class_declaration name: (type_identifier) @name) @class
        (abstract_class_declaration name: (type_identifier) @name) @class
        (variable_declarator name: (identifier) value: (arrow_function)) @arrow_function
        (variable_declarator name: (identifier) value: (function_expression)) @function_expression
        (interface_declaration name: (type_identifier) @name) @interface
        (type_alias_declaration name: (type_identifier) @name) @type_alias
        (enum_declaration name: (identifier) @name) @enum
        (internal_module name: (identifier) @name) @namespace
        (jsx_element open_tag: (jsx_opening_element name: (identifier) @name)) @jsx_element
        (jsx_self_closing_element name: (identifier) @name) @jsx_self_closing_element
    """

    chunk_types = {
        "function": ChunkType.function,
        "method": ChunkType.method,
        "class": ChunkType.class_,
        "arrow_function": ChunkType.function,
        "function_expression": ChunkType.function,
        "interface": ChunkType.interface,
        "type_alias": ChunkType.type_alias,
        "enum": ChunkType.enum,
        "namespace": ChunkType.module,
        "jsx_element": ChunkType.component,
        "jsx_self_closing_element": ChunkType.component,
    }

    def grammar(self) -> "Language":
        import tree_sitter_typescript
        from tree_sitter import Language

        return Language(tree_sitter_typescript.language_tsx())
