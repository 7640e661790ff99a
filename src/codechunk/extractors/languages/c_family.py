"""C, C++ and C# grammars and queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...models import ChunkType
from ..base import LanguageCapability, first_child_of_type, first_child_text, node_text

if TYPE_CHECKING:
    from tree_sitter import Language, Node


_C_MIDDLE_QUERY = """
    (for_statement) @for_loop
    (while_statement) @while_loop
    (do_statement) @do_loop
    (if_statement) @if_block
    (switch_statement) @switch_block
    (call_expression) @function_call
    (compound_statement) @code_block
"""

_C_MIDDLE_CHUNK_TYPES = {
    "for_loop": ChunkType.loop,
    "while_loop": ChunkType.loop,
    "do_loop": ChunkType.loop,
    "if_block": ChunkType.conditional,
    "switch_block": ChunkType.conditional,
    "function_call": ChunkType.function_call,
    "code_block": ChunkType.code_block,
}


def _function_declarator(node: "Node") -> "Node | None":
    """Find the function_declarator under a (possibly templated) definition."""
    if node.type == "template_declaration":
        inner = first_child_of_type(node, "function_definition")
        if inner is None:
            return None
        node = inner
    declarator = node.child_by_field_name("declarator")
    # Pointer and reference return types wrap the function declarator.
    while declarator is not None and declarator.type != "function_declarator":
        declarator = declarator.child_by_field_name("declarator")
    return declarator


def _declarator_name(node: "Node", source: bytes) -> str | None:
    """Name of the entity declared by a function definition.

    Handles plain identifiers, methods defined inside a class body,
    qualified out-of-class definitions (``Foo::bar``), destructors and
    operator overloads.
    """
    func = _function_declarator(node)
    if func is None:
        return None
    target = func.child_by_field_name("declarator")
    if target is None:
        return None
    if target.type == "qualified_identifier":
        # Foo::bar -> bar, Foo::~Foo -> ~Foo
        name = target.child_by_field_name("name")
        while name is not None and name.type == "qualified_identifier":
            name = name.child_by_field_name("name")
        target = name if name is not None else target
    if target.type == "destructor_name":
        inner = first_child_text(target, source, {"identifier"})
        return f"~{inner}" if inner else node_text(target, source)
    return node_text(target, source)


def _init_declarator_name(node: "Node", source: bytes) -> str | None:
    for child in node.children:
        if child.type == "init_declarator":
            return first_child_text(child, source, {"identifier"})
        if child.type == "identifier":
            return node_text(child, source)
    return None


class CCapability(LanguageCapability):
    name = "c"
    display_name = "C"
    extensions = ("c", "h")

    primary_query = """
        (function_definition
            declarator: (function_declarator
                declarator: (identifier) @function.name)
            body: (compound_statement)) @function.definition

        (struct_specifier
            name: (type_identifier) @struct.name
            body: (field_declaration_list)) @struct.definition

        (type_definition
            declarator: (type_identifier) @type.name) @type.definition

        (enum_specifier
            name: (type_identifier) @enum.name) @enum.definition

        (declaration
            declarator: (init_declarator
                declarator: (identifier) @variable.name)) @variable.definition

        (preproc_def
            name: (identifier) @macro.name) @macro.definition
    """

    middle_query = _C_MIDDLE_QUERY

    chunk_types = {
        "function.definition": ChunkType.function,
        "struct.definition": ChunkType.struct,
        "type.definition": ChunkType.struct,
        "enum.definition": ChunkType.enum,
        "variable.definition": ChunkType.variable,
        "macro.definition": ChunkType.function,
    }

    middle_chunk_types = _C_MIDDLE_CHUNK_TYPES

    def extract_name(self, node, source, capture_name):
        if capture_name == "function.definition":
            return _declarator_name(node, source)
        if capture_name in ("struct.definition", "enum.definition"):
            return first_child_text(node, source, {"type_identifier"})
        if capture_name == "type.definition":
            declarator = node.child_by_field_name("declarator")
            return node_text(declarator, source) if declarator is not None else None
        if capture_name == "variable.definition":
            return _init_declarator_name(node, source)
        if capture_name == "macro.definition":
            return first_child_text(node, source, {"identifier"})
        return None

    def grammar(self) -> "Language":
        import tree_sitter_c
        from tree_sitter import Language

        return Language(tree_sitter_c.language())


class CppCapability(LanguageCapability):
    name = "cpp"
    display_name = "C++"
    extensions = ("cpp", "cc", "cxx", "hpp", "hh", "hxx")
    aliases = ("c++", "cxx")

    primary_query = """
        (function_definition
            declarator: (function_declarator
                declarator: (identifier) @function.name)
            body: (compound_statement)) @function.definition

        (function_definition
            declarator: (function_declarator
                declarator: (field_identifier) @method.name)
            body: (compound_statement)) @method.definition

        (function_definition
            declarator: (function_declarator
                declarator: (qualified_identifier) @method.name)
            body: (compound_statement)) @method.definition

        (function_definition
            declarator: (function_declarator
                declarator: (destructor_name))) @destructor.definition

        (function_definition
            declarator: (function_declarator
                declarator: (operator_name))) @operator.definition

        (class_specifier
            name: (type_identifier) @class.name
            body: (field_declaration_list)) @class.definition

        (struct_specifier
            name: (type_identifier) @struct.name
            body: (field_declaration_list)) @struct.definition

        (namespace_definition
            name: (namespace_identifier) @namespace.name) @namespace.definition

        (template_declaration
            (class_specifier
                name: (type_identifier) @template_class.name)) @template_class.definition

        (template_declaration
            (function_definition
                declarator: (function_declarator
                    declarator: (identifier) @template_function.name))) @template_function.definition

        (type_definition
            declarator: (type_identifier) @type.name) @type.definition

        (enum_specifier
            name: (type_identifier) @enum.name) @enum.definition

        (declaration
            declarator: (init_declarator
                declarator: (identifier) @variable.name)) @variable.definition
    """

    middle_query = _C_MIDDLE_QUERY + """
    (for_range_loop) @range_loop
    (try_statement) @try_block
    (lambda_expression) @lambda
"""

    chunk_types = {
        "function.definition": ChunkType.function,
        "method.definition": ChunkType.method,
        "destructor.definition": ChunkType.method,
        "operator.definition": ChunkType.method,
        "class.definition": ChunkType.class_,
        "struct.definition": ChunkType.struct,
        "namespace.definition": ChunkType.module,
        "template_class.definition": ChunkType.class_,
        "template_function.definition": ChunkType.function,
        "type.definition": ChunkType.type_alias,
        "enum.definition": ChunkType.enum,
        "variable.definition": ChunkType.variable,
    }

    middle_chunk_types = {
        **_C_MIDDLE_CHUNK_TYPES,
        "range_loop": ChunkType.loop,
        "try_block": ChunkType.error_handling,
        "lambda": ChunkType.lambda_,
    }

    def extract_name(self, node, source, capture_name):
        if capture_name in (
            "function.definition",
            "method.definition",
            "destructor.definition",
            "operator.definition",
            "template_function.definition",
        ):
            return _declarator_name(node, source)
        if capture_name == "template_class.definition":
            inner = first_child_of_type(node, "class_specifier")
            if inner is not None:
                return first_child_text(inner, source, {"type_identifier"})
            return None
        if capture_name in ("class.definition", "struct.definition", "enum.definition"):
            return first_child_text(node, source, {"type_identifier"})
        if capture_name == "namespace.definition":
            return first_child_text(node, source, {"namespace_identifier", "identifier"})
        if capture_name == "type.definition":
            declarator = node.child_by_field_name("declarator")
            return node_text(declarator, source) if declarator is not None else None
        if capture_name == "variable.definition":
            return _init_declarator_name(node, source)
        return None

    def grammar(self) -> "Language":
        import tree_sitter_cpp
        from tree_sitter import Language

        return Language(tree_sitter_cpp.language())


class CSharpCapability(LanguageCapability):
    name = "csharp"
    display_name = "C#"
    extensions = ("cs", "csx")
    aliases = ("c#", "cs")

    primary_query = """
        (class_declaration name: (identifier) @name) @class
        (interface_declaration name: (identifier) @name) @interface
        (struct_declaration name: (identifier) @name) @struct
        (enum_declaration name: (identifier) @name) @enum
        (record_declaration name: (identifier) @name) @class
        (method_declaration name: (identifier) @name) @method
        (constructor_declaration name: (identifier) @name) @method
        (namespace_declaration) @namespace
    """

    middle_query = """
        (for_statement) @for_loop
        (foreach_statement) @foreach_loop
        (while_statement) @while_loop
        (if_statement) @if_block
        (switch_statement) @switch_block
        (try_statement) @try_block
        (invocation_expression) @function_call
        (lambda_expression) @lambda
        (block) @code_block
    """

    chunk_types = {
        "class": ChunkType.class_,
        "interface": ChunkType.interface,
        "struct": ChunkType.struct,
        "enum": ChunkType.enum,
        "method": ChunkType.method,
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
        "lambda": ChunkType.lambda_,
        "code_block": ChunkType.code_block,
    }

    def extract_name(self, node, source, capture_name):
        if capture_name == "namespace":
            return first_child_text(node, source, {"identifier", "qualified_name"})
        return super().extract_name(node, source, capture_name)

    def grammar(self) -> "Language":
        import tree_sitter_c_sharp
        from tree_sitter import Language

        return Language(tree_sitter_c_sharp.language())
