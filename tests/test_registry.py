"""Tests for the language table and the parser registry."""

from __future__ import annotations

import threading

import pytest
from tree_sitter import Parser

from codechunk.errors import QueryCompilationError, UnsupportedLanguage
from codechunk.extractors.languages import (
    ALL_CAPABILITIES,
    file_patterns,
    language_for_path,
    resolve_language,
    supported_languages,
)
from codechunk.extractors.languages.python import PythonCapability
from codechunk.extractors.registry import (
    QUERY_KINDS,
    ParserRegistry,
    get_registry,
    parse,
)
from codechunk.models import ChunkType

LANGUAGES = [cap.name for cap in ALL_CAPABILITIES]


class TestLanguageTable:
    def test_supported_languages_sorted(self):
        langs = supported_languages()
        assert langs == sorted(langs)
        assert len(langs) == 15

    @pytest.mark.parametrize("path,expected", [
        ("main.py", "python"),
        ("types.pyi", "python"),
        ("lib.rs", "rust"),
        ("app.tsx", "typescript"),
        ("index.mjs", "javascript"),
        ("main.go", "go"),
        ("Main.java", "java"),
        ("util.h", "c"),
        ("widget.HPP", "cpp"),
        ("Program.cs", "csharp"),
        ("app.rb", "ruby"),
        ("index.php", "php"),
        ("Main.kt", "kotlin"),
        ("Main.scala", "scala"),
        ("main.swift", "swift"),
        ("main.dart", "dart"),
    ])
    def test_language_for_path(self, path, expected):
        assert language_for_path(path) == expected

    def test_unknown_extension(self):
        assert language_for_path("README.md") is None
        assert language_for_path("Makefile") is None

    @pytest.mark.parametrize("alias,expected", [
        ("C++", "cpp"),
        ("cxx", "cpp"),
        ("C#", "csharp"),
        ("cs", "csharp"),
        ("js", "javascript"),
        ("TS", "typescript"),
        ("tsx", "typescript"),
        ("py", "python"),
        ("rb", "ruby"),
        ("rs", "rust"),
        ("kt", "kotlin"),
        ("golang", "go"),
        ("Python", "python"),
    ])
    def test_resolve_alias(self, alias, expected):
        assert resolve_language(alias) == expected

    def test_resolve_unknown(self):
        with pytest.raises(UnsupportedLanguage) as excinfo:
            resolve_language("cobol")
        assert excinfo.value.language == "cobol"
        assert "Unsupported language: cobol" in str(excinfo.value)

    def test_file_patterns(self):
        assert file_patterns("cpp") == [
            "**/*.cpp", "**/*.cc", "**/*.cxx", "**/*.hpp", "**/*.hh", "**/*.hxx",
        ]

    def test_extensions_are_unique(self):
        seen: dict[str, str] = {}
        for cap in ALL_CAPABILITIES:
            for ext in cap.extensions:
                assert ext not in seen, f"{ext} claimed by {seen.get(ext)} and {cap.name}"
                seen[ext] = cap.name


class TestCapabilities:
    @pytest.mark.parametrize("language", LANGUAGES)
    def test_every_capability_defines_chunk_types(self, language):
        cap = get_registry().get_capability(language)
        assert cap.primary_query.strip()
        assert cap.chunk_types
        assert all(isinstance(t, ChunkType) for t in cap.chunk_types.values())
        assert all(isinstance(t, ChunkType) for t in cap.middle_chunk_types.values())

    def test_file_chunk_type_never_produced_by_queries(self):
        for cap in ALL_CAPABILITIES:
            assert ChunkType.file not in cap.chunk_types.values()
            assert ChunkType.file not in cap.middle_chunk_types.values()

    def test_unmapped_capture(self):
        cap = PythonCapability()
        assert cap.capture_to_chunk_type("name") is None
        assert cap.middle_capture_to_chunk_type("function") is None


class TestParserRegistry:
    @pytest.mark.parametrize("language", LANGUAGES)
    @pytest.mark.parametrize("kind", QUERY_KINDS)
    def test_queries_compile(self, language, kind):
        registry = get_registry()
        query = registry.compile_query(language, kind)
        if kind == "primary":
            assert query is not None

    def test_validate_all(self):
        get_registry().validate()

    def test_singleton(self):
        assert get_registry() is get_registry()

    def test_queries_are_cached(self):
        registry = ParserRegistry()
        first = registry.compile_query("python", "primary")
        assert registry.compile_query("py", "primary") is first

    def test_grammar_cached(self):
        registry = ParserRegistry()
        assert registry.grammar("rust") is registry.grammar("rs")

    def test_create_parser(self):
        parser = get_registry().create_parser("go")
        assert isinstance(parser, Parser)
        tree = parser.parse(b"package main\n")
        assert tree.root_node.type == "source_file"

    def test_unknown_language(self):
        with pytest.raises(UnsupportedLanguage):
            get_registry().create_parser("cobol")
        with pytest.raises(UnsupportedLanguage):
            get_registry().get_capability("cobol")

    def test_malformed_query_raises(self):
        class BrokenPython(PythonCapability):
            primary_query = "(function_definition name: (identifier) @name"

        registry = ParserRegistry((BrokenPython(),))
        with pytest.raises(QueryCompilationError) as excinfo:
            registry.compile_query("python", "primary")
        assert excinfo.value.language == "python"
        assert excinfo.value.kind == "primary"
        assert "Failed to compile primary query for python" in str(excinfo.value)

    def test_unknown_node_type_raises(self):
        class BrokenPython(PythonCapability):
            comment_query = "(no_such_node) @comment"

        registry = ParserRegistry((BrokenPython(),))
        with pytest.raises(QueryCompilationError):
            registry.validate()

    def test_empty_query_compiles_to_none(self):
        class NoMiddle(PythonCapability):
            middle_query = ""

        registry = ParserRegistry((NoMiddle(),))
        assert registry.compile_query("python", "middle") is None


class TestThreadLocalParsers:
    def test_parse(self):
        tree = parse("python", b"def f():\n    return 1\n")
        assert tree.root_node.type == "module"

    def test_each_thread_gets_its_own_parser(self):
        from codechunk.extractors import registry as registry_module

        seen: list[Parser] = []
        lock = threading.Lock()

        def work():
            parse("python", b"x = 1\n")
            parser = registry_module._thread_parser("python")
            # Same thread reuses its parser.
            assert registry_module._thread_parser("python") is parser
            with lock:
                seen.append(parser)

        threads = [threading.Thread(target=work) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(seen) == 4
        # The list keeps every parser alive, so ids cannot be reused.
        assert len({id(p) for p in seen}) == 4
