"""Tests for chunk models and include/exclude filtering."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from codechunk.errors import UnsupportedLanguage
from codechunk.models import (
    DEFAULT_MAX_FILE_SIZE,
    ChunkType,
    CodeChunk,
    ExtractionOptions,
    type_priority,
)


def _chunk(**overrides) -> CodeChunk:
    fields = {
        "content": "def f():\n    pass",
        "file_path": "a.py",
        "start_line": 1,
        "end_line": 2,
        "language": "python",
        "chunk_type": ChunkType.function,
    }
    fields.update(overrides)
    return CodeChunk(**fields)


class TestTypePriority:
    @pytest.mark.parametrize(
        "chunk_type",
        [ChunkType.function, ChunkType.class_, ChunkType.method, ChunkType.struct],
    )
    def test_specific_types_rank_first(self, chunk_type):
        assert type_priority(chunk_type) == 0

    def test_code_block_ranks_after_other(self):
        assert type_priority(ChunkType.loop) < type_priority(ChunkType.code_block)

    def test_file_ranks_last(self):
        ranks = [type_priority(t) for t in ChunkType if t is not ChunkType.file]
        assert type_priority(ChunkType.file) > max(ranks)

    def test_supplemented_types_share_other_tier(self):
        for t in (ChunkType.const, ChunkType.trait, ChunkType.lambda_,
                  ChunkType.error_handling, ChunkType.comprehension,
                  ChunkType.special_block):
            assert type_priority(t) == type_priority(ChunkType.conditional)


class TestCodeChunk:
    def test_defaults(self):
        chunk = _chunk()
        assert chunk.name == "unknown"
        assert chunk.comment_ranges == []
        assert chunk.original_indentation == 0
        assert chunk.line_count == 2

    def test_start_after_end_rejected(self):
        with pytest.raises(ValidationError):
            _chunk(start_line=3, end_line=2)

    def test_zero_line_rejected(self):
        with pytest.raises(ValidationError):
            _chunk(start_line=0)

    def test_comment_range_past_content_rejected(self):
        with pytest.raises(ValidationError):
            _chunk(content="abc", comment_ranges=[(0, 4)])

    def test_comment_range_at_end_allowed(self):
        chunk = _chunk(content="abc", comment_ranges=[(1, 3)])
        assert chunk.comment_ranges == [(1, 3)]

    def test_chunk_type_serialises_as_string(self):
        data = _chunk(chunk_type=ChunkType.class_).model_dump(mode="json")
        assert data["chunk_type"] == "class"


class TestExtractionOptions:
    def test_default_include_covers_every_language(self):
        opts = ExtractionOptions()
        assert "**/*.py" in opts.include_patterns
        assert "**/*.rs" in opts.include_patterns
        assert "**/*.dart" in opts.include_patterns

    def test_default_max_file_size(self):
        assert ExtractionOptions().max_file_size_bytes == DEFAULT_MAX_FILE_SIZE

    def test_top_level_file_matches_double_star_pattern(self):
        assert ExtractionOptions().is_eligible("main.py")

    def test_nested_file_matches(self):
        assert ExtractionOptions().is_eligible("src/pkg/main.go")

    def test_default_excludes(self):
        opts = ExtractionOptions()
        assert not opts.is_eligible("node_modules/lib/index.js")
        assert not opts.is_eligible("target/debug/build.rs")
        assert not opts.is_eligible("pkg/__pycache__/mod.py")

    def test_default_deny_without_include_match(self):
        opts = ExtractionOptions(include_patterns=["*.rs"], exclude_patterns=[])
        assert not opts.is_eligible("foo.py")
        assert opts.is_eligible("foo.rs")

    def test_single_star_crosses_directories(self):
        opts = ExtractionOptions(include_patterns=["*.rs"], exclude_patterns=[])
        assert opts.is_eligible("src/deep/lib.rs")

    def test_exclude_wins_over_include(self):
        opts = ExtractionOptions(include_patterns=["**/*.py"], exclude_patterns=["**/gen/**"])
        assert not opts.is_eligible("pkg/gen/models.py")
        assert opts.is_eligible("pkg/models.py")

    def test_globs_see_root_relative_path(self, tmp_path: Path):
        # Absolute location of the repo must not trigger an exclude.
        root = tmp_path / "tmp" / "repo"
        opts = ExtractionOptions()
        assert opts.is_eligible(root / "app.py", root)
        assert not opts.is_eligible(root / "tmp" / "app.py", root)

    def test_language_filter(self):
        opts = ExtractionOptions(languages=["Rust", "py"])
        opts.apply_language_filter()
        assert set(opts.include_patterns) == {"**/*.rs", "**/*.py", "**/*.pyi"}
        assert not opts.is_eligible("index.js")

    def test_language_filter_none_keeps_patterns(self):
        opts = ExtractionOptions(include_patterns=["*.c"])
        opts.apply_language_filter()
        assert opts.include_patterns == ["*.c"]

    def test_language_filter_unknown_language(self):
        opts = ExtractionOptions(languages=["cobol"])
        with pytest.raises(UnsupportedLanguage):
            opts.apply_language_filter()
