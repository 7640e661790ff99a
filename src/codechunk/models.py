"""Pydantic models for codechunk's extraction pipeline."""

from __future__ import annotations

import fnmatch
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator


# ---------------------------------------------------------------------------
# Chunk primitives
# ---------------------------------------------------------------------------

class ChunkType(str, Enum):
    """Kind of construct a chunk was extracted from."""

    function = "function"
    class_ = "class"
    method = "method"
    struct = "struct"
    variable = "variable"
    enum = "enum"
    interface = "interface"
    type_alias = "type_alias"
    module = "module"
    component = "component"
    loop = "loop"
    conditional = "conditional"
    function_call = "function_call"
    code_block = "code_block"
    file = "file"
    # Finer-grained kinds used by the middle queries.
    const = "const"
    trait = "trait"
    lambda_ = "lambda"
    error_handling = "error_handling"
    comprehension = "comprehension"
    special_block = "special_block"


# Lower ranks win when two chunks share the same line span.
_SPECIFIC_TYPES = frozenset({
    ChunkType.function, ChunkType.class_, ChunkType.method, ChunkType.struct,
})


def type_priority(chunk_type: ChunkType) -> int:
    """Sort rank of *chunk_type* among chunks covering identical lines."""
    if chunk_type in _SPECIFIC_TYPES:
        return 0
    if chunk_type is ChunkType.code_block:
        return 10
    if chunk_type is ChunkType.file:
        return 20
    return 5


class CodeChunk(BaseModel):
    """One extracted snippet of source code, ready to become a typing challenge."""

    content: str
    file_path: str
    start_line: int = Field(ge=1)
    end_line: int = Field(ge=1)
    language: str
    chunk_type: ChunkType
    name: str = "unknown"
    # Character offsets into ``content``.
    comment_ranges: list[tuple[int, int]] = Field(default_factory=list)
    original_indentation: int = 0

    @model_validator(mode="after")
    def _check_positions(self) -> "CodeChunk":
        if self.start_line > self.end_line:
            raise ValueError(
                f"start_line {self.start_line} is after end_line {self.end_line}"
            )
        length = len(self.content)
        for start, end in self.comment_ranges:
            if not 0 <= start <= end <= length:
                raise ValueError(
                    f"comment range ({start}, {end}) outside content of length {length}"
                )
        return self

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1


# ---------------------------------------------------------------------------
# Repository inputs
# ---------------------------------------------------------------------------

class SourceFile(BaseModel):
    """A discovered source file in the repository."""

    path: str       # repo-relative path (forward slashes)
    language: str   # registered language id: "python", "rust", "cpp", ...


DEFAULT_EXCLUDE_PATTERNS: list[str] = [
    # Build output
    "**/build/**",
    "**/dist/**",
    "**/target/**",
    "**/bin/**",
    "**/obj/**",
    # Dependencies
    "**/node_modules/**",
    "**/vendor/**",
    # Python
    "**/__pycache__/**",
    "**/*.pyc",
    "**/venv/**",
    "**/.venv/**",
    "**/env/**",
    # JavaScript / TypeScript
    "**/.next/**",
    "**/.nuxt/**",
    "**/coverage/**",
    "**/.nyc_output/**",
    # Java / Kotlin / Scala
    "**/*.class",
    "**/.gradle/**",
    "**/buildSrc/**",
    "**/.m2/**",
    "**/.ivy2/**",
    # Ruby
    "**/.bundle/**",
    # Swift / iOS
    "**/.build/**",
    "**/DerivedData/**",
    "**/Pods/**",
    "**/Carthage/**",
    # C / C++
    "**/*.o",
    "**/*.so",
    "**/*.a",
    "**/CMakeFiles/**",
    "**/cmake-build-*/**",
    # Dart / Flutter
    "**/.dart_tool/**",
    # Generated code
    "**/generated/**",
    "**/*_pb2.py",
    "**/*.pb.go",
    "**/bazel-*/**",
    # VCS, temp and caches
    "**/.git/**",
    "**/tmp/**",
    "**/temp/**",
    "**/*.tmp",
    "**/.cache/**",
    "**/*.log",
]

DEFAULT_MAX_FILE_SIZE = 1024 * 1024


def _glob_match(path: str, pattern: str) -> bool:
    if fnmatch.fnmatchcase(path, pattern):
        return True
    # A leading "**/" also matches files at the top level.
    if pattern.startswith("**/"):
        return fnmatch.fnmatchcase(path, pattern[3:])
    return False


def _default_include_patterns() -> list[str]:
    from .extractors.languages import all_file_patterns

    return all_file_patterns()


class ExtractionOptions(BaseModel):
    """Which files take part in an extraction run."""

    include_patterns: list[str] = Field(default_factory=_default_include_patterns)
    exclude_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS)
    )
    languages: list[str] | None = None
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE

    def apply_language_filter(self) -> None:
        """Narrow ``include_patterns`` to the languages named in ``languages``."""
        if self.languages is None:
            return
        from .extractors.languages import file_patterns, resolve_language

        patterns: list[str] = []
        for name in self.languages:
            for pattern in file_patterns(resolve_language(name)):
                if pattern not in patterns:
                    patterns.append(pattern)
        self.include_patterns = patterns

    def is_eligible(self, path: str | Path, root: str | Path | None = None) -> bool:
        """Apply the include/exclude globs to *path*.

        Exclusion is checked first.  A path that matches no include pattern
        is rejected even when nothing excludes it.  When *root* is given the
        globs see the path relative to it, so directories above the
        repository never trigger an exclude.
        """
        target = Path(path).as_posix()
        if root is not None:
            try:
                target = Path(path).relative_to(root).as_posix()
            except ValueError:
                pass

        if any(_glob_match(target, p) for p in self.exclude_patterns):
            return False
        return any(_glob_match(target, p) for p in self.include_patterns)
