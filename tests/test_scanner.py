"""Tests for the repo scanner."""

from __future__ import annotations

from pathlib import Path

from codechunk.scanner import SKIP_DIRS, ScanResult, scan_repo


def _make_repo(base: Path, structure: dict[str, str | dict]) -> Path:
    """Write *structure* under *base*.

    Nested dicts become directories, strings become file contents.
    """
    for name, content in structure.items():
        path = base / name
        if isinstance(content, dict):
            path.mkdir(parents=True, exist_ok=True)
            _make_repo(path, content)
        else:
            path.write_text(content, encoding="utf-8")
    return base


class TestLanguageDetection:
    def test_python_files(self, tmp_path):
        repo = _make_repo(tmp_path, {"app.py": "print('hello')", "lib.py": "x = 1"})
        result = scan_repo(repo)
        assert result.languages == ["python"]
        assert len(result.source_files) == 2
        assert all(sf.language == "python" for sf in result.source_files)

    def test_mixed_languages(self, tmp_path):
        repo = _make_repo(tmp_path, {
            "main.go": "package main",
            "lib.rs": "fn main() {}",
            "App.kt": "fun main() {}",
            "main.dart": "void main() {}",
            "types.tsx": "export type X = string;",
        })
        result = scan_repo(repo)
        assert result.languages == ["dart", "go", "kotlin", "rust", "typescript"]

    def test_unsupported_files_ignored(self, tmp_path):
        repo = _make_repo(tmp_path, {
            "README.md": "# hi",
            "Makefile": "all:",
            "data.json": "{}",
            "main.c": "int main(void) { return 0; }",
        })
        result = scan_repo(repo)
        assert [sf.path for sf in result.source_files] == ["main.c"]
        assert result.languages == ["c"]

    def test_uppercase_extension(self, tmp_path):
        repo = _make_repo(tmp_path, {"Widget.HPP": "class Widget {};"})
        result = scan_repo(repo)
        assert result.source_files[0].language == "cpp"


class TestSkipDirs:
    def test_skip_dirs_pruned(self, tmp_path):
        repo = _make_repo(tmp_path, {
            "src": {"app.py": "x = 1"},
            "node_modules": {"lib": {"index.js": "module.exports = 1;"}},
            ".git": {"hooks": {"pre-commit.py": "pass"}},
            "target": {"debug": {"build.rs": "fn main() {}"}},
        })
        result = scan_repo(repo)
        assert [sf.path for sf in result.source_files] == ["src/app.py"]

    def test_common_dirs_listed(self):
        assert {"node_modules", ".git", "__pycache__", "target", ".dart_tool"} <= SKIP_DIRS


class TestScanResult:
    def test_paths_relative_and_sorted(self, tmp_path):
        repo = _make_repo(tmp_path, {
            "b.py": "x = 1",
            "pkg": {"z.go": "package pkg", "a.rb": "puts 1"},
            "a.py": "y = 2",
        })
        result = scan_repo(repo)
        assert isinstance(result, ScanResult)
        assert result.root == repo.resolve()
        assert [sf.path for sf in result.source_files] == [
            "a.py", "b.py", "pkg/a.rb", "pkg/z.go",
        ]

    def test_empty_repo(self, tmp_path):
        result = scan_repo(tmp_path)
        assert result.source_files == []
        assert result.languages == []

    def test_language_counts(self, tmp_path):
        repo = _make_repo(tmp_path, {"a.py": "x = 1", "b.py": "y = 2", "c.go": "package c"})
        assert scan_repo(repo).language_counts() == {"python": 2, "go": 1}
