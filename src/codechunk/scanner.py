"""Repository walker that pairs every source file with its language."""

from __future__ import annotations

import os
from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .extractors.languages import language_for_path
from .models import SourceFile

# Never descended into.
SKIP_DIRS: frozenset[str] = frozenset({
    # version control
    ".git", ".hg", ".svn",
    # python
    ".venv", "venv", "__pycache__", ".tox", ".eggs", ".mypy_cache", ".pytest_cache",
    # javascript
    "node_modules", ".next", ".nuxt", "coverage",
    # build output
    "dist", "build", "target", "bin", "obj", ".build",
    # dependency caches
    "vendor", ".cargo", ".gradle", "Pods", ".dart_tool", ".cache",
})


@dataclass
class ScanResult:
    root: Path
    source_files: list[SourceFile] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)

    def language_counts(self) -> Counter[str]:
        return Counter(sf.language for sf in self.source_files)


def _walk(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        base = Path(dirpath)
        for name in filenames:
            yield base / name


def scan_repo(root: Path) -> ScanResult:
    """List every file under *root* whose extension maps to a language.

    ``SourceFile.path`` is relative to *root* with ``/`` separators; entries
    come back sorted by that path.
    """
    root = Path(root).resolve()
    files = []
    for path in _walk(root):
        language = language_for_path(path)
        if language is not None:
            files.append(SourceFile(path=path.relative_to(root).as_posix(), language=language))

    files.sort(key=lambda sf: sf.path)
    return ScanResult(
        root=root,
        source_files=files,
        languages=sorted({sf.language for sf in files}),
    )
