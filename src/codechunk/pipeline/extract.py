"""Parallel extraction across every eligible file of a repository."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from ..config import Settings, load_settings
from ..errors import (
    ExtractionCancelled,
    ExtractionFailed,
    NoSupportedFiles,
    UnsupportedLanguage,
)
from ..extractors.chunk_extractor import extract_chunks
from ..extractors.registry import get_registry
from ..models import CodeChunk, ExtractionOptions
from ..scanner import scan_repo
from ..tracker import NoOpTracker, ProgressReporter, StepType

logger = logging.getLogger(__name__)

FileEntry = tuple["str | Path", str]


def find_repo_root(path: str | Path) -> Path | None:
    """Return the nearest ancestor of *path* containing ``.git``, if any."""
    start = Path(path).resolve()
    if start.is_file():
        start = start.parent
    for d in [start, *start.parents]:
        if (d / ".git").exists():
            return d
    return None


def extract_file(
    path: str | Path, language: str, root: str | Path | None = None
) -> list[CodeChunk]:
    """Read *path* and extract its chunks.

    Raises :class:`OSError` or :class:`UnicodeDecodeError` for unreadable
    files and :class:`ExtractionFailed` for unparsable ones.
    """
    source = Path(path).read_text(encoding="utf-8")
    return extract_chunks(source, path, language, root=root)


def sort_chunks(chunks: Iterable[CodeChunk]) -> list[CodeChunk]:
    """Order chunks by file, then position.  Parallel runs are unordered."""
    return sorted(chunks, key=lambda c: (c.file_path, c.start_line, c.end_line))


def _file_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError:
        return 0


def _common_dir(paths: list[Path]) -> Path | None:
    if not paths:
        return None
    return Path(os.path.commonpath([p.parent for p in paths]))


def _glob_root(path: Path, root: Path | None, fallback: Path | None) -> Path | None:
    if root is not None and path.is_relative_to(root):
        return root
    return fallback


def _should_report(current: int, total: int, every: int) -> bool:
    # Past 99% every file is reported so the bar visibly reaches the end.
    if current == total or current * 100 > total * 99:
        return True
    return current % every == 0


class _Run:
    """Per-file worker state for one parallel run."""

    def __init__(
        self,
        total: int,
        root: Path | None,
        options: ExtractionOptions,
        progress: ProgressReporter,
        progress_every: int,
        cancel_event: threading.Event | None,
    ) -> None:
        self.total = total
        self.root = root
        self.options = options
        self.progress = progress
        self.progress_every = progress_every
        self.cancel_event = cancel_event
        self._lock = threading.Lock()
        self._processed = 0
        self.failed: list[str] = []
        self.skipped = 0

    def _advance(self, path: Path) -> None:
        with self._lock:
            self._processed += 1
            current = self._processed
        if _should_report(current, self.total, self.progress_every):
            self.progress.set_file_counts(StepType.extracting, current, self.total, str(path))

    def process(self, path: Path, language: str, size: int) -> list[CodeChunk]:
        try:
            if self.cancel_event is not None and self.cancel_event.is_set():
                with self._lock:
                    self.skipped += 1
                return []
            if size > self.options.max_file_size_bytes:
                logger.warning(
                    "Skipping large file: %s (%d bytes > %d byte limit)",
                    path, size, self.options.max_file_size_bytes,
                )
                return []
            try:
                return extract_file(path, language, root=self.root)
            except (OSError, UnicodeDecodeError, ExtractionFailed) as exc:
                logger.warning("Skipping %s: %s", path, exc)
                with self._lock:
                    self.failed.append(str(path))
                return []
        finally:
            self._advance(path)


def extract_chunks_with_progress(
    files: Iterable[FileEntry],
    options: ExtractionOptions | None = None,
    progress: ProgressReporter | None = None,
    *,
    root: str | Path | None = None,
    max_workers: int | None = None,
    settings: Settings | None = None,
    cancel_event: threading.Event | None = None,
) -> list[CodeChunk]:
    """Extract chunks from *files* on a thread pool.

    *files* holds ``(path, language)`` pairs.  Paths are resolved against
    *root* when relative, and reported relative to it (or to the enclosing
    git checkout when *root* is omitted).

    A file that cannot be read or parsed is logged and contributes no
    chunks.  The merged result is in completion order; use
    :func:`sort_chunks` when a stable order matters.

    Raises :class:`NoSupportedFiles` when nothing was extracted and
    :class:`ExtractionCancelled` when *cancel_event* was set mid-run.
    """
    settings = settings or load_settings()
    if options is None:
        options = ExtractionOptions(max_file_size_bytes=settings.max_file_size_bytes)
    progress = progress or NoOpTracker()
    workers = max_workers or settings.max_workers
    registry = get_registry()

    root_path = Path(root).resolve() if root is not None else None
    candidates: list[tuple[Path, str]] = []
    for raw_path, language in files:
        path = Path(raw_path)
        if root_path is not None and not path.is_absolute():
            path = root_path / path
        try:
            language = registry.get_capability(language).name
        except UnsupportedLanguage:
            logger.debug("Skipping %s: no grammar for %s", path, language)
            continue
        candidates.append((path.resolve(), language))

    if root_path is None and candidates:
        root_path = find_repo_root(candidates[0][0])
    # Files outside the repository root match globs relative to their common directory.
    outside_root = _common_dir([
        path for path, _ in candidates
        if root_path is None or not path.is_relative_to(root_path)
    ])
    entries = [
        (path, language)
        for path, language in candidates
        if options.is_eligible(path, _glob_root(path, root_path, outside_root))
    ]
    if not entries:
        raise NoSupportedFiles()

    # Largest first so early progress moves smoothly.
    sized = sorted(
        ((path, language, _file_size(path)) for path, language in entries),
        key=lambda item: item[2],
        reverse=True,
    )
    total = len(sized)

    progress.set_step(StepType.extracting)
    progress.set_file_counts(StepType.extracting, 0, total, None)

    run = _Run(total, root_path, options, progress, settings.progress_every, cancel_event)
    chunks: list[CodeChunk] = []
    with ThreadPoolExecutor(max_workers=min(workers, total)) as executor:
        futures = [
            executor.submit(run.process, path, language, size)
            for path, language, size in sized
        ]
        for future in as_completed(futures):
            # QueryCompilationError and other bugs propagate from here.
            chunks.extend(future.result())

    progress.set_file_counts(StepType.extracting, total, total, None)
    progress.set_current_file(None)

    if run.skipped:
        raise ExtractionCancelled(
            f"Extraction cancelled after {total - run.skipped} of {total} files"
        )

    logger.info(
        "Extracted %d chunks from %d files (%d failed)",
        len(chunks), total - len(run.failed), len(run.failed),
    )
    if not chunks:
        raise NoSupportedFiles()
    return chunks


def extract_repository(
    root: str | Path,
    options: ExtractionOptions | None = None,
    progress: ProgressReporter | None = None,
    *,
    settings: Settings | None = None,
    max_workers: int | None = None,
    cancel_event: threading.Event | None = None,
) -> list[CodeChunk]:
    """Scan *root* and extract chunks from every eligible file."""
    progress = progress or NoOpTracker()
    settings = settings or load_settings()
    root_path = Path(root).resolve()

    progress.set_step(StepType.scanning)
    scan = scan_repo(root_path)
    logger.info(
        "Found %d source files in %s (%s)",
        len(scan.source_files), root_path, ", ".join(scan.languages) or "none",
    )
    files: Sequence[FileEntry] = [(sf.path, sf.language) for sf in scan.source_files]

    chunks = extract_chunks_with_progress(
        files,
        options,
        progress,
        root=root_path,
        max_workers=max_workers,
        settings=settings,
        cancel_event=cancel_event,
    )
    progress.set_step(StepType.finalizing)
    return chunks

