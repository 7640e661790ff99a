"""Repository-level extraction: fan the per-file pipeline out over a thread pool."""

from .extract import (
    extract_chunks_with_progress,
    extract_file,
    extract_repository,
    find_repo_root,
    sort_chunks,
)

__all__ = [
    "extract_chunks_with_progress",
    "extract_file",
    "extract_repository",
    "find_repo_root",
    "sort_chunks",
]
