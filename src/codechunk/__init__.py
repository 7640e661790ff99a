"""codechunk - extract typing-challenge chunks from source repositories."""

from .errors import (  # noqa: F401 -- public re-exports
    CodeChunkError,
    ExtractionCancelled,
    ExtractionFailed,
    NoSupportedFiles,
    QueryCompilationError,
    UnsupportedLanguage,
)
from .extractors import extract_chunks, get_registry
from .models import ChunkType, CodeChunk, ExtractionOptions, SourceFile
from .pipeline import (
    extract_chunks_with_progress,
    extract_file,
    extract_repository,
    sort_chunks,
)
from .tracker import NoOpTracker, ProgressReporter, ProgressTracker, StepType

__version__ = "0.1.0"

__all__ = [
    "extract_chunks",
    "extract_chunks_with_progress",
    "extract_file",
    "extract_repository",
    "get_registry",
    "sort_chunks",
    "ChunkType",
    "CodeChunk",
    "ExtractionOptions",
    "SourceFile",
    "NoOpTracker",
    "ProgressReporter",
    "ProgressTracker",
    "StepType",
    "CodeChunkError",
    "ExtractionCancelled",
    "ExtractionFailed",
    "NoSupportedFiles",
    "QueryCompilationError",
    "UnsupportedLanguage",
]
