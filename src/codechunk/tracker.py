"""Progress reporting for extraction runs."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class StepType(Enum):
    scanning = "scanning"
    extracting = "extracting"
    finalizing = "finalizing"


@runtime_checkable
class ProgressReporter(Protocol):
    """Sink the pipeline notifies as work advances.  Never read back."""

    def set_step(self, step: StepType) -> None: ...

    def set_current_file(self, file: str | None) -> None: ...

    def set_file_counts(
        self, step: StepType, processed: int, total: int, current_file: str | None = None
    ) -> None: ...


@dataclass
class FileCounts:
    step: StepType
    processed: int
    total: int
    current_file: str | None = None

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 100.0
        return self.processed * 100.0 / self.total


class ProgressTracker:
    """Thread-safe reporter that keeps the latest state and an event log."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._step: StepType | None = None
        self._current_file: str | None = None
        self._counts: FileCounts | None = None
        # Event recording for assertions and replay
        self._events: list[dict[str, Any]] = []
        self._start_time: float = time.time()

    def _record(self, event: dict[str, Any]) -> None:
        event["timestamp"] = time.time() - self._start_time
        self._events.append(event)

    def set_step(self, step: StepType) -> None:
        with self._lock:
            self._step = step
            self._record({"type": "step", "step": step.value})

    def set_current_file(self, file: str | None) -> None:
        with self._lock:
            self._current_file = file
            self._record({"type": "file", "file": file})

    def set_file_counts(
        self, step: StepType, processed: int, total: int, current_file: str | None = None
    ) -> None:
        with self._lock:
            self._counts = FileCounts(step, processed, total, current_file)
            if current_file is not None:
                self._current_file = current_file
            self._record({
                "type": "counts",
                "step": step.value,
                "processed": processed,
                "total": total,
                "file": current_file,
            })

    @property
    def step(self) -> StepType | None:
        with self._lock:
            return self._step

    @property
    def current_file(self) -> str | None:
        with self._lock:
            return self._current_file

    @property
    def counts(self) -> FileCounts | None:
        with self._lock:
            return self._counts

    def events(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._events)  # Copy to avoid mutation


class NoOpTracker:
    """Drop-in reporter that does nothing; used when no progress sink is given."""

    def set_step(self, step: StepType) -> None:
        pass

    def set_current_file(self, file: str | None) -> None:
        pass

    def set_file_counts(
        self, step: StepType, processed: int, total: int, current_file: str | None = None
    ) -> None:
        pass
