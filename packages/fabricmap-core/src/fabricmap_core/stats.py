"""
Extraction statistics and the observability sink they are reported to.

The sink is passed in by whoever owns the process (CLI, service); the core
never reaches for a global. CounterSink is safe to share between concurrent
requests.
"""

import threading
from dataclasses import dataclass
from typing import Protocol

STATUS_SUCCESS = "success"
STATUS_SKIPPED = "skipped"
STATUS_MISSING_LABELS = "missing_labels"


@dataclass
class ExtractionStats:
    success: int = 0
    skipped: int = 0
    bad_labels: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            STATUS_SUCCESS: self.success,
            STATUS_SKIPPED: self.skipped,
            STATUS_MISSING_LABELS: self.bad_labels,
        }


class StatsSink(Protocol):
    """Receives per-status node counts, e.g. a metrics counter vector."""

    def record(self, subsystem: str, status: str, count: int) -> None: ...


class CounterSink:
    """In-process counters keyed by (subsystem, status)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: dict[tuple[str, str], int] = {}

    def record(self, subsystem: str, status: str, count: int) -> None:
        with self._lock:
            key = (subsystem, status)
            self._counts[key] = self._counts.get(key, 0) + count

    def get(self, subsystem: str, status: str) -> int:
        with self._lock:
            return self._counts.get((subsystem, status), 0)

    def snapshot(self) -> dict[tuple[str, str], int]:
        with self._lock:
            return dict(self._counts)


def report(sink: StatsSink | None, subsystem: str, stats: ExtractionStats) -> None:
    if sink is None:
        return
    for status, count in stats.as_dict().items():
        sink.record(subsystem, status, count)
