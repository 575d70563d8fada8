"""
Capped, newest-first log of executed operations.

Prepend and truncate happen under one lock so concurrent completions keep
"newest first" ordering. A bounded deque gives O(1) insertion and drops the
oldest entry on overflow. Readers get a snapshot list, never the live deque.
"""
import threading
from collections import deque
from typing import List

from value_objects import PerformanceEntry

DEFAULT_LOG_SIZE = 50


class PerformanceLog:
    """Append-only ring of the last N operation records"""

    def __init__(self, max_entries: int = DEFAULT_LOG_SIZE):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def record(self, entry: PerformanceEntry) -> None:
        """Insert at the head; evicts the oldest entry when full"""
        with self._lock:
            self._entries.appendleft(entry)

    def entries(self) -> List[PerformanceEntry]:
        """Snapshot, newest first"""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
