"""In-memory history of recent solve results (newest first, never persisted)."""

import threading
from typing import Optional

from solver.result import MathResult

DEFAULT_LIMIT = 5


class ResultHistory:
    """Bounded, most-recent-first list of results.

    Duplicates are kept: solving the same input twice records it twice.
    """

    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        if limit < 1:
            raise ValueError("History limit must be at least 1.")
        self._limit = limit
        self._items: list[MathResult] = []
        self._lock = threading.Lock()

    @property
    def limit(self) -> int:
        return self._limit

    def add(self, result: MathResult) -> None:
        """Record *result* as the newest entry, dropping the oldest past the limit."""
        with self._lock:
            self._items.insert(0, result)
            self._items = self._items[:self._limit]

    def items(self) -> list[MathResult]:
        """Return a snapshot of the history (newest first)."""
        with self._lock:
            return list(self._items)

    def get(self, index: int) -> Optional[MathResult]:
        with self._lock:
            if 0 <= index < len(self._items):
                return self._items[index]
            return None

    def clear(self) -> None:
        with self._lock:
            self._items = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
