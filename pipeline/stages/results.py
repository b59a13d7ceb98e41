"""
Run-scoped collection of compression outcomes.
"""

import threading
from typing import List

from base_classes import CompressionOutcome


class OutcomeCollector:
    """Accumulates kept outcomes for a single run; safe for concurrent appends"""

    def __init__(self):
        self._outcomes: List[CompressionOutcome] = []
        self._lock = threading.Lock()

    def add(self, outcome: CompressionOutcome) -> None:
        with self._lock:
            self._outcomes.append(outcome)

    def outcomes(self) -> List[CompressionOutcome]:
        """Snapshot in arrival order"""
        with self._lock:
            return list(self._outcomes)

    def clear(self) -> None:
        with self._lock:
            self._outcomes.clear()

    def total_saved(self) -> int:
        with self._lock:
            return sum(o.original_size - o.compressed_size for o in self._outcomes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._outcomes)
