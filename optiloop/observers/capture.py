"""
Record capture observer for testing.

Captures all records in memory for assertions and analysis.
"""

from typing import TYPE_CHECKING, List, Optional

from ..kv import KV, KVValue
from .base import Observer

if TYPE_CHECKING:
    from ..executor.result import OptimizationResult


class RecordCapture(Observer):
    """
    Observer that keeps every record it receives.

    Example:
        >>> capture = RecordCapture()
        >>> executor.add_observer("capture", capture, ObserverMode.new_best())
        >>> result = executor.run()
        >>> capture.iterations()
        [0, 1, 2, 5]
    """

    def __init__(self):
        self.records: List[KV] = []
        self.setup_calls = 0
        self.result: Optional["OptimizationResult"] = None

    def setup(self) -> None:
        self.setup_calls += 1

    def notify(self, record: KV) -> None:
        self.records.append(record)

    def finish(self, result: "OptimizationResult") -> None:
        self.result = result

    def iterations(self) -> List[int]:
        """Iteration numbers of the captured records."""
        return [int(r["iter"]) for r in self.records if "iter" in r]

    def values(self, key: str) -> List[Optional[KVValue]]:
        """One field across all captured records."""
        return [r.get(key) for r in self.records]

    def get_last(self) -> Optional[KV]:
        return self.records[-1] if self.records else None

    def clear(self) -> None:
        self.records.clear()

    def __len__(self) -> int:
        return len(self.records)
