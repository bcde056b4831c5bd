"""
Base state record shared by every algorithm shape.

Holds the current and best-known solution, counters, elapsed time and
termination status. Algorithm-specific fields live on subclasses and are
exposed generically through extensions().
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import copy

from ..errors import ExecutorStateError
from ..kv import KV
from ..termination import NOT_TERMINATED, TerminationReason, TerminationStatus

# Fields owned by the executor rather than the solver
CONTINUITY_FIELDS = (
    "iteration",
    "best_param",
    "prev_best_param",
    "best_cost",
    "prev_best_cost",
    "has_best",
    "last_best_iteration",
    "no_improvement_streak",
    "elapsed",
)


@dataclass
class State:
    """
    Progress record of an optimization run.

    Solvers update param and cost (plus any shape-specific fields); the
    executor maintains the counters, best-tracking and timing so that
    every algorithm gets identical bookkeeping.
    """

    # Current iterate
    param: Any = None
    prev_param: Any = None
    cost: float = float("inf")
    prev_cost: float = float("inf")

    # Best-known solution
    best_param: Any = None
    prev_best_param: Any = None
    best_cost: float = float("inf")
    prev_best_cost: float = float("inf")
    has_best: bool = False

    # Counters
    iteration: int = 0
    last_best_iteration: int = 0
    no_improvement_streak: int = 0
    counts: Dict[str, int] = field(default_factory=dict)
    elapsed: float = 0.0

    status: TerminationStatus = NOT_TERMINATED
    kv: KV = field(default_factory=KV)

    # Best tracking

    def record_best(self) -> bool:
        """
        Update the best-known solution from the current iterate.

        Only a strictly lower cost counts as an improvement, so ties do not
        reset the no-improvement streak. The first recorded iterate always
        becomes the best. The param is copied, so solvers may keep updating
        their array in place.

        Returns:
            True if this iteration produced a new best.
        """
        if not self.has_best or self.cost < self.best_cost:
            self.prev_best_param = self.best_param
            self.prev_best_cost = self.best_cost
            self.best_param = copy.deepcopy(self.param)
            self.best_cost = self.cost
            self.has_best = True
            self.last_best_iteration = self.iteration
            self.no_improvement_streak = 0
            return True

        self.no_improvement_streak += 1
        return False

    def is_best(self) -> bool:
        """Whether the current iteration produced the best-known solution."""
        return self.has_best and self.last_best_iteration == self.iteration

    def continuity(self) -> Dict[str, Any]:
        """Snapshot of executor-owned fields."""
        return {name: getattr(self, name) for name in CONTINUITY_FIELDS}

    def restore_continuity(self, snapshot: Dict[str, Any]) -> None:
        """Overwrite executor-owned fields from a snapshot."""
        for name in CONTINUITY_FIELDS:
            setattr(self, name, snapshot[name])

    # Termination

    @property
    def terminated(self) -> bool:
        return self.status.terminated

    @property
    def termination_reason(self) -> Optional[TerminationReason]:
        return self.status.reason

    def terminate_with(self, reason: TerminationReason) -> None:
        """
        Mark the state as terminated.

        Raises:
            ExecutorStateError: If the state was already terminated.
        """
        if self.status.terminated:
            raise ExecutorStateError(
                f"State already terminated ({self.status.reason}); "
                f"cannot terminate again with {reason}"
            )
        self.status = TerminationStatus(reason)

    # Shape-specific fields

    def extensions(self) -> Dict[str, Any]:
        """Algorithm-specific fields that are currently set."""
        return {}

    def has_extension(self, name: str) -> bool:
        return name in self.extensions()

    def summary_kv(self) -> KV:
        """Standard fields every observer record carries."""
        kv = KV()
        kv.set("iter", self.iteration)
        kv.set("cost", float(self.cost))
        kv.set("best_cost", float(self.best_cost))
        kv.set("last_best_iter", self.last_best_iteration)
        kv.set("no_improvement_streak", self.no_improvement_streak)
        kv.set("time", float(self.elapsed))
        for name, value in sorted(self.counts.items()):
            if value:
                kv.set(name, value)
        return kv
