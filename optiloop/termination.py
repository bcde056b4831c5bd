"""
Termination vocabulary and the default convergence checks.

The executor evaluates the checks in a fixed order after best-tracking;
the first match wins and the solver's own criterion is consulted last.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional
import contextlib
import logging
import signal
import threading

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidConfiguration

if TYPE_CHECKING:
    from .solver import Solver
    from .state import State

logger = logging.getLogger(__name__)


class ReasonKind(str, Enum):
    """Why a run stopped."""

    MAX_ITERS_REACHED = "MaxItersReached"
    TARGET_COST_REACHED = "TargetCostReached"
    TARGET_PRECISION_REACHED = "TargetPrecisionReached"
    NO_IMPROVEMENT_STREAK = "NoImprovementStreak"
    TIME_BUDGET_EXCEEDED = "TimeBudgetExceeded"
    EVALUATION_BUDGET_EXCEEDED = "EvaluationBudgetExceeded"
    ABORTED = "Aborted"
    SOLVER_CONVERGED = "SolverConverged"
    SOLVER_EXIT = "SolverExit"
    ERROR = "Error"


_DESCRIPTIONS = {
    ReasonKind.MAX_ITERS_REACHED: "Maximum number of iterations reached",
    ReasonKind.TARGET_COST_REACHED: "Target cost value reached",
    ReasonKind.TARGET_PRECISION_REACHED: "Target precision reached",
    ReasonKind.NO_IMPROVEMENT_STREAK: "No improvement",
    ReasonKind.TIME_BUDGET_EXCEEDED: "Time budget exceeded",
    ReasonKind.EVALUATION_BUDGET_EXCEEDED: "Evaluation budget exceeded",
    ReasonKind.ABORTED: "Aborted",
    ReasonKind.SOLVER_CONVERGED: "Solver converged",
    ReasonKind.SOLVER_EXIT: "Solver exit",
    ReasonKind.ERROR: "Error",
}


@dataclass(frozen=True)
class TerminationReason:
    """
    A termination reason with its optional payload.

    streak is set for NoImprovementStreak(n); message carries free text
    for SolverExit, Error and budget reasons.
    """

    kind: ReasonKind
    streak: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def max_iters_reached(cls) -> "TerminationReason":
        return cls(ReasonKind.MAX_ITERS_REACHED)

    @classmethod
    def target_cost_reached(cls) -> "TerminationReason":
        return cls(ReasonKind.TARGET_COST_REACHED)

    @classmethod
    def target_precision_reached(cls) -> "TerminationReason":
        return cls(ReasonKind.TARGET_PRECISION_REACHED)

    @classmethod
    def no_improvement_streak(cls, n: int) -> "TerminationReason":
        return cls(ReasonKind.NO_IMPROVEMENT_STREAK, streak=n)

    @classmethod
    def time_budget_exceeded(cls) -> "TerminationReason":
        return cls(ReasonKind.TIME_BUDGET_EXCEEDED)

    @classmethod
    def evaluation_budget_exceeded(cls, counter: str) -> "TerminationReason":
        return cls(ReasonKind.EVALUATION_BUDGET_EXCEEDED, message=counter)

    @classmethod
    def aborted(cls) -> "TerminationReason":
        return cls(ReasonKind.ABORTED)

    @classmethod
    def solver_converged(cls) -> "TerminationReason":
        return cls(ReasonKind.SOLVER_CONVERGED)

    @classmethod
    def solver_exit(cls, message: str) -> "TerminationReason":
        return cls(ReasonKind.SOLVER_EXIT, message=message)

    @classmethod
    def error(cls, exc: BaseException) -> "TerminationReason":
        return cls(ReasonKind.ERROR, message=f"{type(exc).__name__}: {exc}")

    def __str__(self) -> str:
        text = _DESCRIPTIONS[self.kind]
        if self.streak is not None:
            text = f"{text} for {self.streak} iterations"
        if self.message:
            text = f"{text}: {self.message}"
        return text


@dataclass(frozen=True)
class TerminationStatus:
    """NotTerminated (reason is None) or Terminated(reason)."""

    reason: Optional[TerminationReason] = None

    @property
    def terminated(self) -> bool:
        return self.reason is not None

    def __str__(self) -> str:
        if self.reason is None:
            return "Running"
        return str(self.reason)


NOT_TERMINATED = TerminationStatus()


class TerminationCriteria(BaseModel):
    """
    Default termination settings.

    All criteria are optional; an unset criterion never fires.

    Example:
        >>> criteria = TerminationCriteria(max_iters=100, target_cost=1e-8)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_iters: Optional[int] = Field(
        None, ge=0, description="Stop once this many iterations have run"
    )
    target_cost: Optional[float] = Field(
        None, description="Stop once the best cost is at or below this value"
    )
    max_time: Optional[float] = Field(
        None, ge=0.0, description="Wall-clock budget in seconds"
    )
    no_improvement_threshold: Optional[int] = Field(
        None, gt=0, description="Stop after this many consecutive non-improving iterations"
    )
    max_evaluations: Dict[str, int] = Field(
        default_factory=dict,
        description="Evaluation budgets keyed by counter name (e.g. 'cost_count')",
    )

    @field_validator("max_evaluations")
    @classmethod
    def _budgets_positive(cls, value: Dict[str, int]) -> Dict[str, int]:
        for name, limit in value.items():
            if limit <= 0:
                raise ValueError(f"evaluation budget for '{name}' must be positive")
        return value

    @classmethod
    def create(cls, **settings) -> "TerminationCriteria":
        """Build criteria, reporting bad settings as InvalidConfiguration."""
        try:
            return cls(**settings)
        except ValidationError as e:
            raise InvalidConfiguration(str(e)) from e


class AbortSignal:
    """
    Cooperative cancellation flag.

    Polled once per iteration by the termination check; setting it never
    interrupts a step in progress. Safe to set from another thread.

    Example:
        >>> abort = AbortSignal()
        >>> with abort.handle_sigint():
        ...     result = executor.abort_signal(abort).run()
    """

    def __init__(self):
        self._event = threading.Event()

    def abort(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    def clear(self) -> None:
        self._event.clear()

    @contextlib.contextmanager
    def handle_sigint(self):
        """Route Ctrl-C to this flag instead of raising KeyboardInterrupt."""

        def _handler(signum, frame):
            logger.warning("Interrupt received, stopping after current iteration")
            self.abort()

        previous = signal.signal(signal.SIGINT, _handler)
        try:
            yield self
        finally:
            signal.signal(signal.SIGINT, previous)


def check_termination(
    state: "State",
    criteria: TerminationCriteria,
    solver: Optional["Solver"] = None,
    abort: Optional[AbortSignal] = None,
) -> Optional[TerminationReason]:
    """
    Evaluate the default checks in order and return the first match.

    Order: abort, time budget, max iterations, target cost, no-improvement
    streak, evaluation budgets, then the solver's own criterion.
    """
    if abort is not None and abort.is_set():
        return TerminationReason.aborted()

    if criteria.max_time is not None and state.elapsed > criteria.max_time:
        return TerminationReason.time_budget_exceeded()

    if criteria.max_iters is not None and state.iteration >= criteria.max_iters:
        return TerminationReason.max_iters_reached()

    if criteria.target_cost is not None and state.best_cost <= criteria.target_cost:
        return TerminationReason.target_cost_reached()

    threshold = criteria.no_improvement_threshold
    if threshold is not None and state.no_improvement_streak >= threshold:
        return TerminationReason.no_improvement_streak(threshold)

    for counter, limit in criteria.max_evaluations.items():
        if state.counts.get(counter, 0) >= limit:
            return TerminationReason.evaluation_budget_exceeded(counter)

    if solver is not None:
        return solver.terminate_early(state)

    return None
