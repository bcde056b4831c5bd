"""
Abstract base class for solvers.

Every algorithm (gradient descent, Newton, particle swarm, Nelder-Mead,
...) implements this contract so the executor can drive it without
knowing its internals.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

from .kv import KV
from .problem import Problem
from .state import IterState, State
from .termination import TerminationReason

StepResult = Tuple[State, Optional[KV]]


class Solver(ABC):
    """
    Contract implemented by each optimization algorithm.

    A solver carries nothing between calls except its configuration; all
    progress lives in the state it returns. That makes a (solver, state)
    pair sufficient to resume a checkpointed run.

    The problem is handed over for the duration of one call. Solvers should
    evaluate through it (so evaluations are counted) and must not keep a
    reference to it after returning.
    """

    #: Display name used in logs and result summaries
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or type(self).__name__

    def new_state(self) -> State:
        """
        Create an empty state of the shape this solver works with.

        Population and linear-program solvers override this.
        """
        return IterState()

    def initialize(self, problem: Problem, state: State) -> StepResult:
        """
        Produce the iteration-0 state.

        May evaluate the problem, e.g. to compute the initial cost.
        Default: return the state unchanged.
        """
        return state, None

    @abstractmethod
    def next_iteration(self, problem: Problem, state: State) -> StepResult:
        """
        Perform one step of the algorithm.

        Args:
            problem: Counting problem wrapper
            state: State after the previous iteration

        Returns:
            Updated state and optional diagnostics for observers.
        """
        pass

    def terminate_early(self, state: State) -> Optional[TerminationReason]:
        """
        Algorithm-specific convergence check.

        Consulted after the default checks. Return a reason to stop.
        """
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
