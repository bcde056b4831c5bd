"""
Executor: the run loop binding problem, solver, state, observers and
checkpointing.

Lifecycle: Created -> Initialized -> Running -> Terminated. Each pass
asks the solver for the next state, merges the executor-owned
bookkeeping, checks termination, writes checkpoints and notifies
observers, strictly in that order.
"""

from enum import Enum
from typing import Any, List, Optional, Tuple
import copy
import logging
import time

from ..checkpointing import CheckpointStore, Checkpointing, CheckpointingFrequency
from ..errors import ExecutorStateError, InvalidConfiguration, OptiloopError, SolverError
from ..kv import KV
from ..observers import Observer, ObserverMode, Observers
from ..problem import Problem
from ..solver import Solver
from ..state import State
from ..termination import AbortSignal, ReasonKind, TerminationReason, check_termination
from ..termination import NOT_TERMINATED
from .config import ExecutorConfig
from .result import OptimizationResult

logger = logging.getLogger(__name__)


class RunPhase(str, Enum):
    CREATED = "created"
    INITIALIZED = "initialized"
    RUNNING = "running"
    TERMINATED = "terminated"


class Executor:
    """
    Runs a solver on a problem until a termination criterion fires.

    Example:
        >>> result = (
        ...     Executor(Rosenbrock(), SteepestDescent(step=1e-3), IterState(param=x0))
        ...     .configure(max_iters=1000, target_cost=1e-10)
        ...     .add_observer("console", ConsoleObserver(), ObserverMode.every(100))
        ...     .run()
        ... )
        >>> print(result)
    """

    def __init__(
        self,
        problem: Any,
        solver: Solver,
        state: Optional[State] = None,
        config: Optional[ExecutorConfig] = None,
    ):
        """
        Args:
            problem: A Problem, or a user problem object to wrap
            solver: Algorithm implementing the Solver contract
            state: Initial state (e.g. with the starting param set);
                   defaults to solver.new_state()
            config: Run settings; see configure() for the flat form
        """
        if not isinstance(solver, Solver):
            raise InvalidConfiguration(
                f"solver must implement Solver, got {type(solver).__name__}"
            )
        self.problem = problem if isinstance(problem, Problem) else Problem(problem)
        self.solver = solver
        self.state = state if state is not None else solver.new_state()
        if not isinstance(self.state, State):
            raise InvalidConfiguration(f"state must be a State, got {type(self.state).__name__}")
        self.config = config or ExecutorConfig()
        self.observers = Observers()
        self._checkpointing: Optional[Checkpointing] = None
        self._abort: Optional[AbortSignal] = None
        self._phase = RunPhase.CREATED
        self._warnings: List[OptiloopError] = []
        self._base_elapsed = 0.0
        self._improved = False

    # Builder

    def configure(self, **settings: Any) -> "Executor":
        """
        Update run settings.

        Accepts termination criteria (max_iters, target_cost, max_time,
        no_improvement_threshold, max_evaluations) and executor settings
        (timer, run_name).

        Raises:
            InvalidConfiguration: For unknown or invalid settings.
        """
        self._require_phase(RunPhase.CREATED, "configure")
        self.config = self.config.updated(**settings)
        return self

    def add_observer(
        self,
        name: str,
        observer: Observer,
        mode: Optional[ObserverMode] = None,
    ) -> "Executor":
        """Register an observer; its setup() runs immediately."""
        self._require_phase(RunPhase.CREATED, "add observers")
        self.observers.add(name, observer, mode)
        return self

    def checkpointing(
        self,
        store: CheckpointStore,
        key: str = "default",
        frequency: Optional[CheckpointingFrequency] = None,
        fatal: bool = False,
        resume: bool = True,
    ) -> "Executor":
        """
        Enable checkpointing.

        Args:
            store: Where snapshots are kept
            key: Run identifier within the store
            frequency: When to write (default: every iteration)
            fatal: Abort the run if a checkpoint cannot be written
            resume: Continue from an existing checkpoint for this key
        """
        self._require_phase(RunPhase.CREATED, "configure checkpointing")
        self._checkpointing = Checkpointing(store, key, frequency, fatal, resume)
        return self

    def abort_signal(self, signal: AbortSignal) -> "Executor":
        """Use an external flag for cooperative cancellation."""
        self._require_phase(RunPhase.CREATED, "set the abort signal")
        self._abort = signal
        return self

    @property
    def phase(self) -> RunPhase:
        return self._phase

    def _require_phase(self, phase: RunPhase, action: str) -> None:
        if self._phase != phase:
            raise ExecutorStateError(f"Cannot {action}: executor is {self._phase.value}")

    # Run loop

    def run(self) -> OptimizationResult:
        """
        Run to termination.

        Solver failures (including missing problem capabilities) do not
        propagate: the run stops, the state is terminated with an Error
        reason and the exception is stored on the result. Use
        result.raise_for_error() to surface it.
        """
        self._require_phase(RunPhase.CREATED, "run")
        name = self.config.run_name or self.solver.display_name
        started = time.perf_counter()
        error: Optional[BaseException] = None

        logger.info(f"Starting run '{name}'")
        try:
            resumed = self._checkpointing.load() if self._checkpointing else None
            if resumed is not None:
                self._resume(*resumed)
            else:
                self._initialize(started)

            while not self.state.terminated:
                self._phase = RunPhase.RUNNING
                self._step(started)

            if self._checkpointing is not None:
                self._collect(self._checkpointing.maybe_save(self.solver, self.state, final=True))
        except Exception as e:
            error = e
            logger.error(
                f"Run '{name}' failed at iteration {self.state.iteration}: {e}",
                exc_info=True,
            )
            if not self.state.terminated:
                self.state.terminate_with(TerminationReason.error(e))

        self._phase = RunPhase.TERMINATED
        result = OptimizationResult(
            problem=self.problem,
            solver=self.solver,
            state=self.state,
            error=error,
            warnings=self._warnings,
        )
        self._warnings.extend(self.observers.finish(result))

        logger.info(
            f"Run '{name}' terminated after {self.state.iteration} iterations: "
            f"{self.state.termination_reason} (best cost {self.state.best_cost})"
        )
        return result

    def _initialize(self, started: float) -> None:
        snapshot = self.state.continuity()
        fallback = copy.deepcopy(self.state)
        self._base_elapsed = self.state.elapsed

        try:
            state, kv = self._call_solver(self.solver.initialize, self.state)
        except Exception:
            self.state = fallback
            raise

        self._merge(state, snapshot, kv, snapshot["iteration"], started)
        self._phase = RunPhase.INITIALIZED
        self._complete_iteration(kv)

    def _resume(self, solver: Solver, state: State) -> None:
        self.solver = solver
        self.state = state
        self.problem.restore_counts(state.counts)
        self._base_elapsed = state.elapsed

        reason = state.termination_reason
        if reason is not None and reason.kind == ReasonKind.ABORTED:
            # An interrupted run continues where it was stopped
            logger.info(f"Reopening run aborted at iteration {state.iteration}")
            state.status = NOT_TERMINATED
        self._phase = RunPhase.RUNNING

    def _step(self, started: float) -> None:
        snapshot = self.state.continuity()
        # Deep copy: solvers may update arrays in place before failing
        fallback = copy.deepcopy(self.state)

        try:
            state, kv = self._call_solver(self.solver.next_iteration, self.state)
        except Exception:
            # Keep the last consistent state
            self.state = fallback
            raise

        state.prev_param = fallback.param
        state.prev_cost = fallback.cost
        self._merge(state, snapshot, kv, snapshot["iteration"] + 1, started)
        self._complete_iteration(kv)

    def _call_solver(self, method, state: State) -> Tuple[State, Optional[KV]]:
        output = method(self.problem, state)
        if isinstance(output, State):
            return output, None
        if (
            not isinstance(output, tuple)
            or len(output) != 2
            or not isinstance(output[0], State)
            or not (output[1] is None or isinstance(output[1], KV))
        ):
            raise SolverError(
                f"{self.solver.display_name}.{method.__name__} must return "
                f"(State, Optional[KV]), got {type(output).__name__}"
            )
        return output

    def _merge(
        self,
        state: State,
        snapshot: dict,
        kv: Optional[KV],
        iteration: int,
        started: float,
    ) -> None:
        """Carry executor-owned fields into the solver's new state."""
        state.restore_continuity(snapshot)
        state.iteration = iteration
        state.counts = self.problem.counts
        if self.config.timer:
            state.elapsed = self._base_elapsed + (time.perf_counter() - started)
        self._improved = state.record_best()
        self.state = state

    def _complete_iteration(self, kv: Optional[KV]) -> None:
        state = self.state

        if not state.terminated:
            reason = check_termination(
                state, self.config.termination, self.solver, self._abort
            )
            if reason is not None:
                state.terminate_with(reason)

        record = state.summary_kv().merge(kv)
        if state.terminated:
            record.set("termination", str(state.termination_reason))
        state.kv = record

        logger.debug(
            f"iter {state.iteration}: cost={state.cost} best={state.best_cost} "
            f"streak={state.no_improvement_streak}"
        )

        if self._checkpointing is not None:
            self._collect(self._checkpointing.maybe_save(self.solver, state))

        self._warnings.extend(
            self.observers.dispatch(record, state.iteration, self._improved)
        )

    def _collect(self, error: Optional[OptiloopError]) -> None:
        if error is not None:
            self._warnings.append(error)
