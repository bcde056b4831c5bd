"""
Example: damped Newton's method on the Rosenbrock function.

Shows the full executor setup:
1. A solver implementing the Solver contract
2. Termination criteria
3. Console and JSONL observers
4. File checkpoints (re-run the script after Ctrl-C to resume)
"""

import logging

import numpy as np

from optiloop import (
    AbortSignal,
    CheckpointingFrequency,
    ConsoleObserver,
    Executor,
    FileCheckpointStore,
    IterState,
    JsonLinesObserver,
    KV,
    ObserverMode,
    Solver,
    SolverError,
    TerminationReason,
)
from optiloop.testfunctions import Rosenbrock


class DampedNewton(Solver):
    """Newton step scaled by a fixed damping factor."""

    name = "DampedNewton"

    def __init__(self, damping: float = 0.5, tol: float = 1e-10):
        self.damping = damping
        self.tol = tol

    def initialize(self, problem, state):
        state.cost = problem.cost(state.param)
        return state, None

    def next_iteration(self, problem, state):
        gradient = problem.gradient(state.param)
        hessian = problem.hessian(state.param)
        try:
            direction = np.linalg.solve(hessian, -gradient)
        except np.linalg.LinAlgError as e:
            raise SolverError(f"Hessian is singular: {e}") from e

        state.param = state.param + self.damping * direction
        state.gradient = gradient
        state.hessian = hessian
        state.cost = problem.cost(state.param)
        return state, KV(gradient_norm=float(np.linalg.norm(gradient)))

    def terminate_early(self, state):
        if state.gradient is not None and np.linalg.norm(state.gradient) < self.tol:
            return TerminationReason.solver_converged()
        return None


def main():
    logging.basicConfig(level=logging.INFO)

    abort = AbortSignal()
    executor = (
        Executor(Rosenbrock(), DampedNewton(), IterState(param=np.array([-1.2, 1.0])))
        .configure(max_iters=200, target_cost=1e-14, run_name="rosenbrock-newton")
        .add_observer("console", ConsoleObserver(), ObserverMode.every(5))
        .add_observer("file", JsonLinesObserver("runs/rosenbrock_newton.jsonl"), ObserverMode.new_best())
        .checkpointing(
            FileCheckpointStore("runs/checkpoints"),
            key="rosenbrock-newton",
            frequency=CheckpointingFrequency.every(10),
        )
        .abort_signal(abort)
    )

    with abort.handle_sigint():
        result = executor.run()

    print(result)
    result.raise_for_error()


if __name__ == "__main__":
    main()
