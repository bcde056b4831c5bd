"""
Tests for running independent executors side by side.
"""

import numpy as np
import pytest

from optiloop import Executor, IterState, ReasonKind, run_concurrently
from optiloop import Problem

from tests.toys import GradientStepSolver, Sphere


def make_executor(x0):
    return Executor(Sphere(), GradientStepSolver(step=0.1), IterState(param=np.asarray(x0))).configure(
        max_iters=20
    )


def test_results_in_input_order():
    starts = [[1.0, 1.0], [10.0, -10.0], [0.1, 0.0]]
    results = run_concurrently([make_executor(x0) for x0 in starts], max_workers=2)

    assert len(results) == 3
    for x0, result in zip(starts, results):
        assert result.termination_reason.kind == ReasonKind.MAX_ITERS_REACHED
        expected = np.asarray(x0) * 0.8 ** 20
        np.testing.assert_allclose(result.best_param, expected)
        assert result.problem.count("cost") == 21

    assert min(results) is results[2]


def test_shared_problem_rejected():
    problem = Problem(Sphere())
    executors = [
        Executor(problem, GradientStepSolver(), IterState(param=np.ones(2))),
        Executor(problem, GradientStepSolver(), IterState(param=np.zeros(2))),
    ]
    with pytest.raises(ValueError):
        run_concurrently(executors)


def test_empty_input():
    assert run_concurrently([]) == []


def test_shared_state_rejected():
    """Solvers update the state in place, so it cannot be shared between runs."""
    state = IterState(param=np.ones(2))
    executors = [
        Executor(Sphere(), GradientStepSolver(), state),
        Executor(Sphere(), GradientStepSolver(), state),
    ]
    with pytest.raises(ValueError, match="state"):
        run_concurrently(executors)
