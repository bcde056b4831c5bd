"""
Tests for OptimizationResult.
"""

import json

import numpy as np
import pytest

from optiloop import Executor, OptimizationResult, ReasonKind, SolverError

from tests.toys import CountdownSolver, FailingSolver, GradientStepSolver, LinearCost, Sphere


def test_summary_string(countdown):
    result = Executor(LinearCost(), countdown).configure(max_iters=5).run()
    text = str(result)

    assert text.startswith("OptimizationResult:")
    assert "param (best):  95.0" in text
    assert "cost (best):   95.0" in text
    assert "iters (total): 5" in text
    assert "Maximum number of iterations reached" in text
    assert "error" not in text


def test_to_dict_is_json_serializable(sphere_start):
    result = Executor(Sphere(), GradientStepSolver(), sphere_start).configure(max_iters=3).run()
    data = result.to_dict()

    json.dumps(data)
    assert data["success"] is True
    assert data["termination"] == ReasonKind.MAX_ITERS_REACHED.value
    assert data["iterations"] == 3
    assert len(data["best_param"]) == 3
    assert data["counts"]["gradient_count"] == 3
    assert data["solver"] == "GradientStepSolver"


def test_error_result():
    result = Executor(LinearCost(), FailingSolver(fail_at=1)).run()

    assert not result.success
    assert "error:" in str(result)
    assert result.to_dict()["termination"] == "Error"
    with pytest.raises(SolverError):
        result.raise_for_error()


def test_raise_for_error_returns_self_on_success(countdown):
    result = Executor(LinearCost(), countdown).configure(max_iters=1).run()
    assert result.raise_for_error() is result


def test_ordering_by_best_cost():
    """min() over results picks the lowest best cost."""
    results = [
        Executor(LinearCost(), CountdownSolver(start=start)).configure(max_iters=3).run()
        for start in (50.0, 10.0, 30.0)
    ]

    best = min(results)
    assert isinstance(best, OptimizationResult)
    assert best.best_cost == 7.0
    assert sorted(results)[-1].best_cost == 47.0
    assert np.isclose(best.best_param, 7.0)
