"""
Tests for the counting problem wrapper.
"""

import numpy as np
import pytest

from optiloop import Capability, CapabilityNotImplemented, FunctionProblem, Problem
from optiloop.testfunctions import Rosenbrock


class CostOnly:
    def cost(self, x):
        return float(np.sum(x))


def test_counts_each_capability():
    """Every call increments its own counter."""
    problem = Problem(Rosenbrock())
    x = np.array([0.5, 0.5])

    problem.cost(x)
    problem.cost(x)
    problem.gradient(x)
    problem.hessian(x)

    assert problem.count(Capability.COST) == 2
    assert problem.count("gradient") == 1
    assert problem.count("hessian") == 1
    assert problem.count("jacobian") == 0
    assert problem.counts["cost_count"] == 2


def test_no_caching():
    """Repeated calls re-invoke the user function."""
    calls = []

    def cost(x):
        calls.append(x)
        return 1.0

    problem = Problem(FunctionProblem(cost=cost))
    problem.cost(1.0)
    problem.cost(1.0)

    assert len(calls) == 2


def test_missing_capability_raises_before_counting():
    """Unsupported calls fail explicitly and leave counters untouched."""
    problem = Problem(CostOnly())

    assert problem.supports("cost")
    assert not problem.supports(Capability.GRADIENT)

    with pytest.raises(CapabilityNotImplemented) as exc_info:
        problem.gradient(np.zeros(2))

    assert exc_info.value.capability == "gradient"
    assert "CostOnly" in str(exc_info.value)
    assert problem.count("gradient") == 0
    assert isinstance(exc_info.value, NotImplementedError)


def test_function_problem_capabilities():
    """Only supplied callables become capabilities."""
    user = FunctionProblem(cost=lambda x: x * x, anneal=lambda x, t: x + t)
    problem = Problem(user)

    assert problem.supports("cost")
    assert problem.supports("anneal")
    assert not problem.supports("hessian")
    assert problem.anneal(1.0, 0.5) == 1.5
    assert problem.count("anneal") == 1


def test_function_problem_rejects_non_callables():
    with pytest.raises(TypeError):
        FunctionProblem(cost=3.0)


def test_unknown_capability():
    with pytest.raises(ValueError):
        Problem(CostOnly()).supports("divergence")


def test_restore_counts():
    """Counters continue from restored values."""
    problem = Problem(CostOnly())
    problem.restore_counts({"cost_count": 7, "operator_count": 3})
    problem.cost(np.ones(2))

    assert problem.count("cost") == 8
    assert "operator_count" not in problem.counts


def test_counts_is_a_copy():
    problem = Problem(CostOnly())
    counts = problem.counts
    counts["cost_count"] = 100

    assert problem.count("cost") == 0


def test_double_wrapping_rejected():
    with pytest.raises(TypeError):
        Problem(Problem(CostOnly()))
