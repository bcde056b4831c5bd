"""
Tests for termination reasons, criteria and the default check order.
"""

import os
import signal

import pytest

from optiloop import (
    AbortSignal,
    InvalidConfiguration,
    IterState,
    ReasonKind,
    Solver,
    TerminationCriteria,
    TerminationReason,
    TerminationStatus,
    check_termination,
)


class ConvergedSolver(Solver):
    def next_iteration(self, problem, state):
        return state, None

    def terminate_early(self, state):
        return TerminationReason.solver_converged()


def make_state(**fields):
    state = IterState(**fields)
    return state


def test_no_criteria_never_terminates():
    state = make_state(iteration=10 ** 6, best_cost=-1e300, elapsed=1e9)
    assert check_termination(state, TerminationCriteria()) is None


def test_check_order():
    """Checks fire in fixed order: abort, time, iterations, target, streak."""
    state = make_state(iteration=10, best_cost=0.0, no_improvement_streak=5, elapsed=2.0)
    criteria = TerminationCriteria(
        max_iters=10, target_cost=1.0, max_time=1.0, no_improvement_threshold=5
    )
    abort = AbortSignal()
    solver = ConvergedSolver()

    abort.abort()
    assert check_termination(state, criteria, solver, abort).kind == ReasonKind.ABORTED
    abort.clear()
    assert check_termination(state, criteria, solver, abort).kind == ReasonKind.TIME_BUDGET_EXCEEDED

    criteria = criteria.model_copy(update={"max_time": None})
    assert check_termination(state, criteria, solver).kind == ReasonKind.MAX_ITERS_REACHED

    criteria = criteria.model_copy(update={"max_iters": None})
    assert check_termination(state, criteria, solver).kind == ReasonKind.TARGET_COST_REACHED

    criteria = criteria.model_copy(update={"target_cost": None})
    reason = check_termination(state, criteria, solver)
    assert reason == TerminationReason.no_improvement_streak(5)

    criteria = criteria.model_copy(update={"no_improvement_threshold": None})
    assert check_termination(state, criteria, solver).kind == ReasonKind.SOLVER_CONVERGED


def test_target_cost_is_inclusive():
    state = make_state(best_cost=10.0)
    criteria = TerminationCriteria(target_cost=10.0)
    assert check_termination(state, criteria).kind == ReasonKind.TARGET_COST_REACHED


def test_evaluation_budget():
    state = make_state(counts={"gradient_count": 20})
    criteria = TerminationCriteria(max_evaluations={"gradient_count": 20})
    reason = check_termination(state, criteria)

    assert reason.kind == ReasonKind.EVALUATION_BUDGET_EXCEEDED
    assert "gradient_count" in str(reason)


def test_criteria_validation():
    with pytest.raises(InvalidConfiguration):
        TerminationCriteria.create(max_iters=-5)
    with pytest.raises(InvalidConfiguration):
        TerminationCriteria.create(no_improvement_threshold=0)
    with pytest.raises(InvalidConfiguration):
        TerminationCriteria.create(max_time=-1.0)
    with pytest.raises(InvalidConfiguration):
        TerminationCriteria.create(max_iter=10)

    assert TerminationCriteria.create(max_iters=0).max_iters == 0


def test_reason_descriptions():
    assert str(TerminationReason.max_iters_reached()) == "Maximum number of iterations reached"
    assert str(TerminationReason.no_improvement_streak(3)) == "No improvement for 3 iterations"
    assert str(TerminationReason.solver_exit("line search failed")) == "Solver exit: line search failed"
    assert "ValueError: boom" in str(TerminationReason.error(ValueError("boom")))


def test_status():
    status = TerminationStatus()
    assert not status.terminated
    assert status.reason is None

    done = TerminationStatus(TerminationReason.aborted())
    assert done.terminated
    assert str(done) == "Aborted"


@pytest.mark.skipif(not hasattr(signal, "SIGINT"), reason="needs SIGINT")
def test_sigint_sets_abort_flag():
    """Ctrl-C raises the flag instead of interrupting."""
    abort = AbortSignal()
    previous = signal.getsignal(signal.SIGINT)

    with abort.handle_sigint():
        os.kill(os.getpid(), signal.SIGINT)
        assert abort.is_set()

    assert signal.getsignal(signal.SIGINT) is previous
