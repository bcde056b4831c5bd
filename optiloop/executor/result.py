"""
Result of an optimization run.

Bundles the final problem, solver and state, together with the fatal
error (if any) and the recoverable errors collected during the run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..errors import OptiloopError
from ..problem import Problem
from ..solver import Solver
from ..state import State
from ..termination import TerminationReason


def _to_jsonable(value: Any) -> Any:
    if value is None:
        return None
    if hasattr(value, "tolist"):
        return value.tolist()
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, (int, float, str, bool)):
        return value
    return repr(value)


@dataclass(eq=False)
class OptimizationResult:
    """
    Final outcome of Executor.run().

    Results order by best cost, so min(results) picks the best of several
    restarts.
    """

    problem: Problem
    solver: Solver
    state: State
    error: Optional[BaseException] = None
    warnings: List[OptiloopError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True when the run terminated by a criterion rather than an error."""
        return self.error is None

    @property
    def best_param(self) -> Any:
        return self.state.best_param

    @property
    def best_cost(self) -> float:
        return self.state.best_cost

    @property
    def iterations(self) -> int:
        return self.state.iteration

    @property
    def termination_reason(self) -> Optional[TerminationReason]:
        return self.state.termination_reason

    @property
    def solver_name(self) -> str:
        return self.solver.display_name

    def raise_for_error(self) -> "OptimizationResult":
        """Re-raise the fatal error of the run, if there was one."""
        if self.error is not None:
            raise self.error
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable summary."""
        reason = self.termination_reason
        return {
            "success": self.success,
            "solver": self.solver_name,
            "best_param": _to_jsonable(self.best_param),
            "best_cost": float(self.best_cost),
            "last_best_iteration": self.state.last_best_iteration,
            "iterations": self.iterations,
            "termination": reason.kind.value if reason else None,
            "message": str(reason) if reason else None,
            "elapsed": self.state.elapsed,
            "counts": dict(self.state.counts),
            "error": repr(self.error) if self.error is not None else None,
            "warnings": [str(w) for w in self.warnings],
        }

    def __lt__(self, other: "OptimizationResult") -> bool:
        if not isinstance(other, OptimizationResult):
            return NotImplemented
        return self.best_cost < other.best_cost

    def __str__(self) -> str:
        best_param = "None" if self.best_param is None else repr(self.best_param)
        lines = [
            "OptimizationResult:",
            f"    param (best):  {best_param}",
            f"    cost (best):   {self.best_cost}",
            f"    iters (best):  {self.state.last_best_iteration}",
            f"    iters (total): {self.iterations}",
            f"    termination:   {self.termination_reason}",
            f"    time:          {self.state.elapsed:.6f}s",
        ]
        if self.error is not None:
            lines.append(f"    error:         {self.error!r}")
        return "\n".join(lines)
