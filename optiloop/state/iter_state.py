"""Point-based state used by gradient, Newton and quasi-Newton solvers."""

from dataclasses import dataclass
from typing import Any, Dict

from .base import State


@dataclass
class IterState(State):
    """
    State for solvers that move a single point.

    Derivative fields are optional; solvers set whichever they compute.
    """

    gradient: Any = None
    prev_gradient: Any = None
    jacobian: Any = None
    hessian: Any = None
    inv_hessian: Any = None
    residuals: Any = None

    def extensions(self) -> Dict[str, Any]:
        fields = {
            "gradient": self.gradient,
            "prev_gradient": self.prev_gradient,
            "jacobian": self.jacobian,
            "hessian": self.hessian,
            "inv_hessian": self.inv_hessian,
            "residuals": self.residuals,
        }
        return {name: value for name, value in fields.items() if value is not None}
