"""
Problem wrapper with evaluation counting.

Wraps a user-supplied problem object and exposes a uniform evaluation
contract regardless of which capabilities the user object implements:
- Capability detection (does the object define gradient? hessian?)
- Evaluation counting per capability
- Explicit failure for missing capabilities instead of silent defaults

Results are never cached; every call re-invokes the user function.
"""

from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional
import logging

from .errors import CapabilityNotImplemented

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    """Evaluation capabilities a user problem may provide."""

    COST = "cost"
    GRADIENT = "gradient"
    JACOBIAN = "jacobian"
    HESSIAN = "hessian"
    APPLY = "apply"      # Linear operator application
    ANNEAL = "anneal"    # Neighbour generation for annealing

    @property
    def counter(self) -> str:
        """Name of the evaluation counter for this capability."""
        return f"{self.value}_count"


class Problem:
    """
    Counting wrapper around a user problem.

    The user object provides any subset of cost(param), gradient(param),
    jacobian(param), hessian(param), apply(param) and
    anneal(param, temperature). Calls to a missing capability raise
    CapabilityNotImplemented before any counter is touched.

    Example:
        >>> class Quadratic:
        ...     def cost(self, x):
        ...         return sum(v * v for v in x)
        >>> problem = Problem(Quadratic())
        >>> problem.cost([1.0, 2.0])
        5.0
        >>> problem.supports(Capability.GRADIENT)
        False
    """

    def __init__(self, user_problem: Any):
        if isinstance(user_problem, Problem):
            raise TypeError("Problem is already wrapped")
        self._user = user_problem
        self._counts: Dict[str, int] = {c.counter: 0 for c in Capability}

    @property
    def user(self) -> Any:
        """The wrapped user problem."""
        return self._user

    def supports(self, capability: "Capability | str") -> bool:
        """Whether the user problem implements the given capability."""
        capability = Capability(capability)
        return callable(getattr(self._user, capability.value, None))

    def _delegate(self, capability: Capability) -> Callable:
        func = getattr(self._user, capability.value, None)
        if not callable(func):
            raise CapabilityNotImplemented(capability.value, self._user)
        self._counts[capability.counter] += 1
        return func

    def cost(self, param: Any) -> Any:
        """Evaluate the cost function."""
        return self._delegate(Capability.COST)(param)

    def gradient(self, param: Any) -> Any:
        """Evaluate the gradient."""
        return self._delegate(Capability.GRADIENT)(param)

    def jacobian(self, param: Any) -> Any:
        """Evaluate the Jacobian."""
        return self._delegate(Capability.JACOBIAN)(param)

    def hessian(self, param: Any) -> Any:
        """Evaluate the Hessian."""
        return self._delegate(Capability.HESSIAN)(param)

    def apply(self, param: Any) -> Any:
        """Apply the linear operator."""
        return self._delegate(Capability.APPLY)(param)

    def anneal(self, param: Any, temperature: float) -> Any:
        """Generate a neighbouring parameter at the given temperature."""
        return self._delegate(Capability.ANNEAL)(param, temperature)

    @property
    def counts(self) -> Dict[str, int]:
        """Copy of all evaluation counters."""
        return dict(self._counts)

    def count(self, capability: "Capability | str") -> int:
        """Number of evaluations of one capability."""
        return self._counts[Capability(capability).counter]

    def restore_counts(self, counts: Mapping[str, int]) -> None:
        """
        Continue counting from previously recorded values.

        Used when resuming a run from a checkpoint. Unknown counter
        names are ignored.
        """
        for name, value in counts.items():
            if name in self._counts:
                self._counts[name] = int(value)
            else:
                logger.debug(f"Ignoring unknown evaluation counter: {name}")

    def __repr__(self) -> str:
        supported = [c.value for c in Capability if self.supports(c)]
        return f"Problem({type(self._user).__name__}, capabilities={supported})"


class FunctionProblem:
    """
    User problem assembled from plain callables.

    Capabilities that are not supplied are absent, so a Problem wrapping
    a FunctionProblem reports them as unsupported.

    Example:
        >>> user = FunctionProblem(cost=rosenbrock, gradient=rosenbrock_gradient)
        >>> Problem(user).supports("hessian")
        False
    """

    def __init__(
        self,
        cost: Optional[Callable] = None,
        gradient: Optional[Callable] = None,
        jacobian: Optional[Callable] = None,
        hessian: Optional[Callable] = None,
        apply: Optional[Callable] = None,
        anneal: Optional[Callable] = None,
        name: str = "function_problem",
    ):
        self.name = name
        supplied = {
            "cost": cost,
            "gradient": gradient,
            "jacobian": jacobian,
            "hessian": hessian,
            "apply": apply,
            "anneal": anneal,
        }
        for attr, func in supplied.items():
            if func is None:
                continue
            if not callable(func):
                raise TypeError(f"{attr} must be callable, got {type(func)}")
            # Instance attributes so missing capabilities stay absent
            setattr(self, attr, func)

    def __repr__(self) -> str:
        return f"FunctionProblem(name={self.name!r})"
