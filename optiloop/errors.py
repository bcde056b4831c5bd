"""
Error taxonomy for optimization runs.

Fatal errors (capability missing, solver failure, invalid configuration)
stop a run; recoverable errors (observer and checkpoint failures) are
logged and collected on the result while the run continues.
"""

from typing import Optional


class OptiloopError(Exception):
    """Base class for all optiloop errors."""


class CapabilityNotImplemented(OptiloopError, NotImplementedError):
    """The wrapped user problem does not provide the requested capability."""

    def __init__(self, capability: str, problem: Optional[object] = None):
        self.capability = capability
        owner = type(problem).__name__ if problem is not None else "problem"
        super().__init__(f"{owner} does not implement '{capability}'")


class SolverError(OptiloopError):
    """The solver cannot proceed (e.g. singular matrix, invalid step)."""


class ObserverError(OptiloopError):
    """An observer sink failed to set up or to record an iteration."""

    def __init__(self, observer_name: str, message: str):
        self.observer_name = observer_name
        super().__init__(f"Observer '{observer_name}': {message}")


class CheckpointError(OptiloopError):
    """A checkpoint could not be written or read."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Checkpoint '{key}': {message}")


class InvalidConfiguration(OptiloopError, ValueError):
    """Configuration rejected at construction time."""


class ExecutorStateError(OptiloopError):
    """Lifecycle misuse, such as running an executor twice."""
