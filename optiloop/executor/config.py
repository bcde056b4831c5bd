"""Executor configuration using Pydantic."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import InvalidConfiguration
from ..termination import TerminationCriteria


class ExecutorConfig(BaseModel):
    """
    Settings for one run.

    Example:
        >>> config = ExecutorConfig.create(max_iters=200, target_cost=1e-6)
        >>> config.termination.max_iters
        200
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    termination: TerminationCriteria = Field(
        default_factory=TerminationCriteria,
        description="Default termination checks",
    )
    timer: bool = Field(True, description="Measure elapsed wall time")
    run_name: Optional[str] = Field(None, description="Label used in logs")

    @classmethod
    def create(cls, **settings: Any) -> "ExecutorConfig":
        """
        Build a config from flat settings.

        Termination settings (max_iters, target_cost, ...) may be passed
        directly; they are routed into the termination criteria.
        """
        return cls().updated(**settings)

    def updated(self, **settings: Any) -> "ExecutorConfig":
        """Return a copy with the given flat settings applied."""
        criteria_fields = set(TerminationCriteria.model_fields)
        criteria = self.termination.model_dump()
        own = {"timer": self.timer, "run_name": self.run_name}
        for name, value in settings.items():
            if name in criteria_fields:
                criteria[name] = value
            elif name in own:
                own[name] = value
            else:
                raise InvalidConfiguration(f"Unknown executor setting: {name}")

        try:
            return ExecutorConfig(termination=TerminationCriteria(**criteria), **own)
        except ValidationError as e:
            raise InvalidConfiguration(str(e)) from e
