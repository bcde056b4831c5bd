"""State family: point-based, population-based and linear-program states."""

from .base import CONTINUITY_FIELDS, State
from .iter_state import IterState
from .linear_program import LinearProgramState
from .population import Individual, PopulationState

__all__ = [
    "CONTINUITY_FIELDS",
    "State",
    "IterState",
    "LinearProgramState",
    "Individual",
    "PopulationState",
]
