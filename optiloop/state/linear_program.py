"""State for linear-program style solvers."""

from dataclasses import dataclass

from .base import State


@dataclass
class LinearProgramState(State):
    """Base fields only; linear-program solvers carry no derivative data."""
