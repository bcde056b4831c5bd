"""Executor: run loop, configuration and results."""

from .concurrent import run_concurrently
from .config import ExecutorConfig
from .executor import Executor, RunPhase
from .result import OptimizationResult

__all__ = [
    "Executor",
    "ExecutorConfig",
    "OptimizationResult",
    "RunPhase",
    "run_concurrently",
]
