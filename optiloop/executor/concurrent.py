"""
Running independent executors side by side.

Each executor owns its problem, solver and state, so separate runs
(e.g. restarts from different initial points) can share a thread pool.
A single run is never parallelized.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence
import logging

from .executor import Executor
from .result import OptimizationResult

logger = logging.getLogger(__name__)


def run_concurrently(
    executors: Sequence[Executor],
    max_workers: Optional[int] = None,
) -> List[OptimizationResult]:
    """
    Run executors in a thread pool.

    Args:
        executors: Executors that have not been run yet; each must own
                   its own problem, solver and state instances
        max_workers: Thread pool size (default: one per executor)

    Returns:
        Results in the same order as the executors.

    Example:
        >>> results = run_concurrently([make_executor(x0) for x0 in starts])
        >>> best = min(results)
    """
    if not executors:
        return []

    for attr in ("problem", "state"):
        owned = [id(getattr(e, attr)) for e in executors]
        if len(set(owned)) != len(owned):
            raise ValueError(f"Executors must not share a {attr} instance")

    workers = max_workers or len(executors)
    logger.info(f"Running {len(executors)} executors on {workers} threads")
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(executor.run) for executor in executors]
        return [future.result() for future in futures]
