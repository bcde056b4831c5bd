"""
Population-based state for particle swarm and evolutionary solvers.

param and cost always describe the best individual of the current
population, so best-tracking works exactly as for point-based solvers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .base import State


@dataclass
class Individual:
    """One member of a population."""

    param: Any
    cost: float = float("inf")
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PopulationState(State):
    """State holding a whole population of candidate solutions."""

    population: List[Individual] = field(default_factory=list)

    def sort_population(self) -> None:
        """Sort the population by ascending cost."""
        self.population.sort(key=lambda ind: ind.cost)

    def take_best_individual(self) -> Optional[Individual]:
        """
        Set param and cost from the lowest-cost individual.

        Returns:
            The best individual, or None for an empty population.
        """
        if not self.population:
            return None
        best = min(self.population, key=lambda ind: ind.cost)
        self.param = best.param
        self.cost = best.cost
        return best

    def extensions(self) -> Dict[str, Any]:
        if not self.population:
            return {}
        return {"population": self.population}

    def summary_kv(self):
        kv = super().summary_kv()
        kv.set("population_size", len(self.population))
        return kv
