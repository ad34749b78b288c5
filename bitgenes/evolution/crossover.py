"""
Crossover Operator

Builds a child genome by recombining the genes of two parents.
"""

from abc import ABC, abstractmethod
from typing import Dict, Type

import numpy as np

from .genes import GeneBuffer
from .models import CrossoverMethod


class CrossoverOperator(ABC):
    """Crossover strategy interface."""

    @abstractmethod
    def crossover(
        self,
        parent1: GeneBuffer,
        parent2: GeneBuffer,
        rng: np.random.Generator,
    ) -> GeneBuffer:
        """Return a new child genome; the parents are left unchanged."""


class UniformCrossover(CrossoverOperator):
    """Uniform gene-wise crossover.

    Each gene of the child is taken from parent1 or parent2 on an independent
    fair coin toss. The child starts as a clone of parent1, so it has
    parent1's length and never aliases either parent.
    """

    def crossover(
        self,
        parent1: GeneBuffer,
        parent2: GeneBuffer,
        rng: np.random.Generator,
    ) -> GeneBuffer:
        bits1 = parent1.to_bits()
        bits2 = parent2.to_bits()
        count = min(len(bits1), len(bits2))

        take_first = rng.random(count) < 0.5

        child = parent1.clone()
        child.assign_bits(np.where(take_first, bits1[:count], bits2[:count]))
        return child


CROSSOVER_STRATEGIES: Dict[CrossoverMethod, Type[CrossoverOperator]] = {
    CrossoverMethod.UNIFORM: UniformCrossover,
}


def create_crossover(method: CrossoverMethod = CrossoverMethod.UNIFORM) -> CrossoverOperator:
    """Instantiate the crossover strategy registered for `method`."""
    return CROSSOVER_STRATEGIES[CrossoverMethod(method)]()
