"""
Evolution Data Models

Core data structures of the evolution engine: the candidate (one genome plus
its cached fitness) and the enumerations resolved once per engine.
"""

import math
from dataclasses import dataclass
from enum import Enum

from .genes import GeneBuffer


class FitnessOrdering(Enum):
    """Which direction of the fitness scale counts as better.

    Attributes:
        MINIMIZE: lower scores are better (errors, distances)
        MAXIMIZE: higher scores are better (rewards, accuracies)
    """
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"

    @property
    def worst_score(self) -> float:
        """Sentinel score that ranks below every real score."""
        return math.inf if self is FitnessOrdering.MINIMIZE else -math.inf

    def is_better(self, score: float, other: float) -> bool:
        """Whether `score` is strictly better than `other`."""
        if self is FitnessOrdering.MINIMIZE:
            return score < other
        return score > other


class SelectionMethod(Enum):
    """Survivor selection strategies.

    Attributes:
        TRUNCATION: keep the best fixed fraction, breed uniformly among them
    """
    TRUNCATION = "truncation"


class CrossoverMethod(Enum):
    """Crossover strategies.

    Attributes:
        UNIFORM: every gene comes from either parent with a fair coin
    """
    UNIFORM = "uniform"


@dataclass
class Candidate:
    """Population member.

    The fitness is a cache: it is rewritten by every evaluation pass and is
    stale between a genome change and the next pass.

    Attributes:
        genome: the candidate's genes (exclusively owned)
        fitness: last computed score (default 0.0)
        generation: generation the candidate was born in (default 0)
    """
    genome: GeneBuffer
    fitness: float = 0.0
    generation: int = 0

    def copy(self) -> "Candidate":
        """Deep copy, including the genome."""
        return Candidate(
            genome=self.genome.clone(),
            fitness=self.fitness,
            generation=self.generation,
        )
