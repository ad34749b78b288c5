"""
Generation Statistics

Per-generation snapshots recorded by the population step and collected by the
engine into an evolution history.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence

from .genes import GeneBuffer
from .models import Candidate


@dataclass
class GenerationStats:
    """Statistics of one evaluation pass.

    Attributes:
        generation: generation number the pass was run on
        best_fitness: fitness of the top-ranked candidate
        average_fitness: mean fitness
        worst_fitness: fitness of the bottom-ranked candidate
        best_genome: copy of the top-ranked genome; None once the stats are
            no longer the latest entry of an EvolutionHistory
    """
    generation: int
    best_fitness: float
    average_fitness: float
    worst_fitness: float
    best_genome: Optional[GeneBuffer]

    @classmethod
    def from_ranked(cls, generation: int, ranked: Sequence[Candidate]) -> "GenerationStats":
        """Summarize a population already ranked best-first.

        Raises:
            ValueError: if the population is empty
        """
        if not ranked:
            raise ValueError("Population cannot be empty")

        fitness_values = [candidate.fitness for candidate in ranked]

        return cls(
            generation=generation,
            best_fitness=fitness_values[0],
            average_fitness=sum(fitness_values) / len(fitness_values),
            worst_fitness=fitness_values[-1],
            best_genome=ranked[0].genome.clone(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Flat record without the genome, for tables and charts."""
        return {
            "generation": self.generation,
            "best_fitness": self.best_fitness,
            "average_fitness": self.average_fitness,
            "worst_fitness": self.worst_fitness,
        }


@dataclass
class EvolutionHistory:
    """Statistics of every generation stepped so far.

    Only the latest entry keeps its best genome, so the history grows by a
    fixed amount per generation whatever the genome size.

    Attributes:
        generations: stats in the order they were recorded
    """
    generations: List[GenerationStats] = field(default_factory=list)

    def append(self, stats: GenerationStats) -> None:
        if self.generations:
            self.generations[-1] = replace(self.generations[-1], best_genome=None)
        self.generations.append(stats)

    @property
    def total_generations(self) -> int:
        return len(self.generations)

    @property
    def latest(self) -> Optional[GenerationStats]:
        return self.generations[-1] if self.generations else None

    def best_fitness_curve(self) -> List[float]:
        return [stats.best_fitness for stats in self.generations]

    def to_records(self) -> List[Dict[str, Any]]:
        return [stats.to_dict() for stats in self.generations]

    def __len__(self) -> int:
        return len(self.generations)
