"""
Population

Initial population generation and the generational step: evaluate, rank,
truncate, then refill the discarded slots with mutated crossover children of
the survivors.
"""

import logging
from typing import Iterator, List, Optional

import numpy as np

from .crossover import CrossoverOperator, UniformCrossover
from .exceptions import is_integer, validate_genome_bits, validate_population_size
from .fitness import FitnessEvaluator, Scorer
from .generation import GenerationStats
from .genes import GeneBuffer
from .models import Candidate, FitnessOrdering
from .mutation import MutationOperator
from .selection import SelectionOperator, TruncationSelection

logger = logging.getLogger(__name__)


class PopulationGenerator:
    """Population generator.

    Builds the initial candidates, either with uniformly random genes or with
    all genes cleared.

    Attributes:
        genome_bits: genes per genome
        random_init: draw random genes (True) or start from zero genomes
    """

    def __init__(self, genome_bits: int, random_init: bool = True):
        """Initialize the generator.

        Args:
            genome_bits: genes per genome
            random_init: draw random genes, True by default

        Raises:
            InvalidSizeError: if genome_bits is not a representable bit count
        """
        validate_genome_bits(genome_bits)
        self.genome_bits = int(genome_bits)
        self.random_init = random_init

    def generate_genome(self, rng: np.random.Generator) -> GeneBuffer:
        """Create one genome; bits past genome_bits in the last byte stay 0."""
        if not self.random_init:
            return GeneBuffer(self.genome_bits)

        n_bytes = (self.genome_bits + 7) // 8
        data = rng.integers(0, 256, size=n_bytes, dtype=np.uint8)

        spare = n_bytes * 8 - self.genome_bits
        if spare:
            data[-1] &= np.uint8(0xFF >> spare)

        return GeneBuffer.from_bytes(data, self.genome_bits)

    def generate_population(self, size: int, rng: np.random.Generator) -> List[Candidate]:
        """Create `size` fresh candidates of generation 0."""
        return [Candidate(genome=self.generate_genome(rng)) for _ in range(size)]


class Population:
    """Fixed-size population evolved one generation at a time.

    The population owns its random generator; given the same seed, scorer and
    options two populations step through identical generations.

    Attributes:
        members: candidates, ranked best-first after every step
        genome_bits: genes per genome
        mutation_rate: per-gene flip probability for children
        ordering: whether lower or higher fitness is better
        generation: number of steps taken so far
    """

    def __init__(
        self,
        size: int,
        genome_bits: int,
        mutation_rate: float,
        scorer: Scorer,
        ordering: FitnessOrdering = FitnessOrdering.MINIMIZE,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        selection: Optional[SelectionOperator] = None,
        crossover: Optional[CrossoverOperator] = None,
        random_init: bool = True,
        guard_errors: bool = True,
    ):
        """Initialize the population.

        Args:
            size: number of candidates, constant across generations
            genome_bits: genes per genome (0 gives empty genomes)
            mutation_rate: per-gene flip probability in [0, 1]
            scorer: object with score(genome) or a callable genome -> float
            ordering: fitness ordering, MINIMIZE by default
            seed: seed for a new generator, ignored when rng is given
            rng: generator to use exclusively for this population
            selection: selection strategy, TruncationSelection() by default
            crossover: crossover strategy, UniformCrossover() by default
            random_init: draw random initial genes, True by default
            guard_errors: turn scorer failures into the worst score

        Raises:
            InvalidPopulationSizeError: if selection would keep fewer than 2 candidates
            InvalidMutationRateError: if mutation_rate is not in [0, 1]
            InvalidSizeError: if genome_bits is not a representable bit count
            InvalidScorerError: if scorer cannot be called
        """
        self._selection = selection or TruncationSelection()
        survivors = self._selection.survivor_count(size) if is_integer(size) else 0
        validate_population_size(size, survivors)

        self._mutation = MutationOperator(mutation_rate)
        self._crossover = crossover or UniformCrossover()
        self._evaluator = FitnessEvaluator(scorer, ordering=ordering, guard_errors=guard_errors)
        self._generator = PopulationGenerator(genome_bits, random_init=random_init)
        self._rng = rng if rng is not None else np.random.default_rng(seed)

        self.genome_bits = self._generator.genome_bits
        self.mutation_rate = self._mutation.mutation_rate
        self.ordering = ordering
        self.generation = 0
        self.members: List[Candidate] = self._generator.generate_population(size, self._rng)

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def evaluator(self) -> FitnessEvaluator:
        return self._evaluator

    def evaluate(self) -> None:
        """Score every member; no member is ranked before all are scored."""
        self._evaluator.evaluate_population(self.members)

    def step(self) -> GenerationStats:
        """Advance the population by one generation.

        Returns:
            statistics of this generation's evaluation pass
        """
        self.evaluate()
        ranked = self._evaluator.rank(self.members)
        stats = GenerationStats.from_ranked(self.generation, ranked)

        keep = self._selection.survivor_count(len(ranked))
        survivors = ranked[:keep]
        next_generation = self.generation + 1

        children = []
        for _ in range(len(ranked) - keep):
            parent1, parent2 = self._selection.select_parents(survivors, self._rng)
            genome = self._crossover.crossover(parent1.genome, parent2.genome, self._rng)
            self._mutation.mutate(genome, self._rng)
            children.append(Candidate(genome=genome, generation=next_generation))

        self.members = survivors + children
        self.generation = next_generation

        logger.debug(
            f"Generation {stats.generation}: best={stats.best_fitness:.6g} "
            f"avg={stats.average_fitness:.6g} worst={stats.worst_fitness:.6g}"
        )
        return stats

    def best(self, rescore: bool = True) -> Candidate:
        """Top-ranked member.

        Args:
            rescore: re-evaluate every member first (default). Reusing the
                cached fitness is only sound for pure scoring functions.

        Returns:
            the first member with the best fitness
        """
        if rescore:
            self.evaluate()
        return self._evaluator.select_best(self.members)

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self.members)

    def __repr__(self) -> str:
        return (
            f"Population(size={self.size}, genome_bits={self.genome_bits}, "
            f"generation={self.generation}, ordering={self.ordering.value})"
        )
