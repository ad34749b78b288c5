"""
Evolution Engine

Main entry point: owns a population, steps it generation by generation,
records per-generation statistics and exposes the best genome.
"""

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional

import numpy as np

from .crossover import create_crossover
from .exceptions import (
    MissingParameterError,
    is_integer,
    validate_generation_count,
    validate_genome_bits,
    validate_mutation_rate,
    validate_population_size,
)
from .fitness import Scorer
from .generation import EvolutionHistory, GenerationStats
from .genes import GeneBuffer
from .models import Candidate, CrossoverMethod, FitnessOrdering, SelectionMethod
from .population import Population
from .selection import create_selection

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, GenerationStats], None]


@dataclass
class EvolutionConfig:
    """Evolution configuration.

    Attributes:
        population_size: number of candidates (100)
        genome_bits: genes per genome, required
        mutation_rate: per-gene flip probability (0.05)
        ordering: fitness ordering (MINIMIZE)
        seed: seed for the engine's random generator (None draws fresh entropy)
        selection_method: survivor selection strategy (TRUNCATION)
        crossover_method: crossover strategy (UNIFORM)
        random_init: draw random initial genes (True)
        guard_errors: turn scorer failures into the worst score (True)
    """
    population_size: int = 100
    genome_bits: Optional[int] = None
    mutation_rate: float = 0.05
    ordering: FitnessOrdering = FitnessOrdering.MINIMIZE
    seed: Optional[int] = None
    selection_method: SelectionMethod = SelectionMethod.TRUNCATION
    crossover_method: CrossoverMethod = CrossoverMethod.UNIFORM
    random_init: bool = True
    guard_errors: bool = True

    def validate(self) -> None:
        """Check every option.

        Raises:
            MissingParameterError: if genome_bits is unset
            InvalidSizeError: if genome_bits is not a representable bit count
            InvalidMutationRateError: if mutation_rate is not in [0, 1]
            InvalidPopulationSizeError: if selection would keep fewer than 2 candidates
        """
        if self.genome_bits is None:
            raise MissingParameterError("genome_bits")
        validate_genome_bits(self.genome_bits)
        validate_mutation_rate(self.mutation_rate)

        selection = create_selection(self.selection_method)
        survivors = selection.survivor_count(self.population_size) if is_integer(self.population_size) else 0
        validate_population_size(self.population_size, survivors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary; enums are stored by value."""
        return {
            "population_size": self.population_size,
            "genome_bits": self.genome_bits,
            "mutation_rate": self.mutation_rate,
            "ordering": self.ordering.value,
            "seed": self.seed,
            "selection_method": self.selection_method.value,
            "crossover_method": self.crossover_method.value,
            "random_init": self.random_init,
            "guard_errors": self.guard_errors,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EvolutionConfig":
        """Build from a dictionary; missing keys take the defaults."""
        defaults = cls()
        return cls(
            population_size=data.get("population_size", defaults.population_size),
            genome_bits=data.get("genome_bits", defaults.genome_bits),
            mutation_rate=data.get("mutation_rate", defaults.mutation_rate),
            ordering=FitnessOrdering(data.get("ordering", defaults.ordering.value)),
            seed=data.get("seed", defaults.seed),
            selection_method=SelectionMethod(
                data.get("selection_method", defaults.selection_method.value)
            ),
            crossover_method=CrossoverMethod(
                data.get("crossover_method", defaults.crossover_method.value)
            ),
            random_init=data.get("random_init", defaults.random_init),
            guard_errors=data.get("guard_errors", defaults.guard_errors),
        )

    def to_json(self) -> str:
        """Serialize to a JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "EvolutionConfig":
        """Deserialize from a JSON string.

        Raises:
            ValueError: if the JSON is malformed or names an unknown enum value
        """
        return cls.from_dict(json.loads(json_str))


class EvolutionEngine:
    """Genetic optimizer over fixed-length bit-string genomes.

    Wires the configured strategies into a Population and drives it:
    - single generation (step)
    - fixed number of generations (run)
    - best genome after a fresh evaluation (best)

    Attributes:
        config: validated configuration
        history: statistics of every generation stepped so far
    """

    def __init__(
        self,
        population_size: int,
        genome_bits: int,
        mutation_rate: float,
        scorer: Scorer,
        ordering: FitnessOrdering = FitnessOrdering.MINIMIZE,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        selection_method: SelectionMethod = SelectionMethod.TRUNCATION,
        crossover_method: CrossoverMethod = CrossoverMethod.UNIFORM,
        random_init: bool = True,
        guard_errors: bool = True,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """Initialize the engine.

        Args:
            population_size: number of candidates
            genome_bits: genes per genome
            mutation_rate: per-gene flip probability in [0, 1]
            scorer: object with score(genome) or a callable genome -> float
            ordering: fitness ordering, MINIMIZE by default
            seed: seed for the engine's generator, ignored when rng is given
            rng: generator owned exclusively by this engine
            selection_method: survivor selection strategy
            crossover_method: crossover strategy
            random_init: draw random initial genes, True by default
            guard_errors: turn scorer failures into the worst score
            progress_callback: called with (generation, stats) after every step

        Raises:
            InvalidConfigurationError: if any option is invalid
            InvalidSizeError: if genome_bits is not a representable bit count
        """
        self._config = EvolutionConfig(
            population_size=population_size,
            genome_bits=genome_bits,
            mutation_rate=mutation_rate,
            ordering=ordering,
            seed=seed,
            selection_method=selection_method,
            crossover_method=crossover_method,
            random_init=random_init,
            guard_errors=guard_errors,
        )
        self._config.validate()
        self._config = replace(
            self._config,
            population_size=int(population_size),
            genome_bits=int(genome_bits),
            mutation_rate=float(mutation_rate),
        )

        self.progress_callback = progress_callback
        self._history = EvolutionHistory()

        self._population = Population(
            size=self._config.population_size,
            genome_bits=self._config.genome_bits,
            mutation_rate=self._config.mutation_rate,
            scorer=scorer,
            ordering=ordering,
            seed=seed,
            rng=rng,
            selection=create_selection(selection_method),
            crossover=create_crossover(crossover_method),
            random_init=random_init,
            guard_errors=guard_errors,
        )

    @classmethod
    def from_config(
        cls,
        config: EvolutionConfig,
        scorer: Scorer,
        rng: Optional[np.random.Generator] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> "EvolutionEngine":
        """Build an engine from a configuration object.

        Raises:
            InvalidConfigurationError: if the configuration is invalid
        """
        config.validate()
        return cls(
            population_size=config.population_size,
            genome_bits=config.genome_bits,
            mutation_rate=config.mutation_rate,
            scorer=scorer,
            ordering=config.ordering,
            seed=config.seed,
            rng=rng,
            selection_method=config.selection_method,
            crossover_method=config.crossover_method,
            random_init=config.random_init,
            guard_errors=config.guard_errors,
            progress_callback=progress_callback,
        )

    @property
    def config(self) -> EvolutionConfig:
        return self._config

    @property
    def history(self) -> EvolutionHistory:
        return self._history

    @property
    def population(self) -> Population:
        return self._population

    @property
    def generation(self) -> int:
        return self._population.generation

    def step(self) -> None:
        """Run exactly one generation."""
        stats = self._population.step()
        self._history.append(stats)

        if self.progress_callback is not None:
            self.progress_callback(stats.generation, stats)

    def run(self, generations: int) -> None:
        """Run `generations` steps back to back; there is no early stopping.

        Raises:
            InvalidGenerationCountError: if generations is negative
        """
        validate_generation_count(generations)

        logger.info(
            f"Evolving {self._population.size} candidates of {self._population.genome_bits} bits "
            f"for {generations} generations"
        )
        for _ in range(generations):
            self.step()

        latest = self._history.latest
        if latest is not None:
            logger.info(
                f"Finished at generation {self.generation}, "
                f"last evaluated best fitness {latest.best_fitness:.6g}"
            )

    def best_candidate(self, rescore: bool = True) -> Candidate:
        """Top-ranked candidate; see Population.best."""
        return self._population.best(rescore=rescore)

    def best(self, rescore: bool = True) -> GeneBuffer:
        """Genome of the top-ranked candidate after a fresh evaluation.

        Args:
            rescore: re-evaluate every candidate first (default); pass False
                only for pure scoring functions

        Returns:
            the best candidate's genome (not a copy)
        """
        return self.best_candidate(rescore=rescore).genome


class EngineBuilder:
    """Incremental engine configuration.

    Genome bits and a scorer are required; every other option falls back to
    the EvolutionConfig defaults (population size 100, mutation rate 0.05).

    Example:
        engine = (
            EngineBuilder()
            .genome_bits(8)
            .scorer(IntegerTarget(24))
            .seed(7)
            .build()
        )
    """

    def __init__(self):
        self._config = EvolutionConfig()
        self._scorer: Optional[Scorer] = None
        self._rng: Optional[np.random.Generator] = None
        self._progress_callback: Optional[ProgressCallback] = None

    def size(self, population_size: int) -> "EngineBuilder":
        self._config.population_size = population_size
        return self

    def genome_bits(self, genome_bits: int) -> "EngineBuilder":
        self._config.genome_bits = genome_bits
        return self

    def mutation_rate(self, mutation_rate: float) -> "EngineBuilder":
        self._config.mutation_rate = mutation_rate
        return self

    def scorer(self, scorer: Scorer) -> "EngineBuilder":
        self._scorer = scorer
        return self

    def ordering(self, ordering: FitnessOrdering) -> "EngineBuilder":
        self._config.ordering = FitnessOrdering(ordering)
        return self

    def seed(self, seed: Optional[int]) -> "EngineBuilder":
        self._config.seed = seed
        return self

    def rng(self, rng: np.random.Generator) -> "EngineBuilder":
        self._rng = rng
        return self

    def selection(self, method: SelectionMethod) -> "EngineBuilder":
        self._config.selection_method = SelectionMethod(method)
        return self

    def crossover(self, method: CrossoverMethod) -> "EngineBuilder":
        self._config.crossover_method = CrossoverMethod(method)
        return self

    def random_init(self, enabled: bool = True) -> "EngineBuilder":
        self._config.random_init = enabled
        return self

    def guard_errors(self, enabled: bool = True) -> "EngineBuilder":
        self._config.guard_errors = enabled
        return self

    def progress_callback(self, callback: ProgressCallback) -> "EngineBuilder":
        self._progress_callback = callback
        return self

    def build(self) -> EvolutionEngine:
        """Finalize the engine.

        Raises:
            MissingParameterError: if genome bits or the scorer were never set
            InvalidConfigurationError: if any other option is invalid
        """
        if self._config.genome_bits is None:
            raise MissingParameterError("genome_bits")
        if self._scorer is None:
            raise MissingParameterError("scorer")

        return EvolutionEngine.from_config(
            self._config,
            self._scorer,
            rng=self._rng,
            progress_callback=self._progress_callback,
        )
