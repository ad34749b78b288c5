"""
Bit-String Evolution Engine

Evolves a population of fixed-length bit-string genomes toward better scores
under a user-supplied scoring function.
"""

from .genes import (
    UINT_WIDTHS,
    GeneBuffer,
)

from .models import (
    FitnessOrdering,
    SelectionMethod,
    CrossoverMethod,
    Candidate,
)

from .fitness import (
    ScoringFunction,
    FitnessEvaluator,
    resolve_scorer,
)

from .selection import (
    SelectionOperator,
    TruncationSelection,
    create_selection,
)

from .crossover import (
    CrossoverOperator,
    UniformCrossover,
    create_crossover,
)

from .mutation import (
    MutationOperator,
)

from .population import (
    PopulationGenerator,
    Population,
)

from .generation import (
    GenerationStats,
    EvolutionHistory,
)

from .engine import (
    EvolutionConfig,
    EvolutionEngine,
    EngineBuilder,
)

from .exceptions import (
    MAX_GENOME_BITS,
    EvolutionError,
    InvalidConfigurationError,
    InvalidPopulationSizeError,
    InvalidMutationRateError,
    InvalidKeepFractionError,
    InvalidGenerationCountError,
    MissingParameterError,
    InvalidScorerError,
    InvalidSizeError,
    is_integer,
    validate_genome_bits,
    validate_population_size,
    validate_mutation_rate,
    validate_keep_fraction,
    validate_generation_count,
)

__all__ = [
    # Genes
    "UINT_WIDTHS",
    "GeneBuffer",
    # Models
    "FitnessOrdering",
    "SelectionMethod",
    "CrossoverMethod",
    "Candidate",
    # Fitness
    "ScoringFunction",
    "FitnessEvaluator",
    "resolve_scorer",
    # Selection
    "SelectionOperator",
    "TruncationSelection",
    "create_selection",
    # Crossover
    "CrossoverOperator",
    "UniformCrossover",
    "create_crossover",
    # Mutation
    "MutationOperator",
    # Population
    "PopulationGenerator",
    "Population",
    # Generation
    "GenerationStats",
    "EvolutionHistory",
    # Engine
    "EvolutionConfig",
    "EvolutionEngine",
    "EngineBuilder",
    # Exceptions
    "MAX_GENOME_BITS",
    "EvolutionError",
    "InvalidConfigurationError",
    "InvalidPopulationSizeError",
    "InvalidMutationRateError",
    "InvalidKeepFractionError",
    "InvalidGenerationCountError",
    "MissingParameterError",
    "InvalidScorerError",
    "InvalidSizeError",
    "is_integer",
    "validate_genome_bits",
    "validate_population_size",
    "validate_mutation_rate",
    "validate_keep_fraction",
    "validate_generation_count",
]
