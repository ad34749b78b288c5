"""
Evolution Engine Exception Classes

This module defines custom exceptions for the bit-string evolution engine.
Configuration problems are reported when an engine or population is built;
once a run is underway the evolutionary loop has no error channel.
"""

import math
from typing import Any, Optional

import numpy as np


# Largest genome length whose byte count and bit indices fit numpy's index type
MAX_GENOME_BITS = int(np.iinfo(np.intp).max)


class EvolutionError(Exception):
    """Base exception class for all evolution-related errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.suggestion:
            return f"{self.message}. Suggestion: {self.suggestion}"
        return self.message


# =============================================================================
# Invalid Configuration Errors
# =============================================================================

class InvalidConfigurationError(EvolutionError):
    """Raised when an engine or population is constructed with invalid options."""


class InvalidPopulationSizeError(InvalidConfigurationError):
    """
    Raised when the population is too small to breed.

    Crossover needs two distinct survivors, so the number of candidates kept
    by selection must be at least MIN_SURVIVORS.
    """

    MIN_SURVIVORS = 2

    def __init__(self, population_size: Any, survivors: Optional[int] = None):
        self.population_size = population_size
        self.survivors = survivors
        message = f"Invalid population size: {population_size}"
        if survivors is not None:
            message += f" (only {survivors} survivor(s) per generation)"
        suggestion = (
            f"Use a population that keeps at least {self.MIN_SURVIVORS} "
            f"candidates after selection"
        )
        super().__init__(message, suggestion)


class InvalidMutationRateError(InvalidConfigurationError):
    """Raised when mutation_rate is not a probability in [0, 1]."""

    MIN_RATE = 0.0
    MAX_RATE = 1.0

    def __init__(self, mutation_rate: Any):
        self.mutation_rate = mutation_rate
        message = f"Invalid mutation rate: {mutation_rate}"
        suggestion = f"Mutation rate must be between {self.MIN_RATE} and {self.MAX_RATE}"
        super().__init__(message, suggestion)


class InvalidKeepFractionError(InvalidConfigurationError):
    """Raised when a truncation keep fraction is not in (0, 1)."""

    def __init__(self, keep_fraction: Any):
        self.keep_fraction = keep_fraction
        message = f"Invalid keep fraction: {keep_fraction}"
        suggestion = "Keep fraction must be strictly between 0 and 1"
        super().__init__(message, suggestion)


class InvalidGenerationCountError(InvalidConfigurationError):
    """Raised when a run is asked for a negative number of generations."""

    def __init__(self, generation_count: Any):
        self.generation_count = generation_count
        message = f"Invalid generation count: {generation_count}"
        suggestion = "Generation count must be a non-negative integer"
        super().__init__(message, suggestion)


class MissingParameterError(InvalidConfigurationError):
    """Raised when a required construction parameter was never supplied."""

    def __init__(self, parameter: str):
        self.parameter = parameter
        message = f"Missing required parameter: {parameter}"
        suggestion = f"Set '{parameter}' before building the engine"
        super().__init__(message, suggestion)


class InvalidScorerError(InvalidConfigurationError):
    """Raised when the scoring function is neither callable nor has a score() method."""

    def __init__(self, scorer: Any):
        self.scorer = scorer
        message = f"Invalid scoring function: {type(scorer).__name__}"
        suggestion = "Pass a callable genome -> float or an object with a score(genome) method"
        super().__init__(message, suggestion)


# =============================================================================
# Genome Errors
# =============================================================================

class InvalidSizeError(EvolutionError):
    """Raised when a genome bit length cannot be represented in the backing storage."""

    def __init__(self, n_bits: Any):
        self.n_bits = n_bits
        message = f"Invalid genome size: {n_bits!r} bits"
        suggestion = f"Genome size must be an integer between 0 and {MAX_GENOME_BITS}"
        super().__init__(message, suggestion)


# =============================================================================
# Utility Functions
# =============================================================================

def is_integer(value: Any) -> bool:
    """True for Python and numpy integers; bools are rejected."""
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def validate_genome_bits(n_bits: Any) -> None:
    """Validate that a genome bit length is representable."""
    if not is_integer(n_bits):
        raise InvalidSizeError(n_bits)
    if n_bits < 0 or n_bits > MAX_GENOME_BITS:
        raise InvalidSizeError(n_bits)


def validate_population_size(size: Any, survivors: int) -> None:
    """Validate that a population keeps enough survivors to breed."""
    if not is_integer(size):
        raise InvalidPopulationSizeError(size)
    if size < InvalidPopulationSizeError.MIN_SURVIVORS or survivors < InvalidPopulationSizeError.MIN_SURVIVORS:
        raise InvalidPopulationSizeError(size, survivors)


def validate_mutation_rate(rate: Any) -> None:
    """Validate mutation rate is a real number in [0, 1]; bools and strings are rejected."""
    if isinstance(rate, (bool, str, bytes)):
        raise InvalidMutationRateError(rate)
    try:
        value = float(rate)
    except (TypeError, ValueError):
        raise InvalidMutationRateError(rate) from None
    if math.isnan(value) or value < InvalidMutationRateError.MIN_RATE or value > InvalidMutationRateError.MAX_RATE:
        raise InvalidMutationRateError(rate)


def validate_keep_fraction(fraction: Any) -> None:
    """Validate a truncation keep fraction."""
    try:
        value = float(fraction)
    except (TypeError, ValueError):
        raise InvalidKeepFractionError(fraction) from None
    if not 0.0 < value < 1.0:
        raise InvalidKeepFractionError(fraction)


def validate_generation_count(count: Any) -> None:
    """Validate generation count is a non-negative integer."""
    if not is_integer(count) or count < 0:
        raise InvalidGenerationCountError(count)
