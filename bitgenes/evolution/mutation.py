"""
Mutation Operator

Flips child genes at random after crossover to keep the population from
settling into a local optimum.
"""

import numpy as np

from .exceptions import validate_mutation_rate
from .genes import GeneBuffer


class MutationOperator:
    """Bit-flip mutation.

    Every gene flips independently with probability mutation_rate.

    Attributes:
        mutation_rate: per-gene flip probability in [0, 1]
    """

    def __init__(self, mutation_rate: float = 0.05):
        """Initialize the mutation operator.

        Args:
            mutation_rate: per-gene flip probability, 0.05 by default

        Raises:
            InvalidMutationRateError: if mutation_rate is not in [0, 1]
        """
        validate_mutation_rate(mutation_rate)
        self.mutation_rate = float(mutation_rate)

    def mutate(self, genome: GeneBuffer, rng: np.random.Generator) -> int:
        """Mutate a genome in place.

        Args:
            genome: genome to mutate
            rng: the population's random generator

        Returns:
            number of genes flipped
        """
        flips = rng.random(genome.addressable_bits) < self.mutation_rate
        return genome.flip_bits(flips)
