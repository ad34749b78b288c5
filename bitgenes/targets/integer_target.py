"""
Integer Guessing Target

Scores a genome by how far one of its unsigned integer fields is from a fixed
target value. Lower is better.
"""

from ..evolution.exceptions import InvalidConfigurationError
from ..evolution.genes import UINT_WIDTHS, GeneBuffer


class IntegerTarget:
    """Absolute distance between a genome field and a target integer.

    Attributes:
        target: value the genome should encode
        width: field width in bits (8, 16, 32, 64 or 128)
        slot: field index within the width-sized view
        evaluations: number of genomes scored so far
    """

    def __init__(self, target: int, width: int = 8, slot: int = 0):
        """Initialize the target.

        Args:
            target: value the genome should encode, 0 <= target < 2**width
            width: field width in bits, 8 by default
            slot: field index, 0 by default

        Raises:
            InvalidConfigurationError: if width is unsupported or target does not fit
        """
        if width not in UINT_WIDTHS:
            raise InvalidConfigurationError(
                f"Unsupported field width: {width}",
                f"Use one of {UINT_WIDTHS}",
            )
        if not 0 <= target < 2 ** width:
            raise InvalidConfigurationError(
                f"Target {target} does not fit in {width} bits",
                f"Choose a target between 0 and {2 ** width - 1}",
            )

        self.target = int(target)
        self.width = width
        self.slot = slot
        self.evaluations = 0

    @property
    def genome_bits(self) -> int:
        """Smallest genome that holds the scored field."""
        return (self.slot + 1) * self.width

    def decode(self, genome: GeneBuffer) -> int:
        return genome.read_uint(self.slot, self.width)

    def score(self, genome: GeneBuffer) -> float:
        self.evaluations += 1
        return float(abs(self.decode(genome) - self.target))
