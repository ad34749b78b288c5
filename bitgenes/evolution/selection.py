"""
Selection Operator

Decides which ranked candidates survive a generation and draws breeding pairs
from the survivors.
"""

from abc import ABC, abstractmethod
from typing import Dict, Sequence, Tuple, Type

import numpy as np

from .exceptions import validate_keep_fraction
from .models import Candidate, SelectionMethod


class SelectionOperator(ABC):
    """Selection strategy interface."""

    @abstractmethod
    def survivor_count(self, population_size: int) -> int:
        """Number of ranked candidates carried over unchanged."""

    @abstractmethod
    def select_parents(
        self,
        survivors: Sequence[Candidate],
        rng: np.random.Generator,
    ) -> Tuple[Candidate, Candidate]:
        """Draw two distinct parents from the survivors."""


class TruncationSelection(SelectionOperator):
    """Truncation selection.

    Keeps the best floor(size * keep_fraction) candidates and pairs survivors
    uniformly at random for breeding.

    Attributes:
        keep_fraction: share of the ranked population that survives (0.5)
    """

    def __init__(self, keep_fraction: float = 0.5):
        """Initialize the selection operator.

        Args:
            keep_fraction: survivor share, 0.5 by default

        Raises:
            InvalidKeepFractionError: if keep_fraction is not in (0, 1)
        """
        validate_keep_fraction(keep_fraction)
        self.keep_fraction = float(keep_fraction)

    def survivor_count(self, population_size: int) -> int:
        return int(population_size * self.keep_fraction)

    def select_parents(
        self,
        survivors: Sequence[Candidate],
        rng: np.random.Generator,
    ) -> Tuple[Candidate, Candidate]:
        """Pick two distinct survivors uniformly at random.

        The second index is redrawn until it differs from the first.

        Args:
            survivors: ranked survivors, at least two
            rng: the population's random generator

        Returns:
            (parent1, parent2)

        Raises:
            ValueError: if fewer than two survivors are given
        """
        keep = len(survivors)
        if keep < 2:
            raise ValueError(f"Need at least 2 survivors to breed, got {keep}")

        first = int(rng.integers(keep))
        second = int(rng.integers(keep))
        while second == first:
            second = int(rng.integers(keep))

        return survivors[first], survivors[second]


SELECTION_STRATEGIES: Dict[SelectionMethod, Type[SelectionOperator]] = {
    SelectionMethod.TRUNCATION: TruncationSelection,
}


def create_selection(method: SelectionMethod = SelectionMethod.TRUNCATION) -> SelectionOperator:
    """Instantiate the selection strategy registered for `method`."""
    return SELECTION_STRATEGIES[SelectionMethod(method)]()
