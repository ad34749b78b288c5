"""
Fitness Evaluator

Calls the user-supplied scoring function for every candidate and ranks the
population according to the configured fitness ordering.
"""

import logging
import math
from typing import Any, Callable, List, Protocol, Sequence, Union

from .exceptions import InvalidScorerError
from .genes import GeneBuffer
from .models import Candidate, FitnessOrdering

logger = logging.getLogger(__name__)


class ScoringFunction(Protocol):
    """Protocol for scoring functions.

    A scorer maps a genome to a scalar fitness. It may keep and update its own
    state between calls but must not modify the genome it is given.
    """

    def score(self, genome: GeneBuffer) -> float:
        ...


Scorer = Union[ScoringFunction, Callable[[GeneBuffer], float]]


def resolve_scorer(scorer: Any) -> Callable[[GeneBuffer], float]:
    """Return the callable behind a scorer object or plain function.

    Raises:
        InvalidScorerError: if scorer has no callable score() and is not callable
    """
    score = getattr(scorer, "score", None)
    if callable(score):
        return score
    if callable(scorer):
        return scorer
    raise InvalidScorerError(scorer)


class FitnessEvaluator:
    """Fitness evaluator.

    Wraps a scoring function with the fitness ordering. When guard_errors is
    set, a scorer that raises or returns NaN is given the ordering's worst
    score instead of interrupting the generation.

    Attributes:
        ordering: whether lower or higher scores are better
        guard_errors: convert scorer failures into the worst score
    """

    def __init__(
        self,
        scorer: Scorer,
        ordering: FitnessOrdering = FitnessOrdering.MINIMIZE,
        guard_errors: bool = True,
    ):
        """Initialize the evaluator.

        Args:
            scorer: object with score(genome) or a callable genome -> float
            ordering: fitness ordering, MINIMIZE by default
            guard_errors: convert failures into the worst score, True by default

        Raises:
            InvalidScorerError: if scorer cannot be called
        """
        self.scorer = scorer
        self.ordering = ordering
        self.guard_errors = guard_errors
        self._score = resolve_scorer(scorer)

    def score(self, genome: GeneBuffer) -> float:
        """Score a single genome."""
        if not self.guard_errors:
            return float(self._score(genome))

        try:
            value = float(self._score(genome))
        except Exception as e:
            logger.warning(f"Scoring function failed, assigning worst score: {e!r}")
            return self.ordering.worst_score

        if math.isnan(value):
            logger.warning("Scoring function returned NaN, assigning worst score")
            return self.ordering.worst_score
        return value

    def evaluate_population(self, population: Sequence[Candidate]) -> None:
        """Score every candidate in order and cache the result on it."""
        for candidate in population:
            candidate.fitness = self.score(candidate.genome)

    def rank(self, population: Sequence[Candidate]) -> List[Candidate]:
        """Stable sort, best first; ties keep their current order."""
        return sorted(
            population,
            key=lambda candidate: candidate.fitness,
            reverse=self.ordering is FitnessOrdering.MAXIMIZE,
        )

    def select_best(self, population: Sequence[Candidate]) -> Candidate:
        """First candidate with the best cached fitness.

        Raises:
            ValueError: if the population is empty
        """
        if not population:
            raise ValueError("Population cannot be empty")

        best = population[0]
        for candidate in population[1:]:
            if self.ordering.is_better(candidate.fitness, best.fitness):
                best = candidate
        return best
