"""
Tests for population initialization and the generational step.
"""

import math

import numpy as np
import pytest
from hypothesis import given, strategies as st, settings

from bitgenes.evolution.exceptions import (
    InvalidMutationRateError,
    InvalidPopulationSizeError,
    InvalidScorerError,
    InvalidSizeError,
)
from bitgenes.evolution.genes import GeneBuffer
from bitgenes.evolution.models import Candidate, FitnessOrdering
from bitgenes.evolution.population import Population, PopulationGenerator


def first_byte(genome: GeneBuffer) -> float:
    return float(genome.read_u8(0))


def seeded_population(values, ordering=FitnessOrdering.MINIMIZE, mutation_rate=0.0, seed=0, scorer=first_byte):
    """Population whose members encode `values` in their single byte."""
    population = Population(
        size=len(values),
        genome_bits=8,
        mutation_rate=mutation_rate,
        scorer=scorer,
        ordering=ordering,
        seed=seed,
    )
    population.members = [Candidate(genome=GeneBuffer.from_bytes(bytes([v]))) for v in values]
    return population


VALUES = [9, 3, 7, 1, 8, 0, 6, 2, 5, 4]


# =============================================================================
# Construction
# =============================================================================

class TestPopulationConstruction:

    def test_initial_state(self):
        population = Population(10, 12, 0.05, first_byte, seed=1)

        assert population.size == 10
        assert len(population) == 10
        assert population.generation == 0
        assert population.genome_bits == 12
        assert population.mutation_rate == 0.05
        for candidate in population:
            assert candidate.genome.bit_count == 12
            assert candidate.genome.byte_count == 2
            assert candidate.generation == 0

    @pytest.mark.parametrize("size", [0, 1, 2, 3, -5])
    def test_too_small_population_rejected(self, size):
        with pytest.raises(InvalidPopulationSizeError):
            Population(size, 8, 0.05, first_byte)

    @pytest.mark.parametrize("size", [4.0, "10", None])
    def test_non_integer_size_rejected(self, size):
        with pytest.raises(InvalidPopulationSizeError):
            Population(size, 8, 0.05, first_byte)

    @pytest.mark.parametrize("rate", [-0.1, 1.5, float("nan")])
    def test_invalid_mutation_rate_rejected(self, rate):
        with pytest.raises(InvalidMutationRateError):
            Population(10, 8, rate, first_byte)

    def test_invalid_scorer_rejected(self):
        with pytest.raises(InvalidScorerError):
            Population(10, 8, 0.05, 42)

    def test_invalid_genome_bits_rejected(self):
        with pytest.raises(InvalidSizeError):
            Population(10, -1, 0.05, first_byte)

    def test_zero_initialized_genomes(self):
        population = Population(6, 20, 0.05, first_byte, random_init=False)
        assert all(c.genome.to_bytes() == b"\x00\x00\x00" for c in population)

    def test_spare_bits_are_masked(self):
        population = Population(50, 3, 0.05, first_byte, seed=2)
        assert all(c.genome.read_u8(0) < 8 for c in population)

    def test_numpy_integer_size_accepted(self):
        population = Population(np.int64(10), 8, 0.05, first_byte, seed=0)
        population.step()

        assert population.size == 10

    def test_seed_and_injected_rng_agree(self):
        seeded = Population(8, 16, 0.05, first_byte, seed=5)
        injected = Population(8, 16, 0.05, first_byte, rng=np.random.default_rng(5))

        assert [c.genome for c in seeded] == [c.genome for c in injected]

    def test_repr(self):
        text = repr(Population(4, 8, 0.05, first_byte))
        assert "size=4" in text
        assert "minimize" in text


class TestPopulationGenerator:

    def test_generates_requested_count(self):
        generator = PopulationGenerator(10)
        candidates = generator.generate_population(7, np.random.default_rng(0))

        assert len(candidates) == 7
        assert all(c.genome.bit_count == 10 for c in candidates)
        assert all(c.genome.get(10) == 0 for c in candidates)

    def test_genomes_are_independent(self):
        candidates = PopulationGenerator(8, random_init=False).generate_population(2, np.random.default_rng(0))
        candidates[0].genome.set(0)
        assert candidates[1].genome.get(0) == 0


# =============================================================================
# Generational Step
# =============================================================================

class TestPopulationStep:

    @given(
        size=st.integers(min_value=4, max_value=40),
        seed=st.integers(min_value=0, max_value=2 ** 32 - 1),
    )
    @settings(max_examples=50, deadline=None)
    def test_size_is_invariant(self, size: int, seed: int):
        population = Population(size, 8, 0.1, first_byte, seed=seed)

        for _ in range(3):
            population.step()
            assert population.size == size

    def test_minimize_keeps_lowest_half(self):
        population = seeded_population(VALUES)
        before = {c.genome.read_u8(0): c for c in population.members}

        population.step()

        survivors = population.members[:5]
        assert [c.genome.read_u8(0) for c in survivors] == [0, 1, 2, 3, 4]
        assert all(c is before[c.genome.read_u8(0)] for c in survivors)

    def test_maximize_keeps_highest_half(self):
        population = seeded_population(VALUES, ordering=FitnessOrdering.MAXIMIZE)
        population.step()

        assert [c.genome.read_u8(0) for c in population.members[:5]] == [9, 8, 7, 6, 5]

    def test_ties_keep_previous_order(self):
        population = seeded_population([1, 1, 1, 1, 9, 9])
        originals = list(population.members)

        population.step()

        assert population.members[:3] == originals[:3]
        assert all(a is b for a, b in zip(population.members[:3], originals[:3]))

    def test_children_are_stamped_with_next_generation(self):
        population = seeded_population(VALUES)
        population.step()

        assert population.generation == 1
        assert [c.generation for c in population.members] == [0] * 5 + [1] * 5

    def test_children_recombine_survivors_without_mutation(self):
        population = seeded_population(VALUES, mutation_rate=0.0)
        population.step()

        # survivors 0..4 only use the low three bits
        assert all(c.genome.read_u8(0) < 8 for c in population.members[5:])

    def test_full_mutation_inverts_children(self):
        population = seeded_population(VALUES, mutation_rate=1.0)
        population.step()

        assert all(c.genome.read_u8(0) >= 0xF8 for c in population.members[5:])

    def test_children_do_not_alias_survivors(self):
        population = seeded_population(VALUES, mutation_rate=0.0)
        population.step()

        survivor_genomes = [c.genome for c in population.members[:5]]
        for child in population.members[5:]:
            assert all(child.genome is not genome for genome in survivor_genomes)

    def test_step_returns_statistics(self):
        population = seeded_population(VALUES)
        stats = population.step()

        assert stats.generation == 0
        assert stats.best_fitness == 0.0
        assert stats.worst_fitness == 9.0
        assert stats.average_fitness == pytest.approx(4.5)
        assert stats.best_genome.read_u8(0) == 0

    def test_same_seed_same_generations(self):
        first = Population(20, 32, 0.05, first_byte, seed=42)
        second = Population(20, 32, 0.05, first_byte, seed=42)

        for _ in range(5):
            first.step()
            second.step()

        assert [c.genome for c in first] == [c.genome for c in second]

    def test_empty_genomes_step(self):
        population = Population(4, 0, 0.5, lambda genome: 0.0, seed=0)
        population.step()

        assert population.size == 4
        assert all(c.genome.bit_count == 0 for c in population)

    def test_step_logs_generation(self, caplog):
        population = seeded_population(VALUES)

        with caplog.at_level("DEBUG", logger="bitgenes.evolution.population"):
            population.step()

        assert "Generation 0" in caplog.text


# =============================================================================
# Best Candidate and Scorer Failures
# =============================================================================

class TestPopulationBest:

    def test_best_rescored_by_default(self):
        calls = []

        def scorer(genome):
            calls.append(1)
            return first_byte(genome)

        population = Population(6, 8, 0.05, scorer, seed=3)
        best = population.best()

        assert len(calls) == 6
        assert best.fitness == min(c.fitness for c in population)

    def test_best_without_rescore_uses_cached_fitness(self):
        calls = []

        def scorer(genome):
            calls.append(1)
            return first_byte(genome)

        population = seeded_population(VALUES, scorer=scorer)
        population.step()
        calls.clear()

        best = population.best(rescore=False)

        assert calls == []
        assert best is population.members[0]
        assert best.fitness == 0.0

    def test_best_sees_stateful_scorer_change(self):
        class MovingTarget:
            def __init__(self):
                self.target = 0

            def score(self, genome):
                return abs(genome.read_u8(0) - self.target)

        scorer = MovingTarget()
        population = Population(4, 8, 0.0, scorer, seed=0)
        population.members = [Candidate(genome=GeneBuffer.from_bytes(bytes([v]))) for v in (0, 10, 200, 255)]
        population.step()

        # the cached ranking favours values near 0; the new target favours large ones
        scorer.target = 255
        largest = max(c.genome.read_u8(0) for c in population)
        best = population.best()

        assert best.genome.read_u8(0) == largest
        assert best.fitness == 255 - largest

    @pytest.mark.parametrize("ordering", list(FitnessOrdering))
    def test_failing_scorer_ranks_last(self, ordering):
        def scorer(genome):
            if genome.read_u8(0) == 3:
                raise RuntimeError("unscorable")
            return first_byte(genome)

        population = seeded_population([3, 1, 2, 4], ordering=ordering, scorer=scorer)
        stats = population.step()

        assert stats.worst_fitness == ordering.worst_score
        assert population.members[0].genome.read_u8(0) != 3

    def test_nan_scorer_ranks_last(self):
        population = Population(4, 8, 0.05, lambda genome: float("nan"), seed=0)
        stats = population.step()

        assert math.isinf(stats.best_fitness)

    def test_unguarded_failure_propagates(self):
        def scorer(genome):
            raise RuntimeError("unscorable")

        population = Population(4, 8, 0.05, scorer, guard_errors=False)
        with pytest.raises(RuntimeError):
            population.step()
