"""
Tests for the evolution engine, its configuration and the engine builder.
"""

import json

import numpy as np
import pytest

from bitgenes.evolution.engine import EngineBuilder, EvolutionConfig, EvolutionEngine
from bitgenes.evolution.exceptions import (
    InvalidGenerationCountError,
    InvalidMutationRateError,
    InvalidPopulationSizeError,
    InvalidSizeError,
    MissingParameterError,
)
from bitgenes.evolution.genes import GeneBuffer
from bitgenes.evolution.models import CrossoverMethod, FitnessOrdering, SelectionMethod
from bitgenes.targets import IntegerTarget


def count_ones(genome: GeneBuffer) -> float:
    return float(genome.count_ones())


# =============================================================================
# Convergence
# =============================================================================

class TestConvergence:

    def test_guesses_small_integer(self):
        results = []
        for seed in range(5):
            target = IntegerTarget(24)
            engine = EvolutionEngine(100, target.genome_bits, 0.05, target, seed=seed)
            engine.run(100)
            results.append(target.decode(engine.best()))

        assert all(abs(value - 24) <= 1 for value in results)
        assert sum(value == 24 for value in results) >= 4

    def test_maximizes_set_bits(self):
        engine = EvolutionEngine(
            50, 16, 0.05, count_ones,
            ordering=FitnessOrdering.MAXIMIZE,
            seed=9,
        )
        engine.run(60)

        assert engine.best().count_ones() >= 15

    def test_best_fitness_never_regresses_when_minimizing(self):
        target = IntegerTarget(200)
        engine = EvolutionEngine(20, 8, 0.1, target, seed=4)
        engine.run(30)

        curve = engine.history.best_fitness_curve()
        assert all(later <= earlier for earlier, later in zip(curve, curve[1:]))


# =============================================================================
# Stepping and Runs
# =============================================================================

class TestEngineRun:

    def test_same_seed_same_result(self):
        genomes = []
        for _ in range(2):
            engine = EvolutionEngine(30, 64, 0.05, IntegerTarget(2 ** 63, width=64), seed=123)
            for _ in range(10):
                engine.step()
            genomes.append([c.genome for c in engine.population])

        assert genomes[0] == genomes[1]

    def test_injected_rng_matches_seed(self):
        seeded = EvolutionEngine(10, 16, 0.05, count_ones, seed=8)
        injected = EvolutionEngine(10, 16, 0.05, count_ones, rng=np.random.default_rng(8))
        seeded.run(5)
        injected.run(5)

        assert seeded.best(rescore=False) == injected.best(rescore=False)

    def test_run_zero_generations_is_no_op(self):
        engine = EvolutionEngine(10, 8, 0.05, count_ones, seed=0)
        before = [c.genome.clone() for c in engine.population]

        engine.run(0)

        assert engine.generation == 0
        assert len(engine.history) == 0
        assert [c.genome for c in engine.population] == before

    @pytest.mark.parametrize("generations", [-1, 2.5, "3", True])
    def test_invalid_generation_count(self, generations):
        engine = EvolutionEngine(10, 8, 0.05, count_ones)
        with pytest.raises(InvalidGenerationCountError):
            engine.run(generations)

    def test_history_and_callback(self):
        seen = []
        engine = EvolutionEngine(
            10, 8, 0.05, count_ones, seed=1,
            progress_callback=lambda generation, stats: seen.append((generation, stats.best_fitness)),
        )
        engine.run(3)

        assert engine.generation == 3
        assert engine.history.total_generations == 3
        assert [generation for generation, _ in seen] == [0, 1, 2]
        assert [fitness for _, fitness in seen] == engine.history.best_fitness_curve()
        assert len(engine.history.to_records()) == 3

    def test_best_returns_member_genome(self):
        engine = EvolutionEngine(10, 8, 0.05, count_ones, seed=2)
        engine.step()

        best = engine.best()
        assert isinstance(best, GeneBuffer)
        assert any(best is c.genome for c in engine.population)
        assert engine.best_candidate().genome is best

    def test_run_logs_start_and_end(self, caplog):
        engine = EvolutionEngine(10, 8, 0.05, count_ones, seed=3)

        with caplog.at_level("INFO", logger="bitgenes.evolution.engine"):
            engine.run(2)

        assert "Evolving 10 candidates of 8 bits for 2 generations" in caplog.text
        assert "Finished at generation 2" in caplog.text

    def test_numpy_integer_options(self):
        engine = EvolutionEngine(np.int64(10), np.int64(16), np.float64(0.1), count_ones, seed=0)
        engine.run(2)

        assert engine.population.size == 10
        restored = json.loads(engine.config.to_json())
        assert restored["population_size"] == 10
        assert restored["genome_bits"] == 16
        assert restored["mutation_rate"] == 0.1

    @pytest.mark.parametrize("rate", [True, "0.5", b"0.5"])
    def test_non_numeric_mutation_rate(self, rate):
        with pytest.raises(InvalidMutationRateError):
            EvolutionEngine(10, 8, rate, count_ones)

    def test_history_keeps_only_latest_genome(self):
        genome_bytes = 4096
        engine = EvolutionEngine(4, genome_bytes * 8, 0.01, count_ones, seed=0)
        engine.run(50)

        retained = [s.best_genome for s in engine.history.generations if s.best_genome is not None]

        assert len(engine.history) == 50
        assert sum(genome.byte_count for genome in retained) == genome_bytes
        assert engine.history.latest.best_genome is retained[0]
        assert len(engine.history.best_fitness_curve()) == 50

    def test_callback_stats_keep_their_genome(self):
        seen = []
        engine = EvolutionEngine(
            4, 8, 0.05, count_ones, seed=0,
            progress_callback=lambda generation, stats: seen.append(stats),
        )
        engine.run(3)

        assert all(stats.best_genome is not None for stats in seen)

    def test_invalid_construction(self):
        with pytest.raises(InvalidPopulationSizeError):
            EvolutionEngine(1, 8, 0.05, count_ones)
        with pytest.raises(InvalidMutationRateError):
            EvolutionEngine(10, 8, 2.0, count_ones)
        with pytest.raises(InvalidSizeError):
            EvolutionEngine(10, -8, 0.05, count_ones)


# =============================================================================
# Configuration
# =============================================================================

class TestEvolutionConfig:

    def test_defaults(self):
        config = EvolutionConfig()

        assert config.population_size == 100
        assert config.genome_bits is None
        assert config.mutation_rate == 0.05
        assert config.ordering is FitnessOrdering.MINIMIZE
        assert config.selection_method is SelectionMethod.TRUNCATION
        assert config.crossover_method is CrossoverMethod.UNIFORM
        assert config.random_init is True
        assert config.guard_errors is True

    def test_validate_requires_genome_bits(self):
        with pytest.raises(MissingParameterError):
            EvolutionConfig().validate()

    def test_validate_rejects_small_population(self):
        with pytest.raises(InvalidPopulationSizeError):
            EvolutionConfig(population_size=3, genome_bits=8).validate()

    def test_json_round_trip(self):
        config = EvolutionConfig(
            population_size=40,
            genome_bits=24,
            mutation_rate=0.2,
            ordering=FitnessOrdering.MAXIMIZE,
            seed=11,
            random_init=False,
        )

        restored = EvolutionConfig.from_json(config.to_json())

        assert restored == config
        assert json.loads(config.to_json())["ordering"] == "maximize"

    def test_from_dict_fills_defaults(self):
        config = EvolutionConfig.from_dict({"genome_bits": 8})

        assert config.genome_bits == 8
        assert config.population_size == 100
        assert config.ordering is FitnessOrdering.MINIMIZE

    def test_unknown_enum_value(self):
        with pytest.raises(ValueError):
            EvolutionConfig.from_dict({"genome_bits": 8, "ordering": "sideways"})

    def test_malformed_json(self):
        with pytest.raises(ValueError):
            EvolutionConfig.from_json("{not json")

    def test_engine_from_config(self):
        config = EvolutionConfig(population_size=12, genome_bits=16, seed=5)
        engine = EvolutionEngine.from_config(config, count_ones)

        assert engine.population.size == 12
        assert engine.population.genome_bits == 16
        assert engine.config == config


# =============================================================================
# Builder
# =============================================================================

class TestEngineBuilder:

    def test_defaults(self):
        engine = EngineBuilder().genome_bits(8).scorer(count_ones).build()

        assert engine.population.size == 100
        assert engine.population.mutation_rate == 0.05
        assert engine.population.ordering is FitnessOrdering.MINIMIZE

    def test_missing_genome_bits(self):
        with pytest.raises(MissingParameterError) as exc_info:
            EngineBuilder().scorer(count_ones).build()
        assert exc_info.value.parameter == "genome_bits"

    def test_missing_scorer(self):
        with pytest.raises(MissingParameterError) as exc_info:
            EngineBuilder().genome_bits(8).build()
        assert exc_info.value.parameter == "scorer"

    def test_all_options(self):
        seen = []
        engine = (
            EngineBuilder()
            .size(10)
            .genome_bits(12)
            .mutation_rate(0.1)
            .scorer(count_ones)
            .ordering("maximize")
            .rng(np.random.default_rng(0))
            .selection(SelectionMethod.TRUNCATION)
            .crossover(CrossoverMethod.UNIFORM)
            .random_init(False)
            .guard_errors(False)
            .progress_callback(lambda generation, stats: seen.append(generation))
            .build()
        )

        assert engine.population.size == 10
        assert engine.population.genome_bits == 12
        assert engine.population.ordering is FitnessOrdering.MAXIMIZE
        assert all(c.genome.count_ones() == 0 for c in engine.population)
        assert engine.config.guard_errors is False

        engine.step()
        assert seen == [0]

    def test_invalid_option_reported_at_build(self):
        builder = EngineBuilder().size(2).genome_bits(8).scorer(count_ones)
        with pytest.raises(InvalidPopulationSizeError):
            builder.build()
