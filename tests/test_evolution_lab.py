"""
Tests for the evolution lab chart helpers.
"""

from bitgenes.evolution.engine import EvolutionEngine
from bitgenes.evolution.generation import EvolutionHistory
from bitgenes.targets import IntegerTarget
from bitgenes.ui.evolution_lab import build_fitness_figure, history_to_frame


class TestHistoryToFrame:

    def test_empty_history(self):
        frame = history_to_frame(EvolutionHistory())

        assert frame.empty
        assert list(frame.columns) == ["generation", "best_fitness", "average_fitness", "worst_fitness"]

    def test_one_row_per_generation(self):
        engine = EvolutionEngine(10, 8, 0.05, IntegerTarget(24), seed=0)
        engine.run(3)

        frame = history_to_frame(engine.history)

        assert frame["generation"].tolist() == [0, 1, 2]
        assert (frame["best_fitness"] <= frame["average_fitness"]).all()
        assert (frame["average_fitness"] <= frame["worst_fitness"]).all()


class TestFitnessFigure:

    def test_three_traces(self):
        engine = EvolutionEngine(10, 8, 0.05, IntegerTarget(24), seed=0)
        engine.run(2)

        fig = build_fitness_figure(history_to_frame(engine.history))

        assert [trace.name for trace in fig.data] == ["Best fitness", "Average fitness", "Worst fitness"]
