"""UI Module for bitgenes

This module provides the Streamlit-based evolution lab.

Usage:
    Run the lab with: streamlit run bitgenes/ui/app.py

    Or programmatically:
        from bitgenes.ui import EvolutionLab, run_evolution_lab
        run_evolution_lab()
"""

from bitgenes.ui.evolution_lab import (
    EvolutionLab,
    build_fitness_figure,
    history_to_frame,
    run_evolution_lab,
)

__all__ = [
    'EvolutionLab',
    'build_fitness_figure',
    'history_to_frame',
    'run_evolution_lab',
]
