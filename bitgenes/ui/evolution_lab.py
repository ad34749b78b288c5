"""
Evolution Lab UI

Streamlit page for experimenting with the evolution engine:
- target selection (integer guessing, image approximation)
- evolution parameter widgets
- progress display and fitness curve
- best genome preview
"""

from typing import Any, Dict, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from bitgenes.evolution.engine import EvolutionConfig, EvolutionEngine
from bitgenes.evolution.exceptions import EvolutionError
from bitgenes.evolution.generation import EvolutionHistory, GenerationStats
from bitgenes.evolution.models import FitnessOrdering
from bitgenes.targets import ImageTarget, IntegerTarget, smiley


TARGET_NAMES: Dict[str, str] = {
    "integer": "Integer guessing",
    "image": "Image approximation",
}

TARGET_DESCRIPTIONS: Dict[str, str] = {
    "integer": "Evolve an unsigned integer field toward a fixed value; fitness is the absolute difference.",
    "image": "Evolve raw RGBA bytes toward a small smiley; fitness is the summed channel error.",
}


def history_to_frame(history: EvolutionHistory) -> pd.DataFrame:
    """Tabulate an evolution history, one row per generation."""
    columns = ["generation", "best_fitness", "average_fitness", "worst_fitness"]
    return pd.DataFrame(history.to_records(), columns=columns)


def build_fitness_figure(frame: pd.DataFrame) -> go.Figure:
    """Line chart of best, average and worst fitness per generation."""
    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=frame["generation"],
        y=frame["best_fitness"],
        mode="lines+markers",
        name="Best fitness",
        line=dict(color="green", width=2),
    ))

    fig.add_trace(go.Scatter(
        x=frame["generation"],
        y=frame["average_fitness"],
        mode="lines",
        name="Average fitness",
        line=dict(color="orange", width=2),
    ))

    fig.add_trace(go.Scatter(
        x=frame["generation"],
        y=frame["worst_fitness"],
        mode="lines",
        name="Worst fitness",
        line=dict(color="red", width=2, dash="dash"),
    ))

    fig.update_layout(
        title="Fitness per generation",
        xaxis_title="Generation",
        yaxis_title="Fitness",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        height=400,
    )
    return fig


class EvolutionLab:
    """
    Evolution lab

    Streamlit front end for the evolution engine.
    """

    def __init__(self):
        self._init_session_state()

    def _init_session_state(self) -> None:
        if "lab_target" not in st.session_state:
            st.session_state.lab_target = "integer"
        if "lab_config" not in st.session_state:
            st.session_state.lab_config = EvolutionConfig(genome_bits=8)
        if "lab_generations" not in st.session_state:
            st.session_state.lab_generations = 100
        if "lab_history" not in st.session_state:
            st.session_state.lab_history = None
        if "lab_result" not in st.session_state:
            st.session_state.lab_result = None

    def render_target_selector(self) -> str:
        """Render the target picker."""
        st.subheader("🎯 Target")

        options = list(TARGET_NAMES)
        current = options.index(st.session_state.lab_target)

        selected_name = st.selectbox(
            "Scoring function",
            options=[TARGET_NAMES[key] for key in options],
            index=current,
            key="lab_target_select",
        )
        target = options[[TARGET_NAMES[key] for key in options].index(selected_name)]
        st.session_state.lab_target = target

        st.info(f"💡 {TARGET_DESCRIPTIONS[target]}")
        return target

    def render_target_params(self, target: str) -> Dict[str, Any]:
        """Render the target-specific parameters."""
        if target == "integer":
            col1, col2 = st.columns(2)
            with col1:
                # number_input only holds integers up to 2**53
                width = st.selectbox("Field width (bits)", options=[8, 16, 32], index=0, key="lab_width")
            with col2:
                value = st.number_input(
                    "Target value",
                    min_value=0,
                    max_value=2 ** width - 1,
                    value=min(24, 2 ** width - 1),
                    step=1,
                    key="lab_value",
                )
            return {"width": int(width), "value": int(value)}

        size = st.slider("Image size (pixels)", min_value=5, max_value=16, value=8, step=1, key="lab_image_size")
        return {"size": int(size)}

    def render_evolution_params(self, genome_bits: int) -> EvolutionConfig:
        """Render the evolution parameter widgets."""
        st.subheader("⚙️ Evolution parameters")
        config: EvolutionConfig = st.session_state.lab_config

        col1, col2 = st.columns(2)

        with col1:
            population_size = st.slider(
                "Population size",
                min_value=4,
                max_value=1000,
                value=config.population_size,
                step=2,
                key="lab_population",
            )

            generations = st.slider(
                "Generations",
                min_value=1,
                max_value=500,
                value=st.session_state.lab_generations,
                step=1,
                key="lab_generation_count",
            )

        with col2:
            mutation_rate = st.slider(
                "Mutation rate",
                min_value=0.0,
                max_value=0.5,
                value=float(config.mutation_rate),
                step=0.005,
                format="%.3f",
                help="Probability that each child gene flips",
                key="lab_mutation",
            )

            seed = st.number_input(
                "Seed",
                min_value=0,
                value=config.seed if config.seed is not None else 0,
                step=1,
                help="Runs with the same seed and parameters are identical",
                key="lab_seed",
            )

        st.session_state.lab_generations = int(generations)
        config = EvolutionConfig(
            population_size=int(population_size),
            genome_bits=genome_bits,
            mutation_rate=float(mutation_rate),
            ordering=FitnessOrdering.MINIMIZE,
            seed=int(seed),
        )
        st.session_state.lab_config = config
        return config

    def _build_target(self, target: str, params: Dict[str, Any]):
        if target == "integer":
            return IntegerTarget(params["value"], width=params["width"])
        return ImageTarget(smiley(params["size"]))

    def _run_evolution(self, config: EvolutionConfig, scorer, generations: int) -> None:
        progress_bar = st.progress(0.0)
        status_text = st.empty()

        def progress_callback(generation: int, stats: GenerationStats) -> None:
            progress_bar.progress((generation + 1) / generations)
            status_text.text(
                f"Generation {generation + 1}/{generations} - best fitness {stats.best_fitness:.4g}"
            )

        try:
            engine = EvolutionEngine.from_config(config, scorer, progress_callback=progress_callback)
            engine.run(generations)
        except EvolutionError as e:
            st.error(f"❌ {e}")
            return

        best = engine.best_candidate()
        st.session_state.lab_history = engine.history
        st.session_state.lab_result = {"scorer": scorer, "genome": best.genome, "fitness": best.fitness}

        progress_bar.progress(1.0)
        status_text.text("✅ Evolution finished")

    def render_evolution_curve(self) -> None:
        st.subheader("📈 Fitness curve")

        history: Optional[EvolutionHistory] = st.session_state.lab_history
        if not history:
            st.info("💡 Run an evolution to see the fitness curve")
            return

        frame = history_to_frame(history)
        st.plotly_chart(build_fitness_figure(frame), use_container_width=True, key="lab_curve")

        with st.expander("Generation table"):
            st.dataframe(frame, use_container_width=True, hide_index=True)

    def render_best_genome(self) -> None:
        st.subheader("🧬 Best genome")

        result = st.session_state.lab_result
        if result is None:
            st.info("💡 Run an evolution to see the best genome")
            return

        scorer = result["scorer"]
        genome = result["genome"]
        st.metric("Best fitness", f"{result['fitness']:.4g}")

        if isinstance(scorer, IntegerTarget):
            col1, col2 = st.columns(2)
            with col1:
                st.metric("Decoded value", scorer.decode(genome))
            with col2:
                st.metric("Target value", scorer.target)
        else:
            col1, col2 = st.columns(2)
            with col1:
                st.plotly_chart(px.imshow(scorer.pixels, title="Target"), use_container_width=True, key="lab_target_img")
            with col2:
                st.plotly_chart(
                    px.imshow(scorer.decode(genome), title="Best approximation"),
                    use_container_width=True,
                    key="lab_best_img",
                )

        st.code(genome.to_bytes().hex(), language=None)

    def render(self) -> None:
        st.title("🧬 Evolution Lab")

        target = self.render_target_selector()
        params = self.render_target_params(target)
        scorer = self._build_target(target, params)
        config = self.render_evolution_params(scorer.genome_bits)

        if st.button("🚀 Run evolution", type="primary", use_container_width=True, key="lab_run"):
            self._run_evolution(config, scorer, st.session_state.lab_generations)

        st.divider()
        self.render_evolution_curve()
        self.render_best_genome()


def run_evolution_lab():
    """Render the evolution lab page."""
    lab = EvolutionLab()
    lab.render()
