"""Streamlit Application Entry Point for bitgenes

Run with: streamlit run bitgenes/ui/app.py
"""

import logging
import os

import streamlit as st

from bitgenes.ui.evolution_lab import EvolutionLab


def configure_logging() -> None:
    """Route library logs to stderr at the level named by BITGENES_LOG_LEVEL."""
    level = os.environ.get("BITGENES_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def main():
    """Main entry point for the Streamlit application."""
    configure_logging()

    st.set_page_config(
        page_title="bitgenes",
        page_icon="🧬",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    with st.sidebar:
        st.title("🧬 bitgenes")
        st.caption("Genetic optimization over packed bit-string genomes")

    lab = EvolutionLab()
    lab.render()


if __name__ == "__main__":
    main()
