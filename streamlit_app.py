"""Streamlit Cloud Entry Point for bitgenes

Streamlit Cloud automatically looks for streamlit_app.py in the repository root.
"""

from bitgenes.ui.app import main

if __name__ == "__main__":
    main()
