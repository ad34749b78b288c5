#!/usr/bin/env python
"""bitgenes evolution lab launcher

Run python run.py to start the Streamlit evolution lab.
"""

import importlib.util
import os
import subprocess
import sys


def check_dependencies():
    """Return the names of required packages that are not installed."""
    required = ['streamlit', 'plotly', 'pandas', 'numpy']
    return [package for package in required if importlib.util.find_spec(package) is None]


def main():
    """Start the bitgenes evolution lab."""
    print("=" * 50)
    print("  bitgenes evolution lab")
    print("=" * 50)
    print()

    missing = check_dependencies()
    if missing:
        print(f"Missing packages: {', '.join(missing)}")
        print("Install them with: pip install -e .")
        sys.exit(1)

    project_dir = os.path.dirname(os.path.abspath(__file__))
    app_path = os.path.join(project_dir, 'bitgenes', 'ui', 'app.py')

    print("Starting Streamlit server...")
    print("If no browser opens, visit: http://localhost:8501")
    print()
    print("Press Ctrl+C to stop the server")
    print("-" * 50)

    try:
        subprocess.run([
            sys.executable, '-m', 'streamlit', 'run',
            app_path,
            '--server.port', '8501',
            '--browser.gatherUsageStats', 'false'
        ], cwd=project_dir)
    except KeyboardInterrupt:
        print("\nServer stopped")


if __name__ == '__main__':
    main()
