"""
Happiness Dashboard Launcher

Streamlit entry point.  Launched by ``python run.py`` or directly:

Usage:
    streamlit run dashboard.py --server.port 8501
"""

import sys
from pathlib import Path

# Ensure the package is importable regardless of the working directory.
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from happiness_dashboard.dashboard.app import main

main()
