"""Run the KinGraph editor UI."""

import sys


# Set path and run
sys.path.insert(0, ".")

from src.ui.app import run_app

if __name__ in {"__main__", "__mp_main__"}:
    run_app()
