"""
Command-line interface for DiscreteHMM.

Demo driver that builds, decodes, scores and retrains a small model.
"""

from .main import app, cli_main

__all__ = ["app", "cli_main"]
