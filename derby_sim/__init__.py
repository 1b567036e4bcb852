"""
Roller Derby Bout Simulation Package

A seeded, tick-stepped roller derby bout simulator with play-by-play export.
"""

__version__ = "1.0.0"
__author__ = "Derby Sim Team"

from .engine.match import MatchEngine
from .scripts.run_sim import simulate_bouts

__all__ = ["MatchEngine", "simulate_bouts"]
