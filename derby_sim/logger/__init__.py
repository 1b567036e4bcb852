"""
Play-by-play recording for roller derby simulation.
Provides the bout record tree, PM4Py-compatible event logs and scoreboard export.
"""

from .play_by_play import PlayByPlayLog
from .scoreboard import ScoreboardExporter

__all__ = ['PlayByPlayLog', 'ScoreboardExporter']
