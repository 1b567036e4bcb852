"""
Roller derby simulation engine components.

This module contains the core simulation engine including:
- Track geometry and the seeded random stream
- Skaters, teams and the officiating crew
- Per-skater activity state machine and penalty box
- Lineup selection and the jam lifecycle
- Main match simulation engine
"""

from .config import SimulationConfig
from .random_source import RandomSource
from .skater import Position, Skater
from .team import Team, RosterValidationError
from .official import Official, OfficialRole
from .match import Match, MatchEngine

__all__ = ['SimulationConfig', 'RandomSource', 'Position', 'Skater', 'Team', 'RosterValidationError',
           'Official', 'OfficialRole', 'Match', 'MatchEngine']
