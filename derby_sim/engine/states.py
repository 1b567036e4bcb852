"""
Match states for roller derby simulation.

Exactly one state is active at any tick. States are plain value records;
the engines produce a new one every tick.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

from .activity import JamSkater


class LeadJammerTeam(Enum):
    NONE = "none"
    HOME = "home"
    AWAY = "away"

    @classmethod
    def for_side(cls, side: str) -> 'LeadJammerTeam':
        return cls(side)


class TimeoutType(Enum):
    OFFICIAL = "official"
    TEAM = "team"
    REVIEW = "review"


@dataclass(frozen=True)
class PreGame:
    pass


@dataclass(frozen=True)
class JamInProgress:
    start_tick: int
    home_on_track: List[JamSkater] = field(default_factory=list)
    away_on_track: List[JamSkater] = field(default_factory=list)
    lead_jammer_team: LeadJammerTeam = LeadJammerTeam.NONE

    @property
    def on_track(self) -> List[JamSkater]:
        return self.home_on_track + self.away_on_track


@dataclass(frozen=True)
class LineupInProgress:
    start_tick: int


@dataclass(frozen=True)
class TimeoutInProgress:
    """Modeled for completeness; the engine never calls a timeout."""
    start_tick: int
    timeout_type: TimeoutType


@dataclass(frozen=True)
class IntervalInProgress:
    start_tick: int


@dataclass(frozen=True)
class PostGame:
    start_tick: int


MatchState = Union[PreGame, JamInProgress, LineupInProgress, TimeoutInProgress,
                   IntervalInProgress, PostGame]


def state_name(state: MatchState) -> str:
    return type(state).__name__
