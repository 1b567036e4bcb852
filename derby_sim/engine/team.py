"""
Team model with roster generation and per-bout bookkeeping.

Implements the randomized team builder and the game-scoped team record the
match engine fields lineups from.
"""

import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .names import COLORS, PLACE_NAMES
from .random_source import RandomSource
from .skater import RosterSkater, Skater


class RosterValidationError(ValueError):
    """Raised when a roster cannot field a legal lineup."""


@dataclass
class Team:
    """
    Roller derby team as produced by the roster generator.

    Holds:
    - Team identity, name and jersey color
    - 8-15 skaters sorted by jersey number
    """
    id: uuid.UUID
    name: str
    color: str
    roster: List[Skater]

    MIN_ROSTER = 8
    MAX_ROSTER = 15

    @classmethod
    def random(cls, random_source: RandomSource) -> 'Team':
        """Generate a random team with a full roster."""
        team_id = random_source.uuid()
        name = random_source.choice(PLACE_NAMES) + " Roller Derby"
        roster = cls._random_roster(random_source)
        color = random_source.choice(COLORS)
        return cls(id=team_id, name=name, color=color, roster=roster)

    @classmethod
    def _random_roster(cls, random_source: RandomSource) -> List[Skater]:
        roster_size = random_source.integer_inclusive(cls.MIN_ROSTER, cls.MAX_ROSTER)
        roster: List[Skater] = []

        while len(roster) < roster_size:
            skater = Skater.random(random_source)
            # Jersey numbers are unique within a team
            if not any(s.number == skater.number for s in roster):
                roster.append(skater)

        roster.sort(key=lambda s: s.number)
        return roster


@dataclass
class GameTeam:
    """
    Team state for a single bout.

    Tracks timeouts and official reviews alongside one persistent
    RosterSkater per rostered skater.
    """
    details: Team
    roster: List[RosterSkater]
    timeouts_remaining: int = 3
    has_official_review: bool = True
    official_review_retained: bool = False
    _index: Dict[uuid.UUID, RosterSkater] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._index = {s.id: s for s in self.roster}

    @classmethod
    def from_team(cls, team: Team) -> 'GameTeam':
        return cls(details=team, roster=[RosterSkater(details=s) for s in team.roster])

    @property
    def id(self) -> uuid.UUID:
        return self.details.id

    @property
    def name(self) -> str:
        return self.details.name

    def get_skater(self, skater_id: uuid.UUID) -> Optional[RosterSkater]:
        return self._index.get(skater_id)

    def has_skater(self, skater_id: uuid.UUID) -> bool:
        return skater_id in self._index

    def get_penalty_count(self) -> int:
        return sum(s.penalty_count for s in self.roster)


def validate_roster(team: GameTeam, lineup_size: int = 5) -> None:
    """
    Verify a team can field a legal lineup every jam.

    Rules:
    1. At least ``lineup_size`` skaters
    2. No skater listed twice
    3. No duplicate jersey numbers

    Raises:
        RosterValidationError: If any rule is broken
    """
    skater_ids = [s.id for s in team.roster]
    if len(skater_ids) < lineup_size:
        raise RosterValidationError(
            f"{team.name} has {len(skater_ids)} skaters, needs at least {lineup_size}"
        )
    if len(set(skater_ids)) != len(skater_ids):
        raise RosterValidationError(f"{team.name} lists a skater more than once")

    numbers = [s.details.number for s in team.roster]
    if len(set(numbers)) != len(numbers):
        raise RosterValidationError(f"{team.name} has duplicate jersey numbers")
