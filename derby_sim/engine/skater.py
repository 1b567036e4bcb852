"""
Skater model with favored positions and roster bookkeeping.

Implements the static skater profile drawn at roster generation and the
persistent per-bout record the match engine mutates.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .names import NAME_ADJECTIVES, NAME_NOUNS
from .random_source import RandomSource


class Position(Enum):
    """
    On-track positions for roller derby.

    Position Responsibilities:
    - Jammer: Scores points by lapping the pack, can earn lead
    - Pivot: Blocker who may take over as jammer, sets pack pace
    - Blocker: Holds the pack, stops the opposing jammer
    """
    JAMMER = "jammer"
    PIVOT = "pivot"
    BLOCKER = "blocker"


@dataclass(frozen=True)
class Skater:
    """Skater profile drawn once at roster generation."""
    id: uuid.UUID
    name: str
    number: str
    favored_position: Position
    base_speed: float      # 15-20: track units per tick outside the pack
    penalty_chance: float  # Per-roll probability of committing a penalty

    @classmethod
    def random(cls, random_source: RandomSource) -> 'Skater':
        """Generate a random skater."""
        return cls(
            id=random_source.uuid(),
            name=random_name(random_source),
            number=cls._random_number(random_source),
            favored_position=cls._random_position(random_source),
            base_speed=random_source.uniform(15.0, 20.0),
            penalty_chance=random_source.uniform(1.0 / 2000.0, 1.0 / 1000.0),
        )

    @staticmethod
    def _random_number(random_source: RandomSource) -> str:
        digit_count = random_source.integer_inclusive(1, 4)
        return "".join(str(random_source.integer_inclusive(0, 9)) for _ in range(digit_count))

    @staticmethod
    def _random_position(random_source: RandomSource) -> Position:
        return [Position.JAMMER, Position.PIVOT, Position.BLOCKER][random_source.integer(0, 3)]


def random_name(random_source: RandomSource) -> str:
    """Draw a derby name from the adjective and noun lists."""
    first_name = random_source.choice(NAME_ADJECTIVES)
    last_name = random_source.choice(NAME_NOUNS)
    return f"{first_name} {last_name}"


# Scoreboard penalty code letters
PENALTY_CODES = ["A", "B", "C", "D", "E", "F", "G", "H", "I", "L", "M", "N", "P", "X"]
CUT_PENALTY_CODE = "X"


def penalty_code_for(skater_id: uuid.UUID, tick: int) -> str:
    """
    Pick the code for a penalty without touching the random stream.

    The code is derived from the skater id and the tick the penalty was
    given on, so a seeded bout always records the same codes.
    """
    codes = [c for c in PENALTY_CODES if c != CUT_PENALTY_CODE]
    return codes[uuid.uuid5(skater_id, str(tick)).int % len(codes)]


@dataclass
class Penalty:
    """A penalty assessed against a skater."""
    code: str
    received_tick: int


@dataclass
class RosterSkater:
    """
    Persistent record of a rostered skater for the whole bout.

    Outlives jams. Holds the penalty history and the tick of the last jam
    the skater was fielded in, which the fielding selector uses to rotate
    rested skaters in first.
    """
    details: Skater
    penalties: List[Penalty] = field(default_factory=list)
    last_jam_tick: int = 0

    @property
    def id(self) -> uuid.UUID:
        return self.details.id

    @property
    def penalty_count(self) -> int:
        return len(self.penalties)

    def add_penalty(self, code: str, tick: int) -> Penalty:
        penalty = Penalty(code=code, received_tick=tick)
        self.penalties.append(penalty)
        return penalty
