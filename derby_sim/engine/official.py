"""
Officiating crew for roller derby bouts.

Referees and non-skating officials are generated once per bout and only
appear in the exported play-by-play.
"""

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import List

from .random_source import RandomSource
from .skater import random_name


class OfficialRole(Enum):
    """Crew roles, skating and non-skating."""
    PENALTY_LINEUP_TRACKER = "PLT"
    PENALTY_WRANGLER = "PW"
    INSIDE_WHITEBOARD = "IWB"
    JAM_TIMER = "JT"
    SCOREKEEPER = "SK"
    SCOREBOARD_OPERATOR = "SO"
    PENALTY_BOX_MANAGER = "PBM"
    PENALTY_BOX_TIMER = "PBT"
    INSIDE_PACK_REFEREE = "IPR"
    OUTSIDE_PACK_REFEREE = "OPR"
    JAMMER_REFEREE = "JR"


# (role, is_head) in crew order. The first tracker is head NSO, the first
# inside pack referee is head referee.
CREW_ROLES = [
    (OfficialRole.PENALTY_LINEUP_TRACKER, True),
    (OfficialRole.PENALTY_LINEUP_TRACKER, False),
    (OfficialRole.PENALTY_WRANGLER, False),
    (OfficialRole.INSIDE_WHITEBOARD, False),
    (OfficialRole.JAM_TIMER, False),
    (OfficialRole.SCOREKEEPER, False),
    (OfficialRole.SCOREKEEPER, False),
    (OfficialRole.SCOREBOARD_OPERATOR, False),
    (OfficialRole.PENALTY_BOX_MANAGER, False),
    (OfficialRole.PENALTY_BOX_TIMER, False),
    (OfficialRole.PENALTY_BOX_TIMER, False),
    (OfficialRole.INSIDE_PACK_REFEREE, True),
    (OfficialRole.INSIDE_PACK_REFEREE, False),
    (OfficialRole.OUTSIDE_PACK_REFEREE, False),
    (OfficialRole.OUTSIDE_PACK_REFEREE, False),
    (OfficialRole.OUTSIDE_PACK_REFEREE, False),
    (OfficialRole.JAMMER_REFEREE, False),
    (OfficialRole.JAMMER_REFEREE, False),
]


@dataclass(frozen=True)
class Official:
    id: uuid.UUID
    name: str
    is_head: bool
    role: OfficialRole

    @property
    def is_referee(self) -> bool:
        return self.role in (
            OfficialRole.INSIDE_PACK_REFEREE,
            OfficialRole.OUTSIDE_PACK_REFEREE,
            OfficialRole.JAMMER_REFEREE,
        )

    @classmethod
    def random(cls, random_source: RandomSource, role: OfficialRole, is_head: bool) -> 'Official':
        return cls(
            id=random_source.uuid(),
            name=random_name(random_source),
            is_head=is_head,
            role=role,
        )

    @classmethod
    def random_crew(cls, random_source: RandomSource) -> List['Official']:
        """Generate a full 18-official crew in standard role order."""
        return [cls.random(random_source, role, is_head) for role, is_head in CREW_ROLES]

