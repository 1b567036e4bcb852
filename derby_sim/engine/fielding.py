"""
Lineup selection for roller derby jams.

Chooses the five skaters each team puts on the track at the start of a jam.
"""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Callable, Dict, List

from .activity import JamSkater, OnTrack
from .skater import Position, RosterSkater
from .team import GameTeam

if TYPE_CHECKING:
    from .match import Match

logger = logging.getLogger(__name__)


# Fit of each favored position for a slot, higher is better
JAMMER_PREFERENCE: Dict[Position, int] = {
    Position.JAMMER: 2,
    Position.BLOCKER: 1,
    Position.PIVOT: 0,
}

PIVOT_PREFERENCE: Dict[Position, int] = {
    Position.PIVOT: 2,
    Position.BLOCKER: 1,
    Position.JAMMER: 0,
}

BLOCKER_PREFERENCE: Dict[Position, int] = {
    Position.BLOCKER: 2,
    Position.PIVOT: 1,
    Position.JAMMER: 0,
}


class RosterFieldingSelector:
    """
    Fairness-biased, position-aware lineup selection.

    Selection order:
    1. Skaters still in the penalty box stay in the lineup
    2. Remaining roster ordered by rest (oldest last jam first)
    3. Jammer, then pivot, then blockers, each picked at random from the
       best ``pick_window`` candidates for the slot
    """

    def field(self, match: 'Match', team: GameTeam, side: str) -> List[JamSkater]:
        """
        Field one team for a new jam.

        Args:
            match: Match context
            team: Team to field
            side: "home" or "away"

        Returns:
            On-track skaters, boxed skaters first
        """
        config = match.config
        on_track = self._seed_from_penalty_box(match, team, side)

        fielded_ids = {s.id for s in on_track}
        available = [s for s in team.roster if s.id not in fielded_ids]
        # Stable sort keeps roster order among equally rested skaters
        available.sort(key=lambda s: s.last_jam_tick)

        if not any(s.position == Position.JAMMER for s in on_track):
            jammer = self._pick(match, available, JAMMER_PREFERENCE)
            on_track.append(self._jam_skater(jammer, side, Position.JAMMER,
                                             config.jammer_start, can_receive_lead=True))
            available.remove(jammer)

        has_pivot = any(s.position == Position.PIVOT for s in on_track)
        if not has_pivot and len(on_track) < config.lineup_size and available:
            pivot = self._pick(match, available, PIVOT_PREFERENCE)
            on_track.append(self._jam_skater(pivot, side, Position.PIVOT, 0.0))
            available.remove(pivot)

        while len(on_track) < config.lineup_size and available:
            blocker = self._pick(match, available, BLOCKER_PREFERENCE)
            on_track.append(self._jam_skater(blocker, side, Position.BLOCKER, 0.0))
            available.remove(blocker)

        logger.debug("%s fielded %s", side, ", ".join(s.name for s in on_track))
        return on_track

    def _seed_from_penalty_box(self, match: 'Match', team: GameTeam, side: str) -> List[JamSkater]:
        seeded = []
        for skater in match.penalty_box.skaters_for_side(side):
            if not team.has_skater(skater.id):
                continue
            if skater.is_jammer:
                # A boxed jammer can still earn lead once released
                skater = replace(skater, can_receive_lead=True, is_lead=False)
            seeded.append(skater)
        return seeded

    def _pick(self, match: 'Match', pool: List[RosterSkater],
              preference: Dict[Position, int]) -> RosterSkater:
        """Pick uniformly among the best candidates for a slot."""
        candidates = sorted(pool, key=self._preference_key(preference))
        window = min(match.config.pick_window, len(candidates))
        return candidates[match.random.integer(0, window)]

    @staticmethod
    def _preference_key(preference: Dict[Position, int]) -> Callable[[RosterSkater], int]:
        return lambda s: -preference[s.details.favored_position]

    @staticmethod
    def _jam_skater(roster_skater: RosterSkater, side: str, position: Position,
                    location: float, can_receive_lead: bool = False) -> JamSkater:
        return JamSkater(
            details=roster_skater.details,
            side=side,
            position=position,
            activity=OnTrack(location=location),
            can_receive_lead=can_receive_lead,
        )
