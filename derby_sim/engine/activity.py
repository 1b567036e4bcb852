"""
Skater activity engine for roller derby simulation.

Advances one on-track skater by one tick: skating the loop, travelling to
the penalty box, sitting, returning, or carrying a sit over a jam boundary.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from .skater import CUT_PENALTY_CODE, Position, Skater, penalty_code_for
from .track import TrackZones

if TYPE_CHECKING:
    from .match import Match

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OnTrack:
    """Skating the track loop."""
    location: float  # 0-100 along the loop


@dataclass(frozen=True)
class SkatingToBox:
    """Heading to the box to serve a penalty."""
    distance_remaining: float
    penalties_to_sit: int = 1


@dataclass(frozen=True)
class SatInBox:
    """Serving a penalty."""
    start_tick: int
    penalty_count: int = 1


@dataclass(frozen=True)
class ReturningFromBox:
    """Released and re-entering play."""
    distance_remaining: float


@dataclass(frozen=True)
class HeldInBox:
    """Jam ended mid-penalty; elapsed sit time carries into the next jam."""
    ticks_expired: int
    penalty_count: int = 1


Activity = Union[OnTrack, SkatingToBox, SatInBox, ReturningFromBox, HeldInBox]

# Activities that keep a skater in the penalty box
BOX_ACTIVITIES = (SkatingToBox, SatInBox, HeldInBox)


@dataclass
class JamSkater:
    """
    A skater fielded for one jam.

    Recreated every jam. Skaters still serving when a jam ends survive only
    as snapshots in the penalty box, matched back up by ``id``.
    """
    details: Skater
    side: str  # "home" or "away"
    position: Position
    activity: Activity
    can_receive_lead: bool = False
    is_lead: bool = False

    @property
    def id(self) -> uuid.UUID:
        return self.details.id

    @property
    def name(self) -> str:
        return self.details.name

    @property
    def is_jammer(self) -> bool:
        return self.position == Position.JAMMER

    @property
    def is_in_box(self) -> bool:
        return isinstance(self.activity, BOX_ACTIVITIES)

    @property
    def zone(self) -> str:
        if isinstance(self.activity, OnTrack):
            return TrackZones.get_zone(self.activity.location)
        return "box"


class SkaterActivityEngine:
    """
    Per-skater state machine.

    Every random draw goes through the match's stream, in a fixed order, so
    a seed and a tick sequence fully determine each skater's path.

    Transitions:
    - OnTrack -> SkatingToBox (penalty)
    - SkatingToBox -> SatInBox (arrival)
    - SatInBox -> ReturningFromBox (sit complete, leaves the box)
    - ReturningFromBox -> OnTrack, or SkatingToBox on a cut
    - HeldInBox -> SatInBox (first tick of the next jam)
    """

    def tick(self, match: 'Match', skater: JamSkater) -> None:
        """
        Advance one skater by one tick.

        Args:
            match: Match context (stream, clocks, box, play-by-play)
            skater: Skater to advance, updated in place
        """
        activity = skater.activity

        if isinstance(activity, OnTrack):
            skater.activity = self._tick_on_track(match, skater, activity)
        elif isinstance(activity, SkatingToBox):
            skater.activity = self._tick_skating_to_box(match, skater, activity)
        elif isinstance(activity, SatInBox):
            skater.activity = self._tick_sat_in_box(match, skater, activity)
        elif isinstance(activity, ReturningFromBox):
            skater.activity = self._tick_returning_from_box(match, skater, activity)
        elif isinstance(activity, HeldInBox):
            skater.activity = self._tick_held_in_box(match, activity)
        else:
            raise TypeError(f"Unknown skater activity: {activity!r}")

        match.penalty_box.refresh(skater)

    def give_penalty(self, match: 'Match', skater: JamSkater,
                     code: Optional[str] = None) -> SkatingToBox:
        """
        Send a skater to the box.

        Clears lead and lead eligibility, records the penalty against the
        skater's roster record and adds the skater to the penalty box.

        Args:
            match: Match context
            skater: Penalized skater
            code: Penalty code (derived from skater and tick if None)

        Returns:
            The SkatingToBox activity the skater moves into
        """
        logger.info("Penalty for %s (%s)", skater.name, skater.side)

        if skater.is_lead:
            # Lead jammer loses lead on a penalty
            match.clear_lead(skater)
        skater.is_lead = False
        skater.can_receive_lead = False
        match.penalty_box.add(skater)

        config = match.config
        distance = match.random.uniform(config.box_distance_min, config.box_distance_max)
        if code is None:
            code = penalty_code_for(skater.id, match.current_tick)
        match.record_penalty(skater, code)

        return SkatingToBox(distance_remaining=distance, penalties_to_sit=1)

    def _tick_on_track(self, match: 'Match', skater: JamSkater, on_track: OnTrack) -> Activity:
        if match.random.chance(skater.details.penalty_chance):
            return self.give_penalty(match, skater)

        if not skater.is_jammer:
            # Blockers and pivots hold the pack, only penalties change their state
            if match.random.chance(skater.details.penalty_chance):
                return self.give_penalty(match, skater)
            return on_track

        if on_track.location < match.config.pack_exit:
            return self._skate_through_pack(match, skater, on_track)
        return self._skate_open_track(match, skater, on_track)

    def _skate_through_pack(self, match: 'Match', skater: JamSkater, on_track: OnTrack) -> Activity:
        config = match.config
        step = match.random.uniform(-config.pack_walk_backoff, skater.details.base_speed / 4.0)
        new_location = on_track.location + step

        if new_location >= config.pack_exit:
            self._exit_pack(match, skater)

        if match.random.chance(skater.details.penalty_chance):
            return self.give_penalty(match, skater)
        return OnTrack(location=new_location)

    def _exit_pack(self, match: 'Match', skater: JamSkater) -> None:
        """Score the completed trip and settle lead for a jammer clearing the pack."""
        config = match.config
        pass_completion_tick = match.random_current_tick()

        team_jam = match.play_by_play.current_team_jam(skater.side)
        trip = team_jam.current_trip
        # The initial trip never scores
        score = 0 if team_jam.trip_count == 1 else config.pass_score
        match.play_by_play.close_trip(
            skater.side,
            duration=max(0, pass_completion_tick - trip.start_tick),
            score=score,
        )

        if skater.is_lead and match.random.chance(config.exit_pack_call_chance):
            match.call_jam(skater.side)

        if match.lead_is_open and skater.can_receive_lead:
            lead_earned = not match.random.chance(config.exit_pack_no_pass_chance)
            if lead_earned:
                match.award_lead(skater)
            skater.can_receive_lead = False

    def _skate_open_track(self, match: 'Match', skater: JamSkater, on_track: OnTrack) -> Activity:
        new_location = on_track.location + skater.details.base_speed
        if new_location > match.config.track_length:
            # Back of the pack, start the next scoring trip
            new_location = TrackZones.PACK_LINE
            match.play_by_play.open_trip(skater.side, match.random_current_tick())
        return OnTrack(location=new_location)

    def _tick_skating_to_box(self, match: 'Match', skater: JamSkater, to_box: SkatingToBox) -> Activity:
        config = match.config
        distance_covered = skater.details.base_speed + match.random.uniform(
            -config.box_speed_jitter, config.box_speed_jitter)

        if to_box.distance_remaining > distance_covered:
            penalties = to_box.penalties_to_sit
            if penalties == 1 and match.random.chance(config.second_penalty_chance):
                penalties = 2
                match.record_penalty(skater, penalty_code_for(skater.id, match.current_tick))
            return SkatingToBox(
                distance_remaining=to_box.distance_remaining - distance_covered,
                penalties_to_sit=penalties,
            )

        return SatInBox(start_tick=match.random_current_tick(), penalty_count=to_box.penalties_to_sit)

    def _tick_sat_in_box(self, match: 'Match', skater: JamSkater, sat_in_box: SatInBox) -> Activity:
        config = match.config
        elapsed = match.current_tick - sat_in_box.start_tick

        if elapsed >= config.penalty_sit_ms * sat_in_box.penalty_count:
            logger.info("Releasing %s (%s)", skater.name, skater.side)
            match.penalty_box.remove(skater.id)
            return ReturningFromBox(
                distance_remaining=match.random.uniform(config.box_distance_min, config.box_distance_max)
            )
        return sat_in_box

    def _tick_returning_from_box(self, match: 'Match', skater: JamSkater,
                                 returning: ReturningFromBox) -> Activity:
        config = match.config
        distance_covered = skater.details.base_speed + match.random.uniform(
            -config.box_speed_jitter, config.box_speed_jitter)

        if returning.distance_remaining > distance_covered:
            return ReturningFromBox(distance_remaining=returning.distance_remaining - distance_covered)

        if match.random.chance(config.return_cut_penalty_chance):
            return self.give_penalty(match, skater, code=CUT_PENALTY_CODE)
        return OnTrack(location=TrackZones.PACK_LINE)

    def _tick_held_in_box(self, match: 'Match', held_in_box: HeldInBox) -> Activity:
        return SatInBox(
            start_tick=match.current_tick - held_in_box.ticks_expired,
            penalty_count=held_in_box.penalty_count,
        )
