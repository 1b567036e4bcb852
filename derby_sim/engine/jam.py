"""
Jam lifecycle for roller derby simulation.

Starts a jam, ticks every fielded skater, detects the end of the jam and
carries penalty box state across the jam boundary.
"""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, List, Optional

from ..logger.play_by_play import SIDES, FieldingSkater, TeamJamFielding
from .activity import JamSkater, SkaterActivityEngine
from .fielding import RosterFieldingSelector
from .skater import Position
from .states import IntervalInProgress, JamInProgress, LineupInProgress, MatchState

if TYPE_CHECKING:
    from .match import Match

logger = logging.getLogger(__name__)


def build_fielding(skaters: List[JamSkater]) -> TeamJamFielding:
    """
    Snapshot a fielded lineup for the play-by-play.

    Raises:
        ValueError: If the lineup has no jammer or too few blockers
    """
    def entry(skater: JamSkater) -> FieldingSkater:
        return FieldingSkater(skater_id=skater.id, number=skater.details.number, name=skater.name)

    jammers = [s for s in skaters if s.position == Position.JAMMER]
    pivots = [s for s in skaters if s.position == Position.PIVOT]
    blockers = [s for s in skaters if s.position == Position.BLOCKER]

    if not jammers:
        raise ValueError("Lineup has no jammer")
    needed_blockers = 3 if pivots else 4
    if len(blockers) < needed_blockers:
        raise ValueError(f"Lineup has {len(blockers)} blockers, needs {needed_blockers}")

    return TeamJamFielding(
        jammer=entry(jammers[0]),
        pivot=entry(pivots[0] if pivots else blockers[3]),
        blocker1=entry(blockers[0]),
        blocker2=entry(blockers[1]),
        blocker3=entry(blockers[2]),
        has_pivot=bool(pivots),
    )


class JamEngine:
    """
    Drives a single jam from whistle to whistle.

    A jam ends when:
    1. The jam clock runs out (not called)
    2. The lead jammer calls it off on a pack exit
    """

    def __init__(self,
                 activity_engine: Optional[SkaterActivityEngine] = None,
                 selector: Optional[RosterFieldingSelector] = None):
        self.activity_engine = activity_engine or SkaterActivityEngine()
        self.selector = selector or RosterFieldingSelector()

    def start_jam(self, match: 'Match') -> JamInProgress:
        """
        Start a jam, opening a new period first if the period clock is unset.

        Args:
            match: Match context

        Returns:
            The new JamInProgress state
        """
        config = match.config
        jam_start_tick = match.random_current_tick()

        if match.period_clock == 0:
            match.play_by_play.open_period(jam_start_tick)
            match.period_clock = config.period_duration_ms

        home_skaters = self.selector.field(match, match.home_team, "home")
        away_skaters = self.selector.field(match, match.away_team, "away")

        if config.track_last_played:
            match.mark_played(home_skaters + away_skaters, jam_start_tick)

        jam_record = match.play_by_play.open_jam(
            jam_start_tick, build_fielding(home_skaters), build_fielding(away_skaters))
        for side in SIDES:
            match.play_by_play.open_trip(side, jam_start_tick)

        match.reset_jam_flags()
        logger.info("Jam %d started", jam_record.number)

        return JamInProgress(
            start_tick=jam_start_tick,
            home_on_track=home_skaters,
            away_on_track=away_skaters,
        )

    def tick_jam(self, match: 'Match', jam: JamInProgress) -> MatchState:
        """Advance a running jam by one tick."""
        config = match.config
        match.period_clock = max(0, match.period_clock - config.tick_ms)

        if match.current_tick - jam.start_tick >= config.jam_duration_ms:
            logger.info("Jam expired")
            return self.end_jam(match, jam, jam.start_tick + config.jam_duration_ms, was_called=False)

        home_skaters = [replace(s) for s in jam.home_on_track]
        for skater in home_skaters:
            self.activity_engine.tick(match, skater)

        away_skaters = [replace(s) for s in jam.away_on_track]
        for skater in away_skaters:
            self.activity_engine.tick(match, skater)

        ticked = JamInProgress(
            start_tick=jam.start_tick,
            home_on_track=home_skaters,
            away_on_track=away_skaters,
            lead_jammer_team=match.lead_jammer_team,
        )

        if match.jam_called:
            logger.info("Jam called")
            return self.end_jam(match, ticked, match.random_current_tick(), was_called=True)
        return ticked

    def end_jam(self, match: 'Match', jam: JamInProgress, jam_end_tick: int,
                was_called: bool) -> MatchState:
        """
        Close out a jam.

        Finalizes both teams' open trips, holds boxed skaters for the next
        jam and closes the period if the period clock has run out.

        Args:
            match: Match context
            jam: Final state of the jam
            jam_end_tick: Tick the jam ended on
            was_called: True if the lead jammer called the jam

        Returns:
            LineupInProgress, or IntervalInProgress when the period is over
        """
        play_by_play = match.play_by_play
        play_by_play.close_jam(jam_end_tick)

        for side in SIDES:
            self._finish_trip(match, side, jam_end_tick)

        match.penalty_box.hold_for_next_jam(jam.on_track, jam_end_tick)
        logger.debug("Jam ended at %d (called=%s)", jam_end_tick, was_called)

        if match.period_clock == 0:
            period = play_by_play.current_period
            play_by_play.close_period(jam_end_tick - period.start_tick)
            logger.info("Period %d ended", period.number)
            return IntervalInProgress(start_tick=jam_end_tick)
        return LineupInProgress(start_tick=jam_end_tick)

    def _finish_trip(self, match: 'Match', side: str, jam_end_tick: int) -> None:
        team_jam = match.play_by_play.current_team_jam(side)
        trip = team_jam.current_trip

        duration = jam_end_tick - trip.start_tick if trip.start_tick < jam_end_tick else 0
        if team_jam.trip_count > 1:
            score = match.random.integer_inclusive(0, match.config.max_trip_score)
        else:
            score = 0

        match.play_by_play.close_trip(side, duration=duration, score=score)
