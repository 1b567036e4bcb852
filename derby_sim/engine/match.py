"""
Main match engine for roller derby simulation.

Orchestrates the tick-synchronous bout: pre-game, jams, lineups and the
period interval, with play-by-play recording throughout.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..logger.play_by_play import SIDES, PlayByPlayLog
from ..logger.scoreboard import ScoreboardExporter
from .activity import JamSkater
from .config import SimulationConfig
from .jam import JamEngine
from .official import Official
from .penalty_box import PenaltyBox
from .random_source import RandomSource
from .states import (IntervalInProgress, JamInProgress, LeadJammerTeam, LineupInProgress,
                     MatchState, PostGame, PreGame, TimeoutInProgress, state_name)
from .team import GameTeam, Team, validate_roster

logger = logging.getLogger(__name__)


@dataclass
class Match:
    """
    Mutable context for one bout.

    Owns the rosters, the random stream, the clocks, the persistent penalty
    box and the play-by-play. Threaded explicitly through every engine call.
    """
    home_team: GameTeam
    away_team: GameTeam
    officials: List[Official]
    random: RandomSource
    play_by_play: PlayByPlayLog
    config: SimulationConfig = field(default_factory=SimulationConfig)
    state: MatchState = field(default_factory=PreGame)
    current_tick: int = 0
    period_clock: int = 0
    penalty_box: PenaltyBox = field(default_factory=PenaltyBox)

    # Jam-scoped flags
    lead_is_open: bool = False
    jam_called: bool = False
    lead_jammer_team: LeadJammerTeam = LeadJammerTeam.NONE

    def team(self, side: str) -> GameTeam:
        if side == "home":
            return self.home_team
        if side == "away":
            return self.away_team
        raise ValueError(f"Unknown side: {side!r}")

    def random_current_tick(self) -> int:
        """A tick somewhere within the second that just elapsed."""
        return self.current_tick - self.random.integer(0, self.config.tick_ms)

    def reset_jam_flags(self) -> None:
        self.lead_is_open = True
        self.jam_called = False
        self.lead_jammer_team = LeadJammerTeam.NONE

    def award_lead(self, skater: JamSkater) -> None:
        logger.info("Lead jammer: %s (%s)", skater.name, skater.side)
        skater.is_lead = True
        self.lead_is_open = False
        self.lead_jammer_team = LeadJammerTeam.for_side(skater.side)
        self.play_by_play.set_lead(skater.side, True)

    def clear_lead(self, skater: JamSkater) -> None:
        logger.info("Lead lost: %s (%s)", skater.name, skater.side)
        skater.is_lead = False
        self.lead_jammer_team = LeadJammerTeam.NONE
        self.play_by_play.set_lead(skater.side, False)

    def call_jam(self, side: str) -> None:
        self.jam_called = True
        self.play_by_play.set_called_off(side, True)

    def record_penalty(self, skater: JamSkater, code: str) -> None:
        roster_skater = self.team(skater.side).get_skater(skater.id)
        if roster_skater is not None:
            roster_skater.add_penalty(code, self.current_tick)

    def mark_played(self, skaters: List[JamSkater], tick: int) -> None:
        for skater in skaters:
            roster_skater = self.team(skater.side).get_skater(skater.id)
            if roster_skater is not None:
                roster_skater.last_jam_tick = tick


class MatchEngine:
    """
    Tick-stepped roller derby bout simulation engine.

    Implements:
    - One tick per simulated second
    - Top-level state machine (pre-game, jam, lineup, interval, post-game)
    - Jam lifecycle and lineup selection via JamEngine
    - Play-by-play recording and export
    """

    def __init__(self,
                 home_team: Team,
                 away_team: Team,
                 officials: List[Official],
                 random_source: RandomSource,
                 config: Optional[SimulationConfig] = None,
                 jam_engine: Optional[JamEngine] = None,
                 bout_start: Optional[datetime] = None):
        """
        Initialize match engine with two teams and a crew.

        Args:
            home_team: Home team
            away_team: Away team
            officials: Officiating crew
            random_source: Random stream for the whole bout
            config: Simulation configuration (defaults if None)
            jam_engine: Jam engine (default if None)
            bout_start: Wall-clock time of tick 0 for exported logs

        Raises:
            RosterValidationError: If either team cannot field a lineup
        """
        config = config or SimulationConfig()

        home = GameTeam.from_team(home_team)
        away = GameTeam.from_team(away_team)
        for team in (home, away):
            validate_roster(team, config.lineup_size)

        play_by_play = PlayByPlayLog(random_source.uuid(), bout_start=bout_start)
        for official in officials:
            play_by_play.add_official(official)

        self.match = Match(
            home_team=home,
            away_team=away,
            officials=officials,
            random=random_source,
            play_by_play=play_by_play,
            config=config,
        )
        self.jam_engine = jam_engine or JamEngine()
        self.transitions: List[Tuple[int, str, str]] = []

    @classmethod
    def random(cls, random_seed: Optional[int] = None,
               config: Optional[SimulationConfig] = None, **kwargs) -> 'MatchEngine':
        """
        Build a bout with generated teams and crew.

        Args:
            random_seed: Random seed for reproducibility
            config: Simulation configuration
        """
        random_source = RandomSource(random_seed)
        home_team = Team.random(random_source)
        away_team = Team.random(random_source)
        officials = Official.random_crew(random_source)
        return cls(home_team, away_team, officials, random_source, config=config, **kwargs)

    @property
    def state(self) -> MatchState:
        return self.match.state

    @property
    def play_by_play(self) -> PlayByPlayLog:
        return self.match.play_by_play

    @property
    def is_finished(self) -> bool:
        return isinstance(self.match.state, PostGame)

    def tick(self) -> MatchState:
        """Advance the bout by one tick."""
        match = self.match
        match.current_tick += match.config.tick_ms
        previous = match.state

        if isinstance(previous, PreGame):
            next_state = self.jam_engine.start_jam(match)
        elif isinstance(previous, JamInProgress):
            next_state = self.jam_engine.tick_jam(match, previous)
        elif isinstance(previous, LineupInProgress):
            next_state = self._tick_lineup(previous)
        elif isinstance(previous, (TimeoutInProgress, IntervalInProgress)):
            # No resumption after an interval or timeout; the bout ends here
            next_state = PostGame(start_tick=match.current_tick)
        elif isinstance(previous, PostGame):
            next_state = previous
        else:
            raise TypeError(f"Unknown match state: {previous!r}")

        if type(next_state) is not type(previous):
            self.transitions.append((match.current_tick, state_name(previous), state_name(next_state)))
        match.state = next_state
        return next_state

    def _tick_lineup(self, lineup: LineupInProgress) -> MatchState:
        match = self.match
        config = match.config
        match.period_clock = max(0, match.period_clock - config.tick_ms)

        if match.period_clock == 0:
            interval_start = match.random_current_tick()
            period = self.play_by_play.current_period
            self.play_by_play.close_period(interval_start - period.start_tick)
            logger.info("Period %d ended", period.number)
            return IntervalInProgress(start_tick=interval_start)
        if match.current_tick - lineup.start_tick >= config.lineup_duration_ms:
            return self.jam_engine.start_jam(match)
        return lineup

    def run(self) -> None:
        """Tick until post-game."""
        while not self.is_finished:
            self.tick()

    def simulate_match(self) -> Dict:
        """
        Simulate a complete bout.

        Returns:
            Dict containing bout result and statistics
        """
        match = self.match
        logger.info("Starting bout: %s vs %s", match.home_team.name, match.away_team.name)

        self.run()

        logger.info(
            "Final: %s %d-%d %s",
            match.home_team.name, self.play_by_play.get_score("home"),
            self.play_by_play.get_score("away"), match.away_team.name,
        )
        return self._generate_match_summary()

    def _generate_match_summary(self) -> Dict:
        match = self.match
        play_by_play = self.play_by_play

        return {
            "game_id": str(play_by_play.game_id),
            "teams": {side: match.team(side).name for side in SIDES},
            "final_score": {side: play_by_play.get_score(side) for side in SIDES},
            "periods": len(play_by_play.periods),
            "jams": len(play_by_play.jams),
            "lead_jams": {
                side: sum(1 for jam in play_by_play.jams if jam.team_jam(side).is_lead)
                for side in SIDES
            },
            "penalties": {side: match.team(side).get_penalty_count() for side in SIDES},
            "ticks_elapsed": match.current_tick,
            "event_log_stats": play_by_play.get_summary_stats(),
        }

    def export_logs(self, output_dir: str = "logs") -> Tuple[str, str, str]:
        """
        Export the play-by-play as CSV, XES and scoreboard JSON.

        Returns:
            Tuple of (csv_path, xes_path, json_path)
        """
        os.makedirs(output_dir, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        stem = f"bout_{timestamp}_{str(self.play_by_play.game_id)[:8]}"
        csv_path = os.path.join(output_dir, f"{stem}.csv")
        xes_path = os.path.join(output_dir, f"{stem}.xes")
        json_path = os.path.join(output_dir, f"{stem}.json")

        self.play_by_play.export_to_csv(csv_path)
        self.play_by_play.export_to_xes(xes_path)
        self.export_game_json(json_path)

        return csv_path, xes_path, json_path

    def export_game_json(self, path: str) -> str:
        exporter = ScoreboardExporter(self.play_by_play, self.match.config)
        exporter.write(path)
        return path
