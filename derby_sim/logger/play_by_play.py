"""
Play-by-play record for roller derby simulation.

Builds the append-only period -> jam -> team-jam -> trip tree the match
engine pushes into, and flattens it into PM4Py-compatible event logs.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import pandas as pd
import pm4py

SIDES = ("home", "away")


@dataclass
class FieldingSkater:
    skater_id: uuid.UUID
    number: str
    name: str


@dataclass
class TeamJamFielding:
    """
    Lineup snapshot taken at jam start.

    The pivot slot holds a fourth blocker when the team fielded no pivot.
    """
    jammer: FieldingSkater
    pivot: FieldingSkater
    blocker1: FieldingSkater
    blocker2: FieldingSkater
    blocker3: FieldingSkater
    has_pivot: bool = True

    def slots(self) -> Dict[str, FieldingSkater]:
        return {
            "Jammer": self.jammer,
            "Pivot": self.pivot,
            "Blocker1": self.blocker1,
            "Blocker2": self.blocker2,
            "Blocker3": self.blocker3,
        }


@dataclass
class TripRecord:
    """One scoring pass of a jammer."""
    id: uuid.UUID
    number: int
    start_tick: int
    duration: int = 0
    score: int = 0

    @property
    def end_tick(self) -> int:
        return self.start_tick + self.duration


@dataclass
class TeamJamRecord:
    side: str
    fielding: TeamJamFielding
    is_lead: bool = False
    called_off: bool = False
    trips: List[TripRecord] = field(default_factory=list)

    @property
    def current_trip(self) -> Optional[TripRecord]:
        return self.trips[-1] if self.trips else None

    @property
    def trip_count(self) -> int:
        return len(self.trips)

    @property
    def score(self) -> int:
        return sum(t.score for t in self.trips)


@dataclass
class JamRecord:
    id: uuid.UUID
    number: int
    start_tick: int
    home: TeamJamRecord
    away: TeamJamRecord
    end_tick: int = 0

    @property
    def duration(self) -> int:
        return max(0, self.end_tick - self.start_tick)

    def team_jam(self, side: str) -> TeamJamRecord:
        if side == "home":
            return self.home
        if side == "away":
            return self.away
        raise ValueError(f"Unknown side: {side!r}")


@dataclass
class PeriodRecord:
    id: uuid.UUID
    number: int
    start_tick: int
    duration: int = 0
    jams: List[JamRecord] = field(default_factory=list)

    @property
    def current_jam(self) -> Optional[JamRecord]:
        return self.jams[-1] if self.jams else None


class PlayByPlayLog:
    """
    Append-only play-by-play for a bout.

    Only the tail entry of each level is ever mutated. Record ids are UUIDv5
    values derived from the game id and the record's path, so a seeded bout
    always produces the same ids.
    """

    def __init__(self, game_id: uuid.UUID, bout_start: Optional[datetime] = None):
        """
        Initialize an empty play-by-play.

        Args:
            game_id: Unique identifier for the bout
            bout_start: Wall-clock time of tick 0, used for event log timestamps
        """
        self.game_id = game_id
        self.bout_start = bout_start or datetime.now().replace(microsecond=0)
        self.periods: List[PeriodRecord] = []
        self.officials: List[Any] = []

    def record_id(self, *path: Any) -> uuid.UUID:
        return uuid.uuid5(self.game_id, "/".join(str(p) for p in path))

    def add_official(self, official: Any) -> None:
        self.officials.append(official)

    @property
    def current_period(self) -> PeriodRecord:
        if not self.periods:
            raise LookupError("No period has been opened")
        return self.periods[-1]

    @property
    def current_jam(self) -> JamRecord:
        jam = self.current_period.current_jam
        if jam is None:
            raise LookupError("No jam has been opened in the current period")
        return jam

    def current_team_jam(self, side: str) -> TeamJamRecord:
        return self.current_jam.team_jam(side)

    @property
    def jams(self) -> List[JamRecord]:
        return [jam for period in self.periods for jam in period.jams]

    # ------------------------------------------------------------------
    # Sink operations
    # ------------------------------------------------------------------

    def open_period(self, start_tick: int) -> PeriodRecord:
        number = len(self.periods) + 1
        period = PeriodRecord(id=self.record_id("period", number), number=number, start_tick=start_tick)
        self.periods.append(period)
        return period

    def open_jam(self, start_tick: int, home_fielding: TeamJamFielding,
                 away_fielding: TeamJamFielding) -> JamRecord:
        period = self.current_period
        number = len(period.jams) + 1
        jam = JamRecord(
            id=self.record_id("period", period.number, "jam", number),
            number=number,
            start_tick=start_tick,
            home=TeamJamRecord(side="home", fielding=home_fielding),
            away=TeamJamRecord(side="away", fielding=away_fielding),
        )
        period.jams.append(jam)
        return jam

    def open_trip(self, side: str, start_tick: int) -> TripRecord:
        jam = self.current_jam
        team_jam = jam.team_jam(side)
        number = team_jam.trip_count + 1
        trip = TripRecord(
            id=self.record_id("period", self.current_period.number, "jam", jam.number, side, "trip", number),
            number=number,
            start_tick=start_tick,
        )
        team_jam.trips.append(trip)
        return trip

    def close_trip(self, side: str, duration: int, score: int) -> None:
        trip = self.current_team_jam(side).current_trip
        if trip is None:
            raise LookupError(f"No open trip for {side}")
        trip.duration = duration
        trip.score = score

    def close_jam(self, end_tick: int) -> None:
        self.current_jam.end_tick = end_tick

    def close_period(self, duration: int) -> None:
        self.current_period.duration = duration

    def set_lead(self, side: str, is_lead: bool) -> None:
        self.current_team_jam(side).is_lead = is_lead

    def set_called_off(self, side: str, called_off: bool) -> None:
        self.current_team_jam(side).called_off = called_off

    # ------------------------------------------------------------------
    # Analysis and export
    # ------------------------------------------------------------------

    def get_score(self, side: str) -> int:
        return sum(jam.team_jam(side).score for jam in self.jams)

    def _timestamp(self, tick: int) -> datetime:
        return self.bout_start + timedelta(milliseconds=tick)

    def to_dataframe(self) -> pd.DataFrame:
        """
        Flatten the play-by-play into one row per event.

        Events are jam starts, scoring trips and jam ends, ordered by tick.
        Each jam is one case.
        """
        rows = []

        for period in self.periods:
            for jam in period.jams:
                case_id = str(jam.id)
                base = {"case_id": case_id, "period": period.number, "jam": jam.number}

                rows.append({**base, "activity": "jam_start", "tick": jam.start_tick})
                for side in SIDES:
                    team_jam = jam.team_jam(side)
                    for trip in team_jam.trips:
                        rows.append({
                            **base,
                            "activity": "scoring_trip",
                            "tick": trip.start_tick,
                            "side": side,
                            "jammer_id": str(team_jam.fielding.jammer.skater_id),
                            "trip": trip.number,
                            "duration": trip.duration,
                            "score": trip.score,
                            "lead": team_jam.is_lead,
                            "called_off": team_jam.called_off,
                        })
                rows.append({**base, "activity": "jam_end", "tick": jam.end_tick})

        if not rows:
            return pd.DataFrame()

        df = pd.DataFrame(rows)
        df = df.sort_values(["tick", "period", "jam"], kind="stable").reset_index(drop=True)
        df["sequence_number"] = range(len(df))
        df["timestamp"] = [self._timestamp(int(t)) for t in df["tick"]]

        # PM4Py column names
        df["case:concept:name"] = df["case_id"]
        df["concept:name"] = df["activity"]
        df["time:timestamp"] = pd.to_datetime(df["timestamp"])
        return df

    def export_to_csv(self, filepath: str) -> None:
        """
        Export the event log to CSV.

        Args:
            filepath: Output file path
        """
        df = self.to_dataframe()
        if df.empty:
            print("No events to export")
            return
        df.to_csv(filepath, index=False)

    def export_to_xes(self, filepath: str) -> None:
        """
        Export the event log to XES using PM4Py.

        Args:
            filepath: Output file path (.xes)
        """
        df = self.to_dataframe()
        if df.empty:
            print("No events to export")
            return

        event_log = pm4py.format_dataframe(
            df,
            case_id='case:concept:name',
            activity_key='concept:name',
            timestamp_key='time:timestamp'
        )
        pm4py.write_xes(event_log, filepath)

    def get_summary_stats(self) -> Dict[str, Any]:
        """Get summary statistics for the play-by-play."""
        df = self.to_dataframe()
        if df.empty:
            return {}

        trips = df[df['activity'] == 'scoring_trip']
        jams = self.jams

        return {
            'total_events': len(df),
            'periods': len(self.periods),
            'jams': len(jams),
            'scoring_trips': len(trips),
            'avg_jam_duration_ms': sum(j.duration for j in jams) / max(1, len(jams)),
            'avg_trip_score': float(trips['score'].mean()) if len(trips) else 0.0,
            'lead_jams': {side: sum(1 for j in jams if j.team_jam(side).is_lead) for side in SIDES},
            'called_off_jams': {side: sum(1 for j in jams if j.team_jam(side).called_off) for side in SIDES},
        }
