"""
Scoreboard state export for roller derby play-by-play.

Renders a finished bout as the flat ``ScoreBoard.Game(<id>).…`` key/value
state that derby scoreboard software imports.
"""

import json
from datetime import date
from typing import Any, Dict, Optional

from .play_by_play import JamRecord, PeriodRecord, PlayByPlayLog, TeamJamRecord

SCOREBOARD_VERSION = "v2023.3"

PENALTY_CODE_DESCRIPTIONS = {
    "?": "Unknown",
    "A": "High Block",
    "B": "Back Block",
    "C": "Illegal Contact,Illegal Assist,OOP Block,Early/Late Hit",
    "D": "Direction,Stop Block",
    "E": "Leg Block",
    "F": "Forearm",
    "G": "Misconduct,Insubordination",
    "H": "Head Block",
    "I": "Illegal Procedure,Star Pass Violation,Pass Interference",
    "L": "Low Block",
    "M": "Multiplayer",
    "N": "Interference,Delay Of Game",
    "P": "Illegal Position,Destruction,Skating OOB,Failure to...",
    "X": "Cut,Illegal Re-Entry",
}

EVENT_INFO = {
    "City": "Testville",
    "GameNo": "1",
    "HostLeague": "Test Roller Derby",
    "StartTime": "12pm",
    "State": "Testshire",
    "Tournament": "",
    "Venue": "Example Sports Center",
}

# name -> (counts down, maximum time ms)
CLOCKS = {
    "Intermission": (True, 3600000),
    "Jam": (True, 120000),
    "Lineup": (False, 86400000),
    "Period": (True, 1200000),
    "Timeout": (False, 86400000),
}

NIL_UUID = "00000000-0000-0000-0000-000000000000"


class ScoreboardExporter:
    """
    Builds scoreboard state from a play-by-play.

    Every id in the output comes from the play-by-play's deterministic
    record ids, so a seeded bout exports byte-identical state apart from
    the event date.
    """

    def __init__(self, play_by_play: PlayByPlayLog, config: Optional[Any] = None,
                 event_date: Optional[date] = None):
        self.play_by_play = play_by_play
        self.period_duration_ms = config.period_duration_ms if config is not None else 30 * 60 * 1000
        self.event_date = event_date or date.today()
        self.state: Dict[str, Any] = {}

    def build(self) -> Dict[str, Any]:
        """Render the full state map."""
        play_by_play = self.play_by_play
        if not play_by_play.periods:
            raise ValueError("Cannot export a bout with no periods")

        self.state = {}
        game_id = str(play_by_play.game_id)
        prefix = f"ScoreBoard.Game({game_id})"

        def put(key: str, value: Any) -> None:
            self.state[f"{prefix}.{key}"] = value

        put("AbortReason", "")
        self._output_clocks(prefix)
        put("ClockDuringFinalScore", False)
        put("CurrentPeriod", str(play_by_play.periods[-1].id))
        put("CurrentPeriodNumber", len(play_by_play.periods))
        put("CurrentTimeout", "noTimeout")
        for name, value in EVENT_INFO.items():
            put(f"EventInfo({name})", value)
        put("EventInfo(Date)", self.event_date.strftime("%Y-%m-%d"))
        put("ExportBlockedBy", "")
        put("Filename", "STATS-Test")
        put("HNSO", self._head_official_name(referee=False))
        put("HR", self._head_official_name(referee=True))
        put("Id", game_id)
        for flag in ("InJam", "InOvertime", "InPeriod", "InSuddenScoring",
                     "InjuryContinuationUpcoming", "NoMoreJam", "OfficialReview", "Readonly"):
            put(flag, False)
        put("JsonExists", True)
        put("Label(Replaced)", "---")
        put("Label(Start)", "Start Jam")
        put("Label(Stop)", "Lineup")
        put("Label(Timeout)", "Timeout")
        put("Label(Undo)", "---")
        put("LastFileUpdate", "Never")
        put("Name", "Test")
        put("NameFormat", "Test")
        put("OfficialScore", True)
        for code, description in PENALTY_CODE_DESCRIPTIONS.items():
            put(f"PenaltyCode({code})", description)
        put("State", "Finished")
        put("StatsbookExists", False)
        put("SuspensionsServed", "")

        self.state["ScoreBoard.Version(release)"] = SCOREBOARD_VERSION

        jams = play_by_play.jams
        first_jam_id = str(play_by_play.record_id("jam", "before-first"))
        upcoming_jam_id = str(play_by_play.record_id("jam", "upcoming"))

        index = 0
        for period in play_by_play.periods:
            self._output_period(prefix, period)
            for jam in period.jams:
                previous_id = str(jams[index - 1].id) if index > 0 else first_jam_id
                next_id = str(jams[index + 1].id) if index + 1 < len(jams) else upcoming_jam_id
                self._output_jam(prefix, period, jam, previous_id, next_id)
                index += 1

        return self.state

    def to_json(self) -> str:
        return json.dumps({"state": self.build()}, indent=2)

    def write(self, path: str) -> None:
        with open(path, "w") as f:
            f.write(self.to_json())

    def _head_official_name(self, referee: bool) -> str:
        for official in self.play_by_play.officials:
            if official.is_head and official.is_referee == referee:
                return official.name
        return ""

    def _output_clocks(self, prefix: str) -> None:
        for name, (direction, max_time) in CLOCKS.items():
            key = f"{prefix}.Clock({name})"
            self.state[f"{key}.Direction"] = direction
            self.state[f"{key}.Id"] = str(self.play_by_play.record_id("clock", name))
            self.state[f"{key}.InvertedTime"] = max_time
            self.state[f"{key}.MaximumTime"] = max_time
            self.state[f"{key}.Name"] = name
            self.state[f"{key}.Number"] = 0
            self.state[f"{key}.Readonly"] = True
            self.state[f"{key}.Running"] = False
            self.state[f"{key}.Time"] = 0

    def _output_period(self, prefix: str, period: PeriodRecord) -> None:
        key = f"{prefix}.Period({period.number})"
        self.state[f"{key}.CurrentJam"] = str(period.jams[-1].id) if period.jams else ""
        self.state[f"{key}.CurrentJamNumber"] = len(period.jams)
        self.state[f"{key}.Duration"] = period.duration
        self.state[f"{key}.FirstJam"] = str(period.jams[0].id) if period.jams else ""
        self.state[f"{key}.FirstJamNumber"] = 1
        self.state[f"{key}.Id"] = str(period.id)

    def _output_jam(self, prefix: str, period: PeriodRecord, jam: JamRecord,
                    previous_id: str, next_id: str) -> None:
        key = f"{prefix}.Period({period.number}).Jam({jam.number})"
        elapsed_end = jam.end_tick - period.start_tick

        self.state[f"{key}.Duration"] = jam.duration
        self.state[f"{key}.Id"] = str(jam.id)
        self.state[f"{key}.InjuryContinuation"] = False
        self.state[f"{key}.Next"] = next_id
        self.state[f"{key}.Number"] = jam.number
        self.state[f"{key}.Overtime"] = False
        self.state[f"{key}.PeriodClockDisplayEnd"] = max(0, self.period_duration_ms - elapsed_end)
        self.state[f"{key}.PeriodClockElapsedEnd"] = elapsed_end
        self.state[f"{key}.PeriodClockElapsedStart"] = jam.start_tick - period.start_tick
        self.state[f"{key}.PeriodNumber"] = period.number
        self.state[f"{key}.Previous"] = previous_id
        self.state[f"{key}.Readonly"] = False
        self.state[f"{key}.StarPass"] = False

        for team_number, team_jam in ((1, jam.home), (2, jam.away)):
            self._output_team_jam(f"{key}.TeamJam({team_number})", jam, team_jam,
                                  team_number, previous_id, next_id)

    def _output_team_jam(self, key: str, jam: JamRecord, team_jam: TeamJamRecord,
                         team_number: int, previous_id: str, next_id: str) -> None:
        self.state[f"{key}.AfterSPScore"] = 0
        self.state[f"{key}.Calloff"] = team_jam.called_off
        self.state[f"{key}.CurrentTrip"] = str(team_jam.current_trip.id) if team_jam.trips else ""
        self.state[f"{key}.CurrentTripNumber"] = team_jam.trip_count
        self.state[f"{key}.DisplayLead"] = team_jam.is_lead
        self.state[f"{key}.JamScore"] = team_jam.score

        for slot, skater in team_jam.fielding.slots().items():
            fielding_key = f"{key}.Fielding({slot})"
            position_name = slot.lower()
            self.state[f"{fielding_key}.Annotation"] = ""
            self.state[f"{fielding_key}.BoxTripSymbols"] = ""
            self.state[f"{fielding_key}.CurrentBoxTrip"] = ""
            self.state[f"{fielding_key}.Id"] = f"{jam.id}_{team_number}_{position_name}"
            self.state[f"{fielding_key}.Next"] = f"{next_id}_{team_number}_{position_name}"
            self.state[f"{fielding_key}.NotFielded"] = False
            self.state[f"{fielding_key}.Number"] = jam.number
            self.state[f"{fielding_key}.PenaltyBox"] = False
            self.state[f"{fielding_key}.Position"] = f"{NIL_UUID}_{team_number}_{position_name}"
            self.state[f"{fielding_key}.Previous"] = f"{previous_id}_{team_number}_{position_name}"
            self.state[f"{fielding_key}.Readonly"] = False
            self.state[f"{fielding_key}.SitFor3"] = False
            self.state[f"{fielding_key}.Skater"] = str(skater.skater_id)
            self.state[f"{fielding_key}.SkaterNumber"] = skater.number

        for trip in team_jam.trips:
            trip_key = f"{key}.ScoringTrip({trip.number})"
            self.state[f"{trip_key}.Current"] = trip is team_jam.current_trip
            self.state[f"{trip_key}.Duration"] = trip.duration
            self.state[f"{trip_key}.Id"] = str(trip.id)
            self.state[f"{trip_key}.JamClockStart"] = trip.start_tick - jam.start_tick
            self.state[f"{trip_key}.JamClockEnd"] = trip.end_tick - jam.start_tick
            self.state[f"{trip_key}.Number"] = trip.number
            self.state[f"{trip_key}.Readonly"] = False
            self.state[f"{trip_key}.Score"] = trip.score
