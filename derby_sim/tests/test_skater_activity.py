"""
Test the per-skater activity state machine.

Validates every activity transition with a scripted random stream so each
outcome is forced rather than sampled.
"""

from dataclasses import replace

import pytest

from derby_sim.engine.activity import (HeldInBox, JamSkater, OnTrack, ReturningFromBox,
                                       SatInBox, SkaterActivityEngine, SkatingToBox)
from derby_sim.engine.match import MatchEngine
from derby_sim.engine.random_source import RandomSource
from derby_sim.engine.skater import PENALTY_CODES, Position, Skater, penalty_code_for
from derby_sim.engine.states import LeadJammerTeam
from derby_sim.engine.team import Team


class ScriptedRandom(RandomSource):
    """
    Random stream with forced outcomes.

    Reals come back at the top of their range, integers at the bottom, and
    a chance succeeds only for certain events or listed probabilities.
    """

    def __init__(self, true_probabilities=()):
        super().__init__(seed=0)
        self.true_probabilities = set(true_probabilities)

    def uniform(self, low, high):
        return float(high)

    def integer(self, low, high):
        return low

    def integer_inclusive(self, low, high):
        return low

    def chance(self, probability):
        return probability >= 1.0 or probability in self.true_probabilities


class CountingRandom(RandomSource):
    """Seeded random stream that records which draws were made."""

    def __init__(self, seed=0):
        super().__init__(seed=seed)
        self.calls = []

    def uniform(self, low, high):
        self.calls.append("uniform")
        return super().uniform(low, high)

    def integer(self, low, high):
        self.calls.append("integer")
        return super().integer(low, high)

    def integer_inclusive(self, low, high):
        self.calls.append("integer_inclusive")
        return super().integer_inclusive(low, high)

    def chance(self, probability):
        self.calls.append("chance")
        return super().chance(probability)


def make_team(random_source: RandomSource, size: int = 8, penalty_chance: float = 0.0) -> Team:
    """Build a team with fixed speed and penalty chance."""
    positions = [Position.JAMMER, Position.PIVOT, Position.BLOCKER]
    roster = [
        Skater(
            id=random_source.uuid(),
            name=f"Skater {i+1}",
            number=str(i + 1),
            favored_position=positions[i % 3],
            base_speed=16.0,
            penalty_chance=penalty_chance,
        )
        for i in range(size)
    ]
    return Team(id=random_source.uuid(), name="Test Roller Derby", color="Red", roster=roster)


def start_test_jam(random_source: RandomSource):
    """Start a jam and return (engine, jam state)."""
    engine = MatchEngine(make_team(random_source), make_team(random_source), [], random_source)
    engine.tick()
    return engine, engine.state


def home_skater(jam, position: Position) -> JamSkater:
    return next(s for s in jam.home_on_track if s.position == position)


def test_held_in_box_resumes_sitting_with_elapsed_time():
    """Test that a held skater sits again with its served time preserved."""
    engine, jam = start_test_jam(ScriptedRandom())
    match = engine.match
    skater = replace(home_skater(jam, Position.BLOCKER), activity=HeldInBox(ticks_expired=12000, penalty_count=1))

    SkaterActivityEngine().tick(match, skater)

    assert isinstance(skater.activity, SatInBox), f"Expected SatInBox, got {skater.activity}"
    assert skater.activity.start_tick == match.current_tick - 12000
    assert skater.activity.penalty_count == 1


def test_sat_in_box_waits_out_penalty():
    """Test that a sitting skater stays put until the sit is served."""
    engine, jam = start_test_jam(ScriptedRandom())
    match = engine.match
    skater = home_skater(jam, Position.BLOCKER)
    activity_engine = SkaterActivityEngine()

    match.penalty_box.add(skater)
    skater.activity = SatInBox(start_tick=match.current_tick - 29000, penalty_count=1)
    activity_engine.tick(match, skater)

    assert isinstance(skater.activity, SatInBox)
    assert skater.id in match.penalty_box

    match.current_tick += 1000
    activity_engine.tick(match, skater)

    assert isinstance(skater.activity, ReturningFromBox), "Skater should be released after 30s"
    assert skater.id not in match.penalty_box, "Released skater must leave the penalty box"


def test_double_penalty_sits_twice_as_long():
    engine, jam = start_test_jam(ScriptedRandom())
    match = engine.match
    skater = home_skater(jam, Position.BLOCKER)

    match.penalty_box.add(skater)
    skater.activity = SatInBox(start_tick=match.current_tick - 45000, penalty_count=2)
    SkaterActivityEngine().tick(match, skater)

    assert isinstance(skater.activity, SatInBox), "Two penalties should take 60s to serve"


def test_penalty_sends_skater_to_box():
    """Test that a penalty roll sends an on-track blocker to the box."""
    engine, jam = start_test_jam(ScriptedRandom())
    match = engine.match
    skater = home_skater(jam, Position.BLOCKER)
    skater.details = replace(skater.details, penalty_chance=1.0)

    SkaterActivityEngine().tick(match, skater)

    assert isinstance(skater.activity, SkatingToBox)
    assert skater.activity.penalties_to_sit == 1
    assert skater.id in match.penalty_box
    assert isinstance(match.penalty_box.get(skater.id).activity, SkatingToBox), \
        "Box snapshot should track the skater's latest activity"

    roster_skater = match.home_team.get_skater(skater.id)
    assert roster_skater.penalty_count == 1
    assert roster_skater.penalties[0].received_tick == match.current_tick


def test_blocker_without_penalty_holds_position():
    engine, jam = start_test_jam(ScriptedRandom())
    skater = home_skater(jam, Position.BLOCKER)
    before = skater.activity

    SkaterActivityEngine().tick(engine.match, skater)

    assert skater.activity == before


def test_skating_to_box_arrives_and_sits():
    engine, jam = start_test_jam(ScriptedRandom())
    match = engine.match
    skater = home_skater(jam, Position.BLOCKER)
    match.penalty_box.add(skater)
    skater.activity = SkatingToBox(distance_remaining=5.0, penalties_to_sit=2)

    SkaterActivityEngine().tick(match, skater)

    assert isinstance(skater.activity, SatInBox)
    assert skater.activity.penalty_count == 2, "Penalty count must carry over on arrival"
    assert skater.id in match.penalty_box


def test_second_penalty_on_way_to_box():
    engine, jam = start_test_jam(ScriptedRandom(true_probabilities=(1.0 / 20.0,)))
    match = engine.match
    skater = home_skater(jam, Position.BLOCKER)
    match.penalty_box.add(skater)
    skater.activity = SkatingToBox(distance_remaining=50.0, penalties_to_sit=1)

    activity_engine = SkaterActivityEngine()
    activity_engine.tick(match, skater)
    assert skater.activity.penalties_to_sit == 2

    activity_engine.tick(match, skater)
    assert skater.activity.penalties_to_sit == 2, "A second penalty is not undone"
    assert match.home_team.get_skater(skater.id).penalty_count == 1


def test_return_from_box_rejoins_at_back_of_pack():
    engine, jam = start_test_jam(ScriptedRandom())
    skater = home_skater(jam, Position.BLOCKER)
    skater.activity = ReturningFromBox(distance_remaining=3.0)

    SkaterActivityEngine().tick(engine.match, skater)

    assert skater.activity == OnTrack(location=0.0)


def test_cut_on_return_sends_skater_back():
    engine, jam = start_test_jam(ScriptedRandom(true_probabilities=(1.0 / 100.0,)))
    match = engine.match
    skater = home_skater(jam, Position.BLOCKER)
    skater.activity = ReturningFromBox(distance_remaining=3.0)

    SkaterActivityEngine().tick(match, skater)

    assert isinstance(skater.activity, SkatingToBox)
    assert skater.id in match.penalty_box
    assert match.home_team.get_skater(skater.id).penalties[-1].code == "X"


def test_jammer_clearing_pack_earns_lead():
    """Test that the first eligible jammer out of the pack takes lead."""
    engine, jam = start_test_jam(ScriptedRandom())
    match = engine.match
    jammer = home_skater(jam, Position.JAMMER)
    jammer.activity = OnTrack(location=19.0)
    match.play_by_play.open_trip("home", match.current_tick)

    SkaterActivityEngine().tick(match, jammer)

    team_jam = match.play_by_play.current_team_jam("home")
    assert jammer.is_lead
    assert not jammer.can_receive_lead
    assert not match.lead_is_open
    assert team_jam.is_lead
    assert team_jam.trips[-1].score == 4, "A completed pass after the initial trip scores 4"
    assert team_jam.trips[0].score == 0
    assert jammer.activity.location >= 20.0


def test_no_pass_keeps_lead_open():
    engine, jam = start_test_jam(ScriptedRandom(true_probabilities=(1.0 / 50.0,)))
    match = engine.match
    jammer = home_skater(jam, Position.JAMMER)
    jammer.activity = OnTrack(location=19.0)

    SkaterActivityEngine().tick(match, jammer)

    assert not jammer.is_lead
    assert not jammer.can_receive_lead, "Eligibility is spent on the first pack exit"
    assert match.lead_is_open
    assert match.play_by_play.current_team_jam("home").trips[0].score == 0, \
        "The initial trip never scores"


def test_lead_jammer_calls_jam():
    engine, jam = start_test_jam(ScriptedRandom(true_probabilities=(1.0 / 2.0,)))
    match = engine.match
    jammer = home_skater(jam, Position.JAMMER)
    jammer.activity = OnTrack(location=19.0)
    jammer.is_lead = True

    SkaterActivityEngine().tick(match, jammer)

    assert match.jam_called
    assert match.play_by_play.current_team_jam("home").called_off


def test_penalized_lead_jammer_loses_lead():
    engine, jam = start_test_jam(ScriptedRandom())
    match = engine.match
    jammer = home_skater(jam, Position.JAMMER)
    jammer.activity = OnTrack(location=50.0)
    match.award_lead(jammer)
    jammer.details = replace(jammer.details, penalty_chance=1.0)

    SkaterActivityEngine().tick(match, jammer)

    assert not jammer.is_lead
    assert not match.play_by_play.current_team_jam("home").is_lead
    assert match.lead_jammer_team == LeadJammerTeam.NONE, "Match lead must follow the play-by-play"


def test_jammer_lapping_pack_opens_trip():
    engine, jam = start_test_jam(ScriptedRandom())
    match = engine.match
    jammer = home_skater(jam, Position.JAMMER)
    trips_before = match.play_by_play.current_team_jam("home").trip_count

    assert jammer.activity == OnTrack(location=95.0), "Jammers start behind the pack"
    SkaterActivityEngine().tick(match, jammer)

    assert jammer.activity == OnTrack(location=0.0)
    assert match.play_by_play.current_team_jam("home").trip_count == trips_before + 1


def test_unknown_activity_is_rejected():
    engine, jam = start_test_jam(ScriptedRandom())
    skater = replace(home_skater(jam, Position.BLOCKER), activity="skating")

    with pytest.raises(TypeError):
        SkaterActivityEngine().tick(engine.match, skater)


def test_penalty_draws_only_box_distance():
    """Test that giving a penalty takes exactly one draw from the stream."""
    random_source = CountingRandom(seed=3)
    engine, jam = start_test_jam(random_source)
    match = engine.match
    skater = home_skater(jam, Position.BLOCKER)

    random_source.calls.clear()
    activity = SkaterActivityEngine().give_penalty(match, skater)

    assert random_source.calls == ["uniform"], f"Unexpected draws: {random_source.calls}"
    assert isinstance(activity, SkatingToBox)
    code = match.home_team.get_skater(skater.id).penalties[-1].code
    assert code in PENALTY_CODES and code != "X"
    assert code == penalty_code_for(skater.id, match.current_tick), "Codes must be reproducible"


def test_second_penalty_takes_no_code_draw():
    random_source = CountingRandom(seed=4)
    engine, jam = start_test_jam(random_source)
    match = engine.match
    match.config.second_penalty_chance = 1.0
    skater = home_skater(jam, Position.BLOCKER)
    match.penalty_box.add(skater)
    skater.activity = SkatingToBox(distance_remaining=500.0, penalties_to_sit=1)

    random_source.calls.clear()
    SkaterActivityEngine().tick(match, skater)

    assert random_source.calls == ["uniform", "chance"], f"Unexpected draws: {random_source.calls}"
    assert skater.activity.penalties_to_sit == 2
    penalties = match.home_team.get_skater(skater.id).penalties
    assert [p.code for p in penalties] == [penalty_code_for(skater.id, match.current_tick)]


def test_cut_penalty_code_is_fixed():
    random_source = CountingRandom(seed=5)
    engine, jam = start_test_jam(random_source)
    match = engine.match
    skater = home_skater(jam, Position.BLOCKER)

    random_source.calls.clear()
    SkaterActivityEngine().give_penalty(match, skater, code="X")

    assert random_source.calls == ["uniform"]
    assert match.home_team.get_skater(skater.id).penalties[-1].code == "X"
