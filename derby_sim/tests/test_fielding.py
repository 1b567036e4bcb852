"""
Test lineup selection.

Validates lineup shape, rotation of rested skaters, position preference and
penalty box carry-over when a team is fielded for a jam.
"""

import pytest

from derby_sim.engine.activity import HeldInBox, JamSkater, OnTrack
from derby_sim.engine.config import SimulationConfig
from derby_sim.engine.fielding import RosterFieldingSelector
from derby_sim.engine.match import MatchEngine
from derby_sim.engine.random_source import RandomSource
from derby_sim.engine.skater import Position, Skater
from derby_sim.engine.states import JamInProgress
from derby_sim.engine.team import RosterValidationError, Team


class FirstPickRandom(RandomSource):
    """Random stream that always picks the first candidate."""

    def __init__(self):
        super().__init__(seed=0)

    def integer(self, low, high):
        return low

    def chance(self, probability):
        return probability >= 1.0


def make_team(random_source: RandomSource, positions) -> Team:
    """Build a team with one skater per favored position given."""
    roster = [
        Skater(
            id=random_source.uuid(),
            name=f"Skater {i+1}",
            number=str(i + 1),
            favored_position=position,
            base_speed=17.0,
            penalty_chance=0.0,
        )
        for i, position in enumerate(positions)
    ]
    return Team(id=random_source.uuid(), name="Test Roller Derby", color="Blue", roster=roster)


def make_engine(home_positions, away_positions=None, random_source=None, **kwargs) -> MatchEngine:
    random_source = random_source or FirstPickRandom()
    away_positions = away_positions or [Position.BLOCKER] * 8
    home = make_team(random_source, home_positions)
    away = make_team(random_source, away_positions)
    return MatchEngine(home, away, [], random_source, **kwargs)


@pytest.mark.parametrize("seed", [1, 7, 42, 1234])
def test_lineup_shape(seed):
    """Test that every fielded lineup is five skaters with one jammer."""
    engine = MatchEngine.random(random_seed=seed)
    jam = engine.tick()
    assert isinstance(jam, JamInProgress)

    for skaters in (jam.home_on_track, jam.away_on_track):
        positions = [s.position for s in skaters]
        assert len(skaters) == 5, f"Expected 5 skaters, got {len(skaters)}"
        assert positions.count(Position.JAMMER) == 1, "Exactly one jammer per lineup"
        assert positions.count(Position.PIVOT) <= 1, "At most one pivot per lineup"
        assert len({s.id for s in skaters}) == 5, "No skater fielded twice"


def test_start_locations_and_lead_eligibility():
    engine = MatchEngine.random(random_seed=3)
    jam = engine.tick()

    for skater in jam.on_track:
        if skater.is_jammer:
            assert skater.activity == OnTrack(location=95.0)
            assert skater.can_receive_lead
        else:
            assert skater.activity == OnTrack(location=0.0)
            assert not skater.can_receive_lead
        assert not skater.is_lead


def test_position_preference():
    """Test that favored positions fill their own slots first."""
    positions = [Position.BLOCKER, Position.PIVOT, Position.BLOCKER, Position.JAMMER,
                 Position.BLOCKER, Position.BLOCKER, Position.PIVOT, Position.JAMMER]
    engine = make_engine(positions)
    match = engine.match

    skaters = RosterFieldingSelector().field(match, match.home_team, "home")

    jammer = next(s for s in skaters if s.position == Position.JAMMER)
    pivot = next(s for s in skaters if s.position == Position.PIVOT)
    blockers = [s for s in skaters if s.position == Position.BLOCKER]

    assert jammer.details.favored_position == Position.JAMMER
    assert pivot.details.favored_position == Position.PIVOT
    assert all(s.details.favored_position == Position.BLOCKER for s in blockers)


def test_rested_skaters_fielded_first():
    """Test that skaters who sat out longest go out first."""
    engine = make_engine([Position.BLOCKER] * 10)
    match = engine.match
    team = match.home_team

    for roster_skater in team.roster[:5]:
        roster_skater.last_jam_tick = 5000

    skaters = RosterFieldingSelector().field(match, team, "home")

    fielded = {s.id for s in skaters}
    rested = {s.id for s in team.roster[5:]}
    assert fielded == rested, "Recently played skaters should rest"


def test_pick_window_with_short_roster():
    engine = make_engine([Position.BLOCKER] * 5, random_source=RandomSource(11))
    match = engine.match

    skaters = RosterFieldingSelector().field(match, match.home_team, "home")

    assert {s.id for s in skaters} == {s.id for s in match.home_team.roster}


def test_boxed_skater_stays_in_lineup():
    """Test that a skater still serving is fielded again, first and unchanged."""
    engine = make_engine([Position.BLOCKER] * 10)
    match = engine.match
    roster_skater = match.home_team.roster[0]

    boxed = JamSkater(
        details=roster_skater.details,
        side="home",
        position=Position.BLOCKER,
        activity=HeldInBox(ticks_expired=10000, penalty_count=1),
    )
    match.penalty_box.add(boxed)

    skaters = RosterFieldingSelector().field(match, match.home_team, "home")

    assert len(skaters) == 5
    assert skaters[0].id == roster_skater.id
    assert skaters[0].activity == HeldInBox(ticks_expired=10000, penalty_count=1)
    assert [s.id for s in skaters].count(roster_skater.id) == 1


def test_boxed_jammer_keeps_jammer_slot():
    engine = make_engine([Position.JAMMER] * 10)
    match = engine.match
    roster_skater = match.home_team.roster[3]

    boxed = JamSkater(
        details=roster_skater.details,
        side="home",
        position=Position.JAMMER,
        activity=HeldInBox(ticks_expired=0, penalty_count=2),
        can_receive_lead=False,
        is_lead=True,
    )
    match.penalty_box.add(boxed)

    skaters = RosterFieldingSelector().field(match, match.home_team, "home")
    jammers = [s for s in skaters if s.is_jammer]

    assert len(jammers) == 1, "No second jammer is fielded alongside a boxed one"
    assert jammers[0].id == roster_skater.id
    assert jammers[0].can_receive_lead, "A released jammer may still earn lead"
    assert not jammers[0].is_lead


def test_full_box_leaves_no_room_for_pivot():
    engine = make_engine([Position.BLOCKER] * 10)
    match = engine.match

    for roster_skater in match.home_team.roster[:4]:
        match.penalty_box.add(JamSkater(
            details=roster_skater.details,
            side="home",
            position=Position.BLOCKER,
            activity=HeldInBox(ticks_expired=0),
        ))

    skaters = RosterFieldingSelector().field(match, match.home_team, "home")

    assert len(skaters) == 5
    assert [s.position for s in skaters].count(Position.JAMMER) == 1
    assert Position.PIVOT not in [s.position for s in skaters]


def test_other_team_box_is_ignored():
    engine = make_engine([Position.BLOCKER] * 8)
    match = engine.match
    away_skater = match.away_team.roster[0]

    match.penalty_box.add(JamSkater(
        details=away_skater.details,
        side="away",
        position=Position.BLOCKER,
        activity=HeldInBox(ticks_expired=0),
    ))

    skaters = RosterFieldingSelector().field(match, match.home_team, "home")

    assert away_skater.id not in {s.id for s in skaters}


def test_fielded_skaters_marked_played():
    engine = make_engine([Position.BLOCKER] * 8)
    jam = engine.tick()

    for skater in jam.home_on_track:
        assert engine.match.home_team.get_skater(skater.id).last_jam_tick == jam.start_tick

    benched = [s for s in engine.match.home_team.roster if s.id not in {j.id for j in jam.home_on_track}]
    assert all(s.last_jam_tick == 0 for s in benched)


def test_last_played_tracking_can_be_disabled():
    engine = make_engine([Position.BLOCKER] * 8, config=SimulationConfig(track_last_played=False))
    engine.tick()

    assert all(s.last_jam_tick == 0 for s in engine.match.home_team.roster)


def test_short_roster_rejected():
    """Test that a team that cannot field five skaters is rejected up front."""
    with pytest.raises(RosterValidationError):
        make_engine([Position.BLOCKER] * 4)


def test_duplicate_numbers_rejected():
    random_source = FirstPickRandom()
    team = make_team(random_source, [Position.BLOCKER] * 8)
    duplicate = Team(
        id=team.id,
        name=team.name,
        color=team.color,
        roster=team.roster + [Skater(
            id=random_source.uuid(),
            name="Copycat",
            number=team.roster[0].number,
            favored_position=Position.BLOCKER,
            base_speed=16.0,
            penalty_chance=0.0,
        )],
    )
    other = make_team(random_source, [Position.BLOCKER] * 8)

    with pytest.raises(RosterValidationError):
        MatchEngine(duplicate, other, [], random_source)
