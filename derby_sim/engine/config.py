"""
Simulation configuration for roller derby bouts.

Collects the timing and probability constants the engines share.
"""

from dataclasses import dataclass

from .track import TrackZones


@dataclass
class SimulationConfig:
    """
    Bout simulation configuration.

    Defines:
    - Clock durations (all in milliseconds of simulated time)
    - Skater movement and penalty probabilities
    - Lineup selection parameters
    """
    tick_ms: int = 1000
    period_duration_ms: int = 30 * 60 * 1000
    jam_duration_ms: int = 2 * 60 * 1000
    lineup_duration_ms: int = 30 * 1000
    penalty_sit_ms: int = 30 * 1000

    # Track geometry
    pack_exit: float = TrackZones.PACK_EXIT
    track_length: float = TrackZones.LENGTH
    jammer_start: float = TrackZones.JAMMER_START
    pack_walk_backoff: float = 2.0  # Jammers can lose ground in the pack
    box_distance_min: float = 1.0
    box_distance_max: float = 60.0
    box_speed_jitter: float = 1.0

    # Event probabilities
    return_cut_penalty_chance: float = 1.0 / 100.0
    exit_pack_no_pass_chance: float = 1.0 / 50.0
    exit_pack_call_chance: float = 1.0 / 2.0
    second_penalty_chance: float = 1.0 / 20.0

    # Trip scoring
    pass_score: int = 4
    max_trip_score: int = 4

    # Lineups
    lineup_size: int = 5
    pick_window: int = 3
    track_last_played: bool = True
