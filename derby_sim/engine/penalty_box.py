"""
Penalty box shared across jams.

The only mutable skater state that outlives a jam. Entries are snapshots of
JamSkater records keyed by skater id, never the live per-jam objects.
"""

import uuid
from dataclasses import replace
from typing import Dict, Iterator, List

from .activity import HeldInBox, JamSkater, SatInBox, SkatingToBox


class PenaltyBox:
    """
    Arena of boxed skaters keyed by skater id.

    A skater is in the box from the moment a penalty is given until their
    sit completes; each id appears at most once.
    """

    def __init__(self):
        self._skaters: Dict[uuid.UUID, JamSkater] = {}

    def __contains__(self, skater_id: uuid.UUID) -> bool:
        return skater_id in self._skaters

    def __iter__(self) -> Iterator[JamSkater]:
        return iter(list(self._skaters.values()))

    def __len__(self) -> int:
        return len(self._skaters)

    def add(self, skater: JamSkater) -> None:
        """
        Put a penalized skater in the box.

        Raises:
            ValueError: If the skater is already boxed
        """
        if skater.id in self._skaters:
            raise ValueError(f"{skater.name} is already in the penalty box")
        self._skaters[skater.id] = replace(skater)

    def remove(self, skater_id: uuid.UUID) -> None:
        self._skaters.pop(skater_id, None)

    def get(self, skater_id: uuid.UUID) -> JamSkater:
        return self._skaters[skater_id]

    def refresh(self, skater: JamSkater) -> None:
        """Sync the snapshot of a boxed skater with its latest jam state."""
        if skater.id in self._skaters:
            self._skaters[skater.id] = replace(skater)

    def skaters_for_side(self, side: str) -> List[JamSkater]:
        return [replace(s) for s in self._skaters.values() if s.side == side]

    def hold_for_next_jam(self, on_track: List[JamSkater], jam_end_tick: int) -> None:
        """
        Freeze boxed skaters at the end of a jam.

        Skaters still skating to the box carry no elapsed time; skaters
        already sitting carry the time served so far.

        Args:
            on_track: Every skater fielded in the ending jam
            jam_end_tick: Tick the jam ended on

        Raises:
            KeyError: If a boxed skater was not fielded in the jam
        """
        track_skaters = {s.id: s for s in on_track}

        for skater_id, boxed in list(self._skaters.items()):
            activity = track_skaters[skater_id].activity

            if isinstance(activity, SkatingToBox):
                activity = HeldInBox(ticks_expired=0, penalty_count=activity.penalties_to_sit)
            elif isinstance(activity, SatInBox):
                activity = HeldInBox(
                    ticks_expired=max(0, jam_end_tick - activity.start_tick),
                    penalty_count=activity.penalty_count,
                )

            self._skaters[skater_id] = replace(boxed, activity=activity)
