"""
Track geometry for roller derby simulation.

Provides the abstract track loop, the pack boundary and zone lookups used by
the skater activity engine.
"""


class TrackZones:
    """
    Abstract model of the flat track.

    The track is a single loop measured on a 0-100 scale. The pack is not
    simulated skater by skater; it is the stretch of track below
    ``PACK_EXIT`` that a jammer has to skate through before a pass counts.

    Zones are used for:
    - Jammer pack exit detection
    - Scoring trip boundaries
    - Jammer start placement and the pack line
    """

    # Loop length
    LENGTH = 100.0

    # Pack boundary
    PACK_START = 0.0
    PACK_EXIT = 20.0

    # Jammers line up behind the pack, outside of it
    JAMMER_START = 95.0
    PACK_LINE = 0.0

    @classmethod
    def get_zone(cls, location: float) -> str:
        """
        Determine track zone for a location.

        Returns:
            str: Zone identifier ('pack', 'open')
        """
        if location < cls.PACK_EXIT:
            return 'pack'
        return 'open'

