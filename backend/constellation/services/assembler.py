"""
Track assembler: hourly positions -> per-id tracks.
"""

import logging
from typing import Iterable

from constellation.models.positions import UNKNOWN_ID, HourlyExtraction, PositionRecord, Track


logger = logging.getLogger(__name__)


def assemble_tracks(extractions: Iterable[HourlyExtraction]) -> list[Track]:
    """
    Group positions by id and order each group oldest -> newest.

    Tracks come out in first-seen id order. Hours with no point for an id
    are simply absent from its track (no interpolation).
    """
    points_by_id: dict[str, list[PositionRecord]] = {}

    for extraction in extractions:
        for point in extraction.positions:
            points_by_id.setdefault(point.id or UNKNOWN_ID, []).append(point)

    tracks = []
    for track_id, points in points_by_id.items():
        # stable sort keeps file order for points sharing an hour
        points.sort(key=lambda p: p.hour_index, reverse=True)
        tracks.append(Track(id=track_id, points=tuple(points)))

    logger.debug(f"Assembled {len(tracks)} tracks")
    return tracks
