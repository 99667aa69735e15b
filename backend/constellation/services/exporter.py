"""
Tabular export of assembled tracks.
"""

from typing import Iterable

import pandas as pd

from constellation.models.positions import Track


EXPORT_COLUMNS = ["id", "hour_index", "lat", "lon", "altitude_m", "timestamp", "third_value"]


def tracks_to_frame(tracks: Iterable[Track]) -> pd.DataFrame:
    """One row per point, in track order then point order (oldest first)."""
    rows = [
        {
            "id": track.id,
            "hour_index": point.hour_index,
            "lat": point.lat,
            "lon": point.lon,
            "altitude_m": point.altitude_m,
            "timestamp": point.timestamp,
            "third_value": point.third_value,
        }
        for track in tracks
        for point in track.points
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def tracks_to_csv(tracks: Iterable[Track]) -> str:
    return tracks_to_frame(tracks).to_csv(index=False)
