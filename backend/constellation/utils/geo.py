"""
Geodesic helpers for balloon tracks.

Distances are great-circle (haversine) on a spherical Earth, which is
plenty for hourly samples hundreds of kilometres apart.
"""

import math
from typing import Sequence, Union

import numpy as np
from numpy.typing import NDArray

EARTH_RADIUS_M = 6371000.0  # mean radius

FloatOrArray = Union[float, NDArray[np.float64]]


def haversine_distance(
    lat1: FloatOrArray,
    lon1: FloatOrArray,
    lat2: FloatOrArray,
    lon2: FloatOrArray,
) -> FloatOrArray:
    """
    Calculate great-circle distance between two points (or arrays of points).

    Args:
        lat1, lon1: First point coordinates in degrees
        lat2, lon2: Second point coordinates in degrees

    Returns:
        Distance in meters
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    dlat = np.radians(np.subtract(lat2, lat1))
    dlon = np.radians(np.subtract(lon2, lon1))

    a = np.sin(dlat / 2) ** 2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def path_length_m(lats: Sequence[float], lons: Sequence[float]) -> float:
    """
    Sum of leg distances along an ordered path.

    Paths with fewer than two points have zero length.
    """
    lat = np.asarray(lats, dtype=np.float64)
    lon = np.asarray(lons, dtype=np.float64)
    if lat.shape != lon.shape:
        raise ValueError(f"lat/lon length mismatch: {lat.shape} vs {lon.shape}")
    if len(lat) < 2:
        return 0.0

    legs = haversine_distance(lat[:-1], lon[:-1], lat[1:], lon[1:])
    return float(np.sum(legs))


def format_meters(meters: float) -> str:
    """Human label: metres below 1 km, kilometres with one decimal above."""
    if meters is None or not math.isfinite(meters):
        return "—"
    if meters < 1000:
        return f"{meters:.0f} m"
    return f"{meters / 1000:.1f} km"
