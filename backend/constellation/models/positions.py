"""
Canonical position/track data model.

Every ingestion cycle produces a fresh, immutable set of these objects:
- one HourlyExtraction per hour file (00 = newest, 23 = oldest)
- one Track per distinct inferred balloon id
Nothing is merged across cycles.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from constellation.models.raw import ErrorKind
from constellation.utils.geo import path_length_m


HOUR_COUNT = 24
UNKNOWN_ID = "unknown"


@dataclass(frozen=True)
class PositionRecord:
    """A single validated balloon position from one hour file."""

    id: str
    lat: float                              # degrees, [-90, 90]
    lon: float                              # degrees, [-180, 180]
    hour_index: int                         # 0 = newest, 23 = oldest
    altitude_m: Optional[float] = None
    timestamp: Optional[float] = None
    third_value: Optional[float] = None     # unlabelled 3rd tuple value


@dataclass(frozen=True)
class HourlyExtraction:
    """Per-hour ingestion result; the unit of diagnostic reporting."""

    hour_index: int
    ok: bool
    error: Optional[str] = None
    positions: tuple[PositionRecord, ...] = ()
    error_kind: Optional[ErrorKind] = None
    url: Optional[str] = None

    def __post_init__(self):
        if not self.ok and self.positions:
            raise ValueError("Failed hour extraction cannot carry positions")

    @classmethod
    def failed(
        cls,
        hour_index: int,
        error: str,
        error_kind: ErrorKind,
        url: Optional[str] = None,
    ) -> "HourlyExtraction":
        return cls(hour_index=hour_index, ok=False, error=error, error_kind=error_kind, url=url)

    @property
    def diagnostic(self) -> Optional[str]:
        if self.ok:
            return None
        return f"Hour {self.hour_index:02d}: {self.error}"


@dataclass(frozen=True)
class Track:
    """
    Time-ordered positions sharing one inferred id.

    Points run oldest -> newest (hour 23 first, hour 0 last).
    """

    id: str
    points: tuple[PositionRecord, ...] = ()

    @property
    def newest_point(self) -> Optional[PositionRecord]:
        """Point from hour 00 if present, otherwise the last (newest) point."""
        for point in self.points:
            if point.hour_index == 0:
                return point
        return self.points[-1] if self.points else None

    @property
    def oldest_point(self) -> Optional[PositionRecord]:
        return self.points[0] if self.points else None

    def total_distance_m(self) -> float:
        """Approximate distance travelled over the sampled points."""
        return path_length_m(
            [p.lat for p in self.points],
            [p.lon for p in self.points],
        )

    def get_bounding_box(self) -> tuple[float, float, float, float]:
        """(min_lat, min_lon, max_lat, max_lon), zeros for an empty track."""
        if not self.points:
            return (0.0, 0.0, 0.0, 0.0)
        lats = [p.lat for p in self.points]
        lons = [p.lon for p in self.points]
        return (min(lats), min(lons), max(lats), max(lons))


@dataclass(frozen=True)
class IngestionResult:
    """Output of one ingestion cycle."""

    extracted_by_hour: tuple[HourlyExtraction, ...]
    tracks: tuple[Track, ...]

    @property
    def total_points(self) -> int:
        return sum(len(t.points) for t in self.tracks)

    def diagnostics(self) -> list[str]:
        """Human-readable lines for every failed hour."""
        return [h.diagnostic for h in self.extracted_by_hour if not h.ok]

    def get_track(self, track_id: str) -> Optional[Track]:
        for track in self.tracks:
            if track.id == track_id:
                return track
        return None


@dataclass(frozen=True)
class ConstellationSnapshot:
    """What the API serves until the next cycle replaces it."""

    result: IngestionResult
    updated_at: datetime

    @property
    def failed_hours(self) -> int:
        return sum(1 for h in self.result.extracted_by_hour if not h.ok)

    @property
    def tracks(self) -> tuple[Track, ...]:
        return self.result.tracks


@dataclass
class TrackSummary:
    """Lightweight summary of a track for listing and map markers."""

    id: str
    point_count: int
    newest_lat: Optional[float]
    newest_lon: Optional[float]
    newest_hour_index: Optional[int]

    @classmethod
    def from_track(cls, track: Track) -> "TrackSummary":
        newest = track.newest_point
        return cls(
            id=track.id,
            point_count=len(track.points),
            newest_lat=newest.lat if newest else None,
            newest_lon=newest.lon if newest else None,
            newest_hour_index=newest.hour_index if newest else None,
        )
