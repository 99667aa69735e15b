"""
API schemas (Pydantic models) for request/response validation.
"""

from typing import Any, Optional
from pydantic import BaseModel


# ============================================================================
# Track Schemas
# ============================================================================

class PositionResponse(BaseModel):
    """Single balloon position."""
    id: str
    lat: float
    lon: float
    hour_index: int
    altitude_m: Optional[float] = None
    timestamp: Optional[float] = None
    third_value: Optional[float] = None


class TrackSummaryResponse(BaseModel):
    """Summary of a track for listing / map markers."""
    id: str
    point_count: int
    newest_lat: Optional[float] = None
    newest_lon: Optional[float] = None
    newest_hour_index: Optional[int] = None
    selected: bool = False


class TrackStatsResponse(BaseModel):
    """Derived details for the selected-track panel."""
    point_count: int
    distance_m: float
    distance_label: str
    newest: Optional[PositionResponse] = None
    oldest: Optional[PositionResponse] = None
    newest_third_value: Optional[float] = None
    bounding_box: tuple[float, float, float, float]  # (min_lat, min_lon, max_lat, max_lon)


class TrackResponse(BaseModel):
    """Full track, oldest point first."""
    id: str
    points: list[PositionResponse]
    stats: TrackStatsResponse


# ============================================================================
# Ingestion Status Schemas
# ============================================================================

class HourStatusResponse(BaseModel):
    """Outcome of one hour file."""
    hour_index: int
    ok: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None
    position_count: int
    url: Optional[str] = None


class HoursResponse(BaseModel):
    """Per-hour statuses plus display-ready diagnostics."""
    updated_at: Optional[str] = None
    hours: list[HourStatusResponse]
    diagnostics: list[str]


class RefreshResponse(BaseModel):
    """Summary of a completed ingestion cycle."""
    updated_at: str
    total_tracks: int
    total_points: int
    failed_hours: int
    diagnostics: list[str]


# ============================================================================
# Selection / Air Quality Schemas
# ============================================================================

class SelectionRequest(BaseModel):
    """Request to select a track (null clears the selection)."""
    track_id: Optional[str] = None


class SelectionResponse(BaseModel):
    """Currently selected track id."""
    track_id: Optional[str] = None


class AirQualityCurrentResponse(BaseModel):
    """Current air-quality values at a location."""
    us_aqi: Optional[float] = None
    pm2_5: Optional[float] = None
    pm10: Optional[float] = None
    carbon_monoxide: Optional[float] = None


class AirQualityResponse(BaseModel):
    """Air-quality lookup result for a track's newest point."""
    track_id: str
    latitude: float
    longitude: float
    ok: bool
    error: Optional[str] = None
    current: Optional[AirQualityCurrentResponse] = None
    data: Optional[Any] = None


# ============================================================================
# Error Schemas
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    code: Optional[str] = None
