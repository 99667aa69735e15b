"""
API routes for balloon tracks and ingestion status.
"""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from constellation.api.schemas import (
    AirQualityCurrentResponse,
    AirQualityResponse,
    ErrorResponse,
    HoursResponse,
    HourStatusResponse,
    PositionResponse,
    RefreshResponse,
    SelectionRequest,
    SelectionResponse,
    TrackResponse,
    TrackStatsResponse,
    TrackSummaryResponse,
)
from constellation.models.positions import ConstellationSnapshot, PositionRecord, Track
from constellation.services.air_quality import AirQualityReading
from constellation.services.exporter import tracks_to_csv
from constellation.services.store import SnapshotStore, get_store
from constellation.utils.geo import format_meters


router = APIRouter(prefix="/tracks", tags=["tracks"])

NOT_FOUND = {404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}}


def _require_snapshot(store: SnapshotStore) -> ConstellationSnapshot:
    if store.snapshot is None:
        raise HTTPException(status_code=503, detail="No data ingested yet")
    return store.snapshot


def _require_track(store: SnapshotStore, track_id: str) -> Track:
    _require_snapshot(store)
    track = store.get_track(track_id)
    if track is None:
        raise HTTPException(status_code=404, detail=f"Track not found: {track_id}")
    return track


def _position_response(point: Optional[PositionRecord]) -> Optional[PositionResponse]:
    if point is None:
        return None
    return PositionResponse(**asdict(point))


def _build_stats(track: Track) -> TrackStatsResponse:
    """Build details-panel stats for a track."""
    distance_m = track.total_distance_m()
    newest = track.newest_point
    return TrackStatsResponse(
        point_count=len(track.points),
        distance_m=distance_m,
        distance_label=format_meters(distance_m),
        newest=_position_response(newest),
        oldest=_position_response(track.oldest_point),
        newest_third_value=newest.third_value if newest else None,
        bounding_box=track.get_bounding_box(),
    )


def _refresh_response(snapshot: ConstellationSnapshot) -> RefreshResponse:
    return RefreshResponse(
        updated_at=snapshot.updated_at.isoformat(),
        total_tracks=len(snapshot.tracks),
        total_points=snapshot.result.total_points,
        failed_hours=snapshot.failed_hours,
        diagnostics=snapshot.result.diagnostics(),
    )


@router.get("", response_model=list[TrackSummaryResponse], responses=NOT_FOUND)
async def list_tracks():
    """
    List all tracks from the latest cycle, in first-seen order.
    """
    store = get_store()
    _require_snapshot(store)

    return [
        TrackSummaryResponse(**asdict(summary), selected=summary.id == store.selected_id)
        for summary in store.list_tracks()
    ]


@router.get("/export.csv", responses=NOT_FOUND)
async def export_tracks_csv():
    """
    Every point of every track as CSV.
    """
    snapshot = _require_snapshot(get_store())
    return Response(content=tracks_to_csv(snapshot.tracks), media_type="text/csv")


@router.get("/{track_id}", response_model=TrackResponse, responses=NOT_FOUND)
async def get_track(track_id: str):
    """
    Get a full track (oldest point first) with derived stats.
    """
    track = _require_track(get_store(), track_id)

    return TrackResponse(
        id=track.id,
        points=[_position_response(p) for p in track.points],
        stats=_build_stats(track),
    )


@router.get("/{track_id}/air-quality", response_model=AirQualityResponse, responses=NOT_FOUND)
async def get_track_air_quality(track_id: str):
    """
    Air quality at the track's newest position.

    Lookup failures are reported in the body (ok=false), not as HTTP errors.
    """
    store = get_store()
    track = _require_track(store, track_id)
    newest = track.newest_point
    if newest is None:
        raise HTTPException(status_code=404, detail=f"Track has no points: {track_id}")

    result = await store.air_quality_for(track)
    reading = AirQualityReading.from_payload(result.data) if result.ok else None

    return AirQualityResponse(
        track_id=track.id,
        latitude=newest.lat,
        longitude=newest.lon,
        ok=result.ok,
        error=result.error,
        current=AirQualityCurrentResponse(**asdict(reading)) if reading else None,
        data=result.data,
    )


# ============================================================================
# Ingestion Status Routes
# ============================================================================

status_router = APIRouter(tags=["ingestion"])


@status_router.get("/hours", response_model=HoursResponse)
async def get_hour_statuses():
    """
    Per-hour ingestion status for the latest cycle.

    Failed hours are also rendered as "Hour NN: <error>" diagnostics.
    """
    snapshot = get_store().snapshot
    if snapshot is None:
        return HoursResponse(hours=[], diagnostics=[])

    return HoursResponse(
        updated_at=snapshot.updated_at.isoformat(),
        hours=[
            HourStatusResponse(
                hour_index=h.hour_index,
                ok=h.ok,
                error=h.error,
                error_kind=h.error_kind.value if h.error_kind is not None else None,
                position_count=len(h.positions),
                url=h.url,
            )
            for h in snapshot.result.extracted_by_hour
        ],
        diagnostics=snapshot.result.diagnostics(),
    )


@status_router.post("/refresh", response_model=RefreshResponse)
async def refresh_now():
    """
    Run one ingestion cycle immediately and replace the snapshot.
    """
    snapshot = await get_store().refresh()
    return _refresh_response(snapshot)


@status_router.get("/selection", response_model=SelectionResponse)
async def get_selection():
    """Get the currently selected track id."""
    return SelectionResponse(track_id=get_store().selected_id)


@status_router.post("/selection", response_model=SelectionResponse, responses=NOT_FOUND)
async def set_selection(request: SelectionRequest):
    """
    Select a track (or clear the selection with null).
    """
    store = get_store()
    if request.track_id is not None:
        _require_track(store, request.track_id)

    return SelectionResponse(track_id=store.select(request.track_id))
