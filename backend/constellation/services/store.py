"""
Snapshot Store - holds the latest ingestion cycle for the API.

Each refresh swaps in a new immutable ConstellationSnapshot; nothing is
mutated in place. Overlapping refreshes are not serialized, so the last
one to finish wins.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from constellation.config import Settings
from constellation.models.positions import ConstellationSnapshot, Track, TrackSummary
from constellation.models.raw import ParseResult
from constellation.services.air_quality import AirQualityClient
from constellation.services.orchestrator import TreasureIngestor


logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    In-memory holder for the current constellation snapshot and the
    selected track.
    """

    def __init__(
        self,
        ingestor: Optional[TreasureIngestor] = None,
        air_quality: Optional[AirQualityClient] = None,
    ):
        """
        Args:
            ingestor: Runs ingestion cycles. Defaults to the public feed.
            air_quality: Air-quality lookup. Defaults to Open-Meteo.
        """
        self._ingestor = ingestor or TreasureIngestor()
        self._air_quality = air_quality or AirQualityClient()
        self._snapshot: Optional[ConstellationSnapshot] = None
        self._selected_id: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SnapshotStore":
        return cls(
            ingestor=TreasureIngestor(settings.base_url, settings.timeout_ms),
            air_quality=AirQualityClient(settings.air_quality_url, settings.timeout_ms),
        )

    @property
    def snapshot(self) -> Optional[ConstellationSnapshot]:
        return self._snapshot

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    async def refresh(self) -> ConstellationSnapshot:
        """
        Run one ingestion cycle and replace the current snapshot.

        Auto-selects the first track when nothing is selected yet.
        """
        result = await self._ingestor.run()
        snapshot = ConstellationSnapshot(result=result, updated_at=datetime.now(timezone.utc))
        self._snapshot = snapshot

        if self._selected_id is None and snapshot.tracks:
            self._selected_id = snapshot.tracks[0].id

        return snapshot

    def list_tracks(self) -> list[TrackSummary]:
        if self._snapshot is None:
            return []
        return [TrackSummary.from_track(t) for t in self._snapshot.tracks]

    def get_track(self, track_id: str) -> Optional[Track]:
        if self._snapshot is None:
            return None
        return self._snapshot.result.get_track(track_id)

    def diagnostics(self) -> list[str]:
        if self._snapshot is None:
            return []
        return self._snapshot.result.diagnostics()

    def select(self, track_id: Optional[str]) -> Optional[str]:
        """Select a track id (None clears the selection)."""
        self._selected_id = track_id
        return self._selected_id

    def selected_track(self) -> Optional[Track]:
        if self._selected_id is None:
            return None
        return self.get_track(self._selected_id)

    async def air_quality_for(self, track: Track) -> Optional[ParseResult]:
        """Air quality at the track's newest point (None for an empty track)."""
        newest = track.newest_point
        if newest is None:
            return None
        return await self._air_quality.fetch(newest.lat, newest.lon)


async def refresh_forever(store: SnapshotStore, interval_s: float) -> None:
    """Refresh on a fixed cadence until cancelled."""
    while True:
        try:
            snapshot = await store.refresh()
            logger.info(
                f"Snapshot updated: {len(snapshot.tracks)} tracks, "
                f"{snapshot.failed_hours} failed hours"
            )
        except Exception as e:
            logger.error(f"Refresh cycle failed: {e}")
        await asyncio.sleep(interval_s)


# Global store instance (set up by app initialization)
_store: Optional[SnapshotStore] = None


def get_store() -> SnapshotStore:
    """Get the global store instance."""
    global _store
    if _store is None:
        _store = SnapshotStore()
    return _store


def init_store(store: SnapshotStore) -> SnapshotStore:
    """Install the global store."""
    global _store
    _store = store
    return _store
