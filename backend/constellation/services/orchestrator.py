"""
Ingestion orchestrator.

Fetches every hour file concurrently, then parses, normalizes and
assembles strictly after all fetches have settled. A failing hour only
empties its own slot.
"""

import asyncio
import logging
from typing import Optional

import httpx

from constellation.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS
from constellation.models.positions import HOUR_COUNT, HourlyExtraction, IngestionResult
from constellation.models.raw import ErrorKind, RawFetchOutcome
from constellation.services.assembler import assemble_tracks
from constellation.services.fetcher import fetch_text
from constellation.services.normalizer import normalize
from constellation.services.payload_parser import parse_payload


logger = logging.getLogger(__name__)


def build_extraction(hour_index: int, outcome: RawFetchOutcome) -> HourlyExtraction:
    """Turn one hour's fetch outcome into its HourlyExtraction."""
    if not outcome.ok:
        return HourlyExtraction.failed(hour_index, outcome.message, outcome.error_kind, outcome.url)

    parsed = parse_payload(outcome.body, outcome.url)
    if not parsed.ok:
        return HourlyExtraction.failed(hour_index, parsed.error, ErrorKind.PARSE, outcome.url)
    if parsed.data is None:
        return HourlyExtraction.failed(
            hour_index, f"Empty payload (null) from {outcome.url}", ErrorKind.PARSE, outcome.url
        )

    return HourlyExtraction(
        hour_index=hour_index,
        ok=True,
        positions=tuple(normalize(parsed.data, hour_index)),
        url=outcome.url,
    )


class TreasureIngestor:
    """
    Runs one ingestion cycle against the hourly treasure feed.

    Each run() is independent and returns a brand new IngestionResult;
    callers replace whatever they held before.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        hour_count: int = HOUR_COUNT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Folder URL holding 00.json .. 23.json
            timeout_ms: Per-file request budget
            hour_count: How many hour files to pull (at most 24)
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        if not 1 <= hour_count <= HOUR_COUNT:
            raise ValueError(f"hour_count must be in [1, {HOUR_COUNT}], got {hour_count}")

        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms
        self.hour_count = hour_count
        self._transport = transport

    def hour_url(self, hour_index: int) -> str:
        return f"{self.base_url}/{hour_index:02d}.json"

    async def run(self) -> IngestionResult:
        hours = range(self.hour_count)

        async with httpx.AsyncClient(transport=self._transport, follow_redirects=True) as client:
            outcomes = await asyncio.gather(
                *(fetch_text(client, self.hour_url(h), self.timeout_ms) for h in hours)
            )

        extractions = tuple(build_extraction(h, outcome) for h, outcome in zip(hours, outcomes))
        for extraction in extractions:
            if not extraction.ok:
                logger.warning(extraction.diagnostic)

        tracks = tuple(assemble_tracks(extractions))
        result = IngestionResult(extracted_by_hour=extractions, tracks=tracks)

        failed = sum(1 for e in extractions if not e.ok)
        logger.info(
            f"Ingested {len(extractions) - failed}/{len(extractions)} hour files: "
            f"{len(tracks)} tracks, {result.total_points} points"
        )
        return result
