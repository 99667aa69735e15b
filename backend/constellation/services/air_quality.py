"""
Open-Meteo air-quality lookup.

https://open-meteo.com/en/docs/air-quality-api
Requests current conditions plus a few hourly series for one location.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from constellation.config import DEFAULT_AIR_QUALITY_URL, DEFAULT_TIMEOUT_MS
from constellation.models.raw import ParseResult
from constellation.services.fetcher import fetch_json_safely


logger = logging.getLogger(__name__)


CURRENT_FIELDS = ["us_aqi", "pm10", "pm2_5", "carbon_monoxide"]
HOURLY_FIELDS = ["us_aqi", "pm10", "pm2_5"]


@dataclass
class AirQualityReading:
    """Current air-quality values (any may be missing)."""

    us_aqi: Optional[float] = None
    pm2_5: Optional[float] = None     # µg/m³
    pm10: Optional[float] = None      # µg/m³
    carbon_monoxide: Optional[float] = None  # µg/m³

    @classmethod
    def from_payload(cls, data: Any) -> Optional["AirQualityReading"]:
        """Pick the "current" block out of an Open-Meteo response."""
        if not isinstance(data, dict) or not isinstance(data.get("current"), dict):
            return None
        current = data["current"]
        return cls(**{name: current.get(name) for name in CURRENT_FIELDS})


class AirQualityClient:
    """Black-box request/response lookup keyed by latitude/longitude."""

    def __init__(
        self,
        endpoint: str = DEFAULT_AIR_QUALITY_URL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self.timeout_ms = timeout_ms
        self._transport = transport

    def build_url(self, latitude: float, longitude: float) -> str:
        params = {
            "latitude": str(latitude),
            "longitude": str(longitude),
            "current": ",".join(CURRENT_FIELDS),
            "hourly": ",".join(HOURLY_FIELDS),
            "timezone": "auto",
        }
        return str(httpx.URL(self.endpoint, params=params))

    async def fetch(self, latitude: float, longitude: float) -> ParseResult:
        """Returns {ok, data, error}; never raises for network or payload problems."""
        url = self.build_url(latitude, longitude)
        async with httpx.AsyncClient(transport=self._transport, follow_redirects=True) as client:
            result = await fetch_json_safely(client, url, self.timeout_ms)

        if not result.ok:
            logger.warning(f"Air quality lookup failed: {result.error}")
        return result
