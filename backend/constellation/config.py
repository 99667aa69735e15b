"""
Runtime configuration.

Values come from the environment so run_server.py (and deployments) can
override them without touching code.
"""

import os
from dataclasses import dataclass


DEFAULT_BASE_URL = "https://a.windbornesystems.com/treasure"
DEFAULT_TIMEOUT_MS = 12_000
DEFAULT_REFRESH_INTERVAL_S = 60.0
DEFAULT_AIR_QUALITY_URL = "https://air-quality-api.open-meteo.com/v1/air-quality"

BASE_URL_ENV = "CONSTELLATION_BASE_URL"
TIMEOUT_MS_ENV = "CONSTELLATION_TIMEOUT_MS"
REFRESH_S_ENV = "CONSTELLATION_REFRESH_S"
AIR_QUALITY_URL_ENV = "CONSTELLATION_AIR_QUALITY_URL"


@dataclass(frozen=True)
class Settings:
    """Ingestion and lookup settings."""

    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    refresh_interval_s: float = DEFAULT_REFRESH_INTERVAL_S  # 0 disables the loop
    air_quality_url: str = DEFAULT_AIR_QUALITY_URL

    def __post_init__(self):
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {self.timeout_ms}")
        if self.refresh_interval_s < 0:
            raise ValueError(f"refresh_interval_s must be >= 0, got {self.refresh_interval_s}")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            base_url=os.getenv(BASE_URL_ENV, DEFAULT_BASE_URL),
            timeout_ms=int(os.getenv(TIMEOUT_MS_ENV, str(DEFAULT_TIMEOUT_MS))),
            refresh_interval_s=float(os.getenv(REFRESH_S_ENV, str(DEFAULT_REFRESH_INTERVAL_S))),
            air_quality_url=os.getenv(AIR_QUALITY_URL_ENV, DEFAULT_AIR_QUALITY_URL),
        )
