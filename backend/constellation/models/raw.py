"""
Raw fetch/parse results (source-format, unnormalized).

The fetcher and parser return these instead of raising so that one bad
hour file never aborts an ingestion cycle.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class FetchStatus(Enum):
    """Outcome of a single bounded HTTP GET."""

    SUCCESS = "success"
    HTTP_ERROR = "httpError"
    NETWORK_ERROR = "networkError"


class ErrorKind(Enum):
    """Why an hour file produced no positions."""

    NETWORK = "network"
    HTTP = "http"
    PARSE = "parse"


@dataclass(frozen=True)
class RawFetchOutcome:
    """Result of fetching one resource."""

    status: FetchStatus
    url: str
    body: Optional[str] = None
    code: Optional[int] = None      # HTTP status, httpError only
    message: Optional[str] = None   # failure detail, errors only

    @classmethod
    def success(cls, url: str, body: str) -> "RawFetchOutcome":
        return cls(status=FetchStatus.SUCCESS, url=url, body=body)

    @classmethod
    def http_error(cls, url: str, code: int) -> "RawFetchOutcome":
        return cls(
            status=FetchStatus.HTTP_ERROR,
            url=url,
            code=code,
            message=f"HTTP {code} from {url}",
        )

    @classmethod
    def network_error(cls, url: str, reason: str) -> "RawFetchOutcome":
        return cls(
            status=FetchStatus.NETWORK_ERROR,
            url=url,
            message=f"Fetch failed for {url}: {reason}",
        )

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.SUCCESS

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        if self.status is FetchStatus.HTTP_ERROR:
            return ErrorKind.HTTP
        if self.status is FetchStatus.NETWORK_ERROR:
            return ErrorKind.NETWORK
        return None


@dataclass(frozen=True)
class ParseResult:
    """Decoded payload, or the reason it could not be decoded."""

    ok: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, data: Any) -> "ParseResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "ParseResult":
        return cls(ok=False, error=error)
