"""
Bounded HTTP fetcher.

One GET per call, no retries (the refresh cadence is the retry policy).
Failures come back as RawFetchOutcome values; nothing raises past here.
"""

import asyncio
import logging

import httpx

from constellation.config import DEFAULT_TIMEOUT_MS
from constellation.models.raw import ParseResult, RawFetchOutcome
from constellation.services.payload_parser import parse_payload


logger = logging.getLogger(__name__)


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> RawFetchOutcome:
    """
    GET a URL and return its body, or why it could not be fetched.

    Args:
        client: Shared async client
        url: Absolute resource URL
        timeout_ms: Budget for the whole request (connect + read)

    Returns:
        success with body, httpError with status code, or networkError
    """
    timeout_s = timeout_ms / 1000.0

    try:
        # wait_for cancels the request and releases its timer on every exit path
        response = await asyncio.wait_for(client.get(url, timeout=timeout_s), timeout=timeout_s)
    except asyncio.TimeoutError:
        logger.debug(f"Timed out fetching {url}")
        return RawFetchOutcome.network_error(url, f"timed out after {timeout_ms} ms")
    except httpx.TimeoutException as e:
        logger.debug(f"Timed out fetching {url}: {e!r}")
        return RawFetchOutcome.network_error(url, f"timed out after {timeout_ms} ms")
    except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
        logger.debug(f"Transport failure for {url}: {e!r}")
        return RawFetchOutcome.network_error(url, f"{type(e).__name__}: {e}")

    if not response.is_success:
        return RawFetchOutcome.http_error(url, response.status_code)

    body = response.text
    logger.debug(f"Fetched {url} ({len(body)} chars)")
    return RawFetchOutcome.success(url, body)


async def fetch_json_safely(
    client: httpx.AsyncClient,
    url: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> ParseResult:
    """Fetch and decode JSON in one step; every failure becomes ParseResult(ok=False)."""
    outcome = await fetch_text(client, url, timeout_ms)
    if not outcome.ok:
        return ParseResult.failure(outcome.message)
    return parse_payload(outcome.body, url)
