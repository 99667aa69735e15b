"""
Payload parser: raw hour-file text -> decoded JSON value.

Hour files are sometimes truncated or otherwise corrupted upstream, so a
decode failure is an expected outcome, not an exception.
"""

import json

from constellation.models.raw import ParseResult


def _reject_constant(name: str):
    raise ValueError(f"Invalid JSON constant: {name}")


def parse_payload(text: str, source_url: str) -> ParseResult:
    """
    Decode strict JSON text (NaN / Infinity literals are rejected).

    Args:
        text: Response body
        source_url: Where the text came from (included in the error)

    Returns:
        ParseResult with the decoded value, or the decode error
    """
    try:
        return ParseResult.success(json.loads(text, parse_constant=_reject_constant))
    except (ValueError, RecursionError) as e:
        # JSONDecodeError is a ValueError; absurd nesting hits the recursion limit
        return ParseResult.failure(f"Invalid JSON from {source_url}: {type(e).__name__}: {e}")
