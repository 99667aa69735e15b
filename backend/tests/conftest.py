"""
Shared fixtures: an offline stand-in for the treasure feed.
"""

import json
from typing import Callable, Union

import httpx
import pytest


FEED_BASE_URL = "http://feed.test/treasure"

HourBody = Union[str, httpx.Response, Callable[[httpx.Request], httpx.Response]]


def hour_of(request: httpx.Request) -> int:
    """'/treasure/07.json' -> 7"""
    return int(request.url.path.rsplit("/", 1)[-1].split(".")[0])


def feed_transport(bodies: dict[int, HourBody], default: HourBody = "[]") -> httpx.MockTransport:
    """
    MockTransport serving one body per hour file.

    Values may be raw text (served as 200), a ready httpx.Response, or a
    callable taking the request (e.g. to raise a transport error).
    """
    def handler(request: httpx.Request) -> httpx.Response:
        body = bodies.get(hour_of(request), default)
        if callable(body):
            return body(request)
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(200, text=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def single_id_feed():
    """Every hour holds one position for balloon "A"."""
    bodies = {
        h: json.dumps({"id": "A", "lat": 10.0 + h, "lon": 20.0, "alt": 15000})
        for h in range(24)
    }
    return bodies
