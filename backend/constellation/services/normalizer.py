"""
Schema normalizer for treasure hour files.

The feed is undocumented and drifts between two shapes:
- tuple schema: [[lat, lon, value3], ...]
- object graphs: lat/lon-bearing objects at any nesting depth

An adapter is picked per payload and turns it into PositionRecords.
Records whose coordinates fail validation are dropped silently.
"""

import math
from typing import Any, Optional, Protocol

from constellation.models.positions import HOUR_COUNT, UNKNOWN_ID, PositionRecord


# Candidate keys per field, in priority order (first usable value wins)
KEY_MAPPINGS = {
    "lat": ["lat", "latitude", "y"],
    "lon": ["lon", "lng", "longitude", "x"],
    "altitude": ["alt", "altitude", "z"],
    "time": ["time", "timestamp", "ts", "t"],
    "id": ["id", "balloon_id", "device_id", "uuid", "name", "callsign"],
}

MAX_ABS_LAT = 90.0
MAX_ABS_LON = 180.0


def coerce_number(value: Any) -> Optional[float]:
    """
    Finite float from a JSON scalar, or None.

    Numeric strings are accepted; booleans, null, containers, blank or
    non-numeric strings, digit-group underscores, NaN/inf and integers
    too large for a float are not.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        if "_" in value:
            return None
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def valid_coordinates(lat: Optional[float], lon: Optional[float]) -> bool:
    if lat is None or lon is None:
        return False
    return abs(lat) <= MAX_ABS_LAT and abs(lon) <= MAX_ABS_LON


def pick_first_number(node: dict, keys: list[str]) -> Optional[float]:
    for key in keys:
        if key in node:
            number = coerce_number(node[key])
            if number is not None:
                return number
    return None


def _format_id(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (str, int, float)):
        try:
            return str(value)
        except ValueError:
            # int too long for str() under the digit limit
            return None
    return None


def pick_id(node: dict) -> Optional[str]:
    """First usable id in key priority order; empty strings count as absent."""
    for key in KEY_MAPPINGS["id"]:
        if node.get(key) is not None:
            identity = _format_id(node[key])
            if identity:
                return identity
    return None


class SchemaAdapter(Protocol):
    """Adapter interface for one payload shape."""

    name: str

    def can_parse(self, data: Any) -> bool:
        ...

    def parse(self, data: Any, hour_index: int) -> list[PositionRecord]:
        ...


class TupleSchemaAdapter:
    """
    Adapter for arrays of [lat, lon, value3?] tuples.

    Ids are positional (balloon_<index>), so they are only stable within one
    hour file; if upstream reorders between hours a balloon's track splits.
    """

    name = "tuple"

    def can_parse(self, data: Any) -> bool:
        return isinstance(data, list) and len(data) > 0 and isinstance(data[0], list)

    def parse(self, data: Any, hour_index: int) -> list[PositionRecord]:
        records = []
        for index, item in enumerate(data):
            if not isinstance(item, list):
                continue

            lat = coerce_number(item[0]) if len(item) > 0 else None
            lon = coerce_number(item[1]) if len(item) > 1 else None
            if not valid_coordinates(lat, lon):
                continue

            third_value = coerce_number(item[2]) if len(item) > 2 else None
            records.append(PositionRecord(
                id=f"balloon_{index}",
                lat=lat,
                lon=lon,
                hour_index=hour_index,
                third_value=third_value,
            ))
        return records


class ObjectGraphAdapter:
    """
    Fallback adapter: depth-first scan for objects carrying lat+lon.

    Uses an explicit stack so deep payloads cannot exhaust the call stack.
    Each stack entry carries the identity hint inherited from its nearest
    identity-bearing ancestor.
    """

    name = "object_graph"

    def can_parse(self, data: Any) -> bool:
        return True

    def parse(self, data: Any, hour_index: int) -> list[PositionRecord]:
        records = []
        stack: list[tuple[Any, Optional[str]]] = [(data, None)]

        while stack:
            value, id_hint = stack.pop()

            if isinstance(value, list):
                # reversed so items come off the stack in document order
                stack.extend((item, id_hint) for item in reversed(value))
                continue
            if not isinstance(value, dict):
                continue

            own_id = pick_id(value)
            record = self._match(value, hour_index, own_id or id_hint or UNKNOWN_ID)
            if record is not None:
                records.append(record)

            child_hint = own_id or id_hint
            stack.extend((child, child_hint) for child in reversed(list(value.values())))

        return records

    def _match(self, node: dict, hour_index: int, identity: str) -> Optional[PositionRecord]:
        lat = pick_first_number(node, KEY_MAPPINGS["lat"])
        lon = pick_first_number(node, KEY_MAPPINGS["lon"])
        if not valid_coordinates(lat, lon):
            return None

        return PositionRecord(
            id=identity,
            lat=lat,
            lon=lon,
            hour_index=hour_index,
            altitude_m=pick_first_number(node, KEY_MAPPINGS["altitude"]),
            timestamp=pick_first_number(node, KEY_MAPPINGS["time"]),
        )


ADAPTERS: list[SchemaAdapter] = [
    TupleSchemaAdapter(),
    ObjectGraphAdapter(),
]


def _select_adapter(data: Any) -> SchemaAdapter:
    for adapter in ADAPTERS:
        if adapter.can_parse(data):
            return adapter
    raise ValueError(f"No schema adapter for payload of type {type(data).__name__}")


def normalize(data: Any, hour_index: int) -> list[PositionRecord]:
    """
    Extract validated positions from one decoded hour file.

    A payload with nothing position-like in it yields an empty list.
    """
    if not 0 <= hour_index < HOUR_COUNT:
        raise ValueError(f"hour_index must be in [0, {HOUR_COUNT - 1}], got {hour_index}")

    return _select_adapter(data).parse(data, hour_index)
