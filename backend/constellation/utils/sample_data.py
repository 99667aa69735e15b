"""
Sample data generator for testing.

Generates realistic-looking treasure hour files: balloons drifting east
with the jet stream, in either the tuple schema or a nested object schema.
"""

import json
from pathlib import Path
from typing import Any, Optional

import numpy as np

from constellation.models.positions import HOUR_COUNT


def generate_drift_paths(
    n_balloons: int = 5,
    hours: int = HOUR_COUNT,
    seed: Optional[int] = 0,
    drift_deg_per_hour: float = 0.4,
) -> np.ndarray:
    """
    Generate balloon positions for every hour.

    Returns:
        Array of shape (hours, n_balloons, 3): lat, lon, altitude (km).
        Index 0 on the first axis is the newest hour.
    """
    rng = np.random.default_rng(seed)

    start_lat = rng.uniform(-60, 60, n_balloons)
    start_lon = rng.uniform(-170, 170, n_balloons)
    altitude_km = rng.uniform(10, 20, n_balloons)

    # hours since the oldest file; row 0 (newest) has drifted furthest
    steps = np.arange(hours)[::-1][:, None]
    lat = start_lat + rng.normal(0, 0.05, (hours, n_balloons)).cumsum(axis=0)
    lon = start_lon + steps * drift_deg_per_hour
    alt = altitude_km + rng.normal(0, 0.2, (hours, n_balloons))

    lat = np.clip(lat, -90, 90)
    lon = (lon + 180) % 360 - 180

    return np.stack([lat, lon, alt], axis=-1)


def tuple_payload(positions: np.ndarray) -> list[list[float]]:
    """Tuple schema for one hour: [[lat, lon, alt_km], ...]."""
    return [[float(lat), float(lon), float(alt)] for lat, lon, alt in positions]


def object_payload(positions: np.ndarray, hour_index: int) -> dict[str, Any]:
    """Nested object schema for one hour, ids on the parent objects."""
    return {
        "hour": hour_index,
        "balloons": [
            {
                "balloon_id": f"WB-{i:03d}",
                "fix": {"latitude": float(lat), "longitude": float(lon), "altitude": float(alt) * 1000},
            }
            for i, (lat, lon, alt) in enumerate(positions)
        ],
    }


def write_sample_feed(
    output_dir: Path,
    n_balloons: int = 5,
    schema: str = "tuple",
    corrupt_hours: tuple[int, ...] = (),
    seed: Optional[int] = 0,
) -> list[Path]:
    """
    Write 00.json .. 23.json into output_dir.

    Hours listed in corrupt_hours get a truncated body, like the real feed
    occasionally serves.
    """
    if schema not in ("tuple", "object"):
        raise ValueError(f"Unknown schema: {schema}")

    output_dir.mkdir(parents=True, exist_ok=True)
    paths = generate_drift_paths(n_balloons=n_balloons, seed=seed)

    written = []
    for hour_index in range(HOUR_COUNT):
        if schema == "tuple":
            payload = tuple_payload(paths[hour_index])
        else:
            payload = object_payload(paths[hour_index], hour_index)

        text = json.dumps(payload)
        if hour_index in corrupt_hours:
            text = text[: len(text) // 2]

        path = output_dir / f"{hour_index:02d}.json"
        path.write_text(text)
        written.append(path)

    return written


if __name__ == "__main__":
    import sys

    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("./data/treasure")
    files = write_sample_feed(out, corrupt_hours=(7,))
    print(f"Wrote {len(files)} hour files to {out}")
