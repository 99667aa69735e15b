#!/usr/bin/env python3
"""
Run a single ingestion cycle from the command line.

Usage:
    python run_ingest.py [--base-url URL] [--timeout-ms MS] [--csv OUT.csv] [--verbose]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add app to path
sys.path.insert(0, str(Path(__file__).parent))

from constellation.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS
from constellation.services.exporter import tracks_to_csv
from constellation.services.orchestrator import TreasureIngestor


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Fetch the last 24 hour files and build tracks")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Folder URL holding 00.json..23.json")
    parser.add_argument("--timeout-ms", type=int, default=DEFAULT_TIMEOUT_MS, help="Per-file timeout in ms")
    parser.add_argument("--csv", type=Path, help="Write all points to this CSV file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    ingestor = TreasureIngestor(args.base_url, args.timeout_ms)
    result = asyncio.run(ingestor.run())

    for line in result.diagnostics():
        print(line, file=sys.stderr)

    print(f"Tracks: {len(result.tracks)}")
    print(f"Points: {result.total_points}")

    if args.csv is not None:
        args.csv.write_text(tracks_to_csv(result.tracks))
        print(f"CSV: {args.csv}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
