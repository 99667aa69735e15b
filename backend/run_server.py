#!/usr/bin/env python3
"""
Launch script for the Constellation Tracker backend.

Usage:
    python run_server.py [--base-url URL] [--timeout-ms MS] [--refresh S] [--port PORT] [--host HOST]

Examples:
    python run_server.py                          # Public treasure feed, refresh every 60s
    python run_server.py --refresh 0              # No background refresh (use POST /refresh)
    python run_server.py --base-url http://localhost:9000/treasure
"""

import argparse
import os
import sys
from pathlib import Path

# Add app to path
sys.path.insert(0, str(Path(__file__).parent))

from constellation.config import (
    AIR_QUALITY_URL_ENV,
    BASE_URL_ENV,
    DEFAULT_AIR_QUALITY_URL,
    DEFAULT_BASE_URL,
    DEFAULT_REFRESH_INTERVAL_S,
    DEFAULT_TIMEOUT_MS,
    REFRESH_S_ENV,
    TIMEOUT_MS_ENV,
)


def build_parser() -> argparse.ArgumentParser:
    """CLI flags; each setting defaults to its environment variable when set."""
    parser = argparse.ArgumentParser(description="Constellation Tracker Backend Server")
    parser.add_argument(
        "--base-url",
        default=os.getenv(BASE_URL_ENV, DEFAULT_BASE_URL),
        help=f"Folder URL holding 00.json..23.json (default: {DEFAULT_BASE_URL})"
    )
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=int(os.getenv(TIMEOUT_MS_ENV, str(DEFAULT_TIMEOUT_MS))),
        help=f"Per-file fetch timeout in ms (default: {DEFAULT_TIMEOUT_MS})"
    )
    parser.add_argument(
        "--refresh",
        type=float,
        default=float(os.getenv(REFRESH_S_ENV, str(DEFAULT_REFRESH_INTERVAL_S))),
        help=f"Refresh interval in seconds, 0 disables (default: {DEFAULT_REFRESH_INTERVAL_S:g})"
    )
    parser.add_argument(
        "--air-quality-url",
        default=os.getenv(AIR_QUALITY_URL_ENV, DEFAULT_AIR_QUALITY_URL),
        help="Open-Meteo air quality endpoint"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to run server on (default: 8000)"
    )
    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for all interfaces)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Run in debug mode"
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    print("Constellation Tracker Backend")
    print("=" * 40)
    print(f"Feed: {args.base_url}")
    print(f"Server: http://{args.host}:{args.port}")
    print("=" * 40)

    # Configure settings for the FastAPI lifespan
    os.environ[BASE_URL_ENV] = args.base_url
    os.environ[TIMEOUT_MS_ENV] = str(args.timeout_ms)
    os.environ[REFRESH_S_ENV] = str(args.refresh)
    os.environ[AIR_QUALITY_URL_ENV] = args.air_quality_url

    print("\nAPI Endpoints:")
    print("  GET  /                       - Health check")
    print("  GET  /health                 - Detailed health")
    print("  GET  /tracks                 - List all tracks")
    print("  GET  /tracks/{id}            - Get one track with stats")
    print("  GET  /tracks/{id}/air-quality - Air quality at newest point")
    print("  GET  /tracks/export.csv      - All points as CSV")
    print("  GET  /hours                  - Per-hour ingestion status")
    print("  POST /refresh                - Run an ingestion cycle now")
    print("  GET|POST /selection          - Selected track")
    print("\nStarting server...")

    import uvicorn

    uvicorn.run(
        "constellation.main:app",
        host=args.host,
        port=args.port,
        reload=args.debug,
        log_level="info",
    )


if __name__ == "__main__":
    main()
