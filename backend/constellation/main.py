"""
Constellation Tracker - FastAPI Backend

Main application entry point and configuration.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from constellation.api.tracks import router as tracks_router, status_router
from constellation.config import Settings
from constellation.services.store import SnapshotStore, get_store, init_store, refresh_forever


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


APP_NAME = "Constellation Tracker"
APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    settings = Settings.from_env()
    logger.info(f"Starting {APP_NAME} backend (feed: {settings.base_url})")

    store = init_store(SnapshotStore.from_settings(settings))

    refresh_task = None
    if settings.refresh_interval_s > 0:
        refresh_task = asyncio.create_task(refresh_forever(store, settings.refresh_interval_s))
        logger.info(f"Refreshing every {settings.refresh_interval_s:g}s")
    else:
        logger.info("Background refresh disabled; use POST /refresh")

    yield

    # Shutdown
    if refresh_task is not None:
        refresh_task.cancel()
        try:
            await refresh_task
        except asyncio.CancelledError:
            pass
    logger.info(f"Shutting down {APP_NAME} backend")


# Create FastAPI app
app = FastAPI(
    title=APP_NAME,
    description="""
    Backend API for the balloon constellation dashboard.

    ## Features
    - Pull the last 24 hourly treasure files concurrently
    - Tolerate corrupted files and drifting payload schemas
    - Group positions into per-balloon tracks (oldest -> newest)
    - Air quality (Open-Meteo) at a track's newest position

    ## Data Flow
    1. Snapshot refreshes in the background (or via POST /refresh)
    2. List tracks via GET /tracks
    3. Get one track via GET /tracks/{id}
    4. Check failed hour files via GET /hours
    """,
    version=APP_VERSION,
    lifespan=lifespan,
)


# CORS middleware (allow all origins for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(tracks_router)
app.include_router(status_router)


@app.get("/")
async def root():
    """Root endpoint - basic health check."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    snapshot = get_store().snapshot

    return {
        "status": "healthy",
        "last_updated": snapshot.updated_at.isoformat() if snapshot else None,
        "total_tracks": len(snapshot.tracks) if snapshot else 0,
        "total_points": snapshot.result.total_points if snapshot else 0,
        "failed_hours": snapshot.failed_hours if snapshot else None,
    }
