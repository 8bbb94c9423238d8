"""Fugazzi - FastAPI Backend.

Game engine for the Fugazzi gem-buying game.
"""

import os
import logging
import random
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .api import api_router
from .services.balance_store import InMemoryBalanceRepository, SqlBalanceRepository
from .services.transaction_feed import TransactionFeedSimulator

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def build_feed() -> TransactionFeedSimulator:
    return TransactionFeedSimulator(
        rng=random.Random(settings.random_seed),
        max_records=settings.feed_max_records,
        seed_count=settings.feed_seed_count,
        min_interval_ms=settings.feed_min_interval_ms,
        max_interval_ms=settings.feed_max_interval_ms,
        extra_delay_chance=settings.feed_extra_delay_chance,
        extra_min_ms=settings.feed_extra_min_ms,
        extra_max_ms=settings.feed_extra_max_ms,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown."""
    logger.info(f"Starting {settings.app_name} API...")

    # Balance storage (fall back to memory if the database is unavailable)
    try:
        from .database import AsyncSessionLocal, init_db
        if AsyncSessionLocal is None:
            raise RuntimeError("no database engine")
        await init_db()
        app.state.balances = SqlBalanceRepository(AsyncSessionLocal)
        logger.info("Database connection successful")
    except Exception as e:
        logger.warning(f"Database unavailable, keeping balances in memory: {e}")
        app.state.balances = InMemoryBalanceRepository()

    app.state.feed = build_feed()
    if settings.feed_enabled:
        app.state.feed.start()

    yield

    logger.info(f"Shutting down {settings.app_name} API...")
    await app.state.feed.stop()
    from .database import async_engine
    if async_engine is not None:
        await async_engine.dispose()


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
    Fugazzi API - buy gems, spot the fakes.

    Features:
    - Procedurally generated gem rounds with tiered risk and reward
    - Round state machine with balance persistence
    - Live feed of simulated transactions (JSON and Server-Sent Events)
    - Expected value per risk tier
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# CORS configuration - allow deployed frontend and localhost
cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

frontend_url = os.environ.get("FRONTEND_URL")
if frontend_url:
    cors_origins.append(frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=f"/api/{settings.api_version}")


@app.get("/")
async def root():
    """Root endpoint - API info."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# For running with uvicorn directly
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "fugazzi.main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 8000)),
        reload=True,
    )
