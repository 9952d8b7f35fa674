"""
Workspace Video Calls Backend - Main Application

This is the entry point for the FastAPI application.
It handles:
- REST API endpoints for the call lifecycle (under /api)
- Health reporting for the database and Redis
- Prometheus metrics exposition (/metrics)
"""
from contextlib import asynccontextmanager
import logging
from datetime import datetime, UTC

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from videocalls.api import router as api_router
from videocalls.config.redis import get_redis, close_redis, redis_is_up
from videocalls.models.database import init_db

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Creates missing tables and opens the Redis connection on startup.
    """
    # === STARTUP ===
    logger.info("🚀 Starting Workspace Video Calls Backend...")

    await init_db()
    logger.info("✅ Database tables ready")

    await get_redis()
    logger.info("✅ Redis connected")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("🛑 Shutting down...")
    await close_redis()


app = FastAPI(
    title="Workspace Video Calls Backend",
    description="Scheduling and lifecycle of client/freelancer video calls",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include REST API routes
app.include_router(api_router, prefix="/api")

# Prometheus scrape endpoint
app.mount("/metrics", make_asgi_app())


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Workspace Video Calls",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "redis": await redis_is_up(),
    }
