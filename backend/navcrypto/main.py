"""FastAPI Application Entry Point

NavCrypto backend: trading signals, courses and member dashboards for a
crypto education platform, backed by Supabase.

This module wires together:
1. Logging configuration
2. REST API routes (public, auth, member dashboard, admin consoles)
3. SSE change feeds under /api/stream
4. CORS middleware for the web frontend
5. Domain error handlers

Run with:
    uvicorn navcrypto.main:app --reload --port 8000
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import sys
from typing import AsyncGenerator

from . import __version__
from .config import get_settings
from .db.supabase_client import reset_client
from .errors import register_error_handlers
from .api import routes, sse

settings = get_settings()

# Configure logging
_handlers = [logging.StreamHandler(sys.stdout)]
if settings.log_file:
    _handlers.append(logging.FileHandler(settings.log_file))

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=_handlers
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log the configuration on startup and drop the shared client on shutdown.

    The Supabase client itself is created lazily on first use, so a missing
    key shows up as a degraded /api/health rather than a failed boot.
    """
    logger.info("=" * 80)
    logger.info("Starting NavCrypto Backend")
    logger.info("=" * 80)

    logger.info("Environment Configuration:")
    logger.info(f"  - SUPABASE_URL: {settings.supabase_url or 'NOT SET'}")
    logger.info(f"  - SUPABASE_SERVICE_KEY: {'***' if settings.supabase_service_key else 'NOT SET'}")
    logger.info(f"  - SUPABASE_ANON_KEY: {'***' if settings.supabase_anon_key else 'NOT SET (using service key)'}")
    logger.info(f"  - SITE_URL: {settings.site_url}")
    logger.info(f"  - CORS_ORIGINS: {', '.join(settings.cors_origins)}")

    logger.info("=" * 80)
    logger.info("Backend startup complete! Ready to accept requests.")
    logger.info("=" * 80)

    try:
        yield
    finally:
        logger.info("=" * 80)
        logger.info("Shutting down NavCrypto Backend")
        logger.info("=" * 80)
        reset_client()
        logger.info("Shutdown complete")


# ============================================================================
# FastAPI Application
# ============================================================================

app = FastAPI(
    title="NavCrypto API",
    description=(
        "Backend API for the NavCrypto trading education platform. "
        "Serves trading signals, courses and member dashboards, plus the "
        "admin consoles, with Supabase persistence and SSE change feeds."
    ),
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================================
# CORS Middleware
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


# ============================================================================
# Route Registration
# ============================================================================

app.include_router(routes.router)

# SSE change feeds: /api/stream/signals, /api/stream/admin/...
app.include_router(sse.router, prefix="/api/stream", tags=["sse"])


@app.get("/", tags=["health"])
async def root():
    """Root endpoint - service banner."""
    return {
        "service": "NavCrypto API",
        "status": "running",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/health"
    }


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting development server with uvicorn...")
    uvicorn.run(
        "navcrypto.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info"
    )
