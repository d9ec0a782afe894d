"""
Health Check API Routes

Endpoints:
- GET /api/health: Service health check
"""

from fastapi import APIRouter, Depends, status
from datetime import datetime, timezone
import logging
from typing import Optional

from supabase import Client

from ...db.supabase_client import check_connection, get_supabase_if_configured
from .schemas import HealthResponse

# Configure logging
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(prefix="/api", tags=["health"])


# ============================================================================
# Health Check Endpoint
# ============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Service is healthy or degraded"},
    }
)
async def health_check(client: Optional[Client] = Depends(get_supabase_if_configured)) -> HealthResponse:
    """
    Health check endpoint for monitoring service availability.

    Checks:
    - Supabase is configured and answers a one-row select on profiles

    Returns:
        "healthy" when every component is ok, otherwise "degraded"
    """
    supabase_healthy = client is not None and await check_connection(client)
    if not supabase_healthy:
        logger.warning("Health check: Supabase unreachable or not configured")

    return HealthResponse(
        status="healthy" if supabase_healthy else "degraded",
        components={"supabase": "ok" if supabase_healthy else "error"},
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
