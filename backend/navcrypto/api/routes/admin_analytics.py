"""
Admin Analytics API Routes

Endpoints:
- GET /api/admin/analytics?period=7d|30d|90d|1y: Period analytics
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
import logging

from supabase import Client

from ...auth.session import CurrentUser, require_admin
from ...db.supabase_client import get_supabase
from ...models import AnalyticsPeriod
from ...services import analytics
from .schemas import AnalyticsResponse, ErrorResponse

# Configure logging
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(prefix="/api/admin", tags=["admin-analytics"])


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin access required"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    }
)
async def get_analytics(
    period: AnalyticsPeriod = Query(AnalyticsPeriod.DAYS_30),
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> AnalyticsResponse:
    """
    User, signal and course-completion figures for the period, each compared
    with the preceding period of the same length.

    Growth figures are percentages; a previous value of 0 reads as 100% growth
    when anything happened in the current period and 0% otherwise.
    """
    try:
        return AnalyticsResponse(**analytics.get_analytics(client, period))

    except HTTPException:
        raise

    except Exception as e:
        logger.error(f"Error loading analytics: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load analytics"
        )
