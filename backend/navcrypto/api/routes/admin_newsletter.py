"""
Admin Newsletter API Routes

Endpoints:
- GET /api/admin/newsletter: Subscribers (status filter, search, 20 per page)
- GET /api/admin/newsletter/export: CSV of the filtered subscribers
- PATCH /api/admin/newsletter/{subscriber_id}: Change status
- DELETE /api/admin/newsletter/{subscriber_id}: Delete a subscriber
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from datetime import datetime, timezone
from typing import Optional
import logging

from supabase import Client

from ...auth.session import CurrentUser, carry_session_cookies, require_admin
from ...db.supabase_client import get_supabase
from ...errors import NavCryptoError
from ...models import SubscriberStatus
from ...services import newsletter
from .schemas import (
    DeleteResponse,
    ErrorResponse,
    SubscriberDetailResponse,
    SubscriberListResponse,
    SubscriberStatusRequest,
)

# Configure logging
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(
    prefix="/api/admin/newsletter",
    tags=["admin-newsletter"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin access required"},
    },
)


@router.get("", response_model=SubscriberListResponse)
async def list_subscribers(
    status_filter: Optional[SubscriberStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Email or name contains (case-insensitive)"),
    page: int = Query(1, ge=1),
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> SubscriberListResponse:
    """Stats cover every subscriber matching the status filter, before search."""
    try:
        data = newsletter.list_subscribers(
            client,
            status_filter.value if status_filter else None,
            search,
            page,
        )
        return SubscriberListResponse(**data)

    except HTTPException:
        raise

    except Exception as e:
        logger.error(f"Error fetching subscribers: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load subscribers"
        )


@router.get("/export", response_class=Response)
async def export_subscribers(
    response: Response,
    status_filter: Optional[SubscriberStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> Response:
    try:
        subscribers = newsletter.fetch_subscribers(client, status_filter.value if status_filter else None)
        body = newsletter.subscribers_csv(newsletter.search_subscribers(subscribers, search))
    except Exception as e:
        logger.error(f"Error exporting subscribers: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to export CSV"
        )

    filename = f"newsletter-subscribers-{datetime.now(timezone.utc).date().isoformat()}.csv"
    return carry_session_cookies(response, Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    ))


@router.patch(
    "/{subscriber_id}",
    response_model=SubscriberDetailResponse,
    responses={404: {"model": ErrorResponse, "description": "Subscriber not found"}},
)
async def update_subscriber(
    subscriber_id: str,
    request_data: SubscriberStatusRequest,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> SubscriberDetailResponse:
    try:
        subscriber = newsletter.update_status(client, subscriber_id, request_data.status)
        return SubscriberDetailResponse(subscriber=subscriber)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error updating subscriber: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update subscriber status"
        )


@router.delete(
    "/{subscriber_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse, "description": "Subscriber not found"}},
)
async def delete_subscriber(
    subscriber_id: str,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> DeleteResponse:
    try:
        newsletter.delete_subscriber(client, subscriber_id)
        return DeleteResponse(id=subscriber_id, message="Subscriber deleted")

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error deleting subscriber: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete subscriber"
        )
