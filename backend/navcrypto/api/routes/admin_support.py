"""
Admin Support API Routes

Endpoints:
- GET /api/admin/support: Tickets newest first with status filter and stats
- GET /api/admin/support/{ticket_id}: Ticket detail
- PATCH /api/admin/support/{ticket_id}: Change ticket status
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
import logging

from supabase import Client

from ...auth.session import CurrentUser, require_admin
from ...db.supabase_client import get_supabase
from ...errors import NavCryptoError
from ...models import TicketStatus
from ...services import support
from .schemas import ErrorResponse, TicketDetailResponse, TicketListResponse, TicketStatusRequest

# Configure logging
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(
    prefix="/api/admin/support",
    tags=["admin-support"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin access required"},
    },
)


@router.get("", response_model=TicketListResponse)
async def list_tickets(
    status_filter: Optional[TicketStatus] = Query(None, alias="status"),
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> TicketListResponse:
    try:
        tickets = support.list_tickets(client)
        selected = support.filter_tickets(tickets, status_filter.value if status_filter else None)
        return TicketListResponse(tickets=selected, total=len(selected), stats=support.ticket_stats(tickets))

    except HTTPException:
        raise

    except Exception as e:
        logger.error(f"Error fetching tickets: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load tickets"
        )


@router.get(
    "/{ticket_id}",
    response_model=TicketDetailResponse,
    responses={404: {"model": ErrorResponse, "description": "Ticket not found"}},
)
async def get_ticket(
    ticket_id: str,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> TicketDetailResponse:
    try:
        return TicketDetailResponse(ticket=support.get_ticket(client, ticket_id))

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error fetching ticket {ticket_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load ticket"
        )


@router.patch(
    "/{ticket_id}",
    response_model=TicketDetailResponse,
    responses={404: {"model": ErrorResponse, "description": "Ticket not found"}},
)
async def update_ticket(
    ticket_id: str,
    request_data: TicketStatusRequest,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> TicketDetailResponse:
    try:
        ticket = support.update_ticket_status(client, ticket_id, request_data.status)
        return TicketDetailResponse(ticket=ticket)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error updating ticket: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update ticket"
        )
