"""
Public (Marketing) API Routes

No session required. The support form attaches the user id when a session
happens to be present.

Endpoints:
- GET /api/public/pricing: Plans and prices
- GET /api/public/faq: FAQ entries with search and category filter
- POST /api/public/newsletter: Subscribe to the newsletter
- POST /api/public/support: Submit a support ticket
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
import logging

from supabase import Client

from ...auth.session import CurrentUser, get_optional_user
from ...db.supabase_client import get_supabase
from ...errors import NavCryptoError
from ...services import marketing, newsletter, support
from .schemas import (
    ErrorResponse,
    FAQResponse,
    MessageResponse,
    NewsletterSubscribeRequest,
    PricingResponse,
    SupportTicketCreateResponse,
    SupportTicketRequest,
)

# Configure logging
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(prefix="/api/public", tags=["public"])


@router.get("/pricing", response_model=PricingResponse)
async def pricing() -> PricingResponse:
    return PricingResponse(plans=marketing.PRICING_PLANS)


@router.get("/faq", response_model=FAQResponse)
async def faq(
    search: Optional[str] = Query(None, description="Case-insensitive text search"),
    category: Optional[str] = Query(None, description="Category name, or All"),
) -> FAQResponse:
    return FAQResponse(
        categories=marketing.faq_categories(),
        faqs=marketing.search_faq(search, category),
    )


@router.post(
    "/newsletter",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Email missing"},
        409: {"model": ErrorResponse, "description": "Already subscribed"},
        500: {"model": ErrorResponse, "description": "Subscription failed"},
    }
)
async def subscribe_newsletter(
    request_data: NewsletterSubscribeRequest,
    client: Client = Depends(get_supabase),
) -> MessageResponse:
    """
    Add an email to the newsletter list.

    The email is trimmed and lowercased; a duplicate returns 409 with
    "You're already subscribed!".
    """
    try:
        newsletter.subscribe(client, request_data.email, request_data.name, request_data.source)
        return MessageResponse(message=newsletter.SUBSCRIBED)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Newsletter subscription error: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=newsletter.SUBSCRIBE_FAILED
        )


@router.post(
    "/support",
    response_model=SupportTicketCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Required field missing"},
        500: {"model": ErrorResponse, "description": "Ticket could not be saved"},
    }
)
async def submit_support_ticket(
    request_data: SupportTicketRequest,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    client: Client = Depends(get_supabase),
) -> SupportTicketCreateResponse:
    try:
        ticket = support.submit_ticket(
            client,
            request_data.name,
            request_data.email,
            request_data.subject,
            request_data.message,
            user_id=user.id if user else None,
        )
        return SupportTicketCreateResponse(ticket_id=(ticket or {}).get("id"))

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error submitting ticket: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=support.SUBMIT_FAILED
        )
