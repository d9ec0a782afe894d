"""
Admin Signal API Routes

Endpoints:
- GET /api/admin/signals: List signals with stats
- POST /api/admin/signals: Create a signal (draft or active)
- PATCH /api/admin/signals/{signal_id}: Update fields and/or status
- POST /api/admin/signals/{signal_id}/status: Activate or close
- DELETE /api/admin/signals/{signal_id}: Delete a signal
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Literal
import logging

from supabase import Client

from ...auth.session import CurrentUser, require_admin
from ...db.supabase_client import get_supabase
from ...errors import NavCryptoError
from ...models import SignalStatus
from ...services import signals
from .schemas import (
    CreateSignalRequest,
    DeleteResponse,
    ErrorResponse,
    SignalDetailResponse,
    SignalListResponse,
    SignalStatusRequest,
    UpdateSignalRequest,
)

# Configure logging
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(
    prefix="/api/admin/signals",
    tags=["admin-signals"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin access required"},
    },
)


@router.get("", response_model=SignalListResponse)
async def list_signals(
    status_filter: Literal["all", "active", "draft", "closed"] = Query("all", alias="status"),
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> SignalListResponse:
    """
    List signals newest first.

    Stats always cover every signal, whatever the filter.
    """
    try:
        all_signals = signals.list_signals(client)
        if status_filter == signals.ALL:
            selected = all_signals
        else:
            selected = [s for s in all_signals if s.get("status") == status_filter]
        return SignalListResponse(
            signals=selected,
            total=len(selected),
            stats=signals.signal_stats(all_signals),
        )

    except HTTPException:
        raise

    except Exception as e:
        logger.error(f"Error loading signals: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load signals"
        )


@router.post(
    "",
    response_model=SignalDetailResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Invalid signal data"}},
)
async def create_signal(
    request_data: CreateSignalRequest,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> SignalDetailResponse:
    try:
        fields = request_data.model_dump(exclude={"status"})
        fields["action"] = request_data.action.value
        signal = signals.create_signal(client, fields, admin.id, SignalStatus(request_data.status))
        return SignalDetailResponse(status="created", signal=signal)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error creating signal: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create signal"
        )


@router.patch(
    "/{signal_id}",
    response_model=SignalDetailResponse,
    responses={404: {"model": ErrorResponse, "description": "Signal not found"}},
)
async def update_signal(
    signal_id: str,
    request_data: UpdateSignalRequest,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> SignalDetailResponse:
    """Update only the provided fields. updated_at is always stamped."""
    try:
        fields = request_data.model_dump(exclude_unset=True, exclude={"status"}, mode="json")
        signal = signals.update_signal(client, signal_id, fields, request_data.status)
        return SignalDetailResponse(signal=signal)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error updating signal {signal_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update signal"
        )


@router.post(
    "/{signal_id}/status",
    response_model=SignalDetailResponse,
    responses={404: {"model": ErrorResponse, "description": "Signal not found"}},
)
async def change_status(
    signal_id: str,
    request_data: SignalStatusRequest,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> SignalDetailResponse:
    """Activate a draft or close a signal (closing stamps closed_at)."""
    try:
        signal = signals.set_signal_status(
            client,
            signal_id,
            SignalStatus(request_data.status),
            request_data.profit_loss,
        )
        return SignalDetailResponse(signal=signal)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error updating status of {signal_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update signal status"
        )


@router.delete(
    "/{signal_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse, "description": "Signal not found"}},
)
async def delete_signal(
    signal_id: str,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> DeleteResponse:
    try:
        signals.delete_signal(client, signal_id)
        return DeleteResponse(id=signal_id, message="Signal deleted")

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error deleting signal {signal_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete signal"
        )
