"""
Admin User API Routes

Endpoints:
- GET /api/admin/users: Paginated user list with plan stats
- GET /api/admin/users/export: CSV export of every profile
- PATCH /api/admin/users/{user_id}: Change plan and/or role
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
from ...models import Plan
from ...services import profiles
from .schemas import ErrorResponse, UpdateUserRequest, UserDetailResponse, UserListResponse

# Configure logging
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(
    prefix="/api/admin/users",
    tags=["admin-users"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin access required"},
    },
)


@router.get("", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    search: Optional[str] = Query(None, description="Name or email contains (case-insensitive)"),
    plan: Optional[Plan] = Query(None),
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> UserListResponse:
    """
    One page (10 users) of profiles, newest first.

    `search` and `plan` narrow the rows of the fetched page; `total` and the
    stats describe the unfiltered page.
    """
    try:
        data = profiles.list_users(client, page, search, plan.value if plan else None)
        return UserListResponse(**data)

    except HTTPException:
        raise

    except Exception as e:
        logger.error(f"Error loading users: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load users"
        )


@router.get("/export", response_class=Response)
async def export_users(
    response: Response,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> Response:
    try:
        body = profiles.users_csv(client)
    except Exception as e:
        logger.error(f"Error exporting CSV: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to export CSV"
        )

    filename = f"users-export-{datetime.now(timezone.utc).date().isoformat()}.csv"
    return carry_session_cookies(response, Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    ))


@router.patch(
    "/{user_id}",
    response_model=UserDetailResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Nothing to update"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def update_user(
    user_id: str,
    request_data: UpdateUserRequest,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> UserDetailResponse:
    try:
        profile = profiles.update_user(client, user_id, request_data.plan, request_data.role)
        logger.info(f"Admin {admin.id} updated user {user_id}")
        return UserDetailResponse(user=profile)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error updating user {user_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user"
        )
