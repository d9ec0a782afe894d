"""
Admin Content API Routes

Endpoints:
- GET /api/admin/content: List content (optional type filter) with stats
- POST /api/admin/content: Create a draft
- PATCH /api/admin/content/{content_id}: Update fields
- POST /api/admin/content/{content_id}/publish: Toggle published / draft
- DELETE /api/admin/content/{content_id}: Delete content
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
import logging

from supabase import Client

from ...auth.session import CurrentUser, require_admin
from ...db.supabase_client import get_supabase
from ...errors import NavCryptoError
from ...models import ContentType
from ...services import content
from .schemas import (
    ContentDetailResponse,
    ContentListResponse,
    CreateContentRequest,
    DeleteResponse,
    ErrorResponse,
    UpdateContentRequest,
)

# Configure logging
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(
    prefix="/api/admin/content",
    tags=["admin-content"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin access required"},
    },
)


@router.get("", response_model=ContentListResponse)
async def list_content(
    content_type: Optional[ContentType] = Query(None, alias="type"),
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> ContentListResponse:
    """List content newest first. Stats cover all content regardless of the filter."""
    try:
        items = content.list_content(client)
        selected = content.filter_by_type(items, content_type.value if content_type else "all")
        return ContentListResponse(content=selected, total=len(selected), stats=content.content_stats(items))

    except HTTPException:
        raise

    except Exception as e:
        logger.error(f"Error loading content: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load content"
        )


@router.post(
    "",
    response_model=ContentDetailResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Title is required"}},
)
async def create_content(
    request_data: CreateContentRequest,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> ContentDetailResponse:
    try:
        item = content.create_content(client, request_data.model_dump(mode="json"), admin.id)
        return ContentDetailResponse(status="created", content=item)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error creating content: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create content"
        )


@router.patch(
    "/{content_id}",
    response_model=ContentDetailResponse,
    responses={404: {"model": ErrorResponse, "description": "Content not found"}},
)
async def update_content(
    content_id: str,
    request_data: UpdateContentRequest,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> ContentDetailResponse:
    try:
        fields = request_data.model_dump(exclude_unset=True, mode="json")
        item = content.update_content(client, content_id, fields)
        return ContentDetailResponse(content=item)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error updating content {content_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update content"
        )


@router.post(
    "/{content_id}/publish",
    response_model=ContentDetailResponse,
    responses={404: {"model": ErrorResponse, "description": "Content not found"}},
)
async def toggle_publish(
    content_id: str,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> ContentDetailResponse:
    try:
        return ContentDetailResponse(content=content.toggle_publish(client, content_id))

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error toggling publish status: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update publish status"
        )


@router.delete(
    "/{content_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse, "description": "Content not found"}},
)
async def delete_content(
    content_id: str,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> DeleteResponse:
    try:
        content.delete_content(client, content_id)
        return DeleteResponse(id=content_id, message="Content deleted")

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error deleting content {content_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete content"
        )
