"""
User Dashboard API Routes

Every endpoint requires a signed-in user (cookie or Bearer token).

Endpoints:
- GET /api/dashboard/overview: Home page summary
- GET /api/dashboard/signals: Active signals with pair filter
- GET /api/dashboard/courses: Published course catalog
- POST /api/dashboard/courses/{course_id}/enroll: Enroll in a course
- GET /api/dashboard/progress: Per-course lesson progress
- POST /api/dashboard/progress/toggle: Mark a lesson complete / incomplete
- GET /api/dashboard/settings: Profile and notification preferences
- PATCH /api/dashboard/settings: Save name and/or preferences
- PUT /api/dashboard/settings/preferences: Save preferences only
- DELETE /api/dashboard/settings/account: Delete account data and sign out
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import Optional
import logging

from supabase import Client

from ...auth.session import CurrentUser, clear_session_cookies, get_current_user
from ...db.supabase_client import get_supabase
from ...errors import NavCryptoError
from ...models import Difficulty
from ...services import accounts, courses, profiles, signals
from .schemas import (
    CatalogResponse,
    EnrollResponse,
    ErrorResponse,
    MessageResponse,
    NotificationPreferences,
    OverviewResponse,
    PreferencesResponse,
    ProgressResponse,
    SettingsResponse,
    ToggleLessonRequest,
    ToggleLessonResponse,
    UpdateSettingsRequest,
    UserSignalListResponse,
)

# Configure logging
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(
    prefix="/api/dashboard",
    tags=["dashboard"],
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)


# ============================================================================
# Overview & Signals
# ============================================================================

@router.get("/overview", response_model=OverviewResponse)
async def overview(
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_supabase),
) -> OverviewResponse:
    """
    Dashboard home: latest 3 active signals, up to 3 enrolled courses and
    the share of completed lessons across all enrolled courses.
    """
    try:
        data = await courses.dashboard_overview(client, user.id, user.full_name)
        return OverviewResponse(**data)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error loading dashboard data for {user.id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load dashboard. Please try refreshing the page."
        )


@router.get("/signals", response_model=UserSignalListResponse)
async def list_signals(
    pair: str = Query("all", description="Trading pair, or all"),
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_supabase),
) -> UserSignalListResponse:
    """Active signals newest first. `pairs` always lists every active pair."""
    try:
        active = signals.list_active_signals(client)
        selected = active if pair == signals.ALL else [s for s in active if s.get("pair") == pair]
        return UserSignalListResponse(
            pairs=signals.pair_options(active),
            signals=[signals.with_targets(s) for s in selected],
            total=len(selected),
        )

    except HTTPException:
        raise

    except Exception as e:
        logger.error(f"Error loading signals: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load signals. Please try refreshing the page."
        )


# ============================================================================
# Courses & Progress
# ============================================================================

@router.get("/courses", response_model=CatalogResponse)
async def list_courses(
    difficulty: Optional[Difficulty] = Query(None, description="beginner, intermediate or advanced"),
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_supabase),
) -> CatalogResponse:
    try:
        catalog = courses.list_catalog(client, user.id, difficulty.value if difficulty else None)
        return CatalogResponse(courses=catalog, total=len(catalog))

    except HTTPException:
        raise

    except Exception as e:
        logger.error(f"Error loading courses: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load courses. Please try refreshing the page."
        )


@router.post(
    "/courses/{course_id}/enroll",
    response_model=EnrollResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Course has no lessons"},
        409: {"model": ErrorResponse, "description": "Already enrolled"},
    }
)
async def enroll(
    course_id: str,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_supabase),
) -> EnrollResponse:
    try:
        lessons = courses.enroll(client, user.id, course_id)
        return EnrollResponse(course_id=course_id, lessons=lessons)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error enrolling {user.id} in {course_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to enroll. Please try again."
        )


@router.get("/progress", response_model=ProgressResponse)
async def progress(
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_supabase),
) -> ProgressResponse:
    """
    Lesson progress per enrolled course.

    Courses still in progress come first (highest percentage first);
    finished courses are listed last.
    """
    try:
        return ProgressResponse(**courses.get_progress(client, user.id))

    except HTTPException:
        raise

    except Exception as e:
        logger.error(f"Error loading progress: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load progress data. Please try refreshing the page."
        )


@router.post(
    "/progress/toggle",
    response_model=ToggleLessonResponse,
    responses={404: {"model": ErrorResponse, "description": "Not enrolled in this lesson"}},
)
async def toggle_lesson(
    request_data: ToggleLessonRequest,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_supabase),
) -> ToggleLessonResponse:
    try:
        row = courses.toggle_lesson(client, user.id, request_data.course_id, request_data.lesson_id)
        return ToggleLessonResponse(progress=row)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error toggling lesson completion: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update lesson. Please try again."
        )


# ============================================================================
# Settings
# ============================================================================

@router.get("/settings", response_model=SettingsResponse)
async def read_settings(
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_supabase),
) -> SettingsResponse:
    try:
        return SettingsResponse(**profiles.get_settings_view(client, user.id))

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error loading profile: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load profile. Please try refreshing the page."
        )


@router.patch("/settings", response_model=SettingsResponse)
async def update_settings(
    request_data: UpdateSettingsRequest,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_supabase),
) -> SettingsResponse:
    try:
        profiles.update_settings(
            client,
            user.id,
            full_name=request_data.full_name,
            preferences=request_data.preferences.model_dump() if request_data.preferences else None,
        )
        return SettingsResponse(**profiles.get_settings_view(client, user.id))

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error saving profile: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile. Please try again."
        )


@router.put("/settings/preferences", response_model=PreferencesResponse)
async def save_preferences(
    request_data: NotificationPreferences,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_supabase),
) -> PreferencesResponse:
    try:
        saved = profiles.save_preferences(client, user.id, request_data.model_dump())
        return PreferencesResponse(preferences=saved)

    except HTTPException:
        raise

    except NavCryptoError:
        raise

    except Exception as e:
        logger.error(f"Error saving preferences: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save preferences. Please try again."
        )


@router.delete(
    "/settings/account",
    response_model=MessageResponse,
    responses={500: {"model": ErrorResponse, "description": "Deletion failed"}},
)
async def delete_account(
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_supabase),
) -> MessageResponse:
    """Delete the user's progress and profile, then end the session."""
    try:
        profiles.delete_account(client, user.id)
    except Exception as e:
        logger.error(f"Error deleting account {user.id}: {str(e)}", exc_info=True)
        raise NavCryptoError(profiles.ACCOUNT_DELETE_FAILED)

    accounts.sign_out(client, user.access_token)
    clear_session_cookies(response)
    return MessageResponse(message="Account deleted", redirect="/")
