"""Supabase Client Configuration

This module provides the Supabase clients used by the backend.

1. Service client (service_role key):
   - Admin privileges, bypasses Row Level Security
   - Used for every table read/write and for `auth.admin` calls
   - One instance per process, created on first use

2. Auth client (anon key):
   - Created fresh for each end-user auth call (sign in, refresh, reset)
   - No token persistence or auto refresh, so a user's session never leaks
     into the shared service client

CRITICAL: Never expose the service_role key to the frontend.

Reference: https://supabase.com/docs/reference/python/initializing
"""

from datetime import datetime, timezone
from typing import Optional
import logging

from supabase import Client, ClientOptions, create_client

from ..config import get_settings

logger = logging.getLogger(__name__)


# ============================================================================
# TABLE NAMES
# ============================================================================

PROFILES = "profiles"
SIGNALS = "signals"
CONTENT = "content"
COURSES = "courses"
COURSE_LESSONS = "course_lessons"
USER_PROGRESS = "user_progress"
AI_TASKS = "ai_tasks"
NEWSLETTER_SUBSCRIBERS = "newsletter_subscribers"
SUPPORT_TICKETS = "support_tickets"

# PostgREST error code for unique constraint violations
UNIQUE_VIOLATION = "23505"


# ============================================================================
# CLIENT FACTORIES
# ============================================================================

def get_supabase_client() -> Client:
    """Create a Supabase client with the service_role key.

    Returns:
        Client: Supabase client with admin privileges

    Raises:
        ValueError: If required environment variables are not set

    Usage:
        ```python
        client = get_supabase_client()
        signals = client.table("signals") \\
            .select("*") \\
            .eq("status", "active") \\
            .execute()
        ```
    """
    settings = get_settings()

    if not settings.supabase_url:
        raise ValueError(
            "SUPABASE_URL not found in environment. "
            "Get it from Supabase Dashboard → Project Settings → API → Project URL"
        )

    if not settings.supabase_service_key:
        raise ValueError(
            "SUPABASE_SERVICE_KEY not found in environment. "
            "Get it from Supabase Dashboard → Project Settings → API → service_role (secret)"
        )

    # This bypasses Row Level Security (RLS) - use with caution
    return create_client(settings.supabase_url, settings.supabase_service_key)


def create_auth_client() -> Client:
    """Create a throwaway client for end-user auth calls.

    Sign-in stores the user's session on the client that performed it, so
    these calls never go through the shared service client.
    """
    settings = get_settings()

    if not settings.supabase_url or not settings.auth_key:
        raise ValueError(
            "SUPABASE_URL and SUPABASE_ANON_KEY (or SUPABASE_SERVICE_KEY) must be set "
            "for authentication. Get them from Supabase Dashboard → Project Settings → API"
        )

    return create_client(
        settings.supabase_url,
        settings.auth_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )


_client: Optional[Client] = None


def get_supabase() -> Client:
    """Shared service client (FastAPI dependency).

    Usage:
        ```python
        @router.get("/signals")
        async def list_signals(client: Client = Depends(get_supabase)):
            ...
        ```
    """
    global _client
    if _client is None:
        _client = get_supabase_client()
        logger.info("Supabase service client initialized")
    return _client


def get_supabase_if_configured() -> Optional[Client]:
    """Shared service client, or None while Supabase is not configured."""
    try:
        return get_supabase()
    except ValueError as e:
        logger.warning(f"Supabase not configured: {e}")
        return None


def reset_client() -> None:
    """Drop the cached service client (used on shutdown and in tests)."""
    global _client
    _client = None


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

async def check_connection(client: Client) -> bool:
    """Health check for the Supabase connection.

    Returns:
        bool: True if a one-row select on profiles succeeds
    """
    try:
        client.table(PROFILES).select("id").limit(1).execute()
        return True
    except Exception as e:
        logger.error(f"Supabase connection error: {e}")
        return False


def first_row(response) -> Optional[dict]:
    """Return the first row of a query response, or None."""
    return response.data[0] if response.data else None


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string for timestamp columns."""
    return datetime.now(timezone.utc).isoformat()
