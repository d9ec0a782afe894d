"""Session Resolution and Role Gate

A session is the pair of Supabase tokens stored in httponly cookies
(`nc-access-token`, `nc-refresh-token`). API clients may send the access
token as `Authorization: Bearer <token>` instead.

The role gate compares the session's user against `profiles.role`:
    - /admin and /dashboard need a user, otherwise → /login?redirect=<path>
    - /admin needs role 'admin', otherwise → /dashboard
    - /login and /signup with a user → /admin (admins) or /dashboard

FastAPI dependencies:
    - get_optional_user: CurrentUser or None
    - get_current_user: CurrentUser or AuthenticationError (401)
    - require_admin: admin CurrentUser or PermissionDeniedError (403)
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple
from urllib.parse import urlencode
import logging

from fastapi import Depends, Request, Response
from supabase import Client

from ..config import get_settings
from ..db.supabase_client import PROFILES, create_auth_client, first_row, get_supabase
from ..errors import AuthenticationError, PermissionDeniedError
from ..models import Role

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "nc-access-token"
REFRESH_COOKIE = "nc-refresh-token"
REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 30


@dataclass
class SessionTokens:
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


@dataclass
class CurrentUser:
    """Authenticated user joined with the role from profiles."""
    id: str
    email: Optional[str]
    full_name: Optional[str]
    role: str
    access_token: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


# ============================================================================
# Cookie Helpers
# ============================================================================

def set_session_cookies(response: Response, tokens: SessionTokens) -> None:
    secure = get_settings().session_cookie_secure
    response.set_cookie(
        ACCESS_COOKIE,
        tokens.access_token,
        max_age=tokens.expires_in,
        httponly=True,
        secure=secure,
        samesite="lax",
    )
    if tokens.refresh_token:
        response.set_cookie(
            REFRESH_COOKIE,
            tokens.refresh_token,
            max_age=REFRESH_COOKIE_MAX_AGE,
            httponly=True,
            secure=secure,
            samesite="lax",
        )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE)


def carry_session_cookies(source: Response, target: Response) -> Response:
    """Copy cookies set on the request-scoped response onto one a route built itself.

    FastAPI only merges the dependency response into responses it builds from
    a return value, so CSV downloads and event streams must carry a refreshed
    session over explicitly.
    """
    for value in source.headers.getlist("set-cookie"):
        target.headers.append("set-cookie", value)
    return target


def tokens_from_session(session: Any) -> SessionTokens:
    """Convert a supabase Session object into SessionTokens."""
    return SessionTokens(
        access_token=session.access_token,
        refresh_token=getattr(session, "refresh_token", None),
        expires_in=getattr(session, "expires_in", None),
    )


def extract_tokens(request: Request) -> Tuple[Optional[str], Optional[str]]:
    """Read (access_token, refresh_token) from the Authorization header or cookies."""
    access_token = None
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        access_token = authorization[7:].strip() or None
    if not access_token:
        access_token = request.cookies.get(ACCESS_COOKIE)
    return access_token, request.cookies.get(REFRESH_COOKIE)


# ============================================================================
# Session Resolution
# ============================================================================

def fetch_profile(client: Client, user_id: str) -> Optional[dict]:
    result = client.table(PROFILES) \
        .select("id, email, full_name, role, plan") \
        .eq("id", user_id) \
        .limit(1) \
        .execute()
    return first_row(result)


def _user_from_token(client: Client, access_token: str) -> Optional[Any]:
    try:
        response = client.auth.get_user(access_token)
    except Exception as e:
        logger.debug(f"Access token rejected: {e}")
        return None
    return response.user if response else None


def _refresh(refresh_token: str) -> Optional[Tuple[Any, SessionTokens]]:
    try:
        response = create_auth_client().auth.refresh_session(refresh_token)
    except Exception as e:
        logger.info(f"Session refresh failed: {e}")
        return None
    if not response or not response.session or not response.user:
        return None
    return response.user, tokens_from_session(response.session)


def resolve_session(
    request: Request,
    client: Client,
) -> Tuple[Optional[CurrentUser], Optional[SessionTokens]]:
    """Resolve the request's session to a user.

    Returns:
        (user, refreshed_tokens). refreshed_tokens is set only when the access
        token had expired and was renewed with the refresh token; callers should
        write them back as cookies.
    """
    access_token, refresh_token = extract_tokens(request)
    if not access_token and not refresh_token:
        return None, None

    auth_user = _user_from_token(client, access_token) if access_token else None
    refreshed = None

    if auth_user is None and refresh_token:
        result = _refresh(refresh_token)
        if result:
            auth_user, refreshed = result
            access_token = refreshed.access_token

    if auth_user is None:
        return None, None

    profile = fetch_profile(client, auth_user.id)
    metadata = getattr(auth_user, "user_metadata", None) or {}
    user = CurrentUser(
        id=auth_user.id,
        email=getattr(auth_user, "email", None),
        full_name=(profile or {}).get("full_name") or metadata.get("full_name"),
        role=(profile or {}).get("role") or Role.USER.value,
        access_token=access_token,
    )
    return user, refreshed


# ============================================================================
# FastAPI Dependencies
# ============================================================================

async def get_optional_user(
    request: Request,
    response: Response,
    client: Client = Depends(get_supabase),
) -> Optional[CurrentUser]:
    user, refreshed = resolve_session(request, client)
    if refreshed:
        set_session_cookies(response, refreshed)
    return user


async def get_current_user(
    user: Optional[CurrentUser] = Depends(get_optional_user),
) -> CurrentUser:
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        logger.warning(f"Non-admin user {user.id} attempted an admin operation")
        raise PermissionDeniedError("Admin access required")
    return user


# ============================================================================
# Route Gate
# ============================================================================

def _matches(pathname: str, prefix: str) -> bool:
    return pathname.startswith(prefix)


def resolve_route_access(
    pathname: str,
    user_id: Optional[str],
    role: Optional[str],
) -> Optional[str]:
    """Decide where a page request must be redirected.

    Args:
        pathname: Requested page path (e.g. "/admin/signals")
        user_id: Signed-in user id, or None
        role: Role from profiles, or None when the profile is missing

    Returns:
        Redirect target, or None when the page may be served
    """
    is_admin_route = _matches(pathname, "/admin")
    is_dashboard_route = _matches(pathname, "/dashboard")
    is_auth_route = _matches(pathname, "/login") or _matches(pathname, "/signup")

    if (is_admin_route or is_dashboard_route) and not user_id:
        return "/login?" + urlencode({"redirect": pathname})

    if user_id and is_admin_route and role != Role.ADMIN.value:
        return "/dashboard"

    if user_id and is_auth_route:
        return "/admin" if role == Role.ADMIN.value else "/dashboard"

    return None


def home_for_role(role: Optional[str]) -> str:
    return "/admin" if role == Role.ADMIN.value else "/dashboard"
