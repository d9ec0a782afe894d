"""Session handling and role-based access."""

from .session import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    CurrentUser,
    SessionTokens,
    clear_session_cookies,
    get_current_user,
    get_optional_user,
    home_for_role,
    require_admin,
    resolve_route_access,
    resolve_session,
    set_session_cookies,
)

__all__ = [
    "ACCESS_COOKIE",
    "REFRESH_COOKIE",
    "CurrentUser",
    "SessionTokens",
    "clear_session_cookies",
    "get_current_user",
    "get_optional_user",
    "home_for_role",
    "require_admin",
    "resolve_route_access",
    "resolve_session",
    "set_session_cookies",
]
