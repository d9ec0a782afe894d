"""Database access (Supabase / PostgREST)."""

from .supabase_client import (
    check_connection,
    create_auth_client,
    get_supabase,
    get_supabase_client,
    reset_client,
)

__all__ = [
    "check_connection",
    "create_auth_client",
    "get_supabase",
    "get_supabase_client",
    "reset_client",
]
