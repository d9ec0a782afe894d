"""Profile Service

User-facing account settings and the admin user directory.

Functions:
    - get_settings_view / update_settings / save_preferences
    - delete_account: progress rows, then the profile
    - list_users: one page of profiles with completion counts and plan stats
    - update_user: plan / role edits by an admin
    - users_csv: CSV export of every profile
"""

from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional
import csv
import io
import logging

from supabase import Client

from ..db.supabase_client import PROFILES, USER_PROGRESS, first_row, utc_now
from ..errors import NotFoundError, ValidationFailedError
from ..models import DEFAULT_PREFERENCES, PLAN_MONTHLY_PRICE, Plan, Role
from .marketing import plan_features

logger = logging.getLogger(__name__)

USERS_PER_PAGE = 10
USERS_CSV_HEADER = ["ID", "Email", "Full Name", "Plan", "Role", "Created At"]

ACCOUNT_DELETE_FAILED = "Failed to delete account. Please contact support."


# ============================================================================
# Account Settings
# ============================================================================

def merged_preferences(stored: Optional[Dict[str, Any]]) -> Dict[str, bool]:
    """Stored notification preferences over the defaults."""
    preferences = dict(DEFAULT_PREFERENCES)
    for key, value in (stored or {}).items():
        if key in preferences:
            preferences[key] = bool(value)
    return preferences


def get_profile(client: Client, user_id: str) -> Dict[str, Any]:
    profile = first_row(client.table(PROFILES).select("*").eq("id", user_id).limit(1).execute())
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


def get_settings_view(client: Client, user_id: str) -> Dict[str, Any]:
    profile = get_profile(client, user_id)
    return {
        "profile": profile,
        "full_name": profile.get("full_name") or "",
        "preferences": merged_preferences(profile.get("preferences")),
        "plan_features": plan_features(profile.get("plan")),
    }


def update_settings(
    client: Client,
    user_id: str,
    full_name: Optional[str] = None,
    preferences: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Save the settings form (name and/or preferences)."""
    updates: Dict[str, Any] = {}
    if full_name is not None:
        updates["full_name"] = full_name.strip()
    if preferences is not None:
        updates["preferences"] = merged_preferences(preferences)
    if not updates:
        raise ValidationFailedError("Nothing to update")
    updates["updated_at"] = utc_now()

    profile = first_row(client.table(PROFILES).update(updates).eq("id", user_id).execute())
    if profile is None:
        raise NotFoundError("Profile not found")
    logger.info(f"Settings updated for user {user_id}")
    return profile


def save_preferences(client: Client, user_id: str, preferences: Dict[str, Any]) -> Dict[str, bool]:
    profile = update_settings(client, user_id, preferences=preferences)
    return merged_preferences(profile.get("preferences"))


def delete_account(client: Client, user_id: str) -> None:
    """Remove the user's progress rows, then the profile row.

    The auth user itself is left for support to remove.
    """
    client.table(USER_PROGRESS).delete().eq("user_id", user_id).execute()
    client.table(PROFILES).delete().eq("id", user_id).execute()
    logger.info(f"Account data deleted for user {user_id}")


# ============================================================================
# Admin: User Directory
# ============================================================================

def courses_completed_by_user(client: Client, user_ids: List[str]) -> Dict[str, int]:
    """Distinct course ids among each user's completed progress rows."""
    if not user_ids:
        return {}
    rows = client.table(USER_PROGRESS) \
        .select("user_id, course_id") \
        .in_("user_id", user_ids) \
        .eq("completed", True) \
        .execute().data or []

    courses = defaultdict(set)
    for row in rows:
        courses[row["user_id"]].add(row.get("course_id"))
    return {user_id: len(courses.get(user_id, ())) for user_id in user_ids}


def plan_stats(profiles: List[Dict[str, Any]], total: int) -> Dict[str, int]:
    pro = sum(1 for p in profiles if p.get("plan") == Plan.PRO.value)
    enterprise = sum(1 for p in profiles if p.get("plan") == Plan.ENTERPRISE.value)
    return {
        "total": total,
        "pro": pro,
        "enterprise": enterprise,
        "mrr": pro * PLAN_MONTHLY_PRICE[Plan.PRO] + enterprise * PLAN_MONTHLY_PRICE[Plan.ENTERPRISE],
    }


def filter_users(
    users: List[Dict[str, Any]],
    search: Optional[str] = None,
    plan: Optional[str] = None,
) -> List[Dict[str, Any]]:
    term = (search or "").strip().lower()
    if term:
        users = [
            u for u in users
            if term in (u.get("full_name") or "").lower() or term in (u.get("email") or "").lower()
        ]
    if plan and plan != "all":
        users = [u for u in users if u.get("plan") == plan]
    return users


def list_users(
    client: Client,
    page: int = 1,
    search: Optional[str] = None,
    plan: Optional[str] = None,
) -> Dict[str, Any]:
    """One page of profiles, newest first.

    Stats are computed over the fetched page; search and plan filter narrow
    the returned rows of that page only.
    """
    page = max(page, 1)
    start = (page - 1) * USERS_PER_PAGE
    end = start + USERS_PER_PAGE - 1

    result = client.table(PROFILES) \
        .select("*", count="exact") \
        .order("created_at", desc=True) \
        .range(start, end) \
        .execute()
    profiles = result.data or []
    total = result.count or 0

    completed = courses_completed_by_user(client, [p["id"] for p in profiles])
    users = [{**p, "courses_completed": completed.get(p["id"], 0)} for p in profiles]

    return {
        "users": filter_users(users, search, plan),
        "page": page,
        "per_page": USERS_PER_PAGE,
        "total": total,
        "total_pages": -(-total // USERS_PER_PAGE),
        "stats": plan_stats(profiles, total),
    }


def update_user(client: Client, user_id: str, plan: Optional[Plan] = None, role: Optional[Role] = None) -> Dict[str, Any]:
    updates: Dict[str, Any] = {}
    if plan is not None:
        updates["plan"] = plan.value
    if role is not None:
        updates["role"] = role.value
    if not updates:
        raise ValidationFailedError("Nothing to update")
    updates["updated_at"] = utc_now()

    profile = first_row(client.table(PROFILES).update(updates).eq("id", user_id).execute())
    if profile is None:
        raise NotFoundError(f"User {user_id} not found")
    logger.info(f"User {user_id} updated: {updates}")
    return profile


def _iso(value: Optional[str]) -> str:
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).isoformat()
    except ValueError:
        return value


def users_csv(client: Client) -> str:
    """Every profile, newest first, as CSV text."""
    profiles = client.table(PROFILES) \
        .select("*") \
        .order("created_at", desc=True) \
        .execute().data or []

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(USERS_CSV_HEADER)
    for p in profiles:
        writer.writerow([
            p.get("id"),
            p.get("email"),
            p.get("full_name") or "",
            p.get("plan"),
            p.get("role"),
            _iso(p.get("created_at")),
        ])
    return buffer.getvalue()
