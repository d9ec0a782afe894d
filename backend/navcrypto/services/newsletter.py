"""Newsletter Service

Public subscription form plus the admin subscriber list.

The admin list filters by status in the query; search and pagination run
over the fetched rows.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import csv
import io
import logging

from postgrest.exceptions import APIError
from supabase import Client

from ..db.supabase_client import NEWSLETTER_SUBSCRIBERS, UNIQUE_VIOLATION, first_row, utc_now
from ..errors import ConflictError, NavCryptoError, NotFoundError, ValidationFailedError
from ..models import SubscriberStatus

logger = logging.getLogger(__name__)

SUBSCRIBERS_PER_PAGE = 20
DEFAULT_SOURCE = "website"
SUBSCRIBERS_CSV_HEADER = ["Email", "Name", "Status", "Source", "Subscribed At"]

ALREADY_SUBSCRIBED = "You're already subscribed!"
SUBSCRIBED = "Thanks for subscribing! Check your inbox for updates."
SUBSCRIBE_FAILED = "Something went wrong. Please try again."


def subscribe(client: Client, email: str, name: Optional[str] = None, source: str = DEFAULT_SOURCE) -> Dict[str, Any]:
    """Add a subscriber.

    Raises:
        ConflictError: Email already on the list (unique violation)
        NavCryptoError: Any other insert failure
    """
    email = (email or "").strip().lower()
    if not email:
        raise ValidationFailedError("Email is required")

    row = {
        "email": email,
        "name": (name or "").strip() or None,
        "source": source or DEFAULT_SOURCE,
    }
    try:
        result = client.table(NEWSLETTER_SUBSCRIBERS).insert(row).execute()
    except APIError as e:
        if e.code == UNIQUE_VIOLATION:
            raise ConflictError(ALREADY_SUBSCRIBED)
        logger.error(f"Newsletter subscription failed: {e.message}")
        raise NavCryptoError(SUBSCRIBE_FAILED)

    logger.info(f"New newsletter subscriber from {row['source']}")
    return first_row(result)


def fetch_subscribers(client: Client, status: Optional[str] = None) -> List[Dict[str, Any]]:
    query = client.table(NEWSLETTER_SUBSCRIBERS).select("*").order("created_at", desc=True)
    if status and status != "all":
        query = query.eq("status", status)
    return query.execute().data or []


def search_subscribers(subscribers: List[Dict[str, Any]], search: Optional[str]) -> List[Dict[str, Any]]:
    term = (search or "").strip().lower()
    if not term:
        return subscribers
    return [
        s for s in subscribers
        if term in (s.get("email") or "").lower() or term in (s.get("name") or "").lower()
    ]


def subscriber_stats(subscribers: List[Dict[str, Any]]) -> Dict[str, int]:
    stats = {"total": len(subscribers)}
    for status in SubscriberStatus:
        stats[status.value] = sum(1 for s in subscribers if s.get("status") == status.value)
    return stats


def list_subscribers(
    client: Client,
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
) -> Dict[str, Any]:
    subscribers = fetch_subscribers(client, status)
    matches = search_subscribers(subscribers, search)

    page = max(page, 1)
    start = (page - 1) * SUBSCRIBERS_PER_PAGE
    return {
        "subscribers": matches[start:start + SUBSCRIBERS_PER_PAGE],
        "page": page,
        "per_page": SUBSCRIBERS_PER_PAGE,
        "total": len(matches),
        "total_pages": -(-len(matches) // SUBSCRIBERS_PER_PAGE),
        "stats": subscriber_stats(subscribers),
    }


def update_status(client: Client, subscriber_id: str, status: SubscriberStatus) -> Dict[str, Any]:
    """Change a subscriber's status; unsubscribed_at follows it."""
    updates = {
        "status": status.value,
        "unsubscribed_at": utc_now() if status == SubscriberStatus.UNSUBSCRIBED else None,
    }
    subscriber = first_row(
        client.table(NEWSLETTER_SUBSCRIBERS).update(updates).eq("id", subscriber_id).execute()
    )
    if subscriber is None:
        raise NotFoundError(f"Subscriber {subscriber_id} not found")
    return subscriber


def delete_subscriber(client: Client, subscriber_id: str) -> None:
    result = client.table(NEWSLETTER_SUBSCRIBERS).delete().eq("id", subscriber_id).execute()
    if not result.data:
        raise NotFoundError(f"Subscriber {subscriber_id} not found")


def _date(value: Optional[str]) -> str:
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return value


def subscribers_csv(subscribers: List[Dict[str, Any]]) -> str:
    """CSV of the given subscribers; every data cell is quoted."""
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(SUBSCRIBERS_CSV_HEADER)
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for s in subscribers:
        writer.writerow([
            s.get("email") or "",
            s.get("name") or "",
            s.get("status") or "",
            s.get("source") or "",
            _date(s.get("subscribed_at")),
        ])
    return buffer.getvalue()
