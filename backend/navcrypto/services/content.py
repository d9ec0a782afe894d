"""Content Service

Articles, videos, tutorials and course pages managed from the admin console.
"""

from typing import Any, Dict, List
import logging

from supabase import Client

from ..db.supabase_client import CONTENT, first_row, utc_now
from ..errors import NotFoundError, ValidationFailedError
from ..models import ContentStatus

logger = logging.getLogger(__name__)

CONTENT_SELECT = "*, author:profiles!content_author_id_fkey(id, full_name, email)"

OPTIONAL_TEXT_FIELDS = ("description", "content_body", "thumbnail_url", "video_url")


def list_content(client: Client) -> List[Dict[str, Any]]:
    """All content newest first, with the author's profile embedded."""
    result = client.table(CONTENT) \
        .select(CONTENT_SELECT) \
        .order("created_at", desc=True) \
        .execute()
    return result.data or []


def filter_by_type(items: List[Dict[str, Any]], content_type: str) -> List[Dict[str, Any]]:
    if not content_type or content_type == "all":
        return items
    return [item for item in items if item.get("type") == content_type]


def content_stats(items: List[Dict[str, Any]]) -> Dict[str, int]:
    return {
        "total": len(items),
        "published": sum(1 for i in items if i.get("status") == ContentStatus.PUBLISHED.value),
        "total_views": sum(i.get("views") or 0 for i in items),
        "ai_generated": sum(1 for i in items if i.get("ai_generated")),
    }


def _row(fields: Dict[str, Any]) -> Dict[str, Any]:
    row = dict(fields)
    if "title" in row:
        row["title"] = (row["title"] or "").strip()
        if not row["title"]:
            raise ValidationFailedError("Title is required")
    for name in OPTIONAL_TEXT_FIELDS:
        if name in row:
            row[name] = row[name] or None
    return row


def create_content(client: Client, fields: Dict[str, Any], author_id: str) -> Dict[str, Any]:
    """Insert a draft content item authored by the given admin."""
    row = _row(fields)
    if not row.get("title"):
        raise ValidationFailedError("Title is required")
    row.update({
        "author_id": author_id,
        "status": ContentStatus.DRAFT.value,
        "views": 0,
        "ai_generated": False,
    })
    item = first_row(client.table(CONTENT).insert(row).execute())
    logger.info(f"Content '{row['title']}' created by {author_id}")
    return item


def update_content(client: Client, content_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    row = _row(fields)
    row["updated_at"] = utc_now()
    item = first_row(client.table(CONTENT).update(row).eq("id", content_id).execute())
    if item is None:
        raise NotFoundError(f"Content {content_id} not found")
    return item


def toggle_publish(client: Client, content_id: str) -> Dict[str, Any]:
    """Flip between published and draft.

    published_at is stamped the first time an item is published and kept
    when it is unpublished again.
    """
    current = first_row(
        client.table(CONTENT).select("id, status, published_at").eq("id", content_id).limit(1).execute()
    )
    if current is None:
        raise NotFoundError(f"Content {content_id} not found")

    if current.get("status") == ContentStatus.PUBLISHED.value:
        new_status = ContentStatus.DRAFT
    else:
        new_status = ContentStatus.PUBLISHED

    now = utc_now()
    updates: Dict[str, Any] = {"status": new_status.value, "updated_at": now}
    if new_status == ContentStatus.PUBLISHED and not current.get("published_at"):
        updates["published_at"] = now

    item = first_row(client.table(CONTENT).update(updates).eq("id", content_id).execute())
    logger.info(f"Content {content_id} -> {new_status.value}")
    return item


def delete_content(client: Client, content_id: str) -> None:
    result = client.table(CONTENT).delete().eq("id", content_id).execute()
    if not result.data:
        raise NotFoundError(f"Content {content_id} not found")
