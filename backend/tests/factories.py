"""Row factories and time helpers shared by the test suites."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

MEMBER_ID = "11111111-1111-1111-1111-111111111111"
ADMIN_ID = "22222222-2222-2222-2222-222222222222"


def iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat()


def days_ago(days: float, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return iso(now - timedelta(days=days))


def make_signal(**overrides) -> Dict[str, Any]:
    row = {
        "pair": "BTC/USDT",
        "action": "LONG",
        "entry_price": 100.0,
        "take_profit": 110.0,
        "stop_loss": 95.0,
        "status": "active",
    }
    row.update(overrides)
    return row


def make_course(**overrides) -> Dict[str, Any]:
    row = {
        "title": "Crypto Basics",
        "description": "Start here",
        "status": "published",
        "difficulty": "beginner",
        "lessons_count": 2,
    }
    row.update(overrides)
    return row


def make_lesson(course_id: str, order_index: int, **overrides) -> Dict[str, Any]:
    row = {
        "course_id": course_id,
        "title": f"Lesson {order_index}",
        "order_index": order_index,
    }
    row.update(overrides)
    return row


def make_task(agent_type: str = "content_creator", **overrides) -> Dict[str, Any]:
    row = {
        "agent_type": agent_type,
        "task_description": "Write a market recap",
        "status": "pending",
    }
    row.update(overrides)
    return row


def make_subscriber(email: str, **overrides) -> Dict[str, Any]:
    row = {"email": email, "name": None, "status": "active", "source": "website"}
    row.update(overrides)
    return row


def make_ticket(**overrides) -> Dict[str, Any]:
    row = {
        "name": "Sam Trader",
        "email": "trader@example.com",
        "subject": "Billing question",
        "message": "How do I upgrade?",
        "status": "open",
    }
    row.update(overrides)
    return row
