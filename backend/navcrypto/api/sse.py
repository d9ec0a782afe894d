"""Server-Sent Events (SSE) Change Feeds

Live views of the tables the dashboards keep open. Each feed polls the
database and pushes the full result set whenever it changes.

Key Endpoints:
    GET /stream/signals - Active signals (any signed-in user)
    GET /stream/admin/ai-tasks - Latest 50 AI tasks (admin)
    GET /stream/admin/support - All support tickets (admin)

SSE Event Types:
    - "snapshot": Full result set, sent on connect and after every change
    - "heartbeat": Keep-alive ping every STREAM_HEARTBEAT_INTERVAL seconds
    - "error": The stream itself failed

Change detection compares a fingerprint of (id, status, timestamps) for
every row; query errors are logged and the next poll tries again.
"""

from fastapi import APIRouter, Depends, Request, Response
from sse_starlette.sse import EventSourceResponse
import asyncio
import json
from typing import Any, AsyncGenerator, Callable, Dict, List, Tuple
import logging

from supabase import Client

from ..auth.session import CurrentUser, carry_session_cookies, get_current_user, require_admin
from ..config import get_settings
from ..db.supabase_client import get_supabase
from ..services import ai_tasks, signals, support

logger = logging.getLogger(__name__)

router = APIRouter()

AI_TASKS_FEED_LIMIT = 50

FINGERPRINT_FIELDS = ("id", "status", "created_at", "updated_at", "closed_at", "published_at")

Rows = List[Dict[str, Any]]


def fingerprint(rows: Rows) -> Tuple[Tuple[Any, ...], ...]:
    """Identity of a result set: one tuple of id/status/timestamps per row."""
    return tuple(tuple(row.get(f) for f in FINGERPRINT_FIELDS) for row in rows)


def snapshot_event(feed: str, rows: Rows) -> Dict[str, str]:
    return {
        "event": "snapshot",
        "data": json.dumps({"feed": feed, "count": len(rows), "rows": rows}, default=str),
    }


async def change_feed(
    request: Request,
    feed: str,
    fetch: Callable[[], Rows],
    poll_interval: float,
    heartbeat_interval: float,
) -> AsyncGenerator[Dict[str, str], None]:
    """Generate SSE events for one feed until the client goes away.

    Args:
        request: Incoming request (used for disconnect detection)
        feed: Feed name, echoed in every snapshot
        fetch: Blocking query returning the current rows
        poll_interval: Seconds between polls
        heartbeat_interval: Seconds between heartbeat events

    Yields:
        Dict with "event" and "data" keys for SSE protocol
    """
    last_fingerprint = None

    try:
        logger.info(f"SSE feed '{feed}' started")
        last_heartbeat = asyncio.get_event_loop().time()

        while True:
            if await request.is_disconnected():
                logger.info(f"Client disconnected from SSE feed '{feed}'")
                break

            try:
                rows = await asyncio.to_thread(fetch)
            except Exception as db_error:
                logger.error(f"Database query error for feed '{feed}': {db_error}")
            else:
                current = fingerprint(rows)
                if current != last_fingerprint:
                    last_fingerprint = current
                    yield snapshot_event(feed, rows)

            current_time = asyncio.get_event_loop().time()
            if current_time - last_heartbeat >= heartbeat_interval:
                yield {
                    "event": "heartbeat",
                    "data": json.dumps({"timestamp": current_time})
                }
                last_heartbeat = current_time

            await asyncio.sleep(poll_interval)

    except Exception as e:
        logger.error(f"SSE feed '{feed}' error: {e}")
        yield {
            "event": "error",
            "data": json.dumps({"error": "Stream failed"})
        }


def _stream(request: Request, response: Response, feed: str, fetch: Callable[[], Rows]) -> EventSourceResponse:
    settings = get_settings()
    return carry_session_cookies(response, EventSourceResponse(change_feed(
        request,
        feed,
        fetch,
        poll_interval=settings.stream_poll_interval,
        heartbeat_interval=settings.stream_heartbeat_interval,
    )))


@router.get("/signals")
async def stream_signals(
    request: Request,
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_supabase),
) -> EventSourceResponse:
    """Active signals, newest first.

    Usage (Frontend):
        ```javascript
        const source = new EventSource('/api/stream/signals', { withCredentials: true });
        source.addEventListener('snapshot', (event) => {
            const { rows } = JSON.parse(event.data);
            renderSignals(rows);
        });
        ```
    """
    return _stream(request, response, "signals", lambda: signals.list_active_signals(client))


@router.get("/admin/ai-tasks")
async def stream_ai_tasks(
    request: Request,
    response: Response,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> EventSourceResponse:
    return _stream(request, response, "ai_tasks", lambda: ai_tasks.list_tasks(client, limit=AI_TASKS_FEED_LIMIT))


@router.get("/admin/support")
async def stream_support_tickets(
    request: Request,
    response: Response,
    admin: CurrentUser = Depends(require_admin),
    client: Client = Depends(get_supabase),
) -> EventSourceResponse:
    return _stream(request, response, "support_tickets", lambda: support.list_tickets(client))
