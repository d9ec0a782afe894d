"""Analytics Service

Period analytics for the admin console. A period of N days compares the
last N days ("current window") with the N days before them ("previous
window").

All figures are computed from plain counts and row lists returned by
PostgREST; nothing is stored.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
import logging

from supabase import Client

from ..db.supabase_client import PROFILES, SIGNALS, USER_PROGRESS
from ..models import PERIOD_DAYS, AnalyticsPeriod, SignalStatus
from .metrics import growth

logger = logging.getLogger(__name__)

TOP_SIGNALS_LIMIT = 5


@dataclass
class Window:
    start: str
    previous_start: str
    previous_end: str


def period_window(period: AnalyticsPeriod, now: Optional[datetime] = None) -> Window:
    now = now or datetime.now(timezone.utc)
    days = PERIOD_DAYS[period]
    start = now - timedelta(days=days)
    return Window(
        start=start.isoformat(),
        previous_start=(now - timedelta(days=days * 2)).isoformat(),
        previous_end=start.isoformat(),
    )


def win_rate(signals: List[Dict[str, Any]]) -> float:
    """Percentage of signals with a positive P/L (missing P/L counts as a loss)."""
    if not signals:
        return 0.0
    wins = sum(1 for s in signals if (s.get("profit_loss") or 0) > 0)
    return wins / len(signals) * 100


def win_rate_change(current: float, previous: float) -> float:
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def _count(query) -> int:
    # PostgREST reports the exact total regardless of the row limit
    return query.limit(1).execute().count or 0


def get_analytics(client: Client, period: AnalyticsPeriod, now: Optional[datetime] = None) -> Dict[str, Any]:
    window = period_window(period, now)

    def profiles():
        return client.table(PROFILES).select("id", count="exact")

    def signals(columns: str = "id"):
        return client.table(SIGNALS).select(columns, count="exact")

    def completions():
        return client.table(USER_PROGRESS).select("id", count="exact").eq("completed", True)

    total_users = _count(profiles())
    new_users = _count(profiles().gte("created_at", window.start))
    prev_new_users = _count(
        profiles().gte("created_at", window.previous_start).lt("created_at", window.previous_end)
    )

    total_signals = _count(signals())
    active_signals = _count(signals().eq("status", SignalStatus.ACTIVE.value))
    period_signals = _count(signals().gte("created_at", window.start))
    prev_period_signals = _count(
        signals().gte("created_at", window.previous_start).lt("created_at", window.previous_end)
    )

    closed = signals("pair, profit_loss") \
        .eq("status", SignalStatus.CLOSED.value) \
        .gte("created_at", window.start) \
        .execute().data or []
    prev_closed = signals("profit_loss") \
        .eq("status", SignalStatus.CLOSED.value) \
        .gte("created_at", window.previous_start) \
        .lt("created_at", window.previous_end) \
        .execute().data or []

    # user_progress has no updated_at; completion time is completed_at
    course_completions = _count(completions().gte("completed_at", window.start))
    prev_completions = _count(
        completions().gte("completed_at", window.previous_start).lt("completed_at", window.previous_end)
    )

    current_rate = win_rate(closed)
    previous_rate = win_rate(prev_closed)

    ranked = sorted(
        (s for s in closed if s.get("profit_loss") is not None),
        key=lambda s: s["profit_loss"],
        reverse=True,
    )
    top_signals = [
        {"pair": s.get("pair"), "profit": s["profit_loss"]}
        for s in ranked[:TOP_SIGNALS_LIMIT]
    ]

    logger.info(f"Analytics computed for period {period.value}")
    return {
        "period": period.value,
        "total_users": total_users,
        "new_users": new_users,
        "user_growth": growth(new_users, prev_new_users),
        "total_signals": total_signals,
        "active_signals": active_signals,
        "signal_growth": growth(period_signals, prev_period_signals),
        "win_rate": current_rate,
        "win_rate_change": win_rate_change(current_rate, previous_rate),
        "course_completions": course_completions,
        "completion_growth": growth(course_completions, prev_completions),
        "top_signals": top_signals,
    }
