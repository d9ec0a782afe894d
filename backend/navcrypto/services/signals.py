"""Signal Service

Trading signals (pair, direction, entry / take-profit / stop-loss prices).

Admins create signals as drafts or publish them straight away, move them
between statuses and close them with a realised P/L. Users only ever see
active signals.
"""

from typing import Any, Dict, List, Optional, Tuple
import logging

from supabase import Client

from ..db.supabase_client import SIGNALS, first_row, utc_now
from ..errors import NotFoundError, ValidationFailedError
from ..models import SignalStatus
from .metrics import format_fixed, percentage

logger = logging.getLogger(__name__)

ALL = "all"

# Fields an admin may set through create/update
EDITABLE_FIELDS = ("pair", "action", "entry_price", "take_profit", "stop_loss", "notes", "profit_loss")


# ============================================================================
# Queries
# ============================================================================

def list_signals(client: Client, status_filter: str = ALL) -> List[Dict[str, Any]]:
    """All signals newest first, optionally restricted to one status."""
    query = client.table(SIGNALS).select("*")
    if status_filter and status_filter != ALL:
        query = query.eq("status", status_filter)
    return query.order("created_at", desc=True).execute().data or []


def list_active_signals(
    client: Client,
    pair: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    query = client.table(SIGNALS).select("*").eq("status", SignalStatus.ACTIVE.value)
    if pair and pair != ALL:
        query = query.eq("pair", pair)
    query = query.order("created_at", desc=True)
    if limit:
        query = query.limit(limit)
    return query.execute().data or []


def get_signal(client: Client, signal_id: str) -> Dict[str, Any]:
    result = client.table(SIGNALS).select("*").eq("id", signal_id).limit(1).execute()
    signal = first_row(result)
    if signal is None:
        raise NotFoundError(f"Signal {signal_id} not found")
    return signal


# ============================================================================
# Writes
# ============================================================================

def _clean(fields: Dict[str, Any]) -> Dict[str, Any]:
    row = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
    if "notes" in row:
        row["notes"] = (row["notes"] or "").strip() or None
    if "pair" in row:
        row["pair"] = (row["pair"] or "").strip().upper()
        if not row["pair"]:
            raise ValidationFailedError("Pair is required")
    return row


def create_signal(
    client: Client,
    fields: Dict[str, Any],
    created_by: str,
    status: SignalStatus = SignalStatus.DRAFT,
) -> Dict[str, Any]:
    """Insert a signal as draft or active."""
    if status not in (SignalStatus.DRAFT, SignalStatus.ACTIVE):
        raise ValidationFailedError("New signals must be draft or active")

    row = _clean(fields)
    row.update({
        "status": status.value,
        "created_by": created_by,
        "ai_generated": False,
    })
    result = client.table(SIGNALS).insert(row).execute()
    signal = first_row(result)
    logger.info(f"Signal {signal.get('id') if signal else '?'} created by {created_by} ({status.value})")
    return signal


def update_signal(
    client: Client,
    signal_id: str,
    fields: Dict[str, Any],
    status: Optional[SignalStatus] = None,
) -> Dict[str, Any]:
    row = _clean(fields)
    if status is not None:
        row["status"] = status.value
        if status == SignalStatus.CLOSED:
            row["closed_at"] = utc_now()
    row["updated_at"] = utc_now()

    result = client.table(SIGNALS).update(row).eq("id", signal_id).execute()
    signal = first_row(result)
    if signal is None:
        raise NotFoundError(f"Signal {signal_id} not found")
    return signal


def set_signal_status(
    client: Client,
    signal_id: str,
    status: SignalStatus,
    profit_loss: Optional[float] = None,
) -> Dict[str, Any]:
    """Move a signal to active or closed. Closing stamps closed_at."""
    if status not in (SignalStatus.ACTIVE, SignalStatus.CLOSED):
        raise ValidationFailedError("Signals can only be activated or closed")

    updates: Dict[str, Any] = {"status": status.value, "updated_at": utc_now()}
    if status == SignalStatus.CLOSED:
        updates["closed_at"] = updates["updated_at"]
        if profit_loss is not None:
            updates["profit_loss"] = profit_loss

    result = client.table(SIGNALS).update(updates).eq("id", signal_id).execute()
    signal = first_row(result)
    if signal is None:
        raise NotFoundError(f"Signal {signal_id} not found")
    logger.info(f"Signal {signal_id} -> {status.value}")
    return signal


def delete_signal(client: Client, signal_id: str) -> None:
    result = client.table(SIGNALS).delete().eq("id", signal_id).execute()
    if not result.data:
        raise NotFoundError(f"Signal {signal_id} not found")
    logger.info(f"Signal {signal_id} deleted")


# ============================================================================
# Derived Values
# ============================================================================

def signal_stats(signals: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Counts, win rate and average P/L over a list of signals.

    Only closed signals with a recorded P/L take part in the win rate and the
    average; with none of those both read "N/A".
    """
    closed = [
        s for s in signals
        if s.get("status") == SignalStatus.CLOSED.value and s.get("profit_loss") is not None
    ]
    if closed:
        wins = sum(1 for s in closed if s["profit_loss"] > 0)
        win_rate = f"{percentage(wins, len(closed))}%"
        avg_profit = f"{format_fixed(sum(s['profit_loss'] for s in closed) / len(closed), 1)}%"
    else:
        win_rate = "N/A"
        avg_profit = "N/A"

    return {
        "total": len(signals),
        "active": sum(1 for s in signals if s.get("status") == SignalStatus.ACTIVE.value),
        "draft": sum(1 for s in signals if s.get("status") == SignalStatus.DRAFT.value),
        "closed": sum(1 for s in signals if s.get("status") == SignalStatus.CLOSED.value),
        "win_rate": win_rate,
        "avg_profit": avg_profit,
    }


def target_percentages(signal: Dict[str, Any]) -> Tuple[str, str]:
    """Take-profit and stop-loss distance from entry, in percent (2 decimals)."""
    entry = signal.get("entry_price") or 0
    if entry <= 0:
        return "0.00", "0.00"

    def pct(price: Optional[float]) -> str:
        return format_fixed(((price or 0) - entry) / entry * 100, 2)

    return pct(signal.get("take_profit")), pct(signal.get("stop_loss"))


def with_targets(signal: Dict[str, Any]) -> Dict[str, Any]:
    take_profit_pct, stop_loss_pct = target_percentages(signal)
    return {**signal, "take_profit_pct": take_profit_pct, "stop_loss_pct": stop_loss_pct}


def pair_options(signals: List[Dict[str, Any]]) -> List[str]:
    """Distinct pairs in first-seen order, with "all" in front."""
    pairs: List[str] = []
    for signal in signals:
        pair = signal.get("pair")
        if pair and pair not in pairs:
            pairs.append(pair)
    return [ALL] + pairs
