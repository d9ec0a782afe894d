"""Support Ticket Service"""

from typing import Any, Dict, List, Optional
import logging

from supabase import Client

from ..db.supabase_client import SUPPORT_TICKETS, first_row, utc_now
from ..errors import NavCryptoError, NotFoundError, ValidationFailedError
from ..models import TicketStatus

logger = logging.getLogger(__name__)

SUBMIT_FAILED = "Failed to submit your request. Please try again or email us directly."


def submit_ticket(
    client: Client,
    name: str,
    email: str,
    subject: str,
    message: str,
    user_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Open a ticket from the public contact form.

    Raises:
        ValidationFailedError: A required field is blank
        NavCryptoError: The insert failed
    """
    fields = {"name": name, "email": email, "subject": subject, "message": message}
    missing = [key for key, value in fields.items() if not (value or "").strip()]
    if missing:
        raise ValidationFailedError(f"Missing required fields: {', '.join(missing)}")

    row = {key: value.strip() for key, value in fields.items()}
    row.update({"user_id": user_id, "status": TicketStatus.OPEN.value})
    try:
        result = client.table(SUPPORT_TICKETS).insert(row).execute()
    except Exception as e:
        logger.error(f"Support ticket insert failed: {e}", exc_info=True)
        raise NavCryptoError(SUBMIT_FAILED)

    ticket = first_row(result)
    logger.info(f"Support ticket {ticket.get('id') if ticket else '?'} opened")
    return ticket


def list_tickets(client: Client) -> List[Dict[str, Any]]:
    return client.table(SUPPORT_TICKETS) \
        .select("*") \
        .order("created_at", desc=True) \
        .execute().data or []


def filter_tickets(tickets: List[Dict[str, Any]], status: Optional[str]) -> List[Dict[str, Any]]:
    if not status or status == "all":
        return tickets
    return [t for t in tickets if t.get("status") == status]


def ticket_stats(tickets: List[Dict[str, Any]]) -> Dict[str, int]:
    stats = {"total": len(tickets)}
    for status in TicketStatus:
        stats[status.value] = sum(1 for t in tickets if t.get("status") == status.value)
    return stats


def get_ticket(client: Client, ticket_id: str) -> Dict[str, Any]:
    ticket = first_row(client.table(SUPPORT_TICKETS).select("*").eq("id", ticket_id).limit(1).execute())
    if ticket is None:
        raise NotFoundError(f"Ticket {ticket_id} not found")
    return ticket


def update_ticket_status(client: Client, ticket_id: str, status: TicketStatus) -> Dict[str, Any]:
    ticket = first_row(
        client.table(SUPPORT_TICKETS)
        .update({"status": status.value, "updated_at": utc_now()})
        .eq("id", ticket_id)
        .execute()
    )
    if ticket is None:
        raise NotFoundError(f"Ticket {ticket_id} not found")
    logger.info(f"Ticket {ticket_id} -> {status.value}")
    return ticket
