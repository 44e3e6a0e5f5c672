"""
Booking status transitions.

Pending -> Confirmed     check-in by staff or an admin, or a confirmed payment
Confirmed -> Completed   check-out by staff or an admin
Pending/Confirmed -> Cancelled   the owner or an admin

Completed and Cancelled are terminal.
"""
import logging
from datetime import datetime
from typing import Optional
from app.db import utcnow
from app.models.booking import PENDING, CONFIRMED, CANCELLED, COMPLETED
from app.models.user import ADMIN, GUEST, STAFF
from app.utils.errors import Forbidden, ValidationError

logger = logging.getLogger(__name__)

# Actor used when the payment provider reports a completed checkout
PAYMENT_PROVIDER = "payment"

TERMINAL_STATUSES = frozenset({COMPLETED, CANCELLED})

TRANSITIONS = {
    (PENDING, CONFIRMED): frozenset({ADMIN, STAFF, PAYMENT_PROVIDER}),
    (CONFIRMED, COMPLETED): frozenset({ADMIN, STAFF}),
    (PENDING, CANCELLED): frozenset({ADMIN, GUEST, STAFF}),
    (CONFIRMED, CANCELLED): frozenset({ADMIN, GUEST, STAFF}),
}

_STAMPS = {
    (PENDING, CONFIRMED): "Checked in at {}",
    (CONFIRMED, COMPLETED): "Checked out at {}",
    (PENDING, CANCELLED): "Cancelled at {}",
    (CONFIRMED, CANCELLED): "Cancelled at {}",
}


def is_terminal(status_name: str) -> bool:
    return status_name in TERMINAL_STATUSES


def allowed_targets(from_status: str):
    return {to for (frm, to) in TRANSITIONS if frm == from_status}


def can_transition(role: str, from_status: str, to_status: str) -> bool:
    return role in TRANSITIONS.get((from_status, to_status), frozenset())


def check_transition(role: str, from_status: str, to_status: str) -> None:
    """Raise unless ``role`` may move a booking from ``from_status`` to ``to_status``."""
    if (from_status, to_status) not in TRANSITIONS:
        logger.error(f"Undefined booking status transition: {from_status} -> {to_status}")
        raise ValidationError(f"Cannot change booking status from {from_status} to {to_status}")
    if not can_transition(role, from_status, to_status):
        logger.error(f"Role {role} may not move a booking from {from_status} to {to_status}")
        raise Forbidden(f"Role '{role}' may not change booking status from {from_status} to {to_status}")


def stamp_note(from_status: str, to_status: str, actor: str, at: Optional[datetime] = None) -> str:
    at = at or utcnow()
    if actor == PAYMENT_PROVIDER and to_status == CONFIRMED:
        template = "Payment confirmed at {}"
    else:
        template = _STAMPS[(from_status, to_status)]
    return template.format(at.strftime("%Y-%m-%d %H:%M"))


def append_notes(existing: Optional[str], *lines: Optional[str]) -> Optional[str]:
    parts = [part for part in (existing, *lines) if part]
    return "\n".join(parts) if parts else None
