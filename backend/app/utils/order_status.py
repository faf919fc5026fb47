"""
Order status workflow: legal transitions and progress.

The adjacency table is static configuration. Helpers here are pure and never
raise on unknown input; callers that must reject a transition use
`ensure_valid_transition`.
"""

from typing import Dict, List, Union

from app.models.order import OrderStatus


class InvalidStatusTransitionError(ValueError):
    """Raised when an order is asked to move along an edge the workflow does not allow."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Invalid status transition from '{current}' to '{requested}'")


ORDER_STATUS_TRANSITIONS: Dict[OrderStatus, List[OrderStatus]] = {
    OrderStatus.NEW: [
        OrderStatus.REVIEWING,
        OrderStatus.AWAITING_INFO,
        OrderStatus.QUOTE_SENT,
        OrderStatus.CONFIRMED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.REVIEWING: [
        OrderStatus.AWAITING_INFO,
        OrderStatus.QUOTE_SENT,
        OrderStatus.CONFIRMED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.AWAITING_INFO: [
        OrderStatus.REVIEWING,
        OrderStatus.QUOTE_SENT,
        OrderStatus.CONFIRMED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.QUOTE_SENT: [
        OrderStatus.REVIEWING,
        OrderStatus.AWAITING_INFO,
        OrderStatus.CONFIRMED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.CONFIRMED: [
        OrderStatus.APPROVED,
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.APPROVED: [
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.COMPLETED: [],
    OrderStatus.CANCELLED: [],
}

# Canonical happy path used for progress reporting
STATUS_PROGRESS_ORDER: List[OrderStatus] = [
    OrderStatus.NEW,
    OrderStatus.REVIEWING,
    OrderStatus.AWAITING_INFO,
    OrderStatus.QUOTE_SENT,
    OrderStatus.CONFIRMED,
    OrderStatus.APPROVED,
    OrderStatus.COMPLETED,
]


def _coerce(status: Union[OrderStatus, str, None]) -> OrderStatus | None:
    """Return the enum member for `status`, or None if it is not a known status."""
    if isinstance(status, OrderStatus):
        return status
    try:
        return OrderStatus(status)
    except ValueError:
        return None


def is_valid_transition(current: Union[OrderStatus, str], next_status: Union[OrderStatus, str]) -> bool:
    """True iff `next_status` is an allowed successor of `current`."""
    current_member = _coerce(current)
    next_member = _coerce(next_status)
    if current_member is None or next_member is None:
        return False
    return next_member in ORDER_STATUS_TRANSITIONS[current_member]


def get_next_statuses(current: Union[OrderStatus, str]) -> List[OrderStatus]:
    """Allowed successors of `current`. An empty list means the status is terminal."""
    current_member = _coerce(current)
    if current_member is None:
        return []
    return list(ORDER_STATUS_TRANSITIONS[current_member])


def is_terminal(status: Union[OrderStatus, str]) -> bool:
    """True for statuses with no outgoing transitions."""
    member = _coerce(status)
    return member is not None and not ORDER_STATUS_TRANSITIONS[member]


def get_status_progress(current: Union[OrderStatus, str]) -> int:
    """
    Completion percentage (0-100) of `current` along the canonical path.

    Cancelled orders, and anything not on the path, report 0.
    """
    member = _coerce(current)
    if member is None or member not in STATUS_PROGRESS_ORDER:
        return 0
    index = STATUS_PROGRESS_ORDER.index(member)
    return round(index / (len(STATUS_PROGRESS_ORDER) - 1) * 100)


def ensure_valid_transition(current: Union[OrderStatus, str], next_status: Union[OrderStatus, str]) -> None:
    """Raise InvalidStatusTransitionError unless the transition is allowed."""
    if not is_valid_transition(current, next_status):
        current_value = current.value if isinstance(current, OrderStatus) else str(current)
        next_value = next_status.value if isinstance(next_status, OrderStatus) else str(next_status)
        raise InvalidStatusTransitionError(current_value, next_value)
