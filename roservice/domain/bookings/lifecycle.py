"""
Booking status state machine

PENDING → IN_PROGRESS → COMPLETED
PENDING / IN_PROGRESS → CANCELED
COMPLETED and CANCELED are terminal.
"""

from ...errors import InvalidTransition
from ...models import BookingStatus

VALID_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.IN_PROGRESS, BookingStatus.CANCELED},
    BookingStatus.IN_PROGRESS: {BookingStatus.COMPLETED, BookingStatus.CANCELED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELED: set(),
}

# A technician may be (re)assigned only while the booking is open
ASSIGNABLE_STATUSES = {BookingStatus.PENDING, BookingStatus.IN_PROGRESS}


def is_terminal(status: BookingStatus) -> bool:
    return not VALID_TRANSITIONS[status]


def validate_status_transition(current_status: BookingStatus, new_status: BookingStatus) -> bool:
    """True if moving from current_status to new_status is allowed (same status is a no-op)"""
    if current_status == new_status:
        return True
    return new_status in VALID_TRANSITIONS.get(current_status, set())


def ensure_transition(current_status: BookingStatus, new_status: BookingStatus) -> None:
    if not validate_status_transition(current_status, new_status):
        raise InvalidTransition(
            f"Cannot move booking from {current_status.value} to {new_status.value}"
        )
