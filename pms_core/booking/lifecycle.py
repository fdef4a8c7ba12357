"""
Booking status lifecycle.

    pending --confirm--> confirmed --check_in--> checked-in --check_out--> checked-out
       |                     |
       +------cancel---------+--> cancelled

Walk-ins may check in straight from pending. Checked-out and cancelled
are terminal. Any other move raises InvalidTransitionError listing the
triggers allowed from the current status.

Usage:
    lifecycle = BookingLifecycle(BookingStatus.PENDING)
    lifecycle.transition(StatusTrigger.CONFIRM)
    assert lifecycle.current_status == BookingStatus.CONFIRMED
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pms_core.errors import PMSError
from pms_core.schemas.booking_schema import BookingStatus

logger = logging.getLogger(__name__)


class StatusTrigger(str, Enum):
    """Front-desk actions that move a booking between statuses."""
    CONFIRM = "confirm"
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
    CANCEL = "cancel"


@dataclass(frozen=True)
class StatusTransition:
    from_status: BookingStatus
    to_status: BookingStatus
    trigger: StatusTrigger


@dataclass
class StatusEntry:
    """Recorded history entry for a status change."""
    status: BookingStatus
    entered_at: datetime
    trigger: Optional[StatusTrigger] = None


class InvalidTransitionError(PMSError):
    """Raised when a trigger is not valid from the current status."""


TERMINAL_STATUSES = frozenset({BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED})

TRANSITIONS: list[StatusTransition] = [
    StatusTransition(BookingStatus.PENDING, BookingStatus.CONFIRMED, StatusTrigger.CONFIRM),
    StatusTransition(BookingStatus.PENDING, BookingStatus.CHECKED_IN, StatusTrigger.CHECK_IN),
    StatusTransition(BookingStatus.PENDING, BookingStatus.CANCELLED, StatusTrigger.CANCEL),
    StatusTransition(BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN, StatusTrigger.CHECK_IN),
    StatusTransition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED, StatusTrigger.CANCEL),
    StatusTransition(BookingStatus.CHECKED_IN, BookingStatus.CHECKED_OUT, StatusTrigger.CHECK_OUT),
]


def valid_triggers(status: BookingStatus) -> list[StatusTrigger]:
    """Return all triggers valid from ``status``."""
    return [t.trigger for t in TRANSITIONS if t.from_status == status]


def next_status(status: BookingStatus, trigger: StatusTrigger) -> BookingStatus:
    """Resolve the status reached by applying ``trigger`` to ``status``."""
    for t in TRANSITIONS:
        if t.from_status == status and t.trigger == trigger:
            return t.to_status
    valid = [t.value for t in valid_triggers(status)]
    raise InvalidTransitionError(
        f"No valid transition from '{status.value}' "
        f"with trigger '{trigger.value}'. Valid triggers: {valid}"
    )


class BookingLifecycle:
    """Tracks one booking's status and the history of how it got there."""

    def __init__(self, status: BookingStatus = BookingStatus.PENDING) -> None:
        self._current_status = status
        self._history: list[StatusEntry] = [
            StatusEntry(status=status, entered_at=datetime.now(timezone.utc))
        ]

    @property
    def current_status(self) -> BookingStatus:
        return self._current_status

    def transition(self, trigger: StatusTrigger) -> BookingStatus:
        """
        Apply a trigger to the current status.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        old_status = self._current_status
        self._current_status = next_status(old_status, trigger)
        self._history.append(StatusEntry(
            status=self._current_status,
            entered_at=datetime.now(timezone.utc),
            trigger=trigger,
        ))
        logger.debug(
            "Booking status: %s -> %s (trigger: %s)",
            old_status.value, self._current_status.value, trigger.value,
        )
        return self._current_status

    def get_valid_triggers(self) -> list[StatusTrigger]:
        return valid_triggers(self._current_status)

    def get_history(self) -> list[StatusEntry]:
        """Return the full status history."""
        return list(self._history)

    def get_status_trace(self) -> list[str]:
        return [entry.status.value for entry in self._history]

    def is_terminal(self) -> bool:
        return self._current_status in TERMINAL_STATUSES
