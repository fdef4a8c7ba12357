"""Best-effort reconciliation of room status against current bookings."""

from datetime import date
from typing import Iterable

from pms_core.schemas.booking_schema import Booking, BookingStatus
from pms_core.schemas.room_schema import Room, RoomStatus

# Statuses set by housekeeping or maintenance; bookings never override them.
HELD_ROOM_STATUSES = frozenset({RoomStatus.MAINTENANCE, RoomStatus.CLEANING})
OCCUPYING_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN})


def is_occupied_on(room: Room, bookings: Iterable[Booking], today: date) -> bool:
    """True when a confirmed or checked-in stay on this room spans ``today``.

    The check-out day counts, since the guest is in the room that morning.
    """
    return any(
        b.room_key == room.key
        and b.status in OCCUPYING_STATUSES
        and b.check_in <= today <= b.check_out
        for b in bookings
    )


def reconcile_room_status(room: Room, bookings: Iterable[Booking], today: date) -> RoomStatus:
    """Return the status the room should show given today's bookings."""
    if room.status in HELD_ROOM_STATUSES:
        return room.status
    return RoomStatus.OCCUPIED if is_occupied_on(room, bookings, today) else RoomStatus.AVAILABLE
