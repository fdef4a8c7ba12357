"""
Availability calculator for the room calendar and booking form validation.

Stays are half-open ranges [check_in, check_out): the check-out day is free
for the next guest, so back-to-back turnover never conflicts. Cancelled
bookings are ignored by every occupancy question asked here.

Every function is pure and works on whatever snapshot it is given. Callers
pre-filter bookings to a room, but anything on another RoomKey is skipped
anyway; matching is exact, never by substring.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from fractions import Fraction
from typing import Iterable, Optional

from pms_core.errors import InvalidDateRangeError, InvalidWindowError
from pms_core.schemas.booking_schema import Booking, BookingStatus, RoomKey
from pms_core.utils import iter_days

NON_BLOCKING_STATUSES = frozenset({BookingStatus.CANCELLED})


class CellState(str, Enum):
    """Render state of one (room, day) cell."""
    EMPTY = "empty"
    BOOKING_START = "booking-start"
    BOOKING_MIDDLE = "booking-middle"
    BOOKING_END = "booking-end"
    BOOKING_SINGLE_DAY = "booking-single-day"


@dataclass(frozen=True)
class BookingBlock:
    """Position of one booking on a calendar row.

    Fractions are exact so that ``left_fraction + width_fraction`` never
    drifts past 1 for bookings that run to the end of the window.
    """

    booking_id: str
    start_index: int
    end_index: int
    left_fraction: Fraction
    width_fraction: Fraction
    status: BookingStatus

    @property
    def left_percent(self) -> float:
        return float(self.left_fraction * 100)

    @property
    def width_percent(self) -> float:
        return float(self.width_fraction * 100)


@dataclass(frozen=True)
class CalendarCell:
    day: date
    state: CellState
    booking_id: Optional[str] = None


@dataclass(frozen=True)
class OverlapResult:
    """Outcome of a proposed stay check. A conflict is data, not an error."""
    available: bool
    conflicting_booking: Optional[Booking] = None


def validate_date_range(check_in: date, check_out: date) -> None:
    """Raise InvalidDateRangeError unless check_out is strictly after check_in."""
    if check_out <= check_in:
        raise InvalidDateRangeError(check_in, check_out)


def _validate_window(days: int) -> None:
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise InvalidWindowError(
            f"View window must span a positive number of days, got {days!r}"
        )


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Half-open interval intersection; touching endpoints do not overlap."""
    return a_start < b_end and a_end > b_start


def blocks_room(booking: Booking) -> bool:
    """True when the booking's status holds the room."""
    return booking.status not in NON_BLOCKING_STATUSES


def _on_room(bookings: Iterable[Booking], target_room: RoomKey) -> list[Booking]:
    return [b for b in bookings if b.room_key == target_room]


def check_overlap(
    existing_bookings: Iterable[Booking],
    target_room: RoomKey,
    check_in: date,
    check_out: date,
    exclude_booking_id: Optional[str] = None,
) -> OverlapResult:
    """Check whether [check_in, check_out) is free on target_room.

    Returns the first conflicting booking found; it does not enumerate all
    of them. Pass ``exclude_booking_id`` when editing so a booking does not
    conflict with itself.
    """
    validate_date_range(check_in, check_out)
    for candidate in _on_room(existing_bookings, target_room):
        if exclude_booking_id is not None and candidate.id == exclude_booking_id:
            continue
        if not blocks_room(candidate):
            continue
        if ranges_overlap(check_in, check_out, candidate.check_in, candidate.check_out):
            return OverlapResult(available=False, conflicting_booking=candidate)
    return OverlapResult(available=True)


def compute_availability(
    existing_bookings: Iterable[Booking],
    target_room: RoomKey,
    view_start: date,
    days: int,
) -> list[BookingBlock]:
    """Lay out the bookings of target_room over [view_start, view_start + days).

    Bookings are clipped to the window; ones entirely outside it are dropped.
    Every status is laid out, cancelled included, so the grid can colour it.
    """
    _validate_window(days)
    blocks: list[BookingBlock] = []
    for booking in _on_room(existing_bookings, target_room):
        validate_date_range(booking.check_in, booking.check_out)
        offset = (booking.check_in - view_start).days
        visible_start = max(0, offset)
        visible_end = min(days, offset + booking.nights)
        if visible_end <= visible_start:
            continue
        blocks.append(
            BookingBlock(
                booking_id=booking.id,
                start_index=visible_start,
                end_index=visible_end,
                left_fraction=Fraction(visible_start, days),
                width_fraction=Fraction(visible_end - visible_start, days),
                status=booking.status,
            )
        )
    return blocks


def _cell_state(booking: Booking, day: date) -> CellState:
    last_night = booking.check_out - timedelta(days=1)
    if booking.check_in == last_night:
        return CellState.BOOKING_SINGLE_DAY
    if day == booking.check_in:
        return CellState.BOOKING_START
    if day == last_night:
        return CellState.BOOKING_END
    return CellState.BOOKING_MIDDLE


def compute_calendar_cells(
    existing_bookings: Iterable[Booking],
    target_room: RoomKey,
    view_start: date,
    days: int,
) -> list[CalendarCell]:
    """One cell per day of the window, marking where each stay starts and ends."""
    _validate_window(days)
    view_end = view_start + timedelta(days=days)
    occupied: dict[date, CalendarCell] = {}

    for booking in _on_room(existing_bookings, target_room):
        if not blocks_room(booking):
            continue
        validate_date_range(booking.check_in, booking.check_out)
        first = max(booking.check_in, view_start)
        last = min(booking.check_out, view_end)
        for day in iter_days(first, last):
            occupied.setdefault(day, CalendarCell(day, _cell_state(booking, day), booking.id))

    return [
        occupied.get(day, CalendarCell(day, CellState.EMPTY))
        for day in iter_days(view_start, view_end)
    ]


def booked_dates(
    existing_bookings: Iterable[Booking],
    target_room: RoomKey,
    exclude_booking_id: Optional[str] = None,
) -> set[date]:
    """All occupied nights on target_room."""
    nights: set[date] = set()
    for booking in _on_room(existing_bookings, target_room):
        if booking.id == exclude_booking_id or not blocks_room(booking):
            continue
        nights.update(iter_days(booking.check_in, booking.check_out))
    return nights


def is_date_booked(
    existing_bookings: Iterable[Booking],
    target_room: RoomKey,
    day: date,
    exclude_booking_id: Optional[str] = None,
) -> bool:
    """True when the night starting on ``day`` is taken."""
    return any(
        booking.check_in <= day < booking.check_out
        for booking in _on_room(existing_bookings, target_room)
        if booking.id != exclude_booking_id and blocks_room(booking)
    )
