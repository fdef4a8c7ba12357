"""
In-memory booking records and the booking form actions.

Stands in for the hosted bookings table. Create and update run the same
gate the booking form runs before submission: validate the stay range,
check the room for overlapping stays, derive the financials with the
configured fee rates, then store and resync the room's status.

Conflicts and invalid ranges come back as ``BookingResult`` values with
``success=False``; only lookups of unknown ids raise.
"""

import json
import uuid
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, TypedDict

from pydantic import TypeAdapter, ValidationError

from pms_core.booking.availability import check_overlap, validate_date_range
from pms_core.booking.financials import FinancialBreakdown, derive_financials, settle_balance
from pms_core.booking.lifecycle import InvalidTransitionError, StatusTrigger, next_status
from pms_core.booking.reference import generate_booking_reference
from pms_core.config import settings
from pms_core.errors import InvalidDateRangeError, RecordNotFoundError, StoreError
from pms_core.logging_context import action_context, get_request_logger
from pms_core.records import rooms as room_records
from pms_core.rooms.status import reconcile_room_status
from pms_core.schemas.booking_schema import (
    Booking,
    BookingRequest,
    BookingStatus,
    DateRange,
    RoomKey,
)

logger = get_request_logger(__name__)


class BookingResult(TypedDict, total=False):
    """Result from create_booking, update_booking, cancel_booking, or change_status."""

    success: bool
    message: str
    error: str
    booking: Booking
    conflict: Booking
    financials: FinancialBreakdown

_bookings: dict[str, Booking] = {}
_booking_list_adapter = TypeAdapter(list[Booking])


def _room_bookings(key: RoomKey) -> list[Booking]:
    return [b for b in _bookings.values() if b.room_key == key]


def _conflict_message(conflict: Booking) -> str:
    return (
        f"Room {conflict.room_number} is already booked by {conflict.guest_name} "
        f"from {conflict.check_in.isoformat()} to {conflict.check_out.isoformat()}."
    )


def _sync_room(key: RoomKey, today: Optional[date] = None) -> None:
    room = room_records.find_room(key)
    if room is None:
        return
    status = reconcile_room_status(room, _room_bookings(key), today or date.today())
    if status != room.status:
        room_records.set_room_status(room.id, status)


def _gate(
    request: BookingRequest, exclude_booking_id: Optional[str] = None
) -> tuple[Optional[BookingResult], Optional[FinancialBreakdown]]:
    """Run range, room, and overlap checks; derive financials when they pass."""
    try:
        validate_date_range(request.check_in, request.check_out)
    except InvalidDateRangeError as e:
        return {"success": False, "error": "invalid_range", "message": str(e)}, None

    key = request.room_key
    if room_records.find_room(key) is None:
        return {
            "success": False,
            "error": "unknown_room",
            "message": f"Room {key.room_number} does not exist at {key.property_id}.",
        }, None

    overlap = check_overlap(
        _room_bookings(key), key, request.check_in, request.check_out,
        exclude_booking_id=exclude_booking_id,
    )
    if not overlap.available:
        conflict = overlap.conflicting_booking
        logger.info(
            "Booking for %s %s..%s rejected: overlaps %s",
            key, request.check_in, request.check_out, conflict.reference,
        )
        return {
            "success": False,
            "error": "conflict",
            "conflict": conflict,
            "message": _conflict_message(conflict),
        }, None

    fees = settings.fees
    financials = derive_financials(
        request.base_rate,
        request.check_in,
        request.check_out,
        fees.tax_rate,
        fees.tourism_fee_rate,
        fees.commission_rate,
    ).rounded()
    return None, financials


def _financial_fields(request: BookingRequest, financials: FinancialBreakdown) -> dict:
    remaining, payment_status = settle_balance(financials.total_amount, request.amount_paid)
    return {
        "base_rate": request.base_rate,
        "total_amount": financials.total_amount,
        "amount_paid": request.amount_paid,
        "remaining_amount": remaining,
        "security_deposit": request.security_deposit,
        "commission": financials.commission,
        "tourism_fee": financials.tourism_fee,
        "vat": financials.vat,
        "net_to_owner": financials.net_to_owner,
        "payment_status": payment_status,
    }


def _stay_fields(request: BookingRequest) -> dict:
    room = room_records.find_room(request.room_key)
    return {
        "guest_name": request.guest_name,
        "guest_email": request.guest_email,
        "guest_phone": request.guest_phone,
        "property_id": request.property_id,
        "property_name": room.property_name if room else "",
        "room_number": request.room_number,
        "check_in": request.check_in,
        "check_out": request.check_out,
        "adults": request.adults,
        "children": request.children,
        "notes": request.notes,
    }


def create_booking(request: BookingRequest, today: Optional[date] = None) -> BookingResult:
    """Create a booking if the room is free for the requested stay."""
    with action_context(property_id=request.property_id):
        rejected, financials = _gate(request)
        if rejected is not None:
            return rejected

        now = datetime.now(timezone.utc)
        booking = Booking(
            id=str(uuid.uuid4()),
            reference=request.reference or generate_booking_reference(today=today),
            status=request.status,
            created_at=now,
            updated_at=now,
            **_stay_fields(request),
            **_financial_fields(request, financials),
        )
        _bookings[booking.id] = booking
        _sync_room(booking.room_key, today)
        logger.info(
            "Booking created: %s for %s in %s from %s to %s",
            booking.reference, booking.guest_name, booking.room_key,
            booking.check_in, booking.check_out,
        )
    return {
        "success": True,
        "booking": booking,
        "financials": financials,
        "message": (
            f"Booking {booking.reference} saved. {booking.nights} night(s), "
            f"total {financials.total_amount} {settings.business.currency}."
        ),
    }


def update_booking(
    booking_id: str, request: BookingRequest, today: Optional[date] = None
) -> BookingResult:
    """Edit a booking's stay, guest, or rate. Status changes go through change_status."""
    existing = get_booking(booking_id)
    with action_context(property_id=request.property_id):
        rejected, financials = _gate(request, exclude_booking_id=booking_id)
        if rejected is not None:
            return rejected

        booking = existing.model_copy(
            update={
                **_stay_fields(request),
                **_financial_fields(request, financials),
                "updated_at": datetime.now(timezone.utc),
            }
        )
        _bookings[booking_id] = booking
        _sync_room(existing.room_key, today)
        if booking.room_key != existing.room_key:
            _sync_room(booking.room_key, today)
        logger.info("Booking updated: %s", booking.reference)
    return {
        "success": True,
        "booking": booking,
        "financials": financials,
        "message": f"Booking {booking.reference} updated.",
    }


def change_status(
    booking_id: str, trigger: StatusTrigger, today: Optional[date] = None
) -> BookingResult:
    """Move a booking through its lifecycle and resync the room."""
    booking = get_booking(booking_id)
    with action_context(property_id=booking.property_id):
        try:
            status = next_status(booking.status, trigger)
        except InvalidTransitionError as e:
            logger.info("Booking %s: %s", booking.reference, e)
            return {"success": False, "error": "invalid_transition", "message": str(e)}

        booking = booking.model_copy(
            update={"status": status, "updated_at": datetime.now(timezone.utc)}
        )
        _bookings[booking_id] = booking
        _sync_room(booking.room_key, today)
        logger.info("Booking %s is now %s", booking.reference, status.value)
    return {
        "success": True,
        "booking": booking,
        "message": f"Booking {booking.reference} is now {status.value}.",
    }


def cancel_booking(booking_id: str, today: Optional[date] = None) -> BookingResult:
    return change_status(booking_id, StatusTrigger.CANCEL, today)


def get_booking(booking_id: str) -> Booking:
    """Retrieve a booking by id.

    Raises:
        RecordNotFoundError: If no booking has that id.
    """
    booking = _bookings.get(booking_id)
    if booking is None:
        raise RecordNotFoundError(f"Booking {booking_id} not found.")
    return booking


def get_booking_by_reference(reference: str) -> Optional[Booking]:
    for booking in _bookings.values():
        if booking.reference == reference:
            return booking
    return None


def list_bookings(
    property_id: Optional[str] = None,
    window: Optional[DateRange] = None,
    statuses: Optional[Iterable[BookingStatus]] = None,
) -> list[Booking]:
    """Bookings filtered by property, stay window intersection, and status."""
    wanted = set(statuses) if statuses is not None else None
    found = [
        b for b in _bookings.values()
        if (property_id is None or b.property_id == property_id)
        and (window is None or window.intersects(b.check_in, b.check_out))
        and (wanted is None or b.status in wanted)
    ]
    return sorted(found, key=lambda b: (b.check_in, b.reference))


def add_bookings(bookings: Iterable[Booking]) -> int:
    """Insert already-built bookings as-is, e.g. from an export file."""
    count = 0
    for booking in bookings:
        _bookings[booking.id] = booking
        count += 1
    return count


def load_bookings_file(path: Path) -> list[Booking]:
    """Load a JSON array of bookings exported from the bookings table.

    Raises:
        StoreError: If the file is missing, is not JSON, or holds invalid rows.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        bookings = _booking_list_adapter.validate_python(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise StoreError(f"Cannot load bookings from {path}: {e}") from e
    logger.debug("Loaded %d booking(s) from %s", len(bookings), path)
    return bookings


def reset() -> None:
    """Clear all bookings. Used by test fixtures for isolation."""
    _bookings.clear()
