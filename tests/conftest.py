"""Shared test fixtures and helpers."""

import itertools
from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from pms_core.booking.lifecycle import BookingLifecycle
from pms_core.records import bookings as booking_records
from pms_core.records import rooms as room_records
from pms_core.schemas.booking_schema import Booking, BookingRequest, BookingStatus, RoomKey

_ids = itertools.count(1)

MARINA_101 = RoomKey(property_id="marina", room_number="101")


@pytest.fixture
def lifecycle():
    return BookingLifecycle()


@pytest.fixture(autouse=True)
def reset_records():
    room_records.reset()
    booking_records.reset()
    yield
    booking_records.reset()
    room_records.reset()


def make_booking(
    check_in: date,
    check_out: date,
    booking_id: Optional[str] = None,
    property_id: str = "marina",
    room_number: str = "101",
    status: BookingStatus = BookingStatus.CONFIRMED,
    total_amount: str = "0",
    guest_name: str = "Test Guest",
) -> Booking:
    """Helper to create a stored-shape Booking with sensible defaults."""
    n = next(_ids)
    return Booking(
        id=booking_id or f"bk-{n}",
        reference=f"BK-2024-{1000 + n % 9000}-{n % 10000:04d}",
        guest_name=guest_name,
        property_id=property_id,
        room_number=room_number,
        check_in=check_in,
        check_out=check_out,
        total_amount=Decimal(total_amount),
        status=status,
    )


def make_request(
    check_in: date,
    check_out: date,
    property_id: str = "marina",
    room_number: str = "101",
    base_rate: str = "100",
    amount_paid: str = "0",
    status: BookingStatus = BookingStatus.CONFIRMED,
    guest_name: str = "Test Guest",
) -> BookingRequest:
    """Helper to create a BookingRequest as the booking form would submit it."""
    return BookingRequest(
        guest_name=guest_name,
        property_id=property_id,
        room_number=room_number,
        check_in=check_in,
        check_out=check_out,
        base_rate=Decimal(base_rate),
        amount_paid=Decimal(amount_paid),
        status=status,
    )
