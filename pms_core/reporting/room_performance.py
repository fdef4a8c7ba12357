"""Per-room revenue and occupancy for the "top rooms" report."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from pms_core.booking.availability import blocks_room
from pms_core.booking.financials import money
from pms_core.schemas.booking_schema import Booking, DateRange
from pms_core.schemas.report_schema import RoomPerformance
from pms_core.schemas.room_schema import Room
from pms_core.utils import iter_days


def rank_rooms(
    bookings: Iterable[Booking],
    rooms: Iterable[Room],
    window: DateRange,
    limit: int = 3,
) -> list[RoomPerformance]:
    """Rank rooms by revenue earned on nights inside ``window``.

    Revenue is spread evenly over each stay's nights, as on the dashboard,
    and cancelled stays are ignored.
    """
    by_room: dict = {}
    for booking in bookings:
        if not blocks_room(booking):
            continue
        by_room.setdefault(booking.room_key, []).append(booking)

    ranked = []
    for room in rooms:
        revenue = Decimal("0")
        occupied = 0
        for booking in by_room.get(room.key, []):
            nightly = booking.total_amount / booking.nights
            for day in iter_days(booking.check_in, booking.check_out):
                if window.contains(day):
                    occupied += 1
                    revenue += nightly
        occupancy = Decimal(100 * occupied) / Decimal(window.days)
        ranked.append(
            RoomPerformance(
                property_id=room.property_id,
                property_name=room.property_name,
                room_number=room.number,
                revenue=money(revenue),
                occupancy=int(occupancy.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
            )
        )

    ranked.sort(key=lambda r: (-r.revenue, r.property_id, r.room_number))
    return ranked[:limit]
