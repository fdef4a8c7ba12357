"""
Housekeeping board.

Cleaning labels map onto room statuses:
    Clean       <-> available
    In Progress <-> cleaning
    Dirty       <-> maintenance (occupied rooms also read as Dirty)
"""

import logging
from datetime import date
from typing import Iterable, Optional

from pms_core.booking.availability import blocks_room
from pms_core.records import rooms as room_records
from pms_core.schemas.booking_schema import Booking, RoomKey
from pms_core.schemas.room_schema import CleaningRoom, CleaningStatus, Room, RoomStatus

logger = logging.getLogger(__name__)


def to_cleaning_status(status: RoomStatus) -> CleaningStatus:
    if status == RoomStatus.CLEANING:
        return CleaningStatus.IN_PROGRESS
    if status == RoomStatus.AVAILABLE:
        return CleaningStatus.CLEAN
    return CleaningStatus.DIRTY


def to_room_status(status: CleaningStatus) -> RoomStatus:
    if status == CleaningStatus.IN_PROGRESS:
        return RoomStatus.CLEANING
    if status == CleaningStatus.CLEAN:
        return RoomStatus.AVAILABLE
    return RoomStatus.MAINTENANCE


def next_check_ins(bookings: Iterable[Booking], today: date) -> dict[RoomKey, date]:
    """Earliest upcoming check-in per room, ignoring cancelled stays."""
    upcoming: dict[RoomKey, date] = {}
    for booking in bookings:
        if booking.check_in < today or not blocks_room(booking):
            continue
        current: Optional[date] = upcoming.get(booking.room_key)
        if current is None or booking.check_in < current:
            upcoming[booking.room_key] = booking.check_in
    return upcoming


def build_cleaning_board(
    rooms: Iterable[Room], bookings: Iterable[Booking], today: date
) -> list[CleaningRoom]:
    upcoming = next_check_ins(bookings, today)
    board = []
    for room in sorted(rooms, key=lambda r: (r.property_name, r.number)):
        status = to_cleaning_status(room.status)
        board.append(
            CleaningRoom(
                room_id=room.id,
                room_number=room.number,
                property_name=room.property_name,
                status=status,
                last_cleaned=room.updated_at if status == CleaningStatus.CLEAN else None,
                next_check_in=upcoming.get(room.key),
            )
        )
    return board


def update_cleaning_status(room_id: str, status: CleaningStatus) -> Room:
    """Record a housekeeping update against the room record."""
    room = room_records.set_room_status(room_id, to_room_status(status))
    logger.info("Cleaning status for %s set to %s", room.key, status.value)
    return room
