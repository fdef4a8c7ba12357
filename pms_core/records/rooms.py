"""
In-memory room records.

Stands in for the hosted rooms table. Seeded with a small two-property
inventory; ``reset()`` restores the seed for test isolation.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pms_core.errors import RecordNotFoundError
from pms_core.schemas.booking_schema import RoomKey
from pms_core.schemas.room_schema import Room, RoomStatus

logger = logging.getLogger(__name__)

_SEED_ROOMS: list[Room] = [
    Room(id="room-101", number="101", property_id="marina", property_name="Marina Tower",
         room_type="studio", base_rate=Decimal("450"), max_occupancy=2, owner_id="owner-1"),
    Room(id="room-102", number="102", property_id="marina", property_name="Marina Tower",
         room_type="one-bedroom", base_rate=Decimal("600"), max_occupancy=3, owner_id="owner-1"),
    Room(id="room-110", number="110", property_id="marina", property_name="Marina Tower",
         room_type="two-bedroom", base_rate=Decimal("850"), max_occupancy=5, owner_id="owner-2"),
    Room(id="room-301", number="301", property_id="downtown", property_name="Downtown Heights",
         room_type="studio", base_rate=Decimal("500"), max_occupancy=2, owner_id="owner-2"),
    Room(id="room-401", number="401", property_id="downtown", property_name="Downtown Heights",
         room_type="penthouse", base_rate=Decimal("1500"), max_occupancy=6,
         status=RoomStatus.MAINTENANCE),
]

_rooms: dict[str, Room] = {}


def get_room(room_id: str) -> Room:
    """Fetch a room by id.

    Raises:
        RecordNotFoundError: If no room has that id.
    """
    room = _rooms.get(room_id)
    if room is None:
        raise RecordNotFoundError(f"Room {room_id} not found.")
    return room


def find_room(key: RoomKey) -> Optional[Room]:
    """Find the room with exactly this (property, number) key."""
    for room in _rooms.values():
        if room.key == key:
            return room
    return None


def list_rooms(
    property_id: Optional[str] = None, status: Optional[RoomStatus] = None
) -> list[Room]:
    rooms = [
        r for r in _rooms.values()
        if (property_id is None or r.property_id == property_id)
        and (status is None or r.status == status)
    ]
    return sorted(rooms, key=lambda r: (r.property_name, r.number))


def count_rooms(property_id: Optional[str] = None) -> int:
    return len(list_rooms(property_id=property_id))


def add_room(room: Room) -> Room:
    if find_room(room.key) is not None:
        raise ValueError(f"Room {room.key} already exists.")
    _rooms[room.id] = room
    logger.info("Room added: %s (%s)", room.key, room.id)
    return room


def set_room_status(room_id: str, status: RoomStatus) -> Room:
    room = get_room(room_id)
    updated = room.model_copy(
        update={"status": status, "updated_at": datetime.now(timezone.utc)}
    )
    _rooms[room_id] = updated
    logger.info("Room %s status: %s -> %s", room.key, room.status.value, status.value)
    return updated


def reset() -> None:
    """Restore the seed inventory. Used by test fixtures for isolation."""
    _rooms.clear()
    for room in _SEED_ROOMS:
        _rooms[room.id] = room.model_copy()


reset()
