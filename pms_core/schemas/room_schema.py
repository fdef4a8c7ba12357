"""Room records and housekeeping views."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from pms_core.schemas.booking_schema import RoomKey
from pms_core.utils import normalize_room_number


class RoomStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    CLEANING = "cleaning"


class CleaningStatus(str, Enum):
    CLEAN = "Clean"
    DIRTY = "Dirty"
    IN_PROGRESS = "In Progress"


class Room(BaseModel):
    """A rentable room within a property."""

    id: str
    number: str
    property_id: str
    property_name: str = ""
    room_type: str = "standard"
    status: RoomStatus = RoomStatus.AVAILABLE
    base_rate: Decimal = Decimal("0")
    max_occupancy: int = Field(default=2, ge=1)
    owner_id: Optional[str] = None
    updated_at: Optional[datetime] = None

    @field_validator("number", mode="before")
    @classmethod
    def _normalize_number(cls, value: object) -> str:
        return normalize_room_number(value)  # type: ignore[arg-type]

    @property
    def key(self) -> RoomKey:
        return RoomKey(property_id=self.property_id, room_number=self.number)


class CleaningRoom(BaseModel):
    """One row of the housekeeping board."""
    room_id: str
    room_number: str
    property_name: str
    status: CleaningStatus
    last_cleaned: Optional[datetime] = None
    next_check_in: Optional[date] = None
