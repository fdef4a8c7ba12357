"""Booking, stay window, and room key data models."""

from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pms_core.utils import normalize_room_number

BOOKING_REFERENCE_PATTERN = r"^BK-\d{4}-\d{4}-\d{4}$"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked-in"
    CHECKED_OUT = "checked-out"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    REFUNDED = "refunded"


class RoomKey(BaseModel):
    """Strict identity of a room: the (property, room number) pair.

    Two keys match only when both parts are equal after normalization.
    Room "1" never matches room "10".
    """

    model_config = ConfigDict(frozen=True)

    property_id: str
    room_number: str

    @field_validator("room_number", mode="before")
    @classmethod
    def _normalize_number(cls, value: object) -> str:
        return normalize_room_number(value)  # type: ignore[arg-type]

    def __str__(self) -> str:
        return f"{self.property_id}/{self.room_number}"


class DateRange(BaseModel):
    """Half-open calendar window [start, end)."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.end <= self.start:
            raise ValueError(f"end {self.end} must be after start {self.start}")
        return self

    @classmethod
    def for_year(cls, year: int) -> "DateRange":
        return cls(start=date(year, 1, 1), end=date(year + 1, 1, 1))

    @classmethod
    def from_days(cls, start: date, days: int) -> "DateRange":
        return cls(start=start, end=start + timedelta(days=days))

    @property
    def days(self) -> int:
        return (self.end - self.start).days

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end

    def intersects(self, start: date, end: date) -> bool:
        return start < self.end and end > self.start


class Booking(BaseModel):
    """A guest stay as stored in the bookings table."""

    id: str
    reference: str = Field(pattern=BOOKING_REFERENCE_PATTERN)
    guest_name: str
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    property_id: str
    property_name: str = ""
    room_number: str
    check_in: date
    check_out: date
    adults: int = Field(default=1, ge=1)
    children: int = Field(default=0, ge=0)
    base_rate: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    amount_paid: Decimal = Decimal("0")
    remaining_amount: Decimal = Decimal("0")
    security_deposit: Decimal = Decimal("0")
    commission: Decimal = Decimal("0")
    tourism_fee: Decimal = Decimal("0")
    vat: Decimal = Decimal("0")
    net_to_owner: Decimal = Decimal("0")
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("room_number", mode="before")
    @classmethod
    def _normalize_number(cls, value: object) -> str:
        return normalize_room_number(value)  # type: ignore[arg-type]

    @model_validator(mode="after")
    def _check_stay_window(self) -> "Booking":
        if self.check_out <= self.check_in:
            raise ValueError(
                f"check_out {self.check_out} must be after check_in {self.check_in}"
            )
        return self

    @property
    def room_key(self) -> RoomKey:
        return RoomKey(property_id=self.property_id, room_number=self.room_number)

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED


class BookingRequest(BaseModel):
    """Booking form submission.

    Dates are not cross-checked here; the records layer validates the range
    so an invalid stay surfaces as a result rather than a schema error.
    """

    guest_name: str = Field(min_length=1)
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    property_id: str
    room_number: str
    check_in: date
    check_out: date
    adults: int = Field(default=1, ge=1)
    children: int = Field(default=0, ge=0)
    base_rate: Decimal = Field(ge=0)
    amount_paid: Decimal = Field(default=Decimal("0"), ge=0)
    security_deposit: Decimal = Field(default=Decimal("0"), ge=0)
    status: BookingStatus = BookingStatus.PENDING
    notes: str = ""
    reference: Optional[str] = Field(default=None, pattern=BOOKING_REFERENCE_PATTERN)

    @field_validator("room_number", mode="before")
    @classmethod
    def _normalize_number(cls, value: object) -> str:
        return normalize_room_number(value)  # type: ignore[arg-type]

    @property
    def room_key(self) -> RoomKey:
        return RoomKey(property_id=self.property_id, room_number=self.room_number)
