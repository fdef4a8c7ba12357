"""Exception types raised by the booking core and the records layer."""

from datetime import date
from typing import Optional


class PMSError(Exception):
    """Base class for all pms_core errors."""


class InvalidDateRangeError(PMSError, ValueError):
    """Raised when a stay range has check-out on or before check-in."""

    def __init__(self, check_in: date, check_out: date, message: Optional[str] = None) -> None:
        self.check_in = check_in
        self.check_out = check_out
        super().__init__(
            message or f"Check-out {check_out} must be after check-in {check_in}."
        )


class InvalidWindowError(PMSError, ValueError):
    """Raised when a calendar view window has a non-positive day count."""


class InvalidAmountError(PMSError, ValueError):
    """Raised when a monetary input or rate is negative."""


class RecordNotFoundError(PMSError, KeyError):
    """Raised when a booking or room id does not exist in the record store."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Record not found."


class StoreError(PMSError):
    """Raised when the record store cannot serve a query."""
