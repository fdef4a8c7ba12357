from pms_core.booking.availability import (
    BookingBlock,
    CalendarCell,
    CellState,
    OverlapResult,
    check_overlap,
    compute_availability,
    compute_calendar_cells,
    ranges_overlap,
    validate_date_range,
)
from pms_core.booking.financials import FinancialBreakdown, derive_financials, settle_balance
from pms_core.booking.lifecycle import BookingLifecycle, InvalidTransitionError, StatusTrigger

__all__ = [
    "BookingBlock",
    "CalendarCell",
    "CellState",
    "OverlapResult",
    "check_overlap",
    "compute_availability",
    "compute_calendar_cells",
    "ranges_overlap",
    "validate_date_range",
    "FinancialBreakdown",
    "derive_financials",
    "settle_balance",
    "BookingLifecycle",
    "InvalidTransitionError",
    "StatusTrigger",
]
