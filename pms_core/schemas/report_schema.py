"""Dashboard and report data models."""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel


class ReportPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class PeriodMetric(BaseModel):
    """Chart-ready figures for one period bucket."""

    label: str
    start: date
    end: date
    occupancy_rate: int = 0
    revenue: Decimal = Decimal("0.00")
    bookings_count: int = 0
    average_stay: float = 0.0
    occupied_days: int = 0
    total_days: int = 0


class MetricsSummary(BaseModel):
    """Reduction of a bucket series for the dashboard header cards."""
    total_revenue: Decimal
    average_occupancy: int
    total_bookings: int


class RoomPerformance(BaseModel):
    """Revenue and occupancy of a single room over a window."""
    property_id: str
    property_name: str = ""
    room_number: str
    revenue: Decimal
    occupancy: int
