"""
Dashboard assembly at the UI boundary.

Fetches a bookings/rooms snapshot, runs the aggregator, and adds the summary
cards and top rooms. When the fetch fails the dashboard degrades to the
canned sample series instead of surfacing the error to the charts; such
dashboards carry ``is_sample=True`` and the error text.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional, Union

from pms_core.config import settings
from pms_core.errors import StoreError
from pms_core.logging_context import action_context, get_request_logger
from pms_core.records import bookings as booking_records
from pms_core.records import rooms as room_records
from pms_core.reporting.metrics import aggregate_metrics, summarize_metrics
from pms_core.reporting.room_performance import rank_rooms
from pms_core.reporting.sample_data import sample_monthly_metrics
from pms_core.schemas.booking_schema import Booking, DateRange
from pms_core.schemas.report_schema import (
    MetricsSummary,
    PeriodMetric,
    ReportPeriod,
    RoomPerformance,
)
from pms_core.schemas.room_schema import Room

logger = get_request_logger(__name__)

BookingFetcher = Callable[..., list[Booking]]
RoomFetcher = Callable[..., list[Room]]


@dataclass
class Dashboard:
    period: ReportPeriod
    metrics: list[PeriodMetric]
    summary: Optional[MetricsSummary]
    top_rooms: list[RoomPerformance] = field(default_factory=list)
    property_id: Optional[str] = None
    is_sample: bool = False
    error: Optional[str] = None


def _sample_dashboard(
    error: StoreError, property_id: Optional[str], year: int
) -> Dashboard:
    logger.warning("Dashboard data unavailable, falling back to sample data: %s", error)
    metrics = sample_monthly_metrics(year)
    return Dashboard(
        period=ReportPeriod.MONTHLY,
        metrics=metrics,
        summary=summarize_metrics(metrics),
        property_id=property_id,
        is_sample=True,
        error=str(error),
    )


def load_dashboard(
    period: Union[ReportPeriod, str, None] = None,
    property_id: Optional[str] = None,
    window: Optional[DateRange] = None,
    today: Optional[date] = None,
    *,
    room_count: Optional[int] = None,
    fetch_bookings: Optional[BookingFetcher] = None,
    fetch_rooms: Optional[RoomFetcher] = None,
) -> Dashboard:
    """Build the dashboard for a period, optionally scoped to one property.

    Args:
        room_count: Occupancy denominator override. Defaults to the number
            of rooms returned by ``fetch_rooms``.
        fetch_bookings: Snapshot source, called with ``property_id``.
            Defaults to the in-memory booking records.
        fetch_rooms: Room source, called with ``property_id``.
    """
    period = ReportPeriod(period or settings.reports.default_period)
    today = today or date.today()
    fetch_bookings = fetch_bookings or booking_records.list_bookings
    fetch_rooms = fetch_rooms or room_records.list_rooms

    with action_context(property_id=property_id):
        try:
            bookings = fetch_bookings(property_id=property_id)
            rooms = fetch_rooms(property_id=property_id)
        except StoreError as e:
            year = window.start.year if window is not None else today.year
            return _sample_dashboard(e, property_id, year)

        denominator = room_count if room_count is not None else len(rooms)
        metrics = aggregate_metrics(bookings, period, denominator, window, today)
        span = window or DateRange(start=metrics[0].start, end=metrics[-1].end)
        top_rooms = rank_rooms(bookings, rooms, span, limit=settings.reports.top_rooms_limit)

        logger.info(
            "Dashboard built: %s, %d booking(s), %d room(s)",
            period.value, len(bookings), denominator,
        )
    return Dashboard(
        period=period,
        metrics=metrics,
        summary=summarize_metrics(metrics),
        top_rooms=top_rooms,
        property_id=property_id,
    )


def format_dashboard_report(dashboard: Dashboard) -> str:
    """Format a dashboard into a human-readable report."""
    currency = settings.business.currency
    title = f"{settings.business.company_name.upper()} - {dashboard.period.value.upper()} REPORT"
    lines = ["=" * 60, title]
    if dashboard.property_id:
        lines.append(f"Property: {dashboard.property_id}")
    if dashboard.is_sample:
        lines.append("NOTE: live data unavailable, showing sample data")
    lines.extend(["=" * 60, ""])

    lines.append(f"  {'Period':<18}{'Occupancy':>10}{'Revenue':>14}{'Bookings':>10}{'Avg stay':>10}")
    for m in dashboard.metrics:
        lines.append(
            f"  {m.label:<18}{m.occupancy_rate:>9}%{m.revenue:>14,.2f}"
            f"{m.bookings_count:>10}{m.average_stay:>10.1f}"
        )

    if dashboard.summary is not None:
        s = dashboard.summary
        lines.extend([
            "",
            "SUMMARY",
            f"  Total revenue:          {s.total_revenue:,.2f} {currency}",
            f"  Average occupancy:      {s.average_occupancy}%",
            f"  Total bookings:         {s.total_bookings}",
        ])

    if dashboard.top_rooms:
        lines.extend(["", "TOP ROOMS"])
        for r in dashboard.top_rooms:
            name = r.property_name or r.property_id
            lines.append(
                f"  Room {r.room_number} ({name}): {r.revenue:,.2f} {currency}, "
                f"{r.occupancy}% occupancy"
            )

    lines.append("=" * 60)
    return "\n".join(lines)
