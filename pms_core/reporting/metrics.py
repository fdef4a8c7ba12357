"""
Dashboard metrics aggregation.

Buckets bookings into daily, weekly, or monthly slots and computes per-slot
occupancy, revenue, booking count, and average stay:

- The home bucket (the one holding the check-in day) gets the booking count
  and the stay length.
- Every night of the stay adds one occupied room-day, and an even share
  ``amount / nights`` of revenue, to the bucket that contains that night.
  A stay crossing a month boundary splits its revenue across both months.

Pure computation: no I/O, no logging.
"""

import bisect
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from pms_core.booking.financials import money
from pms_core.schemas.booking_schema import Booking, DateRange
from pms_core.schemas.report_schema import MetricsSummary, PeriodMetric, ReportPeriod
from pms_core.utils import iter_days

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
WEEKLY_BUCKETS = 12
DAILY_BUCKETS = 14


@dataclass
class PeriodBucket:
    """Accumulator for one reporting slot, discarded after aggregation."""

    label: str
    start: date
    end: date
    occupied_days: int = 0
    revenue: Decimal = Decimal("0")
    bookings_count: int = 0
    total_stay_days: int = 0

    @property
    def days(self) -> int:
        return (self.end - self.start).days


def _round_half_up(value: Decimal, exponent: str) -> Decimal:
    return value.quantize(Decimal(exponent), rounding=ROUND_HALF_UP)


def _day_label(day: date) -> str:
    return f"{MONTH_LABELS[day.month - 1]} {day.day}"


def build_buckets(
    period: ReportPeriod, window: Optional[DateRange], today: date
) -> list[PeriodBucket]:
    """Create the ordered, empty buckets for a period."""
    if period == ReportPeriod.MONTHLY:
        year = window.start.year if window is not None else today.year
        buckets = []
        for month in range(1, 13):
            start = date(year, month, 1)
            end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
            buckets.append(PeriodBucket(MONTH_LABELS[month - 1], start, end))
        return buckets

    if period == ReportPeriod.WEEKLY:
        first = today - timedelta(days=7 * WEEKLY_BUCKETS - 1)
        return [
            PeriodBucket(
                f"Week of {_day_label(first + timedelta(weeks=i))}",
                first + timedelta(weeks=i),
                first + timedelta(weeks=i + 1),
            )
            for i in range(WEEKLY_BUCKETS)
        ]

    first = today - timedelta(days=DAILY_BUCKETS - 1)
    return [
        PeriodBucket(
            _day_label(first + timedelta(days=i)),
            first + timedelta(days=i),
            first + timedelta(days=i + 1),
        )
        for i in range(DAILY_BUCKETS)
    ]


def _locate(buckets: list[PeriodBucket], starts: list[date], day: date) -> Optional[PeriodBucket]:
    index = bisect.bisect_right(starts, day) - 1
    if index < 0:
        return None
    bucket = buckets[index]
    return bucket if day < bucket.end else None


def _to_metric(bucket: PeriodBucket, room_count: int) -> PeriodMetric:
    total_days = bucket.days * room_count
    occupancy_rate = 0
    if total_days > 0:
        occupancy_rate = int(
            _round_half_up(Decimal(100 * bucket.occupied_days) / Decimal(total_days), "1")
        )
    average_stay = 0.0
    if bucket.bookings_count > 0:
        average_stay = float(
            _round_half_up(
                Decimal(bucket.total_stay_days) / Decimal(bucket.bookings_count), "0.1"
            )
        )
    return PeriodMetric(
        label=bucket.label,
        start=bucket.start,
        end=bucket.end,
        occupancy_rate=occupancy_rate,
        revenue=money(bucket.revenue),
        bookings_count=bucket.bookings_count,
        average_stay=average_stay,
        occupied_days=bucket.occupied_days,
        total_days=total_days,
    )


def aggregate_metrics(
    bookings: Iterable[Booking],
    period: Union[ReportPeriod, str],
    room_count: int,
    window: Optional[DateRange] = None,
    today: Optional[date] = None,
) -> list[PeriodMetric]:
    """Aggregate bookings into chronologically ordered period metrics.

    Args:
        bookings: Snapshot to aggregate; only stays intersecting ``window`` count.
        period: ``daily`` (14 trailing days), ``weekly`` (12 trailing weeks),
            or ``monthly`` (the 12 months of the window's year).
        room_count: Occupancy denominator. Values below 1 are treated as 1,
            which keeps the maths finite but overstates occupancy.
        window: Booking filter. Defaults to the span of the buckets.
        today: Anchor for trailing periods and the default year.
    """
    period = ReportPeriod(period)
    today = today or date.today()
    room_count = max(1, room_count)

    buckets = build_buckets(period, window, today)
    starts = [b.start for b in buckets]
    if window is None:
        window = DateRange(start=buckets[0].start, end=buckets[-1].end)

    for booking in bookings:
        if not window.intersects(booking.check_in, booking.check_out):
            continue
        nights = booking.nights

        home = _locate(buckets, starts, booking.check_in)
        if home is not None:
            home.bookings_count += 1
            home.total_stay_days += nights

        nightly_revenue = booking.total_amount / nights
        for day in iter_days(booking.check_in, booking.check_out):
            bucket = _locate(buckets, starts, day)
            if bucket is None:
                continue
            bucket.occupied_days += 1
            bucket.revenue += nightly_revenue

    return [_to_metric(bucket, room_count) for bucket in buckets]


def summarize_metrics(metrics: list[PeriodMetric]) -> Optional[MetricsSummary]:
    """Header-card totals over a bucket series; None when there is nothing to sum."""
    if not metrics:
        return None
    total_revenue = sum((m.revenue for m in metrics), Decimal("0"))
    mean_occupancy = Decimal(sum(m.occupancy_rate for m in metrics)) / len(metrics)
    return MetricsSummary(
        total_revenue=total_revenue,
        average_occupancy=int(_round_half_up(mean_occupancy, "1")),
        total_bookings=sum(m.bookings_count for m in metrics),
    )
