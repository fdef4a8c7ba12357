"""Tests for dashboard metric aggregation and room ranking."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from pms_core.reporting.metrics import (
    DAILY_BUCKETS,
    WEEKLY_BUCKETS,
    aggregate_metrics,
    build_buckets,
    summarize_metrics,
)
from pms_core.reporting.room_performance import rank_rooms
from pms_core.reporting.sample_data import sample_monthly_metrics
from pms_core.records import rooms as room_records
from pms_core.schemas.booking_schema import BookingStatus, DateRange
from pms_core.schemas.report_schema import PeriodMetric, ReportPeriod
from tests.conftest import make_booking

YEAR_2024 = DateRange.for_year(2024)


def by_label(metrics: list[PeriodMetric]) -> dict[str, PeriodMetric]:
    return {m.label: m for m in metrics}


class TestMonthlyBuckets:
    def test_twelve_ordered_months(self):
        metrics = aggregate_metrics([], "monthly", 10, YEAR_2024)
        assert [m.label for m in metrics][:3] == ["Jan", "Feb", "Mar"]
        assert len(metrics) == 12
        assert metrics[0].start == date(2024, 1, 1)
        assert metrics[-1].end == date(2025, 1, 1)

    def test_year_comes_from_window(self):
        metrics = aggregate_metrics([], ReportPeriod.MONTHLY, 10, DateRange.for_year(2023),
                                    today=date(2026, 6, 1))
        assert metrics[1].start == date(2023, 2, 1)

    def test_conservation_of_bookings_count(self):
        bookings = [
            make_booking(date(2024, 1, 3), date(2024, 1, 6)),
            make_booking(date(2024, 3, 30), date(2024, 4, 2)),
            make_booking(date(2024, 7, 10), date(2024, 7, 11)),
            make_booking(date(2024, 12, 30), date(2025, 1, 3)),
            make_booking(date(2023, 12, 28), date(2024, 1, 2)),
            make_booking(date(2025, 2, 1), date(2025, 2, 4)),
        ]
        checked_in_2024 = sum(1 for b in bookings if b.check_in.year == 2024)
        metrics = aggregate_metrics(bookings, "monthly", 5, YEAR_2024)
        assert sum(m.bookings_count for m in metrics) == checked_in_2024

    def test_empty_bucket_average_stay_is_zero(self):
        metrics = aggregate_metrics([], "monthly", 5, YEAR_2024)
        assert all(m.average_stay == 0 for m in metrics)
        assert all(m.occupancy_rate == 0 for m in metrics)
        assert all(m.revenue == 0 for m in metrics)

    def test_average_stay(self):
        bookings = [
            make_booking(date(2024, 3, 1), date(2024, 3, 3)),
            make_booking(date(2024, 3, 10), date(2024, 3, 13)),
        ]
        march = by_label(aggregate_metrics(bookings, "monthly", 5, YEAR_2024))["Mar"]
        assert march.bookings_count == 2
        assert march.average_stay == 2.5

    def test_revenue_spread_evenly_across_month_boundary(self):
        booking = make_booking(date(2024, 1, 30), date(2024, 2, 2), total_amount="300")
        metrics = by_label(aggregate_metrics([booking], "monthly", 1, YEAR_2024))
        assert metrics["Jan"].revenue == Decimal("200.00")
        assert metrics["Feb"].revenue == Decimal("100.00")
        assert metrics["Jan"].bookings_count == 1
        assert metrics["Feb"].bookings_count == 0
        assert metrics["Feb"].average_stay == 0

    def test_occupancy_counts_nights(self):
        booking = make_booking(date(2024, 1, 30), date(2024, 2, 2))
        metrics = by_label(aggregate_metrics([booking], "monthly", 1, YEAR_2024))
        assert metrics["Jan"].occupied_days == 2
        assert metrics["Jan"].total_days == 31
        assert metrics["Jan"].occupancy_rate == 6
        assert metrics["Feb"].occupied_days == 1
        assert metrics["Feb"].occupancy_rate == 3

    def test_full_month_is_full_occupancy(self):
        booking = make_booking(date(2024, 2, 1), date(2024, 3, 1))
        feb = by_label(aggregate_metrics([booking], "monthly", 1, YEAR_2024))["Feb"]
        assert feb.occupancy_rate == 100

    def test_zero_room_count_is_treated_as_one(self):
        booking = make_booking(date(2024, 2, 1), date(2024, 3, 1))
        feb = by_label(aggregate_metrics([booking], "monthly", 0, YEAR_2024))["Feb"]
        assert feb.total_days == 29
        assert feb.occupancy_rate == 100

    def test_narrow_window_filters_bookings(self):
        bookings = [
            make_booking(date(2024, 3, 1), date(2024, 3, 3)),
            make_booking(date(2024, 6, 1), date(2024, 6, 3)),
        ]
        window = DateRange(start=date(2024, 1, 1), end=date(2024, 4, 1))
        metrics = aggregate_metrics(bookings, "monthly", 5, window)
        assert sum(m.bookings_count for m in metrics) == 1

    def test_counts_every_status(self):
        bookings = [
            make_booking(date(2024, 3, 1), date(2024, 3, 3), status=BookingStatus.CANCELLED),
            make_booking(date(2024, 3, 5), date(2024, 3, 6), status=BookingStatus.PENDING),
        ]
        march = by_label(aggregate_metrics(bookings, "monthly", 5, YEAR_2024))["Mar"]
        assert march.bookings_count == 2

    def test_unknown_period_raises(self):
        with pytest.raises(ValueError):
            aggregate_metrics([], "yearly", 5, YEAR_2024)


class TestTrailingBuckets:
    TODAY = date(2024, 3, 20)

    def test_weekly_buckets_end_today(self):
        buckets = build_buckets(ReportPeriod.WEEKLY, None, self.TODAY)
        assert len(buckets) == WEEKLY_BUCKETS
        assert buckets[-1].end == self.TODAY + timedelta(days=1)
        assert buckets[0].start == self.TODAY - timedelta(days=7 * WEEKLY_BUCKETS - 1)
        assert all(b.days == 7 for b in buckets)
        assert buckets[-1].label == "Week of Mar 14"

    def test_daily_buckets(self):
        buckets = build_buckets(ReportPeriod.DAILY, None, self.TODAY)
        assert len(buckets) == DAILY_BUCKETS
        assert buckets[-1].label == "Mar 20"
        assert buckets[0].label == "Mar 7"

    def test_daily_occupancy_and_revenue(self):
        booking = make_booking(date(2024, 3, 19), date(2024, 3, 21), total_amount="500")
        metrics = by_label(aggregate_metrics([booking], "daily", 2, today=self.TODAY))
        assert metrics["Mar 19"].occupancy_rate == 50
        assert metrics["Mar 19"].bookings_count == 1
        assert metrics["Mar 20"].revenue == Decimal("250.00")
        assert metrics["Mar 20"].bookings_count == 0

    def test_weekly_default_window_drops_older_stays(self):
        old = make_booking(date(2023, 6, 1), date(2023, 6, 5))
        metrics = aggregate_metrics([old], "weekly", 2, today=self.TODAY)
        assert sum(m.bookings_count for m in metrics) == 0


class TestSummary:
    def test_summary_reduces_buckets(self):
        bookings = [
            make_booking(date(2024, 2, 1), date(2024, 3, 1), total_amount="2900"),
            make_booking(date(2024, 3, 1), date(2024, 3, 2), total_amount="100"),
        ]
        summary = summarize_metrics(aggregate_metrics(bookings, "monthly", 1, YEAR_2024))
        assert summary.total_revenue == Decimal("3000.00")
        assert summary.total_bookings == 2
        # Feb 100%, Mar 3%, others 0% -> 103 / 12
        assert summary.average_occupancy == 9

    def test_empty_series_has_no_summary(self):
        assert summarize_metrics([]) is None

    def test_sample_series_summary(self):
        summary = summarize_metrics(sample_monthly_metrics(2024))
        assert summary.total_bookings == 525
        assert summary.total_revenue == Decimal("213300.00")
        assert summary.average_occupancy == 77


class TestRankRooms:
    WINDOW = DateRange(start=date(2024, 3, 1), end=date(2024, 3, 11))

    def test_ranks_by_revenue_within_window(self):
        bookings = [
            make_booking(date(2024, 3, 1), date(2024, 3, 6), room_number="101", total_amount="500"),
            make_booking(date(2024, 3, 9), date(2024, 3, 13), room_number="102", total_amount="2000"),
            make_booking(date(2024, 3, 2), date(2024, 3, 4), room_number="110", total_amount="300"),
        ]
        ranked = rank_rooms(bookings, room_records.list_rooms("marina"), self.WINDOW)
        assert [r.room_number for r in ranked] == ["102", "101", "110"]
        assert ranked[0].revenue == Decimal("1000.00")
        assert ranked[0].occupancy == 20
        assert ranked[1].occupancy == 50

    def test_cancelled_stays_earn_nothing(self):
        bookings = [
            make_booking(date(2024, 3, 1), date(2024, 3, 6), total_amount="500",
                         status=BookingStatus.CANCELLED),
        ]
        ranked = rank_rooms(bookings, room_records.list_rooms("marina"), self.WINDOW, limit=1)
        assert ranked[0].revenue == 0

    def test_limit(self):
        ranked = rank_rooms([], room_records.list_rooms(), self.WINDOW, limit=2)
        assert len(ranked) == 2
