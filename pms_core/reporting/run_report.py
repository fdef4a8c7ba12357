"""
CLI entry point for printing a dashboard report from a bookings export.

Usage:
    python -m pms_core.reporting.run_report --bookings bookings.json --rooms 12
    python -m pms_core.reporting.run_report --bookings bookings.json --rooms 12 \
        --period weekly --today 2024-03-20 --report report.txt

If the export cannot be read the report falls back to sample data, as the
dashboard does.
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from pms_core.config import REPORT_PERIODS, settings
from pms_core.logging_context import new_request_id
from pms_core.records.bookings import load_bookings_file
from pms_core.reporting.dashboard import format_dashboard_report, load_dashboard
from pms_core.schemas.booking_schema import DateRange

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Print occupancy and revenue metrics from a bookings JSON export."
    )
    parser.add_argument(
        "--bookings",
        type=str,
        required=True,
        help="Path to a JSON file holding an array of booking records.",
    )
    parser.add_argument(
        "--rooms",
        type=int,
        required=True,
        help="Number of rooms used as the occupancy denominator.",
    )
    parser.add_argument(
        "--period",
        choices=REPORT_PERIODS,
        default=settings.reports.default_period,
        help="Bucket size (default: %(default)s).",
    )
    parser.add_argument(
        "--year",
        type=int,
        default=None,
        help="Year for the monthly report (default: current year).",
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Anchor date for trailing periods, YYYY-MM-DD (default: today).",
    )
    parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="Path to write the report (default: stdout).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging output.",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        )
        # pms_core.config configures the root logger on import, so basicConfig is a no-op here
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s: %(message)s",
        )

    if args.rooms < 1:
        logger.error("--rooms must be at least 1, got %d", args.rooms)
        sys.exit(1)

    request_id = new_request_id()
    bookings_path = Path(args.bookings)
    logger.debug("Report request %s for %s", request_id, bookings_path)

    window = DateRange.for_year(args.year) if args.year and args.period == "monthly" else None
    dashboard = load_dashboard(
        args.period,
        window=window,
        today=args.today,
        room_count=args.rooms,
        fetch_bookings=lambda property_id=None: load_bookings_file(bookings_path),
        fetch_rooms=lambda property_id=None: [],
    )
    output = format_dashboard_report(dashboard)

    if args.report:
        report_path = Path(args.report)
        report_path.write_text(output, encoding="utf-8")
        logger.info("Report written to %s", report_path)
    else:
        sys.stdout.write(output + "\n")


if __name__ == "__main__":
    main()
