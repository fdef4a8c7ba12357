"""
Canned dashboard series shown when live booking data cannot be loaded.

The figures are demo values, not derived from any booking set. Callers
flag dashboards built from them with ``is_sample=True``.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pms_core.reporting.metrics import MONTH_LABELS
from pms_core.schemas.report_schema import PeriodMetric

# (occupancy %, revenue, bookings, average stay) per month, Jan..Dec
_SAMPLE_ROWS: list[tuple[int, str, int, float]] = [
    (65, "12400", 32, 3.2),
    (72, "15200", 38, 3.5),
    (80, "18600", 45, 3.8),
    (87, "21400", 52, 4.0),
    (74, "16800", 41, 3.6),
    (68, "14500", 36, 3.4),
    (78, "17900", 44, 3.7),
    (82, "19300", 48, 3.9),
    (76, "16700", 42, 3.6),
    (84, "20100", 50, 4.1),
    (70, "15800", 39, 3.5),
    (92, "24600", 58, 4.3),
]


def sample_monthly_metrics(year: Optional[int] = None) -> list[PeriodMetric]:
    """Return the twelve demo months for ``year`` (default: current year)."""
    year = year or date.today().year
    metrics = []
    for month, (occupancy, revenue, count, stay) in enumerate(_SAMPLE_ROWS, start=1):
        end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
        metrics.append(
            PeriodMetric(
                label=MONTH_LABELS[month - 1],
                start=date(year, month, 1),
                end=end,
                occupancy_rate=occupancy,
                revenue=Decimal(revenue).quantize(Decimal("0.01")),
                bookings_count=count,
                average_stay=stay,
            )
        )
    return metrics
