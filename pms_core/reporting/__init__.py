from pms_core.reporting.dashboard import Dashboard, format_dashboard_report, load_dashboard
from pms_core.reporting.metrics import aggregate_metrics, summarize_metrics
from pms_core.reporting.room_performance import rank_rooms

__all__ = [
    "Dashboard",
    "format_dashboard_report",
    "load_dashboard",
    "aggregate_metrics",
    "summarize_metrics",
    "rank_rooms",
]
