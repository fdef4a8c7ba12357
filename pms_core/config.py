"""
Centralized configuration with environment variable overrides.

Fee rates, business defaults, and report settings live here. The booking
core never reads this module; the records and dashboard layers pass the
values in explicitly.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

REPORT_PERIODS = ("daily", "weekly", "monthly")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BusinessConfig:
    """Company-level defaults shown on reports and booking forms."""

    company_name: str = os.getenv("COMPANY_NAME", "Hotel Manager")
    currency: str = os.getenv("CURRENCY", "AED")
    default_check_in_time: str = os.getenv("DEFAULT_CHECK_IN_TIME", "14:00")
    default_check_out_time: str = os.getenv("DEFAULT_CHECK_OUT_TIME", "11:00")


@dataclass(frozen=True)
class FeeConfig:
    """Rates applied when deriving booking financials."""

    tax_rate: float = _safe_float("TAX_RATE", "0.05")
    tourism_fee_rate: float = _safe_float("TOURISM_FEE_RATE", "0.03")
    commission_rate: float = _safe_float("COMMISSION_RATE", "0.10")


@dataclass(frozen=True)
class ReportConfig:
    """Dashboard and calendar defaults."""

    default_period: str = os.getenv("REPORT_PERIOD", "monthly")
    calendar_view_days: int = _safe_int("CALENDAR_VIEW_DAYS", "14")
    top_rooms_limit: int = _safe_int("TOP_ROOMS_LIMIT", "3")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    fees: FeeConfig = field(default_factory=FeeConfig)
    reports: ReportConfig = field(default_factory=ReportConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    for rate_name, rate_value in [
        ("TAX_RATE", config.fees.tax_rate),
        ("TOURISM_FEE_RATE", config.fees.tourism_fee_rate),
        ("COMMISSION_RATE", config.fees.commission_rate),
    ]:
        if not 0.0 <= rate_value <= 1.0:
            raise ValueError(f"{rate_name} must be between 0.0 and 1.0, got {rate_value}")

    total_rate = (
        config.fees.tax_rate + config.fees.tourism_fee_rate + config.fees.commission_rate
    )
    if total_rate > 1.0:
        raise ValueError(
            f"Combined fee rates must not exceed 1.0, got {total_rate:.2f}"
        )

    if config.reports.default_period not in REPORT_PERIODS:
        raise ValueError(
            f"REPORT_PERIOD must be one of {', '.join(REPORT_PERIODS)}, "
            f"got {config.reports.default_period!r}"
        )
    if config.reports.calendar_view_days < 1:
        raise ValueError(
            f"CALENDAR_VIEW_DAYS must be >= 1, got {config.reports.calendar_view_days}"
        )
    if config.reports.top_rooms_limit < 1:
        raise ValueError(
            f"TOP_ROOMS_LIMIT must be >= 1, got {config.reports.top_rooms_limit}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.business.company_name)
    return config


# Singleton instance
settings = load_config()
