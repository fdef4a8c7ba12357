"""Human-readable booking references: BK-<year>-<4 digits>-<4 digits>."""

import random
import re
import time
from datetime import date
from typing import Optional

from pms_core.schemas.booking_schema import BOOKING_REFERENCE_PATTERN

_REFERENCE_RE = re.compile(BOOKING_REFERENCE_PATTERN)


def generate_booking_reference(
    today: Optional[date] = None, rng: Optional[random.Random] = None
) -> str:
    """Build a reference from the year, a random block, and the clock's last 4 ms digits."""
    year = (today or date.today()).year
    block = (rng or random).randint(1000, 9999)
    tail = str(time.time_ns() // 1_000_000)[-4:]
    return f"BK-{year}-{block}-{tail}"


def is_valid_booking_reference(value: str) -> bool:
    return bool(_REFERENCE_RE.match(value))
