"""Calendar helpers. Every date in the system is a UTC calendar date."""

from datetime import date, datetime, timezone
from typing import Callable

Clock = Callable[[], date]


def utc_today() -> date:
    return datetime.now(timezone.utc).date()

