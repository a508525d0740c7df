"""Month key helpers.

A month key is the ``YYYY-MM`` prefix of an ISO date and is the unit every
ledger collection is bucketed by.
"""
from datetime import date, datetime, timezone
from typing import Annotated

from pydantic import StringConstraints

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

MonthKey = Annotated[str, StringConstraints(pattern=MONTH_PATTERN)]


def month_of(value: date | datetime) -> str:
    """Month key of a date or datetime."""
    return value.isoformat()[:7]


def current_month() -> str:
    """Month key of today's UTC date."""
    return month_of(datetime.now(timezone.utc))
