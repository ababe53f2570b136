"""Working-day calendar and the rolling display window."""

from __future__ import annotations

import logging
from collections.abc import Collection
from datetime import date, timedelta
from typing import Optional

logger = logging.getLogger(__name__)

WINDOW_LENGTH = 10
# Minimum number of days scanned while building a window; the bound grows to
# three days per requested working day. A calendar made entirely of holidays
# yields a short window instead of looping forever.
MAX_WINDOW_SCAN_DAYS = 30
_SCAN_DAYS_PER_WORKING_DAY = 3

_ONE_DAY = timedelta(days=1)


def day_label(day: date) -> str:
    return day.strftime("%d/%m")


def is_working_day(day: date, holidays: Collection[str] = ()) -> bool:
    return day.weekday() < 5 and day_label(day) not in holidays


def working_days_between(start: date, end: date, holidays: Collection[str] = ()) -> int:
    """Count working days in the inclusive range [start, end]."""

    count = 0
    current = start
    while current <= end:
        if is_working_day(current, holidays):
            count += 1
        current += _ONE_DAY
    return count


def display_window(
    anchor: date,
    holidays: Collection[str] = (),
    length: int = WINDOW_LENGTH,
    max_scan_days: Optional[int] = None,
) -> list[date]:
    """Return the next ``length`` working days starting at ``anchor``.

    Scanning stops after ``max_scan_days`` calendar days (by default the larger
    of ``MAX_WINDOW_SCAN_DAYS`` and three days per requested working day);
    whatever was collected by then is returned.
    """

    if max_scan_days is None:
        max_scan_days = max(MAX_WINDOW_SCAN_DAYS, length * _SCAN_DAYS_PER_WORKING_DAY)

    days: list[date] = []
    cursor = anchor
    for _ in range(max_scan_days):
        if len(days) >= length:
            break
        if is_working_day(cursor, holidays):
            days.append(cursor)
        cursor += _ONE_DAY
    else:
        if len(days) < length:
            logger.warning(
                "Display window truncated: %d of %d working days found within %d days of %s",
                len(days),
                length,
                max_scan_days,
                anchor.isoformat(),
            )
    return days
