"""Parsing, formatting and range checks for Canvas date strings.

Two kinds of input show up here. Tool arguments such as ``dueBefore`` are bare
calendar dates (``2024-03-01``) and mean a day in the user's local timezone.
Canvas fields such as ``due_at`` are ISO 8601 timestamps and mean an absolute
instant. Both parse to timezone-aware datetimes so they can be compared.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, time
from typing import Optional

LOGGER = logging.getLogger(__name__)

BARE_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

FULL = "full"
DATE_ONLY = "date-only"

NO_DATE = "No date set"
INVALID_DATE = "Invalid date"

_START_OF_DAY = time(0, 0, 0, 0)
_END_OF_DAY = time(23, 59, 59, 999000)


def _local(value: datetime) -> datetime:
    """Attach or convert to the local timezone (naive values are local wall time)."""
    return value.astimezone()


def parse_date(text: Optional[str]) -> Optional[datetime]:
    """Parse a bare date or an ISO 8601 timestamp.

    Returns ``None`` for empty input, unparseable text and impossible calendar
    dates such as ``2024-02-30``. Never raises.
    """
    if not text:
        return None

    try:
        if BARE_DATE_PATTERN.fullmatch(text):
            year, month, day = (int(part) for part in text.split("-"))
            return _local(datetime(year, month, day))

        candidate = text
        if candidate.endswith(("Z", "z")):
            candidate = candidate[:-1] + "+00:00"
        return _local(datetime.fromisoformat(candidate))
    except (ValueError, OverflowError, OSError):
        LOGGER.debug("Could not parse date %r", text)
        return None


def format_date(text: Optional[str], mode: str = FULL) -> str:
    """Render a date string for a report.

    ``full`` gives date, time and timezone abbreviation in local time,
    ``date-only`` just the date.
    """
    if mode not in (FULL, DATE_ONLY):
        raise ValueError(f"Unknown date format mode: {mode}")
    if not text:
        return NO_DATE

    parsed = parse_date(text)
    if parsed is None:
        return INVALID_DATE

    local = _local(parsed)
    if mode == DATE_ONLY:
        return local.strftime("%m/%d/%Y")
    return f"{local.strftime('%m/%d/%Y, %I:%M %p')} {local.tzname() or ''}".rstrip()


def start_of_day(value: datetime) -> datetime:
    """00:00:00.000 local time on the local calendar day of ``value``."""
    return _local(datetime.combine(_local(value).date(), _START_OF_DAY))


def end_of_day(value: datetime) -> datetime:
    """23:59:59.999 local time on the local calendar day of ``value``."""
    return _local(datetime.combine(_local(value).date(), _END_OF_DAY))


def is_date_in_range(
    date: Optional[str],
    before: Optional[str] = None,
    after: Optional[str] = None,
) -> bool:
    """Check whether ``date`` falls inside the inclusive ``[after, before]`` days.

    A missing or unparseable ``date`` counts as in range, so undated
    assignments are never hidden by a date filter. Bounds that fail to parse
    are ignored.
    """
    if not date:
        return True

    due = parse_date(date)
    if due is None:
        return True

    if before:
        before_date = parse_date(before)
        if before_date is not None and due > end_of_day(before_date):
            return False

    if after:
        after_date = parse_date(after)
        if after_date is not None and due < start_of_day(after_date):
            return False

    return True
