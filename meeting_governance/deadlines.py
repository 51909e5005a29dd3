"""Normalise free-form deadline strings from meeting notes into dates."""

from __future__ import annotations

import re
from datetime import date, timedelta

_MONTH_DAY = re.compile(r"^(\d{1,2})/(\d{1,2})$")
_YEAR_MONTH_DAY = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")

# Relative tokens, matched case-insensitively after trimming.
NEXT_WEEK_TOKENS = frozenset({"next week", "来週"})
END_OF_WEEK_TOKENS = frozenset({"by end of this week", "this week", "今週中"})

FRIDAY = 4  # date.weekday()


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def next_friday(today: date) -> date:
    """Return the coming Friday, or ``today`` itself when it is a Friday."""
    return today + timedelta(days=(FRIDAY - today.weekday()) % 7)


def parse_deadline(text: str | None, today: date | None = None) -> date | None:
    """Parse a deadline string into an absolute date.

    Accepted forms:
        ``MM/DD``       -- in the current year; the day must exist in that month.
        ``YYYY/MM/DD``  -- four-digit years only.
        ``next week``   -- today + 7 days.
        ``by end of this week`` -- the next Friday, inclusive of today.

    Args:
        text: The raw deadline as written by the extraction model.
        today: Reference date (defaults to ``date.today()``).

    Returns:
        The parsed date, or ``None`` when the text is empty or unrecognised.
    """
    if not text or not text.strip():
        return None

    today = today or date.today()
    trimmed = text.strip()

    match = _MONTH_DAY.match(trimmed)
    if match:
        return _safe_date(today.year, int(match.group(1)), int(match.group(2)))

    match = _YEAR_MONTH_DAY.match(trimmed)
    if match:
        return _safe_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    token = trimmed.lower()
    if token in NEXT_WEEK_TOKENS:
        return today + timedelta(days=7)
    if token in END_OF_WEEK_TOKENS:
        return next_friday(today)

    return None
