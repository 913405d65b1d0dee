"""
Date-window helpers for the query engine.

All windows are inclusive calendar-date ranges. Weeks start on Sunday.
"""
from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from standupsync.core.errors import InvalidDateRangeError, InvalidMonthError


@dataclass(frozen=True)
class DateRange:
    start_date: date
    end_date: date


_MONTH_TOKEN_RE = re.compile(r"^\d{4}-\d{2}$")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MONTH_INDEX: dict[str, int] = {
    "jan": 0, "january": 0,
    "feb": 1, "february": 1,
    "mar": 2, "march": 2,
    "apr": 3, "april": 3,
    "may": 4,
    "jun": 5, "june": 5,
    "jul": 6, "july": 6,
    "aug": 7, "august": 7,
    "sep": 8, "september": 8,
    "oct": 9, "october": 9,
    "nov": 10, "november": 10,
    "dec": 11, "december": 11,
}

# Full names first so "april" wins over "apr" at the same position.
MONTH_NAME_RE = re.compile(
    r"\b(january|february|march|april|may|june|july|august|september|october"
    r"|november|december|jan|feb|mar|apr|jun|jul|aug|sep|oct|nov|dec)\b",
    re.IGNORECASE,
)


def _today() -> date:
    return date.today()


def _sunday_weekday(d: date) -> int:
    """Day of week with Sunday=0 ... Saturday=6."""
    return (d.weekday() + 1) % 7


def current_week_range(today: Optional[date] = None) -> DateRange:
    """Sunday-to-Saturday week containing `today` (local wall clock by default)."""
    now = today or _today()
    start = now - timedelta(days=_sunday_weekday(now))
    return DateRange(start_date=start, end_date=start + timedelta(days=6))


def month_range(month: str) -> DateRange:
    """First and last calendar day of a `YYYY-MM` token."""
    if not isinstance(month, str) or not _MONTH_TOKEN_RE.match(month):
        raise InvalidMonthError(str(month))
    year, month_number = int(month[:4]), int(month[5:])
    if not 1 <= month_number <= 12:
        raise InvalidMonthError(month)
    last_day = calendar.monthrange(year, month_number)[1]
    return DateRange(
        start_date=date(year, month_number, 1),
        end_date=date(year, month_number, last_day),
    )


def month_token_from_text(text: str, today: Optional[date] = None) -> str:
    """
    Resolve the month a free-text query talks about.

    A month name or abbreviation maps onto the current year; without one the
    current month is used. Years written in the text are not parsed.
    """
    now = today or _today()
    match = MONTH_NAME_RE.search(text or "")
    if match:
        month_number = MONTH_INDEX[match.group(1).lower()] + 1
    else:
        month_number = now.month
    return f"{now.year}-{month_number:02d}"


def last_days_range(days: int, today: Optional[date] = None) -> DateRange:
    """Window from `days` days ago up to and including today."""
    now = today or _today()
    return DateRange(start_date=now - timedelta(days=days), end_date=now)


def parse_iso_date(value: str) -> date:
    """Strict `YYYY-MM-DD` parsing; raises ValueError on anything else."""
    if not _ISO_DATE_RE.match(value or ""):
        raise ValueError(f"{value!r} is not a YYYY-MM-DD date")
    return date.fromisoformat(value)


def resolve_range(
    start_date: Optional[date],
    end_date: Optional[date],
    default: DateRange,
) -> DateRange:
    """
    Use the caller's bounds when both are given, otherwise the default window.
    A reversed window is a validation failure.
    """
    if start_date is None or end_date is None:
        return default
    if start_date > end_date:
        raise InvalidDateRangeError(
            "start_date must not be after end_date",
            start_date=str(start_date),
            end_date=str(end_date),
        )
    return DateRange(start_date=start_date, end_date=end_date)
