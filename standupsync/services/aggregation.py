"""
Aggregation engine — turns standup records into summaries and statistics.

Pure functions over any objects exposing the Standup attributes
(`date`, `yesterday`, `today`, `blockers`, `tags`, `mood`, `productivity`,
`is_highlight`). No queries, no writes; records arrive already ordered
by the caller (ascending date for summaries).

Public API
----------
average(values)                    -> float
weekly_summary(records, period)    -> WeeklySummary
monthly_summary(records, month)    -> MonthlySummary
statistics(records)                -> StandupStatistics

Absence of data is a valid result: every function returns zeroed/empty
structures for an empty record list.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional, Sequence

from standupsync.services.date_ranges import DateRange, parse_iso_date


# ---------------------------------------------------------------------------
# Result types (plain dataclasses, no ORM or Pydantic)
# ---------------------------------------------------------------------------

@dataclass
class TagCount:
    tag: str
    count: int


@dataclass
class Period:
    start_date: str
    end_date: str


@dataclass
class StandupCount:
    total: int
    dates: list[str]


@dataclass
class Series:
    average: float
    data: list[Any]


@dataclass
class WeeklySummary:
    period: Period
    standups: StandupCount
    achievements: list[str] = field(default_factory=list)
    plans: list[str] = field(default_factory=list)
    blockers: list[str] = field(default_factory=list)
    mood: Series = field(default_factory=lambda: Series(0, []))
    productivity: Series = field(default_factory=lambda: Series(0, []))
    tags: list[TagCount] = field(default_factory=list)
    highlights: list[str] = field(default_factory=list)


@dataclass
class Accomplishment:
    date: str
    done: str


@dataclass
class WeekGroup:
    week: str
    accomplishments: list[Accomplishment]
    tags: list[str]


@dataclass
class MonthlySummary:
    month: str
    total_entries: int
    weekly_summaries: list[WeekGroup] = field(default_factory=list)
    top_tags: list[TagCount] = field(default_factory=list)


@dataclass
class DateSpan:
    first: Optional[str]
    last: Optional[str]


@dataclass
class BlockerStats:
    count: int
    percentage: int


@dataclass
class HighlightStats:
    count: int
    dates: list[str]


@dataclass
class StandupStatistics:
    total: int
    date_range: DateSpan
    tags: list[TagCount]
    top_tags: list[TagCount]
    blockers: BlockerStats
    mood_average: float
    productivity_average: float
    highlights: HighlightStats


TOP_TAGS = 5


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def average(values: Iterable[Any]) -> float:
    """Arithmetic mean of the finite numbers in `values`; 0 when there are none."""
    valid = [v for v in (values or []) if _is_finite_number(v)]
    if not valid:
        return 0
    return sum(valid) / len(valid)


def _round_half_up(value: float, places: int = 0) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _iso(value: Any) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


def _as_date(value: Any) -> date:
    return value if isinstance(value, date) else parse_iso_date(str(value))


def _lines(text: Optional[str]) -> list[str]:
    if not text:
        return []
    return [line for line in text.splitlines() if line.strip()]


def _is_blank(text: Optional[str]) -> bool:
    return not text or not text.strip()


def tag_histogram(records: Sequence[Any]) -> list[TagCount]:
    """Distinct tags in first-seen order with the number of records carrying each."""
    counts: dict[str, int] = {}
    for record in records:
        for tag in dict.fromkeys(record.tags or []):
            counts[tag] = counts.get(tag, 0) + 1
    return [TagCount(tag=t, count=c) for t, c in counts.items()]


def top_tags(histogram: list[TagCount], limit: int = TOP_TAGS) -> list[TagCount]:
    # sorted() is stable: equal counts keep first-seen order
    return sorted(histogram, key=lambda tc: tc.count, reverse=True)[:limit]


def week_of_month(day: date) -> int:
    """ceil((day_of_month + weekday_of_first) / 7), weekday Sunday=0."""
    first_offset = (day.replace(day=1).weekday() + 1) % 7
    return math.ceil((day.day + first_offset) / 7)


# ---------------------------------------------------------------------------
# Weekly
# ---------------------------------------------------------------------------

def weekly_summary(records: Sequence[Any], period: DateRange) -> WeeklySummary:
    summary = WeeklySummary(
        period=Period(start_date=_iso(period.start_date), end_date=_iso(period.end_date)),
        standups=StandupCount(total=0, dates=[]),
    )
    if not records:
        return summary

    moods = [r.mood for r in records]
    productivity = [r.productivity for r in records]

    summary.standups = StandupCount(total=len(records), dates=[_iso(r.date) for r in records])
    summary.achievements = [line for r in records for line in _lines(r.yesterday)]
    summary.plans = [line for r in records for line in _lines(r.today)]
    summary.blockers = [r.blockers for r in records if not _is_blank(r.blockers)]
    summary.mood = Series(average=average(moods), data=moods)
    summary.productivity = Series(average=average(productivity), data=productivity)
    summary.tags = tag_histogram(records)
    summary.highlights = [f"{_iso(r.date)}: {r.today}" for r in records if r.is_highlight]
    return summary


# ---------------------------------------------------------------------------
# Monthly
# ---------------------------------------------------------------------------

def monthly_summary(records: Sequence[Any], month: str) -> MonthlySummary:
    if not records:
        return MonthlySummary(month=month, total_entries=0)

    weeks: dict[str, WeekGroup] = {}
    for record in records:
        label = f"Week {week_of_month(_as_date(record.date))}"
        group = weeks.get(label)
        if group is None:
            group = weeks[label] = WeekGroup(week=label, accomplishments=[], tags=[])
        group.accomplishments.append(
            Accomplishment(date=_iso(record.date), done=record.yesterday)
        )
        for tag in record.tags or []:
            if tag not in group.tags:
                group.tags.append(tag)

    return MonthlySummary(
        month=month,
        total_entries=len(records),
        weekly_summaries=list(weeks.values()),
        top_tags=top_tags(tag_histogram(records)),
    )


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

def _set_average(values: Iterable[Any]) -> float:
    """Average over values that were actually set (> 0), one decimal place."""
    rated = [v for v in values if _is_finite_number(v) and v > 0]
    return _round_half_up(average(rated), 1)


def statistics(records: Sequence[Any]) -> StandupStatistics:
    total = len(records)
    dates = sorted(_iso(r.date) for r in records)
    histogram = tag_histogram(records)
    with_blockers = sum(1 for r in records if not _is_blank(r.blockers))
    highlighted = [_iso(r.date) for r in records if r.is_highlight]

    percentage = int(_round_half_up(with_blockers / total * 100)) if total else 0

    return StandupStatistics(
        total=total,
        date_range=DateSpan(
            first=dates[0] if dates else None,
            last=dates[-1] if dates else None,
        ),
        tags=histogram,
        top_tags=top_tags(histogram),
        blockers=BlockerStats(count=with_blockers, percentage=percentage),
        mood_average=_set_average(r.mood for r in records),
        productivity_average=_set_average(r.productivity for r in records),
        highlights=HighlightStats(count=len(highlighted), dates=highlighted),
    )
