"""
Query endpoint schemas.

POST /query              → QueryRequest → free-form envelope
GET  /query/week         → WeeklySummaryResponse
GET  /query/month/{m}    → MonthlySummaryResponse
GET  /query/blockers     → BlockerListResponse
GET  /standups/stats     → StatisticsResponse
"""
from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator


class QueryRequest(BaseModel):
    query: Annotated[str, Field(
        min_length=1,
        max_length=2_000,
        description="Free-text question about your standups.",
        examples=["What did I do this week?", "Any recurring blockers?"],
    )]

    @field_validator("query", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        if not isinstance(v, str):
            raise ValueError("query must be a string")
        stripped = v.strip()
        if not stripped:
            raise ValueError("query must not be empty after stripping whitespace")
        return stripped


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------

class TagCountOut(BaseModel):
    tag: str
    count: int


class SeriesOut(BaseModel):
    average: float = Field(description="Mean of the finite values; 0 when none.")
    data: list[int]


# ---------------------------------------------------------------------------
# Weekly
# ---------------------------------------------------------------------------

class PeriodOut(BaseModel):
    start_date: str
    end_date: str


class StandupCountOut(BaseModel):
    total: int
    dates: list[str]


class WeeklySummaryOut(BaseModel):
    period: PeriodOut
    standups: StandupCountOut
    achievements: list[str] = Field(description="Non-blank lines of every `yesterday`.")
    plans: list[str] = Field(description="Non-blank lines of every `today`.")
    blockers: list[str]
    mood: SeriesOut
    productivity: SeriesOut
    tags: list[TagCountOut]
    highlights: list[str] = Field(description='"date: today" for highlighted standups.')


class WeeklySummaryResponse(BaseModel):
    success: bool = True
    data: WeeklySummaryOut


# ---------------------------------------------------------------------------
# Monthly
# ---------------------------------------------------------------------------

class AccomplishmentOut(BaseModel):
    date: str
    done: str


class WeekGroupOut(BaseModel):
    week: str = Field(examples=["Week 2"])
    accomplishments: list[AccomplishmentOut]
    tags: list[str]


class MonthlySummaryOut(BaseModel):
    month: str = Field(examples=["2024-04"])
    total_entries: int
    weekly_summaries: list[WeekGroupOut]
    top_tags: list[TagCountOut] = Field(description="Up to 5 most frequent tags.")


class MonthlySummaryResponse(BaseModel):
    success: bool = True
    data: MonthlySummaryOut


# ---------------------------------------------------------------------------
# Blockers
# ---------------------------------------------------------------------------

class BlockerGroupOut(BaseModel):
    blocker: str = Field(description="Normalized text of the first blocker in the group.")
    occurrences: int
    dates: list[str]


class BlockerListResponse(BaseModel):
    success: bool = True
    data: list[BlockerGroupOut]


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

class DateSpanOut(BaseModel):
    first: Optional[str] = None
    last: Optional[str] = None


class BlockerStatsOut(BaseModel):
    count: int
    percentage: int = Field(description="Share of standups with a blocker, rounded.")


class HighlightStatsOut(BaseModel):
    count: int
    dates: list[str]


class StatisticsOut(BaseModel):
    total: int
    date_range: DateSpanOut
    tags: list[TagCountOut]
    top_tags: list[TagCountOut]
    blockers: BlockerStatsOut
    mood_average: float = Field(description="Average of set (> 0) values, one decimal.")
    productivity_average: float = Field(description="Average of set (> 0) values, one decimal.")
    highlights: HighlightStatsOut


class StatisticsResponse(BaseModel):
    success: bool = True
    data: StatisticsOut
