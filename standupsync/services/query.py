"""
Query entry points: fetch standups from the store and hand them to the
aggregation engine, the blocker clusterer, or the AI gateway.

Every function returns a response envelope (`{"success": ..., ...}`) and
performs no writes. Validation errors are raised before the store is
touched; everything else is left for the router boundary to handle.
"""
from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session

from standupsync.core.errors import HighlightsNotFoundError
from standupsync.services import aggregation
from standupsync.services.ai_gateway import AIAnalysisGateway
from standupsync.services.blockers import cluster_blockers
from standupsync.services.date_ranges import (
    DateRange,
    current_week_range,
    last_days_range,
    month_range,
    resolve_range,
)
from standupsync.services.store import find_standups, standup_to_dict

logger = logging.getLogger(__name__)

RECENT_DAYS = 14
ANALYSIS_DEFAULT_DAYS = 30


def _ok(data: Any, **extra: Any) -> dict[str, Any]:
    return {"success": True, **extra, "data": data}


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

def get_weekly_summary(
    db: Session,
    user_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> dict[str, Any]:
    """Weekly summary for the given bounds, or the current Sunday-Saturday week."""
    period = resolve_range(start_date, end_date, default=current_week_range())
    records = find_standups(db, date_range=period, user_id=user_id)
    return _ok(asdict(aggregation.weekly_summary(records, period)))


def get_monthly_summary(
    db: Session,
    month: str,
    user_id: Optional[str] = None,
) -> dict[str, Any]:
    period = month_range(month)  # raises InvalidMonthError before any fetch
    records = find_standups(db, date_range=period, user_id=user_id)
    return _ok(asdict(aggregation.monthly_summary(records, month)))


def get_statistics(db: Session, user_id: Optional[str] = None) -> dict[str, Any]:
    records = find_standups(db, user_id=user_id)
    return _ok(asdict(aggregation.statistics(records)))


# ---------------------------------------------------------------------------
# Blockers
# ---------------------------------------------------------------------------

def get_blockers(db: Session, user_id: Optional[str] = None) -> dict[str, Any]:
    """Recurring blockers across all of the caller's standups, newest first."""
    records = find_standups(db, user_id=user_id, blockers_only=True, descending=True)
    groups = cluster_blockers((r.date, r.blockers) for r in records)
    return _ok([asdict(g) for g in groups])


def blocker_texts(db: Session, user_id: Optional[str] = None) -> list[str]:
    records = find_standups(db, user_id=user_id, blockers_only=True, descending=True)
    return [r.blockers for r in records]


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------

def list_standups(
    db: Session,
    user_id: Optional[str] = None,
    tag: Optional[str] = None,
) -> dict[str, Any]:
    records = find_standups(db, user_id=user_id, tag=tag, descending=True)
    return _ok([standup_to_dict(r) for r in records], count=len(records))


def list_standups_in_range(
    db: Session,
    start_date: date,
    end_date: date,
    user_id: Optional[str] = None,
) -> dict[str, Any]:
    period = resolve_range(start_date, end_date, default=DateRange(start_date, end_date))
    records = find_standups(db, date_range=period, user_id=user_id)
    return _ok([standup_to_dict(r) for r in records], count=len(records))


def list_highlights(db: Session, user_id: Optional[str] = None) -> dict[str, Any]:
    """Highlighted standups, newest first. Empty is a 404, unlike other listings."""
    records = find_standups(db, user_id=user_id, highlights_only=True, descending=True)
    if not records:
        raise HighlightsNotFoundError()
    return _ok([standup_to_dict(r) for r in records], count=len(records))


def recent_standups(
    db: Session,
    user_id: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[dict[str, Any]]:
    """Standups from the last two weeks, newest first, serialized for prompts."""
    records = find_standups(
        db,
        date_range=last_days_range(RECENT_DAYS),
        user_id=user_id,
        descending=True,
        limit=limit,
    )
    return [standup_to_dict(r) for r in records]


# ---------------------------------------------------------------------------
# AI analysis over a date range
# ---------------------------------------------------------------------------

def analyze_standups(
    db: Session,
    gateway: AIAnalysisGateway,
    user_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    analysis_type: Optional[str] = None,
) -> dict[str, Any]:
    """
    AI analysis of the standups in a window (default: last 30 days).
    `analysis_type="blockers"` analyses blockers; anything else summarizes.
    """
    period = resolve_range(
        start_date, end_date, default=last_days_range(ANALYSIS_DEFAULT_DAYS),
    )
    records = find_standups(db, date_range=period, user_id=user_id)

    if not records:
        return _ok(
            {"insights": [], "trends": {}, "summary": "No data available for analysis"},
            message="No standups found in the specified date range",
        )

    if analysis_type == "blockers":
        blockers = [r.blockers for r in records if r.blockers and r.blockers.strip()]
        if not blockers:
            return _ok(
                {"patterns": [], "suggestions": [], "summary": "No blockers to analyze"},
                message="No blockers found in the specified date range",
            )
        logger.info("Analyzing %d blockers between %s and %s",
                    len(blockers), period.start_date, period.end_date)
        return gateway.analyze_blockers(blockers).to_envelope()

    logger.info("Summarizing %d standups between %s and %s",
                len(records), period.start_date, period.end_date)
    return gateway.summarize_standups([standup_to_dict(r) for r in records]).to_envelope()
