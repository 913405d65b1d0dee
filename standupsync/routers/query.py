"""
Query router.

GET  /query/week            — weekly summary (default: current week)
GET  /query/month/{month}   — monthly summary for YYYY-MM
GET  /query/blockers        — recurring blockers, clustered
GET  /query/analyze         — AI analysis over a date range
POST /query                 — natural-language query
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from standupsync.core.errors import entry_point
from standupsync.db.base import get_db
from standupsync.routers.deps import get_current_user_id, get_gateway
from standupsync.schemas.common import ErrorResponse
from standupsync.schemas.query import (
    BlockerListResponse,
    MonthlySummaryResponse,
    QueryRequest,
    WeeklySummaryResponse,
)
from standupsync.services import query as query_service
from standupsync.services.ai_gateway import AIAnalysisGateway
from standupsync.services.intent_router import dispatch_query

router = APIRouter(prefix="/query", tags=["query"])


# ---------------------------------------------------------------------------
# GET /query/week
# ---------------------------------------------------------------------------

@router.get(
    "/week",
    response_model=WeeklySummaryResponse,
    summary="Weekly summary",
    responses={
        200: {"description": "Summary for the window; zeroed when there is no data."},
        400: {"model": ErrorResponse, "description": "Malformed or reversed dates."},
    },
)
def weekly_summary(
    start_date: Optional[date] = Query(
        default=None,
        description="First day (inclusive). Ignored unless end_date is also given.",
        examples=["2024-04-07"],
    ),
    end_date: Optional[date] = Query(
        default=None,
        description="Last day (inclusive). Ignored unless start_date is also given.",
        examples=["2024-04-13"],
    ),
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """
    Achievements, plans, blockers, mood / productivity averages, tag counts
    and highlights for a week. Without both bounds the current
    Sunday–Saturday week is used.
    """
    with entry_point("Failed to generate weekly summary"):
        return query_service.get_weekly_summary(
            db, user_id=user_id, start_date=start_date, end_date=end_date,
        )


# ---------------------------------------------------------------------------
# GET /query/month/{month}
# ---------------------------------------------------------------------------

@router.get(
    "/month/{month}",
    response_model=MonthlySummaryResponse,
    summary="Monthly summary",
    responses={
        200: {"description": "Per-week accomplishments and top tags."},
        400: {"model": ErrorResponse, "description": "Month is not YYYY-MM."},
    },
)
def monthly_summary(
    month: str,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """
    Group the month's standups into `Week N` buckets (weeks start on Sunday)
    and list the five most frequent tags.
    """
    with entry_point("Failed to generate monthly summary"):
        return query_service.get_monthly_summary(db, month, user_id=user_id)


# ---------------------------------------------------------------------------
# GET /query/blockers
# ---------------------------------------------------------------------------

@router.get(
    "/blockers",
    response_model=BlockerListResponse,
    summary="Recurring blockers",
    responses={200: {"description": "Blocker groups, most frequent first."}},
)
def recurring_blockers(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """
    Group similar blockers with a simple text heuristic (substring or a
    shared word longer than 3 characters) and count how often each recurs.
    """
    with entry_point("Failed to analyze blockers"):
        return query_service.get_blockers(db, user_id=user_id)


# ---------------------------------------------------------------------------
# GET /query/analyze
# ---------------------------------------------------------------------------

@router.get(
    "/analyze",
    summary="AI analysis of standups in a date range",
    responses={
        200: {"description": "AI result, or `success: false` with a fallback in `data`."},
    },
)
def analyze(
    start_date: Optional[date] = Query(default=None, description="Defaults to 30 days ago."),
    end_date: Optional[date] = Query(default=None, description="Defaults to today."),
    type: Optional[str] = Query(
        default=None,
        description='"blockers" analyses blockers; anything else summarizes standups.',
    ),
    db: Session = Depends(get_db),
    gateway: AIAnalysisGateway = Depends(get_gateway),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    with entry_point("Failed to analyze standups"):
        return query_service.analyze_standups(
            db,
            gateway,
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            analysis_type=type,
        )


# ---------------------------------------------------------------------------
# POST /query
# ---------------------------------------------------------------------------

@router.post(
    "",
    summary="Ask a natural-language question",
    responses={
        200: {"description": "Envelope from whichever path handled the query."},
        400: {"model": ErrorResponse, "description": "Missing or empty query."},
    },
)
def process_query(
    payload: QueryRequest,
    db: Session = Depends(get_db),
    gateway: AIAnalysisGateway = Depends(get_gateway),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """
    Route a free-text question to the right analysis.

    ### Routing order (first match wins)
    | Intent | Trigger |
    |---|---|
    | AI blocker analysis | analyze / insights / summarize / trends / patterns + "blocker" |
    | AI standup summary  | analysis word + standup / summary / progress |
    | AI free-text        | any other analysis word |
    | weekly summary      | "this week", or "week" and "do" |
    | monthly summary     | "this month" or "in <month>" |
    | recurring blockers  | blocker / blocking / blocked / stuck |
    | tag listing         | a `#tag` |
    | AI with context     | anything else; falls back to a help message |
    """
    with entry_point("Failed to process query"):
        return dispatch_query(db, gateway, payload.query, user_id=user_id)
