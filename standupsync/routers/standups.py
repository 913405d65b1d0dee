"""
Standup read endpoints.

GET /standups              — list (optional ?tag=), newest first
GET /standups/range        — list by inclusive date range, oldest first
GET /standups/highlights   — highlighted standups (404 when none)
GET /standups/stats        — aggregate statistics
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from standupsync.core.errors import entry_point
from standupsync.db.base import get_db
from standupsync.routers.deps import get_current_user_id
from standupsync.schemas.common import ErrorResponse
from standupsync.schemas.query import StatisticsResponse
from standupsync.schemas.standup import StandupListResponse
from standupsync.services import query as query_service

router = APIRouter(prefix="/standups", tags=["standups"])


@router.get(
    "",
    response_model=StandupListResponse,
    summary="List standups",
    responses={200: {"description": "Standups, newest first. Empty list when none match."}},
)
def list_standups(
    tag: Optional[str] = Query(
        default=None,
        min_length=1,
        description="Only standups carrying this exact tag (without `#`).",
        examples=["frontend"],
    ),
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    with entry_point("Failed to retrieve standups"):
        return query_service.list_standups(db, user_id=user_id, tag=tag)


@router.get(
    "/range",
    response_model=StandupListResponse,
    summary="List standups in a date range",
    responses={
        200: {"description": "Standups in the window, oldest first."},
        400: {"model": ErrorResponse, "description": "Missing, malformed or reversed dates."},
    },
)
def list_standups_in_range(
    start_date: date = Query(description="First day (inclusive).", examples=["2024-04-01"]),
    end_date: date = Query(description="Last day (inclusive).", examples=["2024-04-30"]),
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    with entry_point("Failed to retrieve standups by date range"):
        return query_service.list_standups_in_range(
            db, start_date=start_date, end_date=end_date, user_id=user_id,
        )


@router.get(
    "/highlights",
    response_model=StandupListResponse,
    summary="List highlighted standups",
    responses={
        200: {"description": "Highlighted standups, newest first."},
        404: {"model": ErrorResponse, "description": "No standup is flagged as a highlight."},
    },
)
def list_highlights(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """
    Unlike the other listings, an empty result is reported as **404**.
    Kept for compatibility with existing clients.
    """
    with entry_point("Failed to retrieve highlights"):
        return query_service.list_highlights(db, user_id=user_id)


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Standup statistics",
    responses={200: {"description": "Totals, tag counts, blocker rate, averages."}},
)
def statistics(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """
    Mood and productivity averages only count standups where the value was
    set (> 0) and are rounded to one decimal. The blocker percentage is 0
    when there are no standups.
    """
    with entry_point("Failed to compute statistics"):
        return query_service.get_statistics(db, user_id=user_id)
