"""
Read side of the standup store.

The query engine never writes standups; every fetch goes through
`find_standups`, which is owner-scoped whenever a user id is supplied.
"""
from __future__ import annotations

import json
from datetime import date
from typing import Optional

from sqlalchemy import String, cast, func
from sqlalchemy.orm import Session

from standupsync.models.standup import Standup
from standupsync.services.date_ranges import DateRange


def find_standups(
    db: Session,
    *,
    date_range: Optional[DateRange] = None,
    user_id: Optional[str] = None,
    tag: Optional[str] = None,
    blockers_only: bool = False,
    highlights_only: bool = False,
    descending: bool = False,
    limit: Optional[int] = None,
) -> list[Standup]:
    """Return standups matching every given filter, ordered by date."""
    q = db.query(Standup)
    if date_range is not None:
        q = q.filter(Standup.date.between(date_range.start_date, date_range.end_date))
    if user_id:
        q = q.filter(Standup.user_id == user_id)
    if tag:
        # narrow on the serialized JSON, then confirm the exact element below
        q = q.filter(cast(Standup.tags, String).like(_tag_pattern(tag), escape="\\"))
    if blockers_only:
        q = q.filter(Standup.blockers.isnot(None), func.trim(Standup.blockers) != "")
    if highlights_only:
        q = q.filter(Standup.is_highlight == True)  # noqa: E712
    q = q.order_by(Standup.date.desc() if descending else Standup.date.asc())
    if tag:
        rows = [s for s in q.all() if tag in (s.tags or [])]
        return rows[:limit] if limit is not None else rows
    if limit is not None:
        q = q.limit(limit)
    return q.all()


def _tag_pattern(tag: str) -> str:
    """LIKE pattern for one JSON-encoded list element, metacharacters escaped."""
    needle = json.dumps(tag)
    for ch in ("\\", "%", "_"):
        needle = needle.replace(ch, "\\" + ch)
    return f"%{needle}%"


def standup_to_dict(s: Standup) -> dict:
    return {
        "id": s.id,
        "date": _iso(s.date),
        "user_id": s.user_id,
        "yesterday": s.yesterday,
        "today": s.today,
        "blockers": s.blockers,
        "is_blocker_resolved": s.is_blocker_resolved,
        "tags": list(s.tags or []),
        "mood": s.mood,
        "productivity": s.productivity,
        "is_highlight": s.is_highlight,
        "created_at": s.created_at.isoformat() if s.created_at else None,
        "updated_at": s.updated_at.isoformat() if s.updated_at else None,
    }


def _iso(value) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)
