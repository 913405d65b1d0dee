"""
Standup — one day's self-reported work log.

Owned by the standup store: the query engine only reads these rows.
`mood` / `productivity` use 1–5, with 0 meaning "not set".
`tags` is a JSON list of short strings.
"""
import datetime as dt

from sqlalchemy import (
    JSON, Boolean, Date, DateTime, Integer, String, Text, UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column

from standupsync.db.base import Base


class Standup(Base):
    __tablename__ = "standups"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_standup_user_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    yesterday: Mapped[str] = mapped_column(Text, nullable=False, default="")
    today: Mapped[str] = mapped_column(Text, nullable=False, default="")
    blockers: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_blocker_resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    mood: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    productivity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_highlight: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
