"""
Standup listing schemas.

GET /standups            → StandupListResponse
GET /standups/range      → StandupListResponse
GET /standups/highlights → StandupListResponse
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class StandupOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: str = Field(description="ISO date of the standup.")
    user_id: Optional[str] = None
    yesterday: str
    today: str
    blockers: str
    is_blocker_resolved: bool
    tags: list[str]
    mood: int = Field(description="1–5, 0 when not set.")
    productivity: int = Field(description="1–5, 0 when not set.")
    is_highlight: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class StandupListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[StandupOut]
