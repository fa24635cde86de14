from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


class Speaker(SQLModel, table=True):
    __tablename__ = "speakers"

    id: Optional[int] = Field(default=None, primary_key=True)
    meeting_id: int = Field(index=True, foreign_key="meetings.id", ondelete="CASCADE")
    default_name: str
    custom_name: Optional[str] = None
