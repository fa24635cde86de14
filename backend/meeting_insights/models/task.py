from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    meeting_id: int = Field(index=True, foreign_key="meetings.id", ondelete="CASCADE")
    task: str
    owner: Optional[str] = None
    deadline: Optional[str] = None  # free text as spoken ("next Friday")
    completed: bool = Field(default=False)
