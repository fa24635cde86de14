from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


class Transcript(SQLModel, table=True):
    __tablename__ = "transcripts"

    id: Optional[int] = Field(default=None, primary_key=True)
    meeting_id: int = Field(index=True, foreign_key="meetings.id", ondelete="CASCADE")
    speaker_id: str
    speaker_name: str
    text: str
    order_index: int = Field(index=True)  # one-based, strictly increasing per meeting
    timestamp_seconds: Optional[int] = None
