from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import func
from sqlmodel import Session, select

from meeting_insights.models.meeting import Meeting
from meeting_insights.models.speaker import Speaker
from meeting_insights.models.task import Task
from meeting_insights.models.transcript import Transcript


class MeetingsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, meeting: Meeting) -> Meeting:
        self.session.add(meeting)
        self.session.commit()
        self.session.refresh(meeting)
        return meeting

    def get(self, meeting_id: int) -> Optional[Meeting]:
        return self.session.get(Meeting, meeting_id)

    def list_for_user(
        self, user_id: str, limit: int = 50, offset: int = 0, q: Optional[str] = None
    ) -> list[Meeting]:
        statement = select(Meeting).where(Meeting.user_id == user_id)
        if q and q.strip():
            # Case-insensitive substring match on the title
            statement = statement.where(func.lower(Meeting.title).contains(q.strip().lower(), autoescape=True))
        statement = (
            statement.order_by(Meeting.created_at.desc(), Meeting.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.exec(statement))

    def touch(self, meeting: Meeting) -> Meeting:
        meeting.updated_at = datetime.now(timezone.utc)
        self.session.add(meeting)
        self.session.commit()
        self.session.refresh(meeting)
        return meeting

    def delete(self, meeting: Meeting) -> None:
        # Children first so stores without cascading foreign keys stay orphan-free
        for model in (Transcript, Task, Speaker):
            statement = select(model).where(model.meeting_id == meeting.id)
            for row in list(self.session.exec(statement)):
                self.session.delete(row)
        self.session.flush()
        self.session.delete(meeting)
        self.session.commit()
