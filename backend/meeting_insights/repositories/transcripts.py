from __future__ import annotations

from typing import Iterable
from sqlmodel import Session, select

from meeting_insights.models.transcript import Transcript


class TranscriptsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add_many(self, rows: Iterable[Transcript]) -> None:
        for row in rows:
            self.session.add(row)
        self.session.commit()

    def list_by_meeting(self, meeting_id: int) -> list[Transcript]:
        statement = select(Transcript).where(Transcript.meeting_id == meeting_id).order_by(
            Transcript.order_index.asc()
        )
        return list(self.session.exec(statement))
