from __future__ import annotations

from typing import Iterable, Optional
from sqlmodel import Session, select

from meeting_insights.models.speaker import Speaker


class SpeakersRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add_many(self, rows: Iterable[Speaker]) -> None:
        for row in rows:
            self.session.add(row)
        self.session.commit()

    def list_by_meeting(self, meeting_id: int) -> list[Speaker]:
        statement = select(Speaker).where(Speaker.meeting_id == meeting_id).order_by(Speaker.id.asc())
        return list(self.session.exec(statement))

    def get_for_meeting(self, meeting_id: int, speaker_id: int) -> Optional[Speaker]:
        speaker = self.session.get(Speaker, speaker_id)
        if speaker is None or speaker.meeting_id != meeting_id:
            return None
        return speaker

    def rename(self, speaker: Speaker, custom_name: str) -> Speaker:
        """Only ``custom_name`` is editable; ``default_name`` keeps the diarized label."""
        speaker.custom_name = custom_name
        self.session.add(speaker)
        self.session.commit()
        self.session.refresh(speaker)
        return speaker
