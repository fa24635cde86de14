from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session
import logging

from meeting_insights.deps import get_session
from meeting_insights.models.meeting import Meeting
from meeting_insights.models.speaker import Speaker
from meeting_insights.models.task import Task
from meeting_insights.repositories.meetings import MeetingsRepository
from meeting_insights.repositories.speakers import SpeakersRepository
from meeting_insights.repositories.tasks import TasksRepository
from meeting_insights.repositories.transcripts import TranscriptsRepository

logger = logging.getLogger("meeting_insights.api")


router = APIRouter(prefix="/meetings", tags=["meetings"])


class RenameSpeakerRequest(BaseModel):
    custom_name: str


class UpdateTaskRequest(BaseModel):
    completed: bool


def _get_meeting_or_404(session: Session, meeting_id: int) -> Meeting:
    meeting = MeetingsRepository(session).get(meeting_id)
    if meeting is None:
        raise HTTPException(status_code=404, detail="Meeting not found")
    return meeting


@router.get("")
def list_meetings(
    user_id: str,
    q: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    session: Session = Depends(get_session),
) -> List[Meeting]:
    return MeetingsRepository(session).list_for_user(user_id, limit=limit, offset=offset, q=q)


@router.get("/{meeting_id}")
def get_meeting_detail(meeting_id: int, session: Session = Depends(get_session)) -> Dict[str, Any]:
    meeting = _get_meeting_or_404(session, meeting_id)
    return {
        "meeting": meeting,
        "transcripts": TranscriptsRepository(session).list_by_meeting(meeting_id),
        "tasks": TasksRepository(session).list_by_meeting(meeting_id),
        "speakers": SpeakersRepository(session).list_by_meeting(meeting_id),
    }


@router.put("/{meeting_id}/speakers/{speaker_id}")
def rename_speaker(
    meeting_id: int, speaker_id: int, body: RenameSpeakerRequest, session: Session = Depends(get_session)
) -> Speaker:
    meeting = _get_meeting_or_404(session, meeting_id)
    repo_s = SpeakersRepository(session)
    speaker = repo_s.get_for_meeting(meeting_id, speaker_id)
    if speaker is None:
        raise HTTPException(status_code=404, detail="Speaker not found")
    custom_name = body.custom_name.strip()
    if not custom_name:
        raise HTTPException(status_code=400, detail="Speaker name must not be empty")
    MeetingsRepository(session).touch(meeting)
    return repo_s.rename(speaker, custom_name)


@router.put("/{meeting_id}/tasks/{task_id}")
def update_task(meeting_id: int, task_id: int, body: UpdateTaskRequest, session: Session = Depends(get_session)) -> Task:
    meeting = _get_meeting_or_404(session, meeting_id)
    repo_t = TasksRepository(session)
    task = repo_t.get_for_meeting(meeting_id, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    MeetingsRepository(session).touch(meeting)
    return repo_t.set_completed(task, body.completed)


@router.delete("/{meeting_id}")
def delete_meeting(meeting_id: int, session: Session = Depends(get_session)) -> Dict[str, str]:
    meeting = _get_meeting_or_404(session, meeting_id)
    MeetingsRepository(session).delete(meeting)
    logger.info("Meeting %s deleted", meeting_id)
    return {"detail": "Meeting deleted"}
