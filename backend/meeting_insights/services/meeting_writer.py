from __future__ import annotations

from typing import Callable, List, Optional, Sequence
import logging
import math

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from meeting_insights.errors import StorageError
from meeting_insights.models.meeting import Meeting
from meeting_insights.models.speaker import Speaker
from meeting_insights.models.task import Task
from meeting_insights.models.transcript import Transcript
from meeting_insights.repositories.meetings import MeetingsRepository
from meeting_insights.repositories.speakers import SpeakersRepository
from meeting_insights.repositories.tasks import TasksRepository
from meeting_insights.repositories.transcripts import TranscriptsRepository
from meeting_insights.services.insight_extractor import TaskItem
from meeting_insights.services.transcript_normalizer import TranscriptSegment


logger = logging.getLogger("meeting_insights.storage")


def write_meeting(
    session: Session,
    *,
    user_id: str,
    title: str,
    summary: str,
    segments: Sequence[TranscriptSegment],
    tasks: Sequence[TaskItem],
    language: Optional[str] = None,
) -> int:
    """Persist meeting, transcripts, tasks and speakers in that order.

    Blank segments are skipped before order indices are assigned. Each step
    commits on its own. A failing step raises StorageError and
    the remaining steps are not attempted; earlier rows are left in place.
    """
    segments = [seg for seg in segments if seg.text and seg.text.strip()]

    meeting = _run_step(
        session,
        "meeting",
        lambda: MeetingsRepository(session).create(
            Meeting(user_id=user_id, title=title, summary=summary, language=language)
        ),
    )
    meeting_id = meeting.id
    assert meeting_id is not None
    logger.info("Meeting created with id %s", meeting_id)

    transcript_rows = build_transcript_rows(meeting_id, segments)
    if transcript_rows:
        _run_step(session, "transcripts", lambda: TranscriptsRepository(session).add_many(transcript_rows))

    task_rows = [
        Task(meeting_id=meeting_id, task=item.task, owner=item.owner, deadline=item.deadline) for item in tasks
    ]
    if task_rows:
        _run_step(session, "tasks", lambda: TasksRepository(session).add_many(task_rows))

    speaker_rows = build_speaker_rows(meeting_id, segments)
    if speaker_rows:
        _run_step(session, "speakers", lambda: SpeakersRepository(session).add_many(speaker_rows))

    logger.info(
        "Meeting %s saved: %d transcript rows, %d tasks, %d speakers",
        meeting_id,
        len(transcript_rows),
        len(task_rows),
        len(speaker_rows),
    )
    return meeting_id


def build_transcript_rows(meeting_id: int, segments: Sequence[TranscriptSegment]) -> List[Transcript]:
    return [
        Transcript(
            meeting_id=meeting_id,
            speaker_id=seg.speaker_label,
            speaker_name=seg.speaker_label,
            text=seg.text,
            order_index=index,
            timestamp_seconds=int(math.floor(seg.start_seconds)),
        )
        for index, seg in enumerate(segments, start=1)
    ]


def build_speaker_rows(meeting_id: int, segments: Sequence[TranscriptSegment]) -> List[Speaker]:
    labels = list(dict.fromkeys(seg.speaker_label for seg in segments))
    return [Speaker(meeting_id=meeting_id, default_name=label, custom_name=label) for label in labels]


def _run_step(session: Session, step: str, action: Callable):  # type: ignore[type-arg]
    try:
        return action()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Storage step '%s' failed: %s", step, exc)
        raise StorageError(step, str(exc)) from exc
