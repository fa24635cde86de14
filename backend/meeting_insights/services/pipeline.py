from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol
import logging

from sqlalchemy.engine import Engine
from sqlmodel import Session

from meeting_insights.config import Settings
from meeting_insights.errors import AuthenticationError, PipelineError, UnknownError, ValidationError
from meeting_insights.services.insight_client import GeminiClient
from meeting_insights.services.insight_extractor import InsightGenerator, extract_insights, render_transcript
from meeting_insights.services.meeting_writer import write_meeting
from meeting_insights.services.transcript_normalizer import (
    detected_language,
    normalize_transcription,
)
from meeting_insights.services.transcription_client import DeepgramClient


logger = logging.getLogger("meeting_insights.pipeline")


def oversized_audio_error(max_bytes: int) -> ValidationError:
    return ValidationError(f"Audio exceeds the maximum size of {max_bytes} bytes")


class Transcriber(Protocol):
    def transcribe(self, audio: bytes, content_type: Optional[str] = None) -> Dict[str, Any]: ...


@dataclass
class ProcessResult:
    success: bool
    meeting_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "meetingId": self.meeting_id}
        return {"success": False, "error": self.error}


class MeetingPipeline:
    """Runs transcription, insight extraction and persistence for one upload.

    Holds no per-request state, so one instance may serve concurrent
    requests; each run opens and closes its own store session.
    """

    def __init__(
        self,
        transcriber: Transcriber,
        insight_generator: InsightGenerator,
        session_factory: Callable[[], Session],
        settings: Optional[Settings] = None,
        authenticator: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self._transcriber = transcriber
        self._insight_generator = insight_generator
        self._session_factory = session_factory
        self._settings = settings
        self._authenticator = authenticator

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        engine: Engine,
        authenticator: Optional[Callable[[str], bool]] = None,
    ) -> "MeetingPipeline":
        return cls(
            transcriber=DeepgramClient.from_settings(settings),
            insight_generator=GeminiClient.from_settings(settings),
            session_factory=lambda: Session(engine),
            settings=settings,
            authenticator=authenticator,
        )

    def process_audio(
        self,
        audio: Optional[bytes],
        title: Optional[str],
        user_id: Optional[str],
        content_type: Optional[str] = None,
        duration: Optional[float] = None,
    ) -> ProcessResult:
        try:
            meeting_id = self._run(audio, title, user_id, content_type, duration)
        except PipelineError as exc:
            logger.error("Error processing audio: %s", exc)
            return ProcessResult(success=False, error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error processing audio")
            wrapped = UnknownError(str(exc) or exc.__class__.__name__)
            return ProcessResult(success=False, error=str(wrapped))
        return ProcessResult(success=True, meeting_id=str(meeting_id))

    def _run(
        self,
        audio: Optional[bytes],
        title: Optional[str],
        user_id: Optional[str],
        content_type: Optional[str],
        duration: Optional[float],
    ) -> int:
        title = (title or "").strip()
        user_id = (user_id or "").strip()
        if not audio or not title or not user_id:
            raise ValidationError("Missing required fields: audio, title, or userId")

        if self._settings is not None:
            if len(audio) > self._settings.max_audio_bytes:
                raise oversized_audio_error(self._settings.max_audio_bytes)
            self._settings.require_credentials()

        if self._authenticator is not None and not self._authenticator(user_id):
            raise AuthenticationError("User not authenticated. Please sign in again.")

        logger.info("Processing audio for meeting: %s", title)

        response = self._transcriber.transcribe(audio, content_type)
        segments = normalize_transcription(response, duration)
        logger.info("Transcription completed: %d segments", len(segments))

        insights = extract_insights(render_transcript(segments), self._insight_generator)
        logger.info("Insight extraction completed: %d tasks", len(insights.tasks))

        with self._session_factory() as session:
            return write_meeting(
                session,
                user_id=user_id,
                title=title,
                summary=insights.summary,
                segments=segments,
                tasks=insights.tasks,
                language=detected_language(response),
            )
