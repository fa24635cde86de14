"""Shared fixtures: in-memory store, fake upstream services, response builders."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from meeting_insights.config import Settings
from meeting_insights.errors import UpstreamServiceError
from meeting_insights.models.base import init_db
from meeting_insights.services.pipeline import MeetingPipeline


class FakeTranscriber:
    def __init__(self, response: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None) -> None:
        self.response = response if response is not None else {}
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def transcribe(self, audio: bytes, content_type: Optional[str] = None) -> Dict[str, Any]:
        self.calls.append({"audio": audio, "content_type": content_type})
        if self.error is not None:
            raise self.error
        return self.response


class FakeGenerator:
    def __init__(self, text: str = "", error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


def diarized_response(paragraphs: List[Dict[str, Any]], duration: Optional[float] = None, language: str = "en") -> Dict[str, Any]:
    """Build a transcription response with paragraph-level diarization.

    Each paragraph dict takes ``speaker``, ``start``, ``end`` and ``text``.
    """
    built = [
        {
            "speaker": p["speaker"],
            "start": p["start"],
            "end": p["end"],
            "sentences": [{"text": p["text"], "start": p["start"], "end": p["end"]}],
        }
        for p in paragraphs
    ]
    response: Dict[str, Any] = {
        "results": {
            "channels": [
                {
                    "detected_language": language,
                    "alternatives": [
                        {
                            "transcript": " ".join(p["text"] for p in paragraphs),
                            "paragraphs": {"paragraphs": built},
                        }
                    ],
                }
            ]
        }
    }
    if duration is not None:
        response["metadata"] = {"duration": duration}
    return response


def flat_response(transcript: str, duration: Optional[float] = None) -> Dict[str, Any]:
    response: Dict[str, Any] = {"results": {"channels": [{"alternatives": [{"transcript": transcript}]}]}}
    if duration is not None:
        response["metadata"] = {"duration": duration}
    return response


@pytest.fixture
def settings() -> Settings:
    return Settings(
        deepgram_api_key="dg-test-key",
        google_ai_api_key="gemini-test-key",
        database_url="sqlite://",
        _env_file=None,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Iterator[Session]:
    with Session(engine) as s:
        yield s


@pytest.fixture
def make_pipeline(engine, settings):
    def _make(
        transcriber: FakeTranscriber,
        generator: Optional[FakeGenerator] = None,
        authenticator=None,
    ) -> MeetingPipeline:
        return MeetingPipeline(
            transcriber=transcriber,
            insight_generator=generator or FakeGenerator(),
            session_factory=lambda: Session(engine),
            settings=settings,
            authenticator=authenticator,
        )

    return _make


@pytest.fixture
def unavailable_generator() -> FakeGenerator:
    return FakeGenerator(error=UpstreamServiceError("Insight generation service", "Service Unavailable", 503))
