from __future__ import annotations

from typing import Iterator

from fastapi import Request
from sqlmodel import Session

from meeting_insights.services.pipeline import MeetingPipeline


def get_session(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session


def get_pipeline(request: Request) -> MeetingPipeline:
    return request.app.state.pipeline
