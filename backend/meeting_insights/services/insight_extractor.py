from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Protocol
import json
import logging

from meeting_insights.errors import UpstreamServiceError
from meeting_insights.services.transcript_normalizer import TranscriptSegment


logger = logging.getLogger("meeting_insights.insights")

MIN_TRANSCRIPT_CHARS = 10

DEFAULT_SUMMARY = "Meeting analysis completed successfully."
NO_SPEECH_SUMMARY = "No speech detected in the recording."
UNAVAILABLE_SUMMARY = "Summary temporarily unavailable. The transcript was saved and can be reviewed below."
INVALID_FORMAT_SUMMARY = "Summary could not be generated: the analysis returned an invalid format."


class InsightGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


@dataclass
class TaskItem:
    task: str
    owner: Optional[str] = None
    deadline: Optional[str] = None


@dataclass
class Insights:
    summary: str = DEFAULT_SUMMARY
    tasks: List[TaskItem] = field(default_factory=list)


def render_transcript(segments: Iterable[TranscriptSegment]) -> str:
    return "\n\n".join(f"{seg.speaker_label}: {seg.text}" for seg in segments)


def build_prompt(transcript_text: str) -> str:
    return (
        "Analyze this meeting transcript and extract:\n"
        "1. A concise summary (2-3 sentences)\n"
        "2. Action items/tasks with owners and deadlines if mentioned\n\n"
        "Transcript:\n"
        f"{transcript_text}\n\n"
        "Respond with valid JSON only, in exactly this format:\n"
        "{\n"
        '  "summary": "Brief meeting summary...",\n'
        '  "tasks": [\n'
        '    {"task": "Task description", "owner": "Person name or null", "deadline": "Deadline or null"}\n'
        "  ]\n"
        "}\n"
    )


def extract_insights(transcript_text: str, generator: InsightGenerator) -> Insights:
    """Ask the generator for summary and tasks; never raises on bad output.

    Short transcripts skip the call entirely. Service errors, missing JSON
    and unparseable JSON each degrade to a fallback summary with no tasks.
    """
    if len((transcript_text or "").strip()) < MIN_TRANSCRIPT_CHARS:
        return Insights(summary=NO_SPEECH_SUMMARY)

    try:
        text = generator.generate(build_prompt(transcript_text))
    except UpstreamServiceError as exc:
        logger.warning("Insight generation unavailable: %s", exc)
        return Insights(summary=UNAVAILABLE_SUMMARY)

    payload = _parse_json_object(text)
    if payload is None:
        logger.warning("Insight generation returned no parseable JSON object")
        return Insights(summary=INVALID_FORMAT_SUMMARY)
    return merge_insights(payload)


def merge_insights(payload: dict) -> Insights:
    """Overlay the known keys of an untrusted payload onto the defaults."""
    insights = Insights()
    summary = payload.get("summary")
    if isinstance(summary, str) and summary.strip():
        insights.summary = summary.strip()
    tasks = payload.get("tasks")
    if isinstance(tasks, list):
        insights.tasks = [t for t in (_task_from_raw(raw) for raw in tasks) if t is not None]
    return insights


def _parse_json_object(text: str) -> Optional[dict]:
    t = (text or "").strip()
    start = t.find("{")
    end = t.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        parsed = json.loads(t[start : end + 1])
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def _task_from_raw(raw: Any) -> Optional[TaskItem]:
    if not isinstance(raw, dict):
        return None
    task = raw.get("task")
    if not isinstance(task, str) or not task.strip():
        return None
    return TaskItem(task=task.strip(), owner=_optional_text(raw.get("owner")), deadline=_optional_text(raw.get("deadline")))


def _optional_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    # Models sometimes echo the placeholder as a string
    if not value or value.lower() == "null":
        return None
    return value
