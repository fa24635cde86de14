from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class TranscriptSegment:
    speaker_label: str
    text: str
    start_seconds: float
    end_seconds: float


def normalize_transcription(response: Any, duration: Optional[float] = None) -> List[TranscriptSegment]:
    """Turn a transcription response into ordered, speaker-labelled segments.

    Diarized paragraphs map one-to-one onto segments. Without paragraphs the
    flat transcript becomes a single "Speaker 0" segment spanning the audio.
    No usable text yields an empty list, which callers read as "no speech".
    Blank segments are dropped; the order of the rest is preserved.
    """
    alternative = _first_alternative(response)
    if alternative is None:
        return []

    paragraphs = _paragraphs(alternative)
    if paragraphs:
        segments = [_segment_from_paragraph(p) for p in paragraphs]
        return [s for s in segments if s.text]

    transcript = alternative.get("transcript")
    if isinstance(transcript, str) and transcript.strip():
        end = duration if duration is not None else response_duration(response)
        return [
            TranscriptSegment(
                speaker_label="Speaker 0",
                text=transcript.strip(),
                start_seconds=0.0,
                end_seconds=float(end or 0.0),
            )
        ]
    return []


def detected_language(response: Any) -> Optional[str]:
    channel = _first_channel(response)
    if channel is None:
        return None
    language = channel.get("detected_language")
    return language if isinstance(language, str) and language else None


def response_duration(response: Any) -> Optional[float]:
    if not isinstance(response, dict):
        return None
    metadata = response.get("metadata")
    if not isinstance(metadata, dict):
        return None
    return _as_seconds(metadata.get("duration"))


def speaker_label(speaker: Any) -> str:
    # bool is an int subclass but never a speaker index
    if isinstance(speaker, int) and not isinstance(speaker, bool) and speaker >= 0:
        return f"Speaker {speaker}"
    return "Unknown"


def _first_channel(response: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(response, dict):
        return None
    results = response.get("results")
    if not isinstance(results, dict):
        return None
    channels = results.get("channels")
    if not isinstance(channels, list) or not channels or not isinstance(channels[0], dict):
        return None
    return channels[0]


def _first_alternative(response: Any) -> Optional[Dict[str, Any]]:
    channel = _first_channel(response)
    if channel is None:
        return None
    alternatives = channel.get("alternatives")
    if not isinstance(alternatives, list) or not alternatives or not isinstance(alternatives[0], dict):
        return None
    return alternatives[0]


def _paragraphs(alternative: Dict[str, Any]) -> List[Dict[str, Any]]:
    block = alternative.get("paragraphs")
    if not isinstance(block, dict):
        return []
    items = block.get("paragraphs")
    if not isinstance(items, list):
        return []
    return [p for p in items if isinstance(p, dict)]


def _segment_from_paragraph(paragraph: Dict[str, Any]) -> TranscriptSegment:
    sentences = paragraph.get("sentences")
    texts: List[str] = []
    if isinstance(sentences, list):
        for sentence in sentences:
            text = sentence.get("text") if isinstance(sentence, dict) else None
            if isinstance(text, str) and text.strip():
                texts.append(text.strip())
    start = _as_seconds(paragraph.get("start")) or 0.0
    end = _as_seconds(paragraph.get("end"))
    return TranscriptSegment(
        speaker_label=speaker_label(paragraph.get("speaker")),
        text=" ".join(texts),
        start_seconds=start,
        end_seconds=max(start, end if end is not None else start),
    )


def _as_seconds(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)
