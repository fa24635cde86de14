"""Client for a Deepgram-compatible pre-recorded transcription endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from meeting_insights.config import Settings
from meeting_insights.errors import UpstreamServiceError


logger = logging.getLogger("meeting_insights.transcription")

SERVICE_NAME = "Transcription service"

DEFAULT_OPTIONS: Dict[str, str] = {
    "diarize": "true",
    "punctuate": "true",
    "smart_format": "true",
    "paragraphs": "true",
    "detect_language": "true",
}


class DeepgramClient:
    def __init__(
        self,
        api_key: str,
        url: str = "https://api.deepgram.com/v1/listen",
        model: Optional[str] = None,
        timeout: float = 300.0,
    ) -> None:
        self._api_key = api_key
        self._url = url
        self._model = model
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "DeepgramClient":
        return cls(
            api_key=settings.deepgram_api_key or "",
            url=settings.deepgram_url,
            model=settings.deepgram_model,
            timeout=settings.transcription_timeout_seconds,
        )

    def transcribe(self, audio: bytes, content_type: Optional[str] = None) -> Dict[str, Any]:
        params = dict(DEFAULT_OPTIONS)
        if self._model:
            params["model"] = self._model
        try:
            response = requests.post(
                self._url,
                params=params,
                headers={
                    "Authorization": f"Token {self._api_key}",
                    "Content-Type": content_type or "audio/wav",
                },
                data=audio,
                timeout=self._timeout,
            )
        except requests.Timeout as exc:
            raise UpstreamServiceError(SERVICE_NAME, f"timed out after {self._timeout}s") from exc
        except requests.RequestException as exc:
            raise UpstreamServiceError(SERVICE_NAME, f"request failed: {exc}") from exc

        if not response.ok:
            logger.error("Transcription error: %s - %s", response.status_code, response.text[:500])
            raise UpstreamServiceError(
                SERVICE_NAME, response.reason or str(response.status_code), status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamServiceError(SERVICE_NAME, "response was not valid JSON") from exc
        if not isinstance(data, dict):
            raise UpstreamServiceError(SERVICE_NAME, "unexpected response shape")
        return data
