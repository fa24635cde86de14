"""Gemini client used to turn a transcript into summary and action items."""

from __future__ import annotations

import logging
from typing import Any

import requests

from meeting_insights.config import Settings
from meeting_insights.errors import UpstreamServiceError


logger = logging.getLogger("meeting_insights.insights")

SERVICE_NAME = "Insight generation service"


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com",
        timeout: float = 60.0,
        temperature: float = 0.2,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.google_ai_api_key or "",
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.insight_timeout_seconds,
        )

    def generate(self, prompt: str) -> str:
        """Send one prompt and return the first candidate's text ("" if none)."""
        model_name = self._model
        if not model_name.startswith("models/"):
            model_name = f"models/{model_name}"
        url = f"{self._base_url}/v1beta/{model_name}:generateContent"

        try:
            response = requests.post(
                url,
                params={"key": self._api_key},
                headers={"Content-Type": "application/json"},
                json={
                    "contents": [{"parts": [{"text": prompt}]}],
                    "generationConfig": {"temperature": self._temperature},
                },
                timeout=self._timeout,
            )
        except requests.Timeout as exc:
            raise UpstreamServiceError(SERVICE_NAME, f"timed out after {self._timeout}s") from exc
        except requests.RequestException as exc:
            raise UpstreamServiceError(SERVICE_NAME, f"request failed: {exc}") from exc

        if not response.ok:
            logger.error("Gemini error: %s - %s", response.status_code, response.text[:500])
            raise UpstreamServiceError(
                SERVICE_NAME, response.reason or str(response.status_code), status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamServiceError(SERVICE_NAME, "response was not valid JSON") from exc
        return _first_text(data)


def _first_text(data: Any) -> str:
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return ""
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return ""
    text = parts[0].get("text")
    return text if isinstance(text, str) else ""
