"""Tests for the HTTP clients of the transcription and insight services."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from meeting_insights.errors import UpstreamServiceError
from meeting_insights.services.insight_client import GeminiClient
from meeting_insights.services.transcription_client import DeepgramClient


def _response(status_code: int = 200, payload=None, reason: str = "OK", json_error: bool = False) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    response.text = str(payload)
    if json_error:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = payload
    return response


class TestDeepgramClient:
    def test_posts_audio_with_diarization_options(self) -> None:
        client = DeepgramClient(api_key="dg-key", url="https://dg.example/v1/listen", model="nova-2", timeout=12)
        with patch("meeting_insights.services.transcription_client.requests.post") as post:
            post.return_value = _response(payload={"results": {}})

            data = client.transcribe(b"audio-bytes", "audio/webm")

        assert data == {"results": {}}
        args, kwargs = post.call_args
        assert args == ("https://dg.example/v1/listen",)
        assert kwargs["data"] == b"audio-bytes"
        assert kwargs["timeout"] == 12
        assert kwargs["headers"] == {"Authorization": "Token dg-key", "Content-Type": "audio/webm"}
        for option in ("diarize", "punctuate", "smart_format", "paragraphs", "detect_language"):
            assert kwargs["params"][option] == "true"
        assert kwargs["params"]["model"] == "nova-2"

    def test_defaults_content_type_to_wav(self) -> None:
        with patch("meeting_insights.services.transcription_client.requests.post") as post:
            post.return_value = _response(payload={})
            DeepgramClient(api_key="k").transcribe(b"a")

        assert post.call_args.kwargs["headers"]["Content-Type"] == "audio/wav"

    def test_error_status_raises(self) -> None:
        with patch("meeting_insights.services.transcription_client.requests.post") as post:
            post.return_value = _response(status_code=401, payload={"err": "bad key"}, reason="Unauthorized")
            with pytest.raises(UpstreamServiceError) as excinfo:
                DeepgramClient(api_key="k").transcribe(b"a")

        assert excinfo.value.status_code == 401
        assert "Unauthorized" in str(excinfo.value)

    def test_timeout_raises(self) -> None:
        with patch("meeting_insights.services.transcription_client.requests.post") as post:
            post.side_effect = requests.Timeout("slow")
            with pytest.raises(UpstreamServiceError, match="timed out"):
                DeepgramClient(api_key="k", timeout=1).transcribe(b"a")

    def test_non_json_body_raises(self) -> None:
        with patch("meeting_insights.services.transcription_client.requests.post") as post:
            post.return_value = _response(json_error=True)
            with pytest.raises(UpstreamServiceError, match="not valid JSON"):
                DeepgramClient(api_key="k").transcribe(b"a")

    def test_from_settings(self, settings) -> None:
        client = DeepgramClient.from_settings(settings)

        assert client._api_key == "dg-test-key"
        assert client._timeout == settings.transcription_timeout_seconds


class TestGeminiClient:
    def test_returns_first_candidate_text(self) -> None:
        payload = {"candidates": [{"content": {"parts": [{"text": '{"summary": "s"}'}]}}]}
        client = GeminiClient(api_key="g-key", model="gemini-1.5-flash", base_url="https://gen.example/", timeout=5)
        with patch("meeting_insights.services.insight_client.requests.post") as post:
            post.return_value = _response(payload=payload)

            text = client.generate("prompt text")

        assert text == '{"summary": "s"}'
        args, kwargs = post.call_args
        assert args == ("https://gen.example/v1beta/models/gemini-1.5-flash:generateContent",)
        assert kwargs["params"] == {"key": "g-key"}
        assert kwargs["json"]["contents"] == [{"parts": [{"text": "prompt text"}]}]
        assert kwargs["timeout"] == 5

    def test_missing_candidates_yield_empty_text(self) -> None:
        with patch("meeting_insights.services.insight_client.requests.post") as post:
            post.return_value = _response(payload={"candidates": []})

            assert GeminiClient(api_key="k").generate("p") == ""

    def test_error_status_raises(self) -> None:
        with patch("meeting_insights.services.insight_client.requests.post") as post:
            post.return_value = _response(status_code=503, payload={}, reason="Service Unavailable")
            with pytest.raises(UpstreamServiceError) as excinfo:
                GeminiClient(api_key="k").generate("p")

        assert excinfo.value.status_code == 503

    def test_connection_error_raises(self) -> None:
        with patch("meeting_insights.services.insight_client.requests.post") as post:
            post.side_effect = requests.ConnectionError("refused")
            with pytest.raises(UpstreamServiceError, match="request failed"):
                GeminiClient(api_key="k").generate("p")
