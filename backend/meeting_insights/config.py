from __future__ import annotations

from pathlib import Path
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings

from meeting_insights.errors import ConfigurationError


def _default_data_dir() -> Path:
    return Path.home() / ".meeting_insights" / "data"


class Settings(BaseSettings):
    app_name: str = "Meeting Insights"

    data_dir: Path = Field(default_factory=_default_data_dir)
    logs_dir: Path = Field(default_factory=lambda: Path.home() / ".meeting_insights" / "logs")

    # Empty means "use a SQLite file inside data_dir"
    database_url: Optional[str] = None

    # Transcription service (Deepgram-compatible)
    deepgram_api_key: Optional[str] = None
    deepgram_url: str = "https://api.deepgram.com/v1/listen"
    deepgram_model: str = "nova-2"
    transcription_timeout_seconds: float = 300.0

    # Insight generation service (Gemini-compatible)
    google_ai_api_key: Optional[str] = None
    gemini_base_url: str = "https://generativelanguage.googleapis.com"
    gemini_model: str = "gemini-1.5-flash"
    insight_timeout_seconds: float = 60.0

    max_audio_bytes: int = 200 * 1024 * 1024

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    class Config:
        env_prefix = "MI_"
        env_file = ".env"
        case_sensitive = False

    def ensure_dirs(self) -> None:
        for d in [self.data_dir, self.logs_dir]:
            d.mkdir(parents=True, exist_ok=True)

    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.data_dir / 'meeting_insights.db'}"

    def require_credentials(self) -> None:
        """Fail fast when a credential needed by the pipeline is missing."""
        missing = [
            name
            for name, value in (
                ("deepgram_api_key", self.deepgram_api_key),
                ("google_ai_api_key", self.google_ai_api_key),
            )
            if not (value or "").strip()
        ]
        if missing:
            raise ConfigurationError(
                "Missing required configuration: " + ", ".join(f"MI_{m.upper()}" for m in missing)
            )
