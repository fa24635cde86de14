from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from meeting_insights.config import Settings


_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(settings: Settings) -> None:
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    formatter = logging.Formatter(fmt=_FORMAT)

    if not any(getattr(h, "name", None) == "meeting_insights_stream" for h in root.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        stream_handler.name = "meeting_insights_stream"
        root.addHandler(stream_handler)

    if any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        return
    try:
        settings.logs_dir.mkdir(parents=True, exist_ok=True)
        log_file = settings.logs_dir / "backend.log"
        handler = RotatingFileHandler(str(log_file), maxBytes=5_000_000, backupCount=2)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    except OSError:
        logging.getLogger("meeting_insights").warning(
            "Could not open log file in %s; logging to stream only", settings.logs_dir
        )
