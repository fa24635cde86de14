from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
import logging

from meeting_insights.config import Settings
from meeting_insights.logging_setup import configure_logging
from meeting_insights.models.base import build_engine, init_db
from meeting_insights.api.meetings import router as meetings_router
from meeting_insights.api.process_audio import CORS_ALLOW_HEADERS, router as process_audio_router
from meeting_insights.services.pipeline import MeetingPipeline


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    pipeline: Optional[MeetingPipeline] = None,
) -> FastAPI:
    settings = settings or Settings()
    engine = engine or build_engine(settings)

    app = FastAPI(title="Meeting Insights Backend", version="0.1.0")
    app.state.settings = settings
    app.state.engine = engine
    app.state.pipeline = pipeline or MeetingPipeline.from_settings(settings, engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    @app.on_event("startup")
    def _startup() -> None:
        configure_logging(settings)
        init_db(engine)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(process_audio_router)
    app.include_router(meetings_router)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):  # type: ignore[override]
        logging.getLogger("meeting_insights").exception("Unhandled exception")
        return JSONResponse(status_code=500, content={"error": str(exc)})

    return app


if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Meeting Insights Backend Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload (dev only)")

    args = parser.parse_args()

    uvicorn.run(
        "meeting_insights.main:create_app" if args.reload else create_app(),
        host=args.host,
        port=args.port,
        reload=args.reload,
        factory=args.reload,
    )
