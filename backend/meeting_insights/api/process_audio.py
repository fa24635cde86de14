from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from meeting_insights.config import Settings
from meeting_insights.deps import get_pipeline
from meeting_insights.services.pipeline import MeetingPipeline, ProcessResult, oversized_audio_error


router = APIRouter(tags=["process-audio"])

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

READ_CHUNK_BYTES = 1024 * 1024


def cors_headers(request: Request) -> Dict[str, str]:
    """CORS headers limited to the configured origins."""
    settings: Settings = request.app.state.settings
    headers = {"Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS)}
    if "*" in settings.cors_origins:
        headers["Access-Control-Allow-Origin"] = "*"
        return headers
    origin = request.headers.get("origin")
    if origin and origin in settings.cors_origins:
        headers["Access-Control-Allow-Origin"] = origin
    headers["Vary"] = "Origin"
    return headers


async def read_capped(audio: UploadFile, max_bytes: int) -> Optional[bytes]:
    """Read the upload, or return None as soon as it exceeds ``max_bytes``."""
    if audio.size is not None and audio.size > max_bytes:
        return None
    chunks = []
    total = 0
    while True:
        chunk = await audio.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


@router.options("/process-audio")
def process_audio_preflight(request: Request) -> Response:
    return Response(status_code=200, headers=cors_headers(request))


@router.post("/process-audio")
async def process_audio(
    request: Request,
    audio: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    userId: Optional[str] = Form(None),
    pipeline: MeetingPipeline = Depends(get_pipeline),
) -> JSONResponse:
    headers = cors_headers(request)
    max_bytes = request.app.state.settings.max_audio_bytes

    # Missing fields are not rejected here so they surface in the pipeline's failure shape
    audio_bytes = None
    content_type = None
    if audio is not None:
        audio_bytes = await read_capped(audio, max_bytes)
        if audio_bytes is None:
            result = ProcessResult(success=False, error=str(oversized_audio_error(max_bytes)))
            return JSONResponse(status_code=500, content=result.to_dict(), headers=headers)
        content_type = audio.content_type

    result = await run_in_threadpool(
        pipeline.process_audio,
        audio_bytes,
        title,
        userId,
        content_type,
    )
    if result.success:
        body = {**result.to_dict(), "message": "Audio processed successfully"}
        return JSONResponse(status_code=200, content=body, headers=headers)
    return JSONResponse(status_code=500, content=result.to_dict(), headers=headers)
