"""Subtitle routes: SRT export/import and transcription uploads."""

from api.dependencies import get_subtitle_service
from api.schemas import ParseSrtRequest, SubtitlesRequest
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import PlainTextResponse
from services.subtitle_service import SubtitleService, generate_srt, parse_srt

router = APIRouter(tags=["Subtitles"])


@router.post(
    "/api/subtitles/srt",
    response_class=PlainTextResponse,
    summary="Export SRT",
    description="Render subtitle cues as SRT text.",
)
async def export_srt(body: SubtitlesRequest) -> str:
    return generate_srt([sub.to_subtitle() for sub in body.subtitles])


@router.post("/api/subtitles/parse", summary="Parse SRT")
async def import_srt(body: ParseSrtRequest) -> list[dict]:
    return [sub.to_dict() for sub in parse_srt(body.srt)]


@router.post(
    "/api/subtitles/transcribe",
    summary="Transcribe video",
    description="Upload a video and receive timed subtitle cues.",
    responses={413: {"description": "File too large"}},
)
async def transcribe(
    file: UploadFile = File(...),
    service: SubtitleService = Depends(get_subtitle_service),
) -> list[dict]:
    size = file.size
    if size is None:
        size = len(await file.read())
    subtitles = await service.transcribe_video(file.filename or "upload", size)
    return [sub.to_dict() for sub in subtitles]
