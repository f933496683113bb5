"""Generation routes: script, speech, images and the option catalogs."""

import logging

from api.dependencies import get_image_gen_service, get_script_generator, get_tts_service
from api.schemas import ImageRequest, ScriptRequest, TTSRequest
from fastapi import APIRouter, Depends
from models.catalog import DURATION_TIERS, LANGUAGES, VIDEO_STYLES, VOICE_OPTIONS
from production.script_generator import ScriptGenerator
from services.image_generation_service import ImageGenerationService
from services.tts_service import TTSService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Generation"])


@router.post(
    "/api/script",
    summary="Generate script",
    description=(
        "Generate scenes from a topic, or split a manual script into scenes. "
        "Malformed AI output falls back to one scene per input line."
    ),
    responses={400: {"description": "Invalid parameters"}, 503: {"description": "Gemini not configured"}},
)
async def generate_script(
    body: ScriptRequest,
    generator: ScriptGenerator = Depends(get_script_generator),
) -> dict:
    if body.script and body.script.strip():
        scenes = await generator.parse_manual_script(body.script, body.input_language, body.language)
    else:
        scenes = await generator.generate_script(
            body.topic or "", body.input_language, body.language, body.style, body.duration
        )
    return {"scenes": [scene.to_dict() for scene in scenes]}


@router.post(
    "/api/tts",
    summary="Generate speech",
    description="Synthesize narration with a prebuilt voice; returns a data URL.",
    responses={400: {"description": "Unknown voice"}, 502: {"description": "Upstream failure"}},
)
async def generate_speech(
    body: TTSRequest,
    tts: TTSService = Depends(get_tts_service),
) -> dict:
    audio_url = await tts.generate_speech(body.text, body.voice_id)
    return {"audioUrl": audio_url}


@router.post(
    "/api/images",
    summary="Generate image",
    description="Generate one image with Gemini; returns a data URL.",
    responses={400: {"description": "Invalid aspect ratio"}, 502: {"description": "Upstream failure"}},
)
async def generate_image(
    body: ImageRequest,
    images: ImageGenerationService = Depends(get_image_gen_service),
) -> dict:
    image_url = await images.generate_image(body.prompt, body.aspect_ratio)
    return {"imageUrl": image_url}


@router.get("/api/voices", summary="List voices")
async def list_voices() -> list[dict]:
    return [
        {"id": v.id, "name": v.name, "gender": v.gender, "description": v.description}
        for v in VOICE_OPTIONS
    ]


@router.get("/api/styles", summary="List video styles and duration tiers")
async def list_styles() -> dict:
    return {
        "styles": [
            {"id": s.id, "label": s.label, "description": s.description} for s in VIDEO_STYLES
        ],
        "durations": [
            {"id": tier_id, "sceneCount": tier.scene_count, "detailLevel": tier.detail_level}
            for tier_id, tier in DURATION_TIERS.items()
        ],
    }


@router.get("/api/languages", summary="List languages")
async def list_languages() -> list[dict]:
    return [{"code": code, "name": name} for code, name in LANGUAGES.items()]
