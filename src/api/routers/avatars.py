"""Avatar studio routes: presenter catalog, custom avatars and talking clips."""

from api.dependencies import get_avatar_service
from api.schemas import AvatarVideoRequest
from fastapi import APIRouter, Depends, File, Form, UploadFile
from services.avatar_service import AvatarService

router = APIRouter(tags=["Avatars"])


@router.get("/api/avatars", summary="List avatars")
async def list_avatars(service: AvatarService = Depends(get_avatar_service)) -> list[dict]:
    return [avatar.to_dict() for avatar in service.list_avatars()]


@router.post(
    "/api/avatars",
    status_code=201,
    summary="Create custom avatar",
    description=(
        "Upload a photo or short clip to use as a presenter. "
        "`legalConfirmed` must be true: the uploader owns the likeness."
    ),
    responses={400: {"description": "Invalid upload"}, 413: {"description": "File too large"}},
)
async def create_avatar(
    file: UploadFile = File(...),
    legal_confirmed: bool = Form(False, alias="legalConfirmed"),
    service: AvatarService = Depends(get_avatar_service),
) -> dict:
    data = await file.read()
    avatar = await service.create_user_avatar(
        file.filename or "upload",
        file.content_type or "",
        data,
        legal_confirmed,
    )
    return avatar.to_dict()


@router.post(
    "/api/avatars/{avatar_id}/video",
    summary="Generate talking avatar",
    description="Narrate the text with a prebuilt voice and return the avatar clip.",
    responses={
        400: {"description": "Empty text or unknown voice"},
        404: {"description": "Avatar not found"},
        502: {"description": "Narration failed"},
    },
)
async def generate_avatar_video(
    avatar_id: str,
    body: AvatarVideoRequest,
    service: AvatarService = Depends(get_avatar_service),
) -> dict:
    generation = await service.generate_talking_avatar(avatar_id, body.text, body.voice_id)
    return generation.to_dict()
