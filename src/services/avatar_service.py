"""Avatar service - presenter catalog, custom avatars and talking-avatar videos.

Lip-sync rendering is simulated: after a processing delay the avatar's
preview clip (or a default clip) stands in for the generated video. The
narration track is real and comes from the TTS service.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import time
import uuid
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from models.avatar import Avatar, AvatarGeneration, AvatarStyle
from models.catalog import DEFAULT_AVATAR_VIDEO, SYSTEM_AVATARS, VOICE_IDS
from utils.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from services.tts_service import TTSService

logger = logging.getLogger(__name__)

ACCEPTED_MEDIA_PREFIXES = ("image/", "video/")


class AvatarService:
    """Lists presenter avatars, registers uploaded ones and renders talking clips."""

    def __init__(
        self,
        tts_service: Optional["TTSService"] = None,
        max_upload_mb: int = 10,
        upload_delay: float = 1.0,
        render_delay: float = 4.0,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """Initialize the service.

        Args:
            tts_service: Narration provider; without one, clips have no audio
            max_upload_mb: Size limit for avatar uploads
            upload_delay: Simulated processing time for a new avatar
            render_delay: Simulated lip-sync rendering time
            sleep: Awaitable sleep function (tests inject a fake)
        """
        self.tts = tts_service
        self.max_upload_mb = max_upload_mb
        self.upload_delay = upload_delay
        self.render_delay = render_delay
        self.sleep = sleep or asyncio.sleep
        self._custom_avatars: dict[str, Avatar] = {}

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    def list_avatars(self) -> list[Avatar]:
        """System presets first, then custom avatars in creation order."""
        return [*SYSTEM_AVATARS, *self._custom_avatars.values()]

    def get_avatar(self, avatar_id: str) -> Optional[Avatar]:
        for avatar in SYSTEM_AVATARS:
            if avatar.id == avatar_id:
                return avatar
        return self._custom_avatars.get(avatar_id)

    async def create_user_avatar(
        self,
        filename: str,
        content_type: str,
        data: bytes,
        legal_confirmed: bool,
    ) -> Avatar:
        """Register an uploaded photo or clip as a custom avatar.

        Raises:
            ValidationError: Missing ownership confirmation, empty or
                non-media upload, or (413) a file over the size limit
        """
        if not legal_confirmed:
            raise ValidationError("Please confirm legal ownership first.")
        if len(data) > self.max_upload_bytes:
            raise ValidationError(
                f"File too large: {filename} exceeds {self.max_upload_mb}MB",
                status_code=413,
            )
        if not data:
            raise ValidationError(f"Empty upload: {filename}")
        if not content_type.startswith(ACCEPTED_MEDIA_PREFIXES):
            raise ValidationError(f"Unsupported avatar file type: {content_type or 'unknown'}")

        logger.info(f"Creating avatar from {filename} ({len(data)} bytes, {content_type})")
        if self.upload_delay > 0:
            await self.sleep(self.upload_delay)

        encoded = base64.b64encode(data).decode("ascii")
        avatar = Avatar(
            id=f"user-avatar-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}",
            name="Custom Avatar",
            image_url=f"data:{content_type};base64,{encoded}",
            gender="Female",
            style=AvatarStyle.REALISTIC,
        )
        self._custom_avatars[avatar.id] = avatar
        return avatar

    async def generate_talking_avatar(self, avatar_id: str, text: str, voice_id: str) -> AvatarGeneration:
        """Narrate ``text`` and return the talking-avatar clip for it.

        Raises:
            ValidationError: Empty text or unknown voice
            NotFoundError: Unknown avatar id
            UpstreamServiceError: Narration failed
        """
        if not text or not text.strip():
            raise ValidationError("Script text is required")
        if voice_id not in VOICE_IDS:
            raise ValidationError(f"Unknown voice: {voice_id}")
        avatar = self.get_avatar(avatar_id)
        if avatar is None:
            raise NotFoundError(f"Avatar not found: {avatar_id}")

        generation = AvatarGeneration(
            id=f"avatar_gen_{int(time.time() * 1000)}",
            avatar_id=avatar.id,
            text=text,
            voice_id=voice_id,
        )
        logger.info(f"Generating avatar video for {avatar.id} with voice {voice_id} ({len(text)} chars)")

        if self.tts is not None:
            generation.audio_url = await self.tts.generate_speech(text, voice_id)

        if self.render_delay > 0:
            await self.sleep(self.render_delay)

        generation.video_url = avatar.preview_video_url or DEFAULT_AVATAR_VIDEO
        generation.status = "completed"
        return generation
