"""Avatar models for talking-presenter videos."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class AvatarStyle(str, Enum):
    REALISTIC = "realistic"
    ANIME = "anime"
    THREE_D = "3d"


@dataclass
class Avatar:
    """A presenter face: a system preset or one created from an upload."""

    id: str
    name: str
    image_url: str
    gender: str
    style: AvatarStyle = AvatarStyle.REALISTIC
    preview_video_url: Optional[str] = None

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "name": self.name,
            "imageUrl": self.image_url,
            "gender": self.gender,
            "style": self.style.value,
        }
        if self.preview_video_url:
            result["previewVideoUrl"] = self.preview_video_url
        return result


@dataclass
class AvatarGeneration:
    """Result of one talking-avatar generation."""

    id: str
    avatar_id: str
    text: str
    voice_id: str
    status: str = "processing"
    audio_url: Optional[str] = None
    video_url: Optional[str] = None
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "avatarId": self.avatar_id,
            "text": self.text,
            "voiceId": self.voice_id,
            "status": self.status,
            "createdAt": self.created_at,
        }
        if self.audio_url:
            result["audioUrl"] = self.audio_url
        if self.video_url:
            result["videoUrl"] = self.video_url
        return result
