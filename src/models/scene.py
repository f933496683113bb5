"""Scene model - one narrated, illustrated unit of a video."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Spoken pace used for duration estimates (~150 words per minute)
WORDS_PER_SECOND = 2.5
MIN_SCENE_DURATION = 3.0


class MediaType(str, Enum):
    """Which visual field of a scene is authoritative."""

    IMAGE = "image"
    VIDEO = "video"


def estimate_duration(text: str) -> float:
    """Estimate narration length in seconds from the word count.

    Args:
        text: Narration text (may be empty)

    Returns:
        ``max(3, words / 2.5)`` seconds
    """
    word_count = len(text.split()) if text else 0
    return max(MIN_SCENE_DURATION, word_count / WORDS_PER_SECOND)


@dataclass
class Scene:
    """A scene produced by script generation and enriched by later stages.

    ``media_type`` decides which visual is used: ``stock_video_url`` for video
    scenes, ``image_url`` for image scenes. Both may be set after toggling.
    """

    id: str
    text: str
    duration: float = MIN_SCENE_DURATION
    media_type: MediaType = MediaType.IMAGE
    image_url: Optional[str] = None
    stock_video_url: Optional[str] = None
    audio_url: Optional[str] = None
    visual_prompt: Optional[str] = None
    is_generating_image: bool = False
    is_generating_audio: bool = False

    def set_text(self, text: str) -> None:
        """Replace narration text and recompute the duration estimate."""
        self.text = text
        self.duration = estimate_duration(text)

    @property
    def visual_url(self) -> Optional[str]:
        """URL of the visual the consumer should show for this scene."""
        if self.media_type == MediaType.VIDEO:
            return self.stock_video_url
        return self.image_url

    def to_dict(self) -> dict:
        """Convert to the camelCase dictionary used for storage and the API."""
        result = {
            "id": self.id,
            "text": self.text,
            "duration": self.duration,
            "mediaType": self.media_type.value,
            "isGeneratingImage": self.is_generating_image,
            "isGeneratingAudio": self.is_generating_audio,
        }
        optional = {
            "imageUrl": self.image_url,
            "stockVideoUrl": self.stock_video_url,
            "audioUrl": self.audio_url,
            "visualPrompt": self.visual_prompt,
        }
        result.update({key: value for key, value in optional.items() if value is not None})
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "Scene":
        """Build a Scene from its camelCase dictionary form."""
        media_type = str(data.get("mediaType", MediaType.IMAGE.value)).lower()
        try:
            parsed_media_type = MediaType(media_type)
        except ValueError:
            parsed_media_type = MediaType.IMAGE

        text = str(data.get("text", ""))
        duration = data.get("duration")

        return cls(
            id=str(data["id"]),
            text=text,
            duration=float(duration) if duration is not None else estimate_duration(text),
            media_type=parsed_media_type,
            image_url=data.get("imageUrl"),
            stock_video_url=data.get("stockVideoUrl"),
            audio_url=data.get("audioUrl"),
            visual_prompt=data.get("visualPrompt"),
            is_generating_image=bool(data.get("isGeneratingImage", False)),
            is_generating_audio=bool(data.get("isGeneratingAudio", False)),
        )
