"""Project aggregate - a user's video with its ordered scenes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from models.scene import Scene


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    DRAFT = "draft"
    PROCESSING = "processing"
    COMPLETED = "completed"


@dataclass
class Project:
    """Aggregate root owning its scene list.

    ``created_at`` is set on first save and preserved afterwards;
    ``updated_at`` is refreshed on every save (both ISO-8601 strings).
    """

    id: str
    user_id: str
    title: str
    topic: str
    language: str = "en"
    input_language: str = "en"
    style: str = "documentary"
    duration_level: str = "short"
    status: ProjectStatus = ProjectStatus.DRAFT
    created_at: str = ""
    updated_at: Optional[str] = None
    scenes: list[Scene] = field(default_factory=list)
    script: Optional[str] = None
    background_music_url: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to the camelCase dictionary used for storage and the API."""
        result = {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "topic": self.topic,
            "inputLanguage": self.input_language,
            "language": self.language,
            "style": self.style,
            "durationLevel": self.duration_level,
            "status": self.status.value,
            "createdAt": self.created_at,
            "scenes": [scene.to_dict() for scene in self.scenes],
        }
        optional = {
            "updatedAt": self.updated_at,
            "script": self.script,
            "backgroundMusicUrl": self.background_music_url,
        }
        result.update({key: value for key, value in optional.items() if value is not None})
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        """Build a Project from its camelCase dictionary form."""
        try:
            status = ProjectStatus(data.get("status", ProjectStatus.DRAFT.value))
        except ValueError:
            status = ProjectStatus.DRAFT

        return cls(
            id=str(data["id"]),
            user_id=str(data.get("userId", "")),
            title=str(data.get("title", "")),
            topic=str(data.get("topic", "")),
            language=str(data.get("language", "en")),
            input_language=str(data.get("inputLanguage") or data.get("language", "en")),
            style=str(data.get("style", "documentary")),
            duration_level=str(data.get("durationLevel", "short")),
            status=status,
            created_at=str(data.get("createdAt", "")),
            updated_at=data.get("updatedAt"),
            scenes=[Scene.from_dict(scene) for scene in data.get("scenes", [])],
            script=data.get("script"),
            background_music_url=data.get("backgroundMusicUrl"),
        )
