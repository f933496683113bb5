"""Pydantic request/response models for the DocuGen API.

Wire names are camelCase to match the stored project format; Python-side
field names stay snake_case (either form is accepted on input).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from models.catalog import DEFAULT_VOICE, DURATION_TIERS, STYLE_IDS
from models.project import Project
from models.scene import Scene
from models.subtitle import Subtitle
from models.user import User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_style(value: str) -> str:
    if value not in STYLE_IDS:
        raise ValueError(f"Unknown style '{value}'. Valid styles: {sorted(STYLE_IDS)}")
    return value


def _check_duration(value: str) -> str:
    if value not in DURATION_TIERS:
        raise ValueError(f"Unknown duration '{value}'. Valid durations: {list(DURATION_TIERS)}")
    return value


# =============================================================================
# Response Models
# =============================================================================


class RootResponse(BaseModel):
    """Root endpoint response."""

    message: str
    version: str

    model_config = {"json_schema_extra": {"examples": [{"message": "DocuGen API", "version": "1.0.0"}]}}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    issues: list[str] = Field(default_factory=list)

    model_config = {"json_schema_extra": {"examples": [{"status": "healthy", "issues": []}]}}


class JobAcceptedResponse(BaseModel):
    """Returned with 202 when a background job starts."""

    job_id: str
    status: str


class DeleteResponse(BaseModel):
    deleted: bool


# =============================================================================
# Domain payloads
# =============================================================================


class SceneSchema(CamelModel):
    id: str
    text: str
    duration: Optional[float] = None
    media_type: str = "image"
    image_url: Optional[str] = None
    stock_video_url: Optional[str] = None
    audio_url: Optional[str] = None
    visual_prompt: Optional[str] = None
    is_generating_image: bool = False
    is_generating_audio: bool = False

    def to_scene(self) -> Scene:
        return Scene.from_dict(self.model_dump(by_alias=True, exclude_none=True))


class ProjectSchema(CamelModel):
    id: str
    user_id: str
    title: str = ""
    topic: str = ""
    input_language: str = "en"
    language: str = "en"
    style: str = "documentary"
    duration_level: str = "short"
    status: str = "draft"
    created_at: str = ""
    updated_at: Optional[str] = None
    scenes: list[SceneSchema] = Field(default_factory=list)
    script: Optional[str] = None
    background_music_url: Optional[str] = None

    def to_project(self) -> Project:
        return Project.from_dict(self.model_dump(by_alias=True, exclude_none=True))


class SubtitleSchema(CamelModel):
    id: str = ""
    start_time: float = Field(ge=0)
    end_time: float = Field(ge=0)
    text: str

    def to_subtitle(self) -> Subtitle:
        return Subtitle(
            id=self.id, start_time=self.start_time, end_time=self.end_time, text=self.text
        )


class UserSchema(CamelModel):
    id: str
    name: str
    email: str
    avatar_url: Optional[str] = None

    def to_user(self) -> User:
        return User(id=self.id, name=self.name, email=self.email, avatar_url=self.avatar_url)


# =============================================================================
# Request Models
# =============================================================================


class ScriptRequest(CamelModel):
    """Topic mode when ``topic`` is set, manual mode when ``script`` is set."""

    topic: Optional[str] = None
    script: Optional[str] = None
    input_language: str = "en"
    language: str = "en"
    style: str = "documentary"
    duration: str = "short"

    @field_validator("style")
    @classmethod
    def check_style(cls, value: str) -> str:
        return _check_style(value)

    @field_validator("duration")
    @classmethod
    def check_duration(cls, value: str) -> str:
        return _check_duration(value)

    @model_validator(mode="after")
    def require_input(self) -> "ScriptRequest":
        if not (self.topic and self.topic.strip()) and not (self.script and self.script.strip()):
            raise ValueError("Either topic or script is required")
        return self


class TTSRequest(CamelModel):
    text: str = Field(min_length=1)
    voice_id: str = DEFAULT_VOICE


class ImageRequest(CamelModel):
    prompt: str = Field(min_length=1)
    aspect_ratio: str = "16:9"


class SceneTextRequest(CamelModel):
    text: str


class KeywordsRequest(CamelModel):
    text: str


class ScenesRequest(CamelModel):
    scenes: list[SceneSchema]


class AutomationRequestBody(CamelModel):
    user_id: str
    topic: str = ""
    script: Optional[str] = None
    project_id: Optional[str] = None
    title: Optional[str] = None
    input_language: str = "en"
    language: str = "en"
    style: str = "documentary"
    duration: str = "short"
    voice: str = DEFAULT_VOICE

    @field_validator("style")
    @classmethod
    def check_style(cls, value: str) -> str:
        return _check_style(value)

    @field_validator("duration")
    @classmethod
    def check_duration(cls, value: str) -> str:
        return _check_duration(value)

    @model_validator(mode="after")
    def require_input(self) -> "AutomationRequestBody":
        if not self.topic.strip() and not (self.script and self.script.strip()):
            raise ValueError("Either topic or script is required")
        return self


class BatchAudioRequest(CamelModel):
    voice: str = DEFAULT_VOICE


class BatchVisualsRequest(CamelModel):
    style: Optional[str] = None


class RenderRequest(CamelModel):
    """Render either an inline project or a saved one by id."""

    project: Optional[ProjectSchema] = None
    project_id: Optional[str] = None

    @model_validator(mode="after")
    def require_project(self) -> "RenderRequest":
        if self.project is None and not self.project_id:
            raise ValueError("Either project or projectId is required")
        return self


class SubtitlesRequest(CamelModel):
    subtitles: list[SubtitleSchema]


class ParseSrtRequest(CamelModel):
    srt: str


class AvatarVideoRequest(CamelModel):
    text: str = Field(min_length=1)
    voice_id: str = DEFAULT_VOICE
