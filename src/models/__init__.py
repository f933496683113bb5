# Data models for DocuGen
from .scene import Scene, MediaType, estimate_duration
from .project import Project, ProjectStatus
from .jobs import AutomationJob, JobStatus, RenderAssets, RenderJob
from .stock import StockResult
from .subtitle import Subtitle
from .user import User
from .avatar import Avatar, AvatarGeneration, AvatarStyle
from .catalog import (
    DURATION_TIERS,
    LANGUAGES,
    SYSTEM_AVATARS,
    VIDEO_STYLES,
    VOICE_OPTIONS,
    DurationTier,
    VideoStyle,
    Voice,
    language_name,
)

__all__ = [
    "Scene",
    "MediaType",
    "estimate_duration",
    "Project",
    "ProjectStatus",
    "AutomationJob",
    "JobStatus",
    "RenderAssets",
    "RenderJob",
    "StockResult",
    "Subtitle",
    "User",
    "Avatar",
    "AvatarGeneration",
    "AvatarStyle",
    # Catalogs
    "DURATION_TIERS",
    "LANGUAGES",
    "SYSTEM_AVATARS",
    "VIDEO_STYLES",
    "VOICE_OPTIONS",
    "DurationTier",
    "VideoStyle",
    "Voice",
    "language_name",
]
