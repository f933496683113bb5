"""Video sources package for stock footage search."""

from services.video_sources.base import VideoSource
from services.video_sources.mock import MOCK_CATALOG, MockVideoSource
from services.video_sources.pexels import PexelsVideoSource
from services.video_sources.pixabay import PixabayVideoSource

__all__ = [
    "VideoSource",
    "MockVideoSource",
    "MOCK_CATALOG",
    "PexelsVideoSource",
    "PixabayVideoSource",
]
