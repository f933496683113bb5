"""Stock media service: keyword extraction, provider search and background music.

Search precedence is fixed: Pexels (if an API key is configured), then
Pixabay (if configured), then the local mock catalog. A configured provider
that raises is logged and skipped; a configured provider that answers with no
results ends the search, so callers can fall back to AI imagery.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from models.stock import StockResult
from services.video_sources import (
    MockVideoSource,
    PexelsVideoSource,
    PixabayVideoSource,
    VideoSource,
)

if TYPE_CHECKING:
    from services.ai_service import AIService

logger = logging.getLogger(__name__)

MUSIC_BASE_URL = "https://cdn.pixabay.com/download/audio"

BACKGROUND_MUSIC = {
    "documentary": f"{MUSIC_BASE_URL}/2022/03/24/audio_14233a73df.mp3?filename=cinematic-atmosphere-score-2-21140.mp3",
    "explainer": f"{MUSIC_BASE_URL}/2022/05/27/audio_1808fbf07a.mp3?filename=music-for-video-118248.mp3",
    "educational": f"{MUSIC_BASE_URL}/2022/01/18/audio_d0a13f69d2.mp3?filename=tech-soft-10255.mp3",
    "storytelling": f"{MUSIC_BASE_URL}/2022/10/25/audio_5113c23363.mp3?filename=emotional-piano-124967.mp3",
    "news": f"{MUSIC_BASE_URL}/2022/03/23/audio_07b2a04be3.mp3?filename=news-intro-11226.mp3",
}


def get_background_music(style: str) -> str:
    """Return the background track for a video style (documentary by default)."""
    return BACKGROUND_MUSIC.get(style, BACKGROUND_MUSIC["documentary"])


class StockMediaService:
    """Finds stock footage for scene narration."""

    def __init__(
        self,
        ai_service: "AIService",
        sources: Optional[list[VideoSource]] = None,
        fallback: Optional[VideoSource] = None,
    ):
        """Initialize the service.

        Args:
            ai_service: AIService used for keyword extraction
            sources: Ordered live providers; unconfigured ones are skipped
            fallback: Source used when no live provider answered (mock catalog)
        """
        self.ai_service = ai_service
        self.sources = sources or []
        self.fallback = fallback or MockVideoSource()

        configured = [s.get_source_name() for s in self.sources if s.is_configured()]
        if configured:
            logger.info(f"Stock media providers: {', '.join(configured)}")
        else:
            logger.info("Stock media: no Pexels or Pixabay API keys, using mock catalog")

    @classmethod
    def from_config(cls, config: dict, ai_service: "AIService") -> "StockMediaService":
        """Build the service with the Pexels -> Pixabay -> mock chain."""
        return cls(
            ai_service=ai_service,
            sources=[
                PexelsVideoSource(config.get("pexels_api_key", "")),
                PixabayVideoSource(config.get("pixabay_api_key", "")),
            ],
        )

    async def extract_keywords(self, text: str) -> str:
        """Extract 1-2 English search keywords from scene text."""
        return await self.ai_service.extract_keywords(text)

    async def search_videos(self, query: str) -> list[StockResult]:
        """Search stock footage following the provider precedence.

        Args:
            query: Search keywords

        Returns:
            Results from the first configured provider that answered, or
            from the mock catalog
        """
        for source in self.sources:
            if not source.is_configured():
                continue
            try:
                results = await source.search_videos(query)
            except Exception as e:
                logger.warning(f"Search failed for source '{source.get_source_name()}': {e!r}")
                continue
            logger.debug(f"Source '{source.get_source_name()}' returned {len(results)} videos")
            return results

        return await self.fallback.search_videos(query)

    async def find_video_for_text(self, text: str) -> Optional[str]:
        """Pick the first stock video for a piece of narration.

        Returns:
            Video URL, or None when the search came back empty
        """
        keywords = await self.extract_keywords(text)
        results = await self.search_videos(keywords)
        if not results:
            logger.info(f"No stock footage for keywords '{keywords}'")
            return None
        return results[0].video_url

    def get_background_music(self, style: str) -> str:
        return get_background_music(style)
