"""Pixabay video source for CC0-like stock footage."""

import asyncio
import logging
from typing import Optional

import aiohttp

from models.stock import StockResult
from services.video_sources.base import VideoSource
from utils.errors import NetworkError, RateLimitError, UpstreamServiceError

logger = logging.getLogger(__name__)

THUMBNAIL_URL = "https://i.vimeocdn.com/video/{picture_id}_640x360.jpg"


class PixabayVideoSource(VideoSource):
    """Pixabay video source.

    API Documentation: https://pixabay.com/api/docs/
    """

    BASE_URL = "https://pixabay.com/api/videos/"

    def __init__(self, api_key: str):
        self.api_key = api_key

    def get_source_name(self) -> str:
        return "Pixabay"

    def is_configured(self) -> bool:
        """Check if this source has required configuration."""
        return bool(self.api_key)

    async def search_videos(self, phrase: str) -> list[StockResult]:
        """Search Pixabay for videos matching the search phrase."""
        if not phrase.strip():
            return []

        logger.info(f"[Pixabay] Searching for: '{phrase}'")

        params = {"key": self.api_key, "q": phrase}
        timeout = aiohttp.ClientTimeout(total=30)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.BASE_URL, params=params) as response:
                    if response.status == 429:
                        logger.warning("[Pixabay] Rate limit exceeded")
                        raise RateLimitError("Pixabay rate limit exceeded")

                    if response.status != 200:
                        logger.warning(f"[Pixabay] API returned status {response.status}")
                        raise UpstreamServiceError(f"Pixabay returned status {response.status}")

                    data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"[Pixabay] Network error: {e!r}")
            raise NetworkError(f"Pixabay network error: {e!r}") from e
        except ValueError as e:
            logger.error(f"[Pixabay] Invalid JSON response: {e}")
            raise UpstreamServiceError(f"Pixabay returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise UpstreamServiceError("Pixabay returned an unexpected response body")

        results = []
        for video in data.get("hits") or []:
            if not isinstance(video, dict):
                continue
            result = self._parse_video(video)
            if result:
                results.append(result)

        logger.info(f"[Pixabay] Found {len(results)} videos")
        return results

    def _parse_video(self, video: dict) -> Optional[StockResult]:
        """Parse a Pixabay API hit.

        Pixabay has no direct thumbnail field for videos, so it is built from
        ``picture_id``. The large rendition is preferred over medium.
        """
        video_id = video.get("id")
        videos_dict = video.get("videos") or {}
        if video_id is None or not videos_dict:
            return None

        video_url = (videos_dict.get("large") or {}).get("url") or (
            videos_dict.get("medium") or {}
        ).get("url")
        if not video_url:
            return None

        picture_id = video.get("picture_id", "")
        return StockResult(
            id=str(video_id),
            thumbnail=THUMBNAIL_URL.format(picture_id=picture_id) if picture_id else "",
            video_url=video_url,
            duration=int(video.get("duration", 0)),
            provider=self.get_source_name(),
        )
