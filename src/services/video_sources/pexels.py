"""Pexels video source for CC0-like stock footage."""

import asyncio
import logging
from typing import Optional

import aiohttp

from models.stock import StockResult
from services.video_sources.base import VideoSource
from utils.errors import NetworkError, RateLimitError, UpstreamServiceError

logger = logging.getLogger(__name__)


class PexelsVideoSource(VideoSource):
    """Pexels video source.

    API Documentation: https://www.pexels.com/api/documentation/
    """

    BASE_URL = "https://api.pexels.com/videos/search"

    def __init__(self, api_key: str, max_results: int = 5):
        """Initialize Pexels video source.

        Args:
            api_key: Pexels API key (empty disables the source)
            max_results: Results per search (max 80 per page)
        """
        self.api_key = api_key
        self.max_results = min(max_results, 80)  # Pexels API limit

    def get_source_name(self) -> str:
        return "Pexels"

    def is_configured(self) -> bool:
        """Check if this source has required configuration."""
        return bool(self.api_key)

    async def search_videos(self, phrase: str) -> list[StockResult]:
        """Search Pexels for videos matching the search phrase."""
        if not phrase.strip():
            return []

        logger.info(f"[Pexels] Searching for: '{phrase}'")

        headers = {"Authorization": self.api_key}
        params = {"query": phrase, "per_page": self.max_results}
        timeout = aiohttp.ClientTimeout(total=30)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.BASE_URL, headers=headers, params=params) as response:
                    if response.status == 429:
                        logger.warning("[Pexels] Rate limit exceeded")
                        raise RateLimitError("Pexels rate limit exceeded")

                    if response.status != 200:
                        logger.warning(f"[Pexels] API returned status {response.status}")
                        raise UpstreamServiceError(f"Pexels returned status {response.status}")

                    data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"[Pexels] Network error: {e!r}")
            raise NetworkError(f"Pexels network error: {e!r}") from e
        except ValueError as e:
            logger.error(f"[Pexels] Invalid JSON response: {e}")
            raise UpstreamServiceError(f"Pexels returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise UpstreamServiceError("Pexels returned an unexpected response body")

        results = []
        for video in data.get("videos") or []:
            if not isinstance(video, dict):
                continue
            result = self._parse_video(video)
            if result:
                results.append(result)

        logger.info(f"[Pexels] Found {len(results)} videos")
        return results

    def _parse_video(self, video: dict) -> Optional[StockResult]:
        """Parse a Pexels API video entry.

        The HD rendition is preferred; otherwise the first listed file is used.

        Args:
            video: Video dict from Pexels API

        Returns:
            StockResult or None if the entry has no usable file
        """
        video_id = video.get("id")
        video_files = video.get("video_files") or []
        if video_id is None or not video_files:
            return None

        hd_file = next((f for f in video_files if f.get("quality") == "hd"), None)
        video_url = (hd_file or {}).get("link") or video_files[0].get("link", "")
        if not video_url:
            return None

        return StockResult(
            id=str(video_id),
            thumbnail=video.get("image", ""),
            video_url=video_url,
            duration=int(video.get("duration", 0)),
            provider=self.get_source_name(),
        )
