"""Local mock catalog used when no stock provider is configured."""

import logging
import random
from dataclasses import dataclass
from typing import Optional

from models.stock import StockResult
from services.video_sources.base import VideoSource

logger = logging.getLogger(__name__)

MOCK_DURATION = 15
SUGGESTION_COUNT = 3


@dataclass(frozen=True)
class CatalogVideo:
    id: int
    url: str
    tags: tuple[str, ...]


def _coverr(slug: str) -> str:
    return f"https://cdn.coverr.co/videos/{slug}/1080p.mp4"


MOCK_CATALOG: tuple[CatalogVideo, ...] = (
    CatalogVideo(1, _coverr("coverr-walking-in-a-coniferous-forest-5426"), ("forest", "nature", "trees", "walking")),
    CatalogVideo(2, _coverr("coverr-cloudy-sky-2751"), ("sky", "clouds", "blue", "weather")),
    CatalogVideo(3, _coverr("coverr-working-on-a-laptop-374"), ("technology", "computer", "work", "office", "coding")),
    CatalogVideo(4, _coverr("coverr-city-traffic-at-night-9092"), ("city", "traffic", "night", "urban")),
    CatalogVideo(5, _coverr("coverr-people-talking-in-a-meeting-5346"), ("business", "meeting", "people", "discussion")),
    CatalogVideo(6, _coverr("coverr-reading-a-book-in-a-library-5501"), ("education", "book", "library", "reading")),
    CatalogVideo(7, _coverr("coverr-robot-arm-4974"), ("tech", "robot", "future", "ai")),
    CatalogVideo(8, _coverr("coverr-waves-crashing-on-rocks-5444"), ("sea", "ocean", "waves", "water")),
)


class MockVideoSource(VideoSource):
    """Tag-matched search over a fixed catalog of demo clips.

    Matching is substring based: an entry matches when any of its tags occurs
    in the lowercased query. A query matching nothing still returns a random
    sample, flagged ``suggested``, so the stock library panel is never empty.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def get_source_name(self) -> str:
        return "Mock"

    def match(self, query: str) -> list[CatalogVideo]:
        """Return catalog entries with a tag contained in the query."""
        lower_query = query.lower()
        return [v for v in MOCK_CATALOG if any(tag in lower_query for tag in v.tags)]

    async def search_videos(self, phrase: str) -> list[StockResult]:
        matches = self.match(phrase)
        suggested = not matches
        if suggested:
            logger.debug(f"[Mock] No tag match for '{phrase}', returning suggestions")
            matches = self.rng.sample(MOCK_CATALOG, SUGGESTION_COUNT)

        return [
            StockResult(
                id=str(video.id),
                thumbnail="",
                video_url=video.url,
                duration=MOCK_DURATION,
                provider=self.get_source_name(),
                suggested=suggested,
            )
            for video in matches
        ]
