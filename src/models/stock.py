"""Stock media search result model."""

from dataclasses import dataclass


@dataclass
class StockResult:
    """Ephemeral stock video search result (never persisted).

    ``suggested`` marks random catalog picks returned when the mock catalog
    had no tag match, as opposed to real matches.
    """

    id: str
    thumbnail: str
    video_url: str
    duration: int  # in seconds
    provider: str  # Pexels, Pixabay or Mock
    suggested: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "thumbnail": self.thumbnail,
            "videoUrl": self.video_url,
            "duration": self.duration,
            "provider": self.provider,
            "suggested": self.suggested,
        }
