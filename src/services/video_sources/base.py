"""Base abstraction for stock video sources."""

from abc import ABC, abstractmethod

from models.stock import StockResult


class VideoSource(ABC):
    """Abstract base class for stock video sources (Pexels, Pixabay, mock catalog)."""

    @abstractmethod
    async def search_videos(self, phrase: str) -> list[StockResult]:
        """Search for videos matching the search phrase.

        Args:
            phrase: Search query string

        Returns:
            List of StockResult objects matching the search criteria

        Raises:
            UpstreamServiceError: If the provider could not be queried
        """

    @abstractmethod
    def get_source_name(self) -> str:
        """Get the provider name reported on results (e.g. "Pexels", "Mock")."""

    def is_configured(self) -> bool:
        """Check if this source has required configuration (API keys, etc.).

        Default implementation returns True (no config required).
        Override in subclasses that require API keys.

        Returns:
            True if source is properly configured and ready to use
        """
        return True
