"""AI service for script text and stock keywords using Google GenAI."""

import asyncio
import logging
from typing import Optional

from google.genai import Client
from google.genai import types

from services.prompts import KEYWORD_EXTRACTOR_V1
from utils.errors import ConfigurationError, NetworkError, RateLimitError, UpstreamServiceError

logger = logging.getLogger(__name__)

DEFAULT_KEYWORD = "video"
FALLBACK_KEYWORD = "general"


def classify_upstream_error(error: Exception, service: str) -> UpstreamServiceError:
    """Map an arbitrary client exception onto the upstream error taxonomy.

    Args:
        error: Exception raised by a third-party client
        service: Human-readable service name for the message

    Returns:
        RateLimitError, NetworkError or a plain UpstreamServiceError
    """
    message = str(error).lower()
    if "rate limit" in message or "429" in message or "resource_exhausted" in message:
        return RateLimitError(f"{service} rate limit hit: {error}")
    if "network" in message or "connection" in message or "timeout" in message:
        return NetworkError(f"{service} network error: {error}")
    return UpstreamServiceError(f"{service} request failed: {error}")


class AIService:
    """Service for Gemini text generation (scripts, keywords).

    The underlying client is created on first use so a missing API key only
    fails the call that needs it.
    """

    def __init__(self, api_key: str, model_name: str = "gemini-3-flash-preview"):
        """Initialize the service.

        Args:
            api_key: Google GenAI API key
            model_name: Gemini model to use
        """
        self.api_key = api_key
        self.model_name = model_name
        self._client: Optional[Client] = None

    @property
    def client(self) -> Client:
        """Lazily create the Google GenAI client."""
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError("GEMINI_API_KEY missing")
            self._client = Client(api_key=self.api_key)
            logger.info(f"Initialized AI service with model: {self.model_name}")
        return self._client

    async def generate_text(
        self,
        prompt: str,
        temperature: float = 0.7,
        json_output: bool = False,
    ) -> str:
        """Run a single text generation call.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature
            json_output: Ask Gemini for an application/json response

        Returns:
            Response text ("" when the model returned nothing)

        Raises:
            ConfigurationError: If no API key is configured
            UpstreamServiceError: If the API call fails
        """
        client = self.client
        config = types.GenerateContentConfig(
            temperature=temperature,
            response_mime_type="application/json" if json_output else None,
        )

        try:
            response = await asyncio.to_thread(
                client.models.generate_content,
                model=self.model_name,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            logger.error(f"Gemini text generation failed: {e}")
            raise classify_upstream_error(e, "Gemini") from e

        return response.text or ""

    async def extract_keywords(self, text: str) -> str:
        """Extract 1-2 English stock-search keywords from scene text.

        Upstream failures degrade to a generic keyword instead of failing the
        caller; a missing API key still raises.

        Args:
            text: Scene narration in any language

        Returns:
            Space-separated keywords
        """
        prompt = KEYWORD_EXTRACTOR_V1.format(text=text)
        try:
            keywords = await self.generate_text(prompt, temperature=0.2)
        except UpstreamServiceError as e:
            logger.error(f"Keyword extraction failed: {e}")
            return FALLBACK_KEYWORD

        keywords = " ".join(keywords.split())
        return keywords or DEFAULT_KEYWORD
