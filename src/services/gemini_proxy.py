"""Stateless relay to the Gemini generateContent endpoint.

Requests are forwarded as-is and the upstream JSON is handed back verbatim.
No retries, no rate limiting, no caching.
"""

import logging
from typing import Any, Optional

import httpx

from utils.errors import ConfigurationError, UpstreamServiceError, ValidationError

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


def build_contents(body: dict[str, Any]) -> list:
    """Return the ``contents`` to forward for a ``{prompt}`` or ``{contents}`` body.

    Raises:
        ValidationError: If the body has neither field
    """
    contents = body.get("contents")
    if contents:
        return contents
    prompt = body.get("prompt")
    if not prompt:
        raise ValidationError("Prompt missing")
    return [{"parts": [{"text": prompt}]}]


class GeminiProxy:
    """Forwards text-generation requests to Gemini."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-1.5-flash",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.client = client or httpx.AsyncClient(timeout=60.0)

    async def forward(self, body: dict[str, Any]) -> Any:
        """Relay a request body and return the upstream JSON.

        Raises:
            ValidationError: Neither ``prompt`` nor ``contents`` present
            ConfigurationError: No API key configured
            UpstreamServiceError: Transport failure or non-JSON upstream answer
        """
        contents = build_contents(body)
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY missing")

        url = f"{GEMINI_API_BASE}/models/{self.model_name}:generateContent"
        try:
            response = await self.client.post(
                url,
                params={"key": self.api_key},
                headers={"Content-Type": "application/json"},
                json={"contents": contents},
            )
            return response.json()
        except httpx.HTTPError as e:
            logger.error(f"Gemini proxy request failed: {e}")
            raise UpstreamServiceError(f"Gemini proxy request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Gemini proxy got a non-JSON response: {e}")
            raise UpstreamServiceError(f"Invalid upstream response: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
