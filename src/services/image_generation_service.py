"""Image Generation Service - Gemini Flash image provider."""

import logging
import time
from typing import Any, Optional

import httpx

from utils.errors import ConfigurationError, UpstreamServiceError, ValidationError

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

SUPPORTED_ASPECT_RATIOS = ("1:1", "16:9", "9:16", "4:3", "3:4")
DEFAULT_ASPECT_RATIO = "16:9"


class ImageGenerationServiceError(UpstreamServiceError):
    """Error from image generation service."""

    pass


def get_aspect_ratio(width: int, height: int) -> str:
    """Map pixel dimensions to the closest supported aspect ratio.

    Args:
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        One of SUPPORTED_ASPECT_RATIOS
    """
    if width <= 0 or height <= 0:
        return DEFAULT_ASPECT_RATIO
    ratio = width / height
    ratios = {
        "1:1": 1.0,
        "16:9": 16 / 9,
        "9:16": 9 / 16,
        "4:3": 4 / 3,
        "3:4": 3 / 4,
    }
    return min(ratios, key=lambda name: abs(ratios[name] - ratio))


class ImageGenerationService:
    """Service for AI image generation through the Gemini REST API."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.5-flash-image",
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the service.

        Args:
            api_key: Google GenAI API key
            model_name: Gemini image model
            client: Optional pre-built HTTP client (tests inject a mock transport)
        """
        self.api_key = api_key
        self.model_name = model_name
        self.client = client or httpx.AsyncClient(timeout=120.0)

    def is_configured(self) -> bool:
        """Check if Gemini API key is configured."""
        return bool(self.api_key)

    async def generate_image(self, prompt: str, aspect_ratio: str = DEFAULT_ASPECT_RATIO) -> str:
        """Generate one image.

        Args:
            prompt: Text prompt (English works best)
            aspect_ratio: One of SUPPORTED_ASPECT_RATIOS

        Returns:
            ``data:<mime>;base64,...`` URL of the first generated image

        Raises:
            ValidationError: Empty prompt or unsupported aspect ratio
            ConfigurationError: No API key configured
            ImageGenerationServiceError: Upstream failure or empty response
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Image prompt is required")
        if aspect_ratio not in SUPPORTED_ASPECT_RATIOS:
            raise ValidationError(
                f"Unsupported aspect ratio: {aspect_ratio} "
                f"(expected one of {', '.join(SUPPORTED_ASPECT_RATIOS)})"
            )
        if not self.is_configured():
            raise ConfigurationError("GEMINI_API_KEY missing")

        url = f"{GEMINI_API_BASE}/models/{self.model_name}:generateContent"
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseModalities": ["IMAGE"],
                "imageConfig": {"aspectRatio": aspect_ratio},
            },
        }

        logger.info(f"Generating image with Gemini Flash (aspect={aspect_ratio})")
        start_time = time.time()

        try:
            response = await self.client.post(url, headers=headers, json=payload)
            response.raise_for_status()
            result_data = response.json()
        except httpx.HTTPStatusError as e:
            error_detail = _error_detail(e.response, str(e))
            logger.error(f"Gemini image API error: {error_detail}")
            raise ImageGenerationServiceError(f"Gemini API error: {error_detail}") from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini image request failed: {e}")
            raise ImageGenerationServiceError(f"Gemini image generation failed: {e}") from e
        except ValueError as e:
            logger.error(f"Gemini image response is not JSON: {e}")
            raise ImageGenerationServiceError(f"Invalid Gemini image response: {e}") from e

        image_url = _find_inline_image(result_data)
        if image_url is None:
            raise ImageGenerationServiceError("Gemini returned no image data")

        generation_time_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Gemini generated image in {generation_time_ms}ms")
        return image_url

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()


def _error_detail(response: httpx.Response, fallback: str) -> str:
    """Best-effort error message from a failed Gemini response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or fallback
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"].get("message") or fallback
    return fallback


def _find_inline_image(result_data: Any) -> Optional[str]:
    """Return the first inline image as a data URL, skipping malformed parts."""
    if not isinstance(result_data, dict):
        return None
    for candidate in result_data.get("candidates") or []:
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        for part in parts or []:
            inline_data = part.get("inlineData") if isinstance(part, dict) else None
            if isinstance(inline_data, dict) and inline_data.get("data"):
                mime_type = inline_data.get("mimeType", "image/png")
                return f"data:{mime_type};base64,{inline_data['data']}"
    return None
