"""Unit tests for AIService text generation and keyword extraction."""

from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from services.ai_service import AIService, classify_upstream_error
from utils.errors import ConfigurationError, NetworkError, RateLimitError, UpstreamServiceError


def _service(generate_content) -> AIService:
    service = AIService("test_gemini_key", "gemini-test")
    service._client = Mock()
    service._client.models.generate_content = generate_content
    return service


@pytest.mark.unit
class TestClassifyUpstreamError:
    def test_rate_limit(self):
        error = classify_upstream_error(RuntimeError("429 RESOURCE_EXHAUSTED"), "Gemini")
        assert isinstance(error, RateLimitError)

    def test_network(self):
        error = classify_upstream_error(OSError("Connection reset by peer"), "Gemini")
        assert isinstance(error, NetworkError)

    def test_other(self):
        error = classify_upstream_error(ValueError("bad request"), "Gemini")
        assert type(error) is UpstreamServiceError
        assert "Gemini request failed" in str(error)


@pytest.mark.unit
class TestGenerateText:
    @pytest.mark.asyncio
    async def test_returns_response_text(self):
        generate = Mock(return_value=SimpleNamespace(text='[{"text": "hi"}]'))
        service = _service(generate)

        text = await service.generate_text("prompt", json_output=True)

        assert text == '[{"text": "hi"}]'
        config = generate.call_args.kwargs["config"]
        assert config.response_mime_type == "application/json"
        assert generate.call_args.kwargs["model"] == "gemini-test"

    @pytest.mark.asyncio
    async def test_none_text_is_empty(self):
        service = _service(Mock(return_value=SimpleNamespace(text=None)))
        assert await service.generate_text("prompt") == ""

    @pytest.mark.asyncio
    async def test_failure_is_classified(self):
        service = _service(Mock(side_effect=RuntimeError("429 quota")))

        with pytest.raises(RateLimitError):
            await service.generate_text("prompt")

    @pytest.mark.asyncio
    async def test_missing_key(self):
        with pytest.raises(ConfigurationError):
            await AIService("").generate_text("prompt")


@pytest.mark.unit
class TestExtractKeywords:
    @pytest.mark.asyncio
    async def test_collapses_whitespace(self):
        service = _service(Mock(return_value=SimpleNamespace(text="  ocean \n waves ")))
        assert await service.extract_keywords("Waves crash on the shore") == "ocean waves"

    @pytest.mark.asyncio
    async def test_blank_answer_defaults_to_video(self):
        service = _service(Mock(return_value=SimpleNamespace(text="   ")))
        assert await service.extract_keywords("Something") == "video"

    @pytest.mark.asyncio
    async def test_failure_degrades_to_general(self):
        service = _service(Mock(side_effect=RuntimeError("500 internal")))
        assert await service.extract_keywords("Something") == "general"

    @pytest.mark.asyncio
    async def test_missing_key_still_raises(self):
        with pytest.raises(ConfigurationError):
            await AIService("").extract_keywords("Something")
