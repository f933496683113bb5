"""Unit tests for Gemini image generation and the Gemini relay (mocked HTTP)."""

import json

import httpx
import pytest
from services.gemini_proxy import GeminiProxy, build_contents
from services.image_generation_service import (
    ImageGenerationService,
    ImageGenerationServiceError,
    get_aspect_ratio,
)
from utils.errors import ConfigurationError, UpstreamServiceError, ValidationError


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.unit
def test_aspect_ratio_mapping():
    assert get_aspect_ratio(1920, 1080) == "16:9"
    assert get_aspect_ratio(1080, 1920) == "9:16"
    assert get_aspect_ratio(1024, 1024) == "1:1"
    assert get_aspect_ratio(1600, 1200) == "4:3"
    assert get_aspect_ratio(0, 100) == "16:9"


@pytest.mark.unit
class TestImageGeneration:
    @pytest.mark.asyncio
    async def test_returns_data_url_and_sends_aspect_ratio(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers["x-goog-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "candidates": [
                        {"content": {"parts": [{"text": "here"}, {"inlineData": {"mimeType": "image/jpeg", "data": "QUJD"}}]}}
                    ]
                },
            )

        service = ImageGenerationService("img_key", client=_client(handler))
        try:
            url = await service.generate_image("a lighthouse at dusk", "9:16")
        finally:
            await service.close()

        assert url == "data:image/jpeg;base64,QUJD"
        assert seen["url"].endswith("/models/gemini-2.5-flash-image:generateContent")
        assert seen["key"] == "img_key"
        assert seen["body"]["contents"][0]["parts"][0]["text"] == "a lighthouse at dusk"
        assert seen["body"]["generationConfig"]["imageConfig"]["aspectRatio"] == "9:16"

    @pytest.mark.asyncio
    async def test_empty_response_is_upstream_error(self):
        service = ImageGenerationService(
            "img_key", client=_client(lambda request: httpx.Response(200, json={"candidates": []}))
        )
        try:
            with pytest.raises(ImageGenerationServiceError, match="no image data"):
                await service.generate_image("anything")
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_http_error_carries_upstream_message(self):
        def handler(request):
            return httpx.Response(400, json={"error": {"message": "Prompt blocked by safety filter"}})

        service = ImageGenerationService("img_key", client=_client(handler))
        try:
            with pytest.raises(ImageGenerationServiceError, match="safety filter"):
                await service.generate_image("anything")
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_html_body_is_upstream_error(self):
        def handler(request):
            return httpx.Response(
                200, content=b"<html>gateway</html>", headers={"Content-Type": "text/html"}
            )

        service = ImageGenerationService("img_key", client=_client(handler))
        try:
            with pytest.raises(ImageGenerationServiceError, match="Invalid Gemini image response"):
                await service.generate_image("anything")
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_error_status_with_list_body(self):
        def handler(request):
            return httpx.Response(503, json=[{"error": "overloaded"}])

        service = ImageGenerationService("img_key", client=_client(handler))
        try:
            with pytest.raises(ImageGenerationServiceError, match="503"):
                await service.generate_image("anything")
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_malformed_candidates_are_skipped(self):
        body = {
            "candidates": [
                "oops",
                {"content": None},
                {"content": {"parts": ["text only", {"inlineData": {"data": "WFla"}}]}},
            ]
        }
        service = ImageGenerationService(
            "img_key", client=_client(lambda request: httpx.Response(200, json=body))
        )
        try:
            assert await service.generate_image("anything") == "data:image/png;base64,WFla"
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        service = ImageGenerationService("img_key", client=_client(handler))
        try:
            with pytest.raises(ImageGenerationServiceError):
                await service.generate_image("anything")
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_validation_and_configuration(self):
        service = ImageGenerationService("", client=_client(lambda request: httpx.Response(500)))
        try:
            with pytest.raises(ValidationError):
                await service.generate_image("")
            with pytest.raises(ValidationError, match="aspect ratio"):
                await service.generate_image("a cat", "21:9")
            with pytest.raises(ConfigurationError):
                await service.generate_image("a cat")
        finally:
            await service.close()


@pytest.mark.unit
class TestGeminiProxy:
    def test_build_contents(self):
        assert build_contents({"prompt": "hi"}) == [{"parts": [{"text": "hi"}]}]
        contents = [{"role": "user", "parts": [{"text": "hey"}]}]
        assert build_contents({"contents": contents, "prompt": "ignored"}) == contents
        with pytest.raises(ValidationError, match="Prompt missing"):
            build_contents({})

    @pytest.mark.asyncio
    async def test_forwards_and_returns_upstream_json(self):
        seen = {}

        def handler(request):
            seen["key"] = request.url.params["key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "pong"}]}}]})

        proxy = GeminiProxy("proxy_key", client=_client(handler))
        try:
            data = await proxy.forward({"prompt": "ping"})
        finally:
            await proxy.close()

        assert data["candidates"][0]["content"]["parts"][0]["text"] == "pong"
        assert seen == {"key": "proxy_key", "body": {"contents": [{"parts": [{"text": "ping"}]}]}}

    @pytest.mark.asyncio
    async def test_upstream_error_body_is_passed_through(self):
        proxy = GeminiProxy(
            "proxy_key",
            client=_client(lambda request: httpx.Response(429, json={"error": {"code": 429}})),
        )
        try:
            assert await proxy.forward({"prompt": "ping"}) == {"error": {"code": 429}}
        finally:
            await proxy.close()

    @pytest.mark.asyncio
    async def test_non_json_answer_is_upstream_error(self):
        proxy = GeminiProxy("proxy_key", client=_client(lambda request: httpx.Response(502, text="<html>")))
        try:
            with pytest.raises(UpstreamServiceError):
                await proxy.forward({"prompt": "ping"})
        finally:
            await proxy.close()

    @pytest.mark.asyncio
    async def test_missing_key(self):
        proxy = GeminiProxy("", client=_client(lambda request: httpx.Response(200, json={})))
        try:
            with pytest.raises(ConfigurationError):
                await proxy.forward({"prompt": "ping"})
        finally:
            await proxy.close()
