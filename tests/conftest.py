"""Shared pytest fixtures for DocuGen tests."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest
import pytest_asyncio

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from models.scene import Scene  # noqa: E402
from services.project_store import KeyValueStore, ProjectStore  # noqa: E402
from utils.errors import UpstreamServiceError  # noqa: E402


class FakeAIService:
    """Stands in for AIService: canned text responses, echo keywords."""

    def __init__(self, responses: Optional[list] = None):
        self.responses = list(responses or [])
        self.prompts: list[str] = []

    async def generate_text(self, prompt: str, temperature: float = 0.7, json_output: bool = False) -> str:
        self.prompts.append(prompt)
        response = self.responses.pop(0) if self.responses else ""
        if isinstance(response, Exception):
            raise response
        return response

    async def extract_keywords(self, text: str) -> str:
        return text.lower()


class FakeTTSService:
    """Returns a fixed data URL; fails for texts listed in ``fail_on``."""

    def __init__(self, fail_on: tuple[str, ...] = ()):
        self.fail_on = fail_on
        self.calls: list[tuple[str, str]] = []

    async def generate_speech(self, text: str, voice_id: str) -> str:
        self.calls.append((text, voice_id))
        if any(marker in text for marker in self.fail_on):
            raise UpstreamServiceError("speech quota exceeded")
        return "data:audio/wav;base64,UklGRg=="


class FakeImageService:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.prompts: list[str] = []

    async def generate_image(self, prompt: str, aspect_ratio: str = "16:9") -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise UpstreamServiceError("image model unavailable")
        return "data:image/png;base64,iVBORw0KGgo="

    async def close(self) -> None:
        pass


class FakeStockMedia:
    """Maps narration to a video URL via ``matches`` (substring -> url)."""

    def __init__(self, matches: Optional[dict[str, str]] = None):
        self.matches = matches or {}
        self.queries: list[str] = []

    async def find_video_for_text(self, text: str) -> Optional[str]:
        self.queries.append(text)
        for marker, url in self.matches.items():
            if marker in text:
                return url
        return None

    def get_background_music(self, style: str) -> str:
        return f"https://music.example/{style}.mp3"


class FakeClock:
    """Deterministic UTC clock that advances one second per call."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def fake_ai() -> FakeAIService:
    return FakeAIService()


@pytest.fixture
def fake_tts() -> FakeTTSService:
    return FakeTTSService()


@pytest.fixture
def fake_images() -> FakeImageService:
    return FakeImageService()


@pytest.fixture
def fake_stock() -> FakeStockMedia:
    return FakeStockMedia()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample_scenes() -> list[Scene]:
    """Three short scenes with visual prompts."""
    return [
        Scene(id="scene_0", text="A walk through an ancient forest.", visual_prompt="misty forest"),
        Scene(id="scene_1", text="Waves crash against the northern cliffs.", visual_prompt="ocean cliffs"),
        Scene(id="scene_2", text="The city wakes up at dawn.", visual_prompt="city skyline at dawn"),
    ]


@pytest_asyncio.fixture
async def kv_store(tmp_path: Path):
    """Connected key-value store in a temporary directory."""
    store = KeyValueStore(str(tmp_path / "store.db"))
    await store.connect()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def project_store(kv_store: KeyValueStore, fake_clock: FakeClock) -> ProjectStore:
    return ProjectStore(kv_store, clock=fake_clock)
