"""End-to-end pipeline test: topic -> automation -> saved project -> render.

Gemini, TTS, image and stock providers are stubbed; the script generator,
stock precedence, project store and render engine are the real ones.
"""

import base64
import json

import pytest
from models.jobs import JobStatus, RenderJob
from models.project import ProjectStatus
from models.scene import MediaType
from models.stock import StockResult
from production.automation import AutomationRequest, AutomationRunner
from production.job_store import JobStore
from production.render_engine import RenderEngine, RenderService, SimulatedRenderBackend
from production.script_generator import ScriptGenerator
from services.stock_media_service import StockMediaService
from services.video_sources import VideoSource


class KeywordStockSource(VideoSource):
    """Live-provider stand-in that only knows about glaciers."""

    def get_source_name(self):
        return "Pexels"

    async def search_videos(self, phrase):
        if "glacier" in phrase:
            return [
                StockResult(
                    id="99",
                    thumbnail="https://images.example/99.jpg",
                    video_url="https://videos.example/glacier.mp4",
                    duration=12,
                    provider="Pexels",
                )
            ]
        return []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_topic_to_rendered_video(fake_ai, fake_tts, fake_images, project_store):
    fake_ai.responses = [
        json.dumps(
            [
                {"text": "Glaciers shape the northern valleys.", "visualPrompt": "glacier valley aerial"},
                {"text": "Meltwater feeds ancient rivers.", "visualPrompt": "river delta from above"},
                {"text": "Scientists track every retreat.", "visualPrompt": "researchers on ice"},
            ]
        )
    ]

    async def no_sleep(_seconds):
        return None

    stock = StockMediaService(fake_ai, sources=[KeywordStockSource()])
    runner = AutomationRunner(
        script_generator=ScriptGenerator(fake_ai),
        tts_service=fake_tts,
        image_service=fake_images,
        stock_media=stock,
        project_store=project_store,
        sleep=no_sleep,
    )

    result = await runner.run_full_automation(
        AutomationRequest(user_id="user_1", topic="Glaciers", style="educational", voice="Kore")
    )

    assert result.status == JobStatus.COMPLETED
    assert len(result.scenes) == 3
    for scene in result.scenes:
        assert scene.audio_url
        assert scene.visual_url
    assert result.scenes[0].media_type == MediaType.VIDEO
    assert result.scenes[0].stock_video_url == "https://videos.example/glacier.mp4"
    assert result.scenes[0].image_url is None
    assert [s.media_type for s in result.scenes[1:]] == [MediaType.IMAGE, MediaType.IMAGE]
    assert fake_images.prompts == [
        "educational style, cinematic 4k: river delta from above",
        "educational style, cinematic 4k: researchers on ice",
    ]

    project = await project_store.get_project(result.project.id)
    assert project.status == ProjectStatus.COMPLETED
    assert project.background_music_url == stock.get_background_music("educational")

    render_service = RenderService(
        JobStore[RenderJob](), RenderEngine(SimulatedRenderBackend(time_scale=0))
    )
    job_id = await render_service.start_render(project)
    job = await render_service.wait_for_completion(job_id, interval=0, timeout=5)

    assert job.status == JobStatus.COMPLETED
    assert job.progress == 100
    assert job.assets.audio == project.background_music_url
    srt = base64.b64decode(job.assets.subtitles.split(",", 1)[1]).decode("utf-8")
    assert "Glaciers shape the northern valleys." in srt
    assert "Scientists track every retreat." in srt
