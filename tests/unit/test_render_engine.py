"""Unit tests for the render state machine and render service."""

import asyncio
import base64

import pytest
from models.jobs import JobStatus, RenderJob
from models.project import Project
from models.scene import Scene
from production.job_store import JobStore
from production.render_engine import (
    DEFAULT_AUDIO_URL,
    DEMO_VIDEO_URL,
    RenderBackend,
    RenderEngine,
    RenderPhase,
    RenderService,
    SimulatedRenderBackend,
    next_phase,
    scene_progress,
)
from utils.errors import NotFoundError


def _project(scene_count: int = 3, music: str | None = None) -> Project:
    return Project(
        id="proj_1",
        user_id="user_1",
        title="Tea",
        topic="Tea",
        background_music_url=music,
        scenes=[Scene(id=f"scene_{i}", text=f"Scene number {i}.", duration=4.0) for i in range(scene_count)],
    )


class RecordingBackend(RenderBackend):
    """Records the phase order and the job progress seen before each phase."""

    def __init__(self, fail_on: RenderPhase | None = None):
        self.fail_on = fail_on
        self.job: RenderJob | None = None
        self.calls: list[tuple[RenderPhase, int | None]] = []
        self.progress_seen: list[int] = []

    async def run_phase(self, phase, project, scene_index=None):
        self.calls.append((phase, scene_index))
        if self.job is not None:
            self.progress_seen.append(self.job.progress)
        if phase == self.fail_on:
            raise RuntimeError("encoder crashed")


class BlockingBackend(RenderBackend):
    def __init__(self):
        self.release = asyncio.Event()

    async def run_phase(self, phase, project, scene_index=None):
        await self.release.wait()


@pytest.mark.unit
class TestTransitions:
    def test_scene_progress_spans_assembly(self):
        assert [scene_progress(i, 3) for i in range(3)] == [51, 58, 65]
        assert scene_progress(0, 1) == 65

    def test_scene_loop(self):
        assert next_phase(RenderPhase.ASSEMBLY, None, 2) == (RenderPhase.SCENE, 0)
        assert next_phase(RenderPhase.SCENE, 0, 2) == (RenderPhase.SCENE, 1)
        assert next_phase(RenderPhase.SCENE, 1, 2) == (RenderPhase.SUBTITLES, None)

    def test_zero_scenes_skip_loop(self):
        assert next_phase(RenderPhase.ASSEMBLY, None, 0) == (RenderPhase.SUBTITLES, None)

    def test_complete_is_final(self):
        with pytest.raises(ValueError):
            next_phase(RenderPhase.COMPLETE, None, 3)


@pytest.mark.unit
class TestRenderEngine:
    @pytest.mark.asyncio
    async def test_progress_checkpoints_are_monotonic(self):
        backend = RecordingBackend()
        job = RenderJob(id="job_1", project_id="proj_1")
        backend.job = job

        await RenderEngine(backend).run(job, _project(3))

        assert backend.progress_seen == [0, 5, 15, 30, 45, 51, 58, 65, 75, 85, 95]
        assert job.progress == 100
        assert job.status == JobStatus.COMPLETED
        assert job.current_step == "Ready to Download"

    @pytest.mark.asyncio
    async def test_phase_order(self):
        backend = RecordingBackend()
        await RenderEngine(backend).run(RenderJob(id="job_1", project_id="p"), _project(2))

        assert backend.calls == [
            (RenderPhase.VALIDATE, None),
            (RenderPhase.FETCH, None),
            (RenderPhase.AUDIO, None),
            (RenderPhase.ASSEMBLY, None),
            (RenderPhase.SCENE, 0),
            (RenderPhase.SCENE, 1),
            (RenderPhase.SUBTITLES, None),
            (RenderPhase.ENCODE, None),
            (RenderPhase.FINALIZE, None),
            (RenderPhase.COMPLETE, None),
        ]

    @pytest.mark.asyncio
    async def test_completed_job_has_assets(self):
        job = RenderJob(id="job_1", project_id="proj_1")

        await RenderEngine(RecordingBackend()).run(job, _project(2, music="https://music.example/doc.mp3"))

        assert job.assets.video1080p == DEMO_VIDEO_URL
        assert job.output_url == job.assets.video1080p
        assert job.assets.audio == "https://music.example/doc.mp3"
        assert job.assets.subtitles.startswith("data:text/plain;base64,")
        srt = base64.b64decode(job.assets.subtitles.split(",", 1)[1]).decode("utf-8")
        assert "00:00:04,000 --> 00:00:08,000" in srt
        assert "Scene number 1." in srt
        assert job.logs[-1].endswith("Render complete. Assets generated: 1080p, 720p, MP3, SRT.")

    @pytest.mark.asyncio
    async def test_subtitle_asset_keeps_braces_in_narration(self):
        project = _project(1)
        project.scenes[0].text = "Set {x} to 5, then <i>wait</i>."
        job = RenderJob(id="job_1", project_id="proj_1")

        await RenderEngine(RecordingBackend()).run(job, project)

        srt = base64.b64decode(job.assets.subtitles.split(",", 1)[1]).decode("utf-8")
        assert "Set {x} to 5, then <i>wait</i>." in srt

    @pytest.mark.asyncio
    async def test_default_audio_without_music(self):
        job = RenderJob(id="job_1", project_id="proj_1")
        await RenderEngine(RecordingBackend()).run(job, _project(1))
        assert job.assets.audio == DEFAULT_AUDIO_URL

    @pytest.mark.asyncio
    async def test_scene_log_lines(self):
        job = RenderJob(id="job_1", project_id="proj_1")
        await RenderEngine(RecordingBackend()).run(job, _project(2))

        messages = [line[11:] for line in job.logs]
        assert "Processing Scene 2/2..." in messages
        assert "Concatenating clip 1: 4.0s" in messages
        assert "Downloading 2 video clips/images to render node..." in messages

    @pytest.mark.asyncio
    async def test_backend_failure_fails_job(self):
        backend = RecordingBackend(fail_on=RenderPhase.ENCODE)
        job = RenderJob(id="job_1", project_id="proj_1")

        await RenderEngine(backend).run(job, _project(2))

        assert job.status == JobStatus.FAILED
        assert job.current_step == "Render failed"
        assert job.error == "encoder crashed"
        assert job.assets is None
        assert job.progress == 75
        assert job.finished_at is not None
        assert "assets" not in job.to_dict()

    @pytest.mark.asyncio
    async def test_zero_scene_project_completes(self):
        backend = RecordingBackend()
        job = RenderJob(id="job_1", project_id="proj_1")

        await RenderEngine(backend).run(job, _project(0))

        assert job.status == JobStatus.COMPLETED
        assert all(phase != RenderPhase.SCENE for phase, _ in backend.calls)

    @pytest.mark.asyncio
    async def test_simulated_backend_scales_delays(self):
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        backend = SimulatedRenderBackend(time_scale=2.0, sleep=fake_sleep)
        await RenderEngine(backend).run(RenderJob(id="job_1", project_id="p"), _project(1))

        assert delays == [2.0, 3.0, 4.0, 2.0, 1.6, 3.0, 4.0, 5.0, 2.0]

    @pytest.mark.asyncio
    async def test_zero_time_scale_never_sleeps(self):
        async def forbidden_sleep(seconds):
            raise AssertionError("should not sleep")

        backend = SimulatedRenderBackend(time_scale=0, sleep=forbidden_sleep)
        job = RenderJob(id="job_1", project_id="p")
        await RenderEngine(backend).run(job, _project(1))

        assert job.status == JobStatus.COMPLETED


@pytest.mark.unit
class TestRenderService:
    def _service(self, backend: RenderBackend | None = None) -> RenderService:
        return RenderService(
            JobStore[RenderJob](),
            RenderEngine(backend or SimulatedRenderBackend(time_scale=0)),
        )

    @pytest.mark.asyncio
    async def test_start_render_and_wait(self):
        service = self._service()

        job_id = await service.start_render(_project(3))
        polled = []
        job = await service.wait_for_completion(job_id, interval=0, on_poll=polled.append)

        assert job.status == JobStatus.COMPLETED
        assert job.progress == 100
        assert [line[11:] for line in job.logs[:4]] == [
            "Received project data",
            "Project ID: proj_1",
            "Resolution: 1080p",
            "Format: MP4 (H.264)",
        ]
        assert polled[-1].status == JobStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_render_uses_project_snapshot(self):
        backend = BlockingBackend()
        service = self._service(backend)
        project = _project(2)

        job_id = await service.start_render(project)
        project.scenes.append(Scene(id="scene_late", text="Added after start."))
        backend.release.set()
        job = await service.wait_for_completion(job_id, interval=0)

        assert "Processing Scene 2/2..." in [line[11:] for line in job.logs]

    @pytest.mark.asyncio
    async def test_status_snapshots_and_unknown_ids(self):
        service = self._service()
        job_id = await service.start_render(_project(1))

        snapshot = service.get_job_status(job_id)
        assert snapshot.status == JobStatus.PROCESSING
        assert snapshot is not service.job_store.get_job(job_id)
        assert service.get_job_status("job_missing") is None
        with pytest.raises(NotFoundError):
            await service.wait_for_completion("job_missing", interval=0)

        await service.wait_for_completion(job_id, interval=0)
        assert [job.id for job in service.list_jobs()] == [job_id]

    @pytest.mark.asyncio
    async def test_wait_times_out(self):
        backend = BlockingBackend()
        service = self._service(backend)
        job_id = await service.start_render(_project(1))

        with pytest.raises(TimeoutError):
            await service.wait_for_completion(job_id, interval=0.01, timeout=0.05)

        backend.release.set()
        await service.wait_for_completion(job_id, interval=0)
