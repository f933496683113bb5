"""Render engine - the render job state machine and its polling surface.

A render walks a fixed sequence of phases. Each phase is carried out by a
RenderBackend; only after the backend reports the phase done does the engine
advance the job's progress to the phase checkpoint and append its log lines.
SimulatedRenderBackend stands in for a real encoder by waiting out fixed,
scalable delays.
"""

import asyncio
import copy
import logging
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Awaitable, Callable, Optional

from models.jobs import JobStatus, RenderAssets, RenderJob
from models.project import Project
from production.job_store import JobStore, new_job_id
from services.subtitle_service import generate_srt, scenes_to_subtitles, srt_data_url
from utils.errors import NotFoundError
from utils.logging import job_context

logger = logging.getLogger(__name__)

DEMO_VIDEO_URL = "https://cdn.coverr.co/videos/coverr-cloudy-sky-2751/1080p.mp4"
DEFAULT_AUDIO_URL = "https://cdn.pixabay.com/download/audio/2022/03/24/audio_14233a73df.mp3"

ASSEMBLY_START = 45
ASSEMBLY_SPAN = 20


class RenderPhase(str, Enum):
    VALIDATE = "validate"
    FETCH = "fetch"
    AUDIO = "audio"
    ASSEMBLY = "assembly"
    SCENE = "scene"
    SUBTITLES = "subtitles"
    ENCODE = "encode"
    FINALIZE = "finalize"
    COMPLETE = "complete"


# Reference delay (seconds) before each phase reports done
PHASE_DELAYS = {
    RenderPhase.VALIDATE: 1.0,
    RenderPhase.FETCH: 1.5,
    RenderPhase.AUDIO: 2.0,
    RenderPhase.ASSEMBLY: 1.0,
    RenderPhase.SCENE: 0.8,
    RenderPhase.SUBTITLES: 1.5,
    RenderPhase.ENCODE: 2.0,
    RenderPhase.FINALIZE: 2.5,
    RenderPhase.COMPLETE: 1.0,
}

# Progress checkpoint and step label applied when a phase completes
PHASE_CHECKPOINTS = {
    RenderPhase.VALIDATE: (5, "Analyzing Assets"),
    RenderPhase.FETCH: (15, "Fetching Media"),
    RenderPhase.AUDIO: (30, "Audio Engineering"),
    RenderPhase.ASSEMBLY: (ASSEMBLY_START, "Video Assembly"),
    RenderPhase.SUBTITLES: (75, "Generating Subtitles"),
    RenderPhase.ENCODE: (85, "Final Encoding"),
    RenderPhase.FINALIZE: (95, "Finalizing"),
    RenderPhase.COMPLETE: (100, "Ready to Download"),
}

LINEAR_TRANSITIONS = {
    RenderPhase.VALIDATE: RenderPhase.FETCH,
    RenderPhase.FETCH: RenderPhase.AUDIO,
    RenderPhase.AUDIO: RenderPhase.ASSEMBLY,
    RenderPhase.SUBTITLES: RenderPhase.ENCODE,
    RenderPhase.ENCODE: RenderPhase.FINALIZE,
    RenderPhase.FINALIZE: RenderPhase.COMPLETE,
}


def scene_progress(index: int, scene_count: int) -> int:
    """Progress after assembling scene ``index`` (0-based) of ``scene_count``."""
    return ASSEMBLY_START + (ASSEMBLY_SPAN * (index + 1)) // scene_count


def next_phase(
    phase: RenderPhase, scene_index: Optional[int], scene_count: int
) -> tuple[RenderPhase, Optional[int]]:
    """Transition function of the render state machine.

    The per-scene loop runs SCENE once per scene; a project without scenes
    goes straight from ASSEMBLY to SUBTITLES.
    """
    if phase == RenderPhase.ASSEMBLY:
        if scene_count > 0:
            return RenderPhase.SCENE, 0
        return RenderPhase.SUBTITLES, None
    if phase == RenderPhase.SCENE:
        index = scene_index or 0
        if index + 1 < scene_count:
            return RenderPhase.SCENE, index + 1
        return RenderPhase.SUBTITLES, None
    if phase in LINEAR_TRANSITIONS:
        return LINEAR_TRANSITIONS[phase], None
    raise ValueError(f"No transition out of {phase.value}")


class RenderBackend(ABC):
    """Does the actual work of a render phase."""

    @abstractmethod
    async def run_phase(
        self, phase: RenderPhase, project: Project, scene_index: Optional[int] = None
    ) -> None:
        """Carry out one phase; return when it is done, raise on failure."""


class SimulatedRenderBackend(RenderBackend):
    """Backend that only waits out the reference phase delays.

    Args:
        time_scale: Multiplier on PHASE_DELAYS (0 disables waiting)
        sleep: Awaitable sleep function (tests inject a fake)
    """

    def __init__(
        self,
        time_scale: float = 1.0,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self.time_scale = time_scale
        self.sleep = sleep or asyncio.sleep

    async def run_phase(
        self, phase: RenderPhase, project: Project, scene_index: Optional[int] = None
    ) -> None:
        delay = PHASE_DELAYS[phase] * self.time_scale
        if delay > 0:
            await self.sleep(delay)


class RenderEngine:
    """Drives a RenderJob through the render phases."""

    def __init__(self, backend: RenderBackend):
        self.backend = backend

    async def run(self, job: RenderJob, project: Project) -> RenderJob:
        """Run every phase for a project, mutating ``job`` as phases complete.

        A backend failure moves the job to FAILED with no assets.
        """
        scene_count = len(project.scenes)
        job.status = JobStatus.PROCESSING
        phase, scene_index = RenderPhase.VALIDATE, None

        try:
            while True:
                await self.backend.run_phase(phase, project, scene_index)
                self._apply_phase(job, project, phase, scene_index)
                if phase == RenderPhase.COMPLETE:
                    break
                phase, scene_index = next_phase(phase, scene_index, scene_count)
        except Exception as e:
            logger.error(f"Render job {job.id} failed during {phase.value}: {e}")
            job.status = JobStatus.FAILED
            job.current_step = "Render failed"
            job.error = str(e)
            job.assets = None
            job.log(f"Render failed during {phase.value}: {e}")
            job.finished_at = time.time()

        return job

    def _advance(self, job: RenderJob, progress: int, step: str, message: str) -> None:
        job.progress = max(job.progress, progress)
        job.current_step = step
        job.log(message)

    def _apply_phase(
        self,
        job: RenderJob,
        project: Project,
        phase: RenderPhase,
        scene_index: Optional[int],
    ) -> None:
        scene_count = len(project.scenes)

        if phase == RenderPhase.SCENE:
            index = scene_index or 0
            scene = project.scenes[index]
            self._advance(
                job,
                scene_progress(index, scene_count),
                "Video Assembly",
                f"Processing Scene {index + 1}/{scene_count}...",
            )
            job.log(f"Concatenating clip {index + 1}: {scene.duration}s")
            job.log("Applying transition: CrossFade (0.5s)")
            return

        if phase == RenderPhase.COMPLETE:
            self._complete(job, project)
            return

        progress, step = PHASE_CHECKPOINTS[phase]
        if phase == RenderPhase.VALIDATE:
            self._advance(job, progress, step, "Validating media assets and manifest...")
        elif phase == RenderPhase.FETCH:
            self._advance(
                job, progress, step,
                f"Downloading {scene_count} video clips/images to render node...",
            )
            job.log("Cache hit: 0 assets. Downloading all from source.")
        elif phase == RenderPhase.AUDIO:
            self._advance(job, progress, step, "Merging TTS tracks with background score...")
            if project.background_music_url:
                job.log(f"Mixing background track: {project.background_music_url[:30]}...")
                job.log("Applying side-chain compression to music for voice clarity.")
        elif phase == RenderPhase.ASSEMBLY:
            self._advance(job, progress, step, "Initializing MoviePy engine...")
        elif phase == RenderPhase.SUBTITLES:
            self._advance(job, progress, step, "Running Vosk speech-to-text alignment...")
            job.log("Generating .srt file for burn-in...")
        elif phase == RenderPhase.ENCODE:
            self._advance(job, progress, step, "Running FFmpeg encoding pass...")
            job.log(
                "Command: ffmpeg -i temp_concat.mp4 -vf subtitles=subs.srt "
                "-c:v libx264 -preset medium -crf 23 output.mp4"
            )
        elif phase == RenderPhase.FINALIZE:
            self._advance(job, progress, step, "Optimizing for web streaming (MOOV atom)...")

    def _complete(self, job: RenderJob, project: Project) -> None:
        subtitles = srt_data_url(generate_srt(scenes_to_subtitles(project.scenes)))
        job.assets = RenderAssets(
            video1080p=DEMO_VIDEO_URL,
            video720p=DEMO_VIDEO_URL,
            audio=project.background_music_url or DEFAULT_AUDIO_URL,
            subtitles=subtitles,
        )
        job.output_url = job.assets.video1080p
        job.progress = 100
        job.current_step = PHASE_CHECKPOINTS[RenderPhase.COMPLETE][1]
        job.status = JobStatus.COMPLETED
        job.finished_at = time.time()
        job.log("Render complete. Assets generated: 1080p, 720p, MP3, SRT.")
        logger.info(f"Render job {job.id} completed")


class RenderService:
    """Starts render jobs in the background and answers status polls."""

    def __init__(self, job_store: JobStore[RenderJob], engine: RenderEngine):
        self.job_store = job_store
        self.engine = engine
        # Keep references to background tasks so they aren't garbage collected
        self._background_tasks: set[asyncio.Task] = set()

    async def start_render(self, project: Project) -> str:
        """Create a render job for a snapshot of ``project`` and start it.

        Returns:
            The new job id
        """
        project = copy.deepcopy(project)
        job = RenderJob(id=new_job_id("job"), project_id=project.id)
        job.status = JobStatus.PROCESSING
        for message in (
            "Received project data",
            f"Project ID: {project.id}",
            "Resolution: 1080p",
            "Format: MP4 (H.264)",
        ):
            job.log(message)
        self.job_store.create_job(job)

        task = asyncio.create_task(self._run(job, project))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

        logger.info(f"Started render job {job.id} for project {project.id} ({len(project.scenes)} scenes)")
        return job.id

    async def _run(self, job: RenderJob, project: Project) -> None:
        with job_context(job.id):
            await self.engine.run(job, project)

    def get_job_status(self, job_id: str) -> Optional[RenderJob]:
        """Snapshot of a job, or None for unknown ids."""
        job = self.job_store.get_job(job_id)
        return job.snapshot() if job else None

    def list_jobs(self) -> list[RenderJob]:
        return [job.snapshot() for job in self.job_store.list_jobs()]

    async def wait_for_completion(
        self,
        job_id: str,
        interval: float = 1.0,
        timeout: Optional[float] = None,
        on_poll: Optional[Callable[[RenderJob], None]] = None,
    ) -> RenderJob:
        """Poll a job until it reaches a terminal status.

        Args:
            job_id: Job to watch
            interval: Seconds between polls
            timeout: Give up after this many seconds (None waits forever)
            on_poll: Called with every snapshot observed

        Raises:
            NotFoundError: If the job id is unknown (or was evicted)
            TimeoutError: If the timeout elapses first
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout if timeout is not None else None

        while True:
            job = self.get_job_status(job_id)
            if job is None:
                raise NotFoundError(f"Render job not found: {job_id}")
            if on_poll:
                on_poll(job)
            if job.is_terminal:
                return job
            if deadline is not None and loop.time() >= deadline:
                raise TimeoutError(f"Render job {job_id} still {job.status.value} after {timeout}s")
            await asyncio.sleep(interval)
