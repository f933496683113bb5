"""Full automation and batch production helpers.

Failure policy, shared by the full run and every batch helper: a failure on
one scene is logged and counted, the scene keeps whatever it already had and
the run moves on to the next scene. Failures before the scene loop (script
generation) or when saving the project abort the run.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from models.catalog import DEFAULT_VOICE
from models.jobs import AutomationJob, JobStatus
from models.project import Project, ProjectStatus
from models.scene import MediaType, Scene, estimate_duration
from production.job_store import JobStore, new_job_id
from utils.errors import DocuGenError
from utils.logging import clear_job_context, set_job_context

if TYPE_CHECKING:
    from production.script_generator import ScriptGenerator
    from services.image_generation_service import ImageGenerationService
    from services.project_store import ProjectStore
    from services.stock_media_service import StockMediaService
    from services.tts_service import TTSService

logger = logging.getLogger(__name__)

# (message, percent, scenes so far)
ProgressCallback = Callable[[str, int, list[Scene]], None]


def image_prompt(style: str, visual_prompt: str) -> str:
    return f"{style} style, cinematic 4k: {visual_prompt}"


@dataclass
class AutomationRequest:
    """Inputs for a full automation run (topic mode unless ``script`` is set)."""

    user_id: str
    topic: str = ""
    script: Optional[str] = None
    project_id: Optional[str] = None
    title: Optional[str] = None
    input_language: str = "en"
    language: str = "en"
    style: str = "documentary"
    duration: str = "short"
    voice: str = DEFAULT_VOICE


@dataclass
class BatchResult:
    """Outcome of a per-scene batch: processed count and error tally."""

    scenes: list[Scene]
    processed: int = 0
    error_count: int = 0
    errors: list[str] = field(default_factory=list)

    def record_error(self, scene: Scene, stage: str, error: Exception) -> None:
        self.error_count += 1
        self.errors.append(f"{scene.id} {stage}: {error}")

    def to_dict(self) -> dict:
        return {
            "scenes": [scene.to_dict() for scene in self.scenes],
            "processed": self.processed,
            "errorCount": self.error_count,
            "errors": list(self.errors),
        }


@dataclass
class AutomationResult:
    """Outcome of a full automation run."""

    status: JobStatus
    project: Project
    error_count: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def scenes(self) -> list[Scene]:
        return self.project.scenes

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "projectId": self.project.id,
            "scenes": [scene.to_dict() for scene in self.scenes],
            "errorCount": self.error_count,
            "errors": list(self.errors),
        }


class AutomationRunner:
    """Sequences script, audio, visuals and save for a project."""

    def __init__(
        self,
        script_generator: "ScriptGenerator",
        tts_service: "TTSService",
        image_service: "ImageGenerationService",
        stock_media: "StockMediaService",
        project_store: "ProjectStore",
        scene_delay: float = 0.2,
        match_concurrency: int = 5,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """Initialize the runner.

        Args:
            scene_delay: Fixed pause between scenes of a full run
            match_concurrency: Max stock searches in flight during auto-match
            sleep: Awaitable sleep function (tests inject a fake)
        """
        self.script_generator = script_generator
        self.tts = tts_service
        self.images = image_service
        self.stock_media = stock_media
        self.project_store = project_store
        self.scene_delay = scene_delay
        self.match_concurrency = max(1, match_concurrency)
        self.sleep = sleep or asyncio.sleep

    async def generate_scenes(self, request: AutomationRequest) -> list[Scene]:
        """Script step: manual script parsing or topic generation."""
        if request.script:
            return await self.script_generator.parse_manual_script(
                request.script, request.input_language, request.language
            )
        return await self.script_generator.generate_script(
            request.topic,
            request.input_language,
            request.language,
            request.style,
            request.duration,
        )

    async def generate_all_audio(self, scenes: list[Scene], voice: str = DEFAULT_VOICE) -> BatchResult:
        """Narrate every scene that has no audio yet."""
        result = BatchResult(scenes=scenes)
        for scene in scenes:
            if scene.audio_url:
                continue
            scene.is_generating_audio = True
            try:
                scene.audio_url = await self.tts.generate_speech(scene.text, voice)
                result.processed += 1
            except DocuGenError as e:
                logger.error(f"Audio generation failed for {scene.id}: {e}")
                result.record_error(scene, "audio", e)
            finally:
                scene.is_generating_audio = False

        logger.info(f"Audio batch done: {result.processed} generated, {result.error_count} errors")
        return result

    async def generate_all_visuals(self, scenes: list[Scene], style: str) -> BatchResult:
        """Switch every scene to image and generate missing images."""
        result = BatchResult(scenes=scenes)
        for scene in scenes:
            scene.media_type = MediaType.IMAGE
        for scene in scenes:
            if scene.image_url or not scene.visual_prompt:
                continue
            scene.is_generating_image = True
            try:
                scene.image_url = await self.images.generate_image(
                    image_prompt(style, scene.visual_prompt)
                )
                result.processed += 1
            except DocuGenError as e:
                logger.error(f"Image generation failed for {scene.id}: {e}")
                result.record_error(scene, "image", e)
            finally:
                scene.is_generating_image = False

        logger.info(f"Visuals batch done: {result.processed} generated, {result.error_count} errors")
        return result

    async def auto_match_scenes(self, scenes: list[Scene]) -> BatchResult:
        """Switch every scene to video and match stock footage concurrently.

        At most ``match_concurrency`` searches run at once; each result is
        written back to the scene at its own index.
        """
        result = BatchResult(scenes=scenes)
        for scene in scenes:
            scene.media_type = MediaType.VIDEO

        pending = [i for i, scene in enumerate(scenes) if not scene.stock_video_url]
        if not pending:
            return result

        semaphore = asyncio.Semaphore(self.match_concurrency)

        async def match(index: int) -> Optional[str]:
            async with semaphore:
                return await self.stock_media.find_video_for_text(scenes[index].text)

        outcomes = await asyncio.gather(*(match(i) for i in pending), return_exceptions=True)

        for index, outcome in zip(pending, outcomes):
            scene = scenes[index]
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error(f"Stock match failed for {scene.id}: {outcome}")
                result.record_error(scene, "stock", outcome)
            elif outcome:
                scene.stock_video_url = outcome
                result.processed += 1

        logger.info(f"Auto-match done: {result.processed}/{len(pending)} matched")
        return result

    async def _produce_scene(self, scene: Scene, request: AutomationRequest, result: BatchResult) -> None:
        """Audio then visuals for one scene, recording failures per stage."""
        if not scene.audio_url:
            scene.is_generating_audio = True
            try:
                scene.audio_url = await self.tts.generate_speech(scene.text, request.voice)
                scene.duration = estimate_duration(scene.text)
            except DocuGenError as e:
                logger.error(f"Audio generation failed for {scene.id}: {e}")
                result.record_error(scene, "audio", e)
            finally:
                scene.is_generating_audio = False

        scene.media_type = MediaType.VIDEO
        try:
            video_url = await self.stock_media.find_video_for_text(scene.text)
        except Exception as e:
            logger.warning(f"Stock search failed for {scene.id}, using AI image: {e}")
            video_url = None

        if video_url:
            scene.stock_video_url = video_url
            return

        scene.media_type = MediaType.IMAGE
        scene.is_generating_image = True
        try:
            scene.image_url = await self.images.generate_image(
                image_prompt(request.style, scene.visual_prompt or scene.text)
            )
        except DocuGenError as e:
            logger.error(f"Image generation failed for {scene.id}: {e}")
            result.record_error(scene, "image", e)
        finally:
            scene.is_generating_image = False

    async def run_full_automation(
        self,
        request: AutomationRequest,
        on_progress: Optional[ProgressCallback] = None,
    ) -> AutomationResult:
        """Drive a project from topic or script to saved scenes with media.

        Scenes are produced strictly one after another with a fixed pause
        between them. ``on_progress`` sees the scene list after every scene.
        """

        def report(message: str, percent: int, scenes: list[Scene]) -> None:
            logger.info(message)
            if on_progress:
                on_progress(message, percent, scenes)

        report("Creating professional script...", 5, [])
        scenes = await self.generate_scenes(request)

        report("Composing background score...", 10, scenes)
        music_url = self.stock_media.get_background_music(request.style)

        result = BatchResult(scenes=scenes)
        total = len(scenes)
        for i, scene in enumerate(scenes):
            report(f"Production: Scene {i + 1}/{total}...", 10 + (80 * i) // max(total, 1), scenes)
            await self._produce_scene(scene, request, result)
            result.processed += 1
            report(f"Production: Scene {i + 1}/{total}...", 10 + (80 * (i + 1)) // max(total, 1), scenes)
            if self.scene_delay > 0 and i + 1 < total:
                await self.sleep(self.scene_delay)

        report("Rendering final preview...", 95, scenes)
        status = JobStatus.COMPLETED if result.error_count == 0 else JobStatus.COMPLETED_WITH_ERRORS

        project = await self._load_or_create_project(request)
        project.scenes = scenes
        project.background_music_url = music_url
        project.status = ProjectStatus.COMPLETED if status == JobStatus.COMPLETED else ProjectStatus.DRAFT
        project = await self.project_store.save_project(project)

        logger.info(
            f"Automation finished for {project.id}: {status.value}, "
            f"{result.error_count} errors across {total} scenes"
        )
        return AutomationResult(
            status=status,
            project=project,
            error_count=result.error_count,
            errors=result.errors,
        )

    async def _load_or_create_project(self, request: AutomationRequest) -> Project:
        existing = None
        if request.project_id:
            existing = await self.project_store.get_project(request.project_id)

        manual = bool(request.script)
        project = existing or Project(
            id=request.project_id or f"proj_{int(time.time() * 1000)}",
            user_id=request.user_id,
            title="",
            topic="",
        )
        project.title = request.title or ("My Script Video" if manual else request.topic)
        project.topic = "Manual Script" if manual else request.topic
        project.input_language = request.input_language
        project.language = request.language
        project.style = request.style
        project.duration_level = request.duration
        project.script = request.script
        return project


class AutomationService:
    """Runs full automation in the background and answers status polls."""

    def __init__(self, job_store: JobStore[AutomationJob], runner: AutomationRunner):
        self.job_store = job_store
        self.runner = runner
        # Keep references to background tasks so they aren't garbage collected
        self._background_tasks: set[asyncio.Task] = set()

    def start_automation(self, request: AutomationRequest) -> str:
        """Create an automation job and start it. Returns the job id."""
        job = AutomationJob(id=new_job_id("auto"), project_id=request.project_id or "")
        self.job_store.create_job(job)

        task = asyncio.create_task(self._run(job, request))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return job.id

    async def _run(self, job: AutomationJob, request: AutomationRequest) -> None:
        set_job_context(job.id)
        job.status = JobStatus.PROCESSING

        def on_progress(message: str, percent: int, scenes: list[Scene]) -> None:
            job.message = message
            job.progress = max(job.progress, percent)
            job.scenes = [scene.to_dict() for scene in copy.deepcopy(scenes)]

        try:
            result = await self.runner.run_full_automation(request, on_progress)
        except Exception as e:
            logger.error(f"Automation job {job.id} failed: {e}")
            job.status = JobStatus.FAILED
            job.error = str(e)
            job.message = "Automation failed"
        else:
            job.project_id = result.project.id
            job.scenes = [scene.to_dict() for scene in result.scenes]
            job.error_count = result.error_count
            job.errors = list(result.errors)
            job.status = result.status
            job.progress = 100
            job.message = (
                "Full generation complete!"
                if result.status == JobStatus.COMPLETED
                else f"Completed with {result.error_count} errors."
            )
        finally:
            job.finished_at = time.time()
            clear_job_context()

    def get_job(self, job_id: str) -> Optional[AutomationJob]:
        return self.job_store.get_job(job_id)
