"""Main application entry point for DocuGen."""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from tqdm import tqdm

from models.catalog import DEFAULT_VOICE, DURATION_TIERS, STYLE_IDS, VOICE_IDS
from models.jobs import JobStatus, RenderJob
from production.automation import AutomationRequest, AutomationRunner
from production.job_store import JobStore
from production.render_engine import RenderEngine, RenderService, SimulatedRenderBackend
from production.script_generator import ScriptGenerator
from services.ai_service import AIService
from services.image_generation_service import ImageGenerationService
from services.interactive_ui import InteractiveUI
from services.project_store import KeyValueStore, ProjectStore
from services.stock_media_service import StockMediaService
from services.tts_service import TTSService
from utils.config import load_config, validate_config
from utils.errors import DocuGenError
from utils.logging import setup_logging

logger = logging.getLogger(__name__)


class RenderProgressBar:
    """tqdm bar fed by render job snapshots."""

    def __init__(self):
        self.bar: Optional[tqdm] = None

    def __call__(self, job: RenderJob) -> None:
        if self.bar is None:
            self.bar = tqdm(total=100, desc="Rendering", unit="%", leave=True)
        self.bar.n = job.progress
        self.bar.set_description(job.current_step)
        self.bar.refresh()

    def close(self) -> None:
        if self.bar:
            self.bar.close()


class DocuGenApp:
    """Wires services together for the command line."""

    def __init__(self, config: dict):
        self.config = config
        self.ui = InteractiveUI()
        self.kv = KeyValueStore(config["db_path"])
        self.store = ProjectStore(self.kv)
        self.ai = AIService(config["gemini_api_key"], config["gemini_model"])
        self.images = ImageGenerationService(config["gemini_api_key"], config["gemini_image_model"])

    async def __aenter__(self) -> "DocuGenApp":
        await self.kv.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.images.close()
        await self.kv.close()

    def build_runner(self) -> AutomationRunner:
        return AutomationRunner(
            script_generator=ScriptGenerator(self.ai),
            tts_service=TTSService(self.config["gemini_api_key"], self.config["gemini_tts_model"]),
            image_service=self.images,
            stock_media=StockMediaService.from_config(self.config, self.ai),
            project_store=self.store,
            scene_delay=self.config["automation_scene_delay"],
            match_concurrency=self.config["auto_match_concurrency"],
        )

    def build_render_service(self) -> RenderService:
        backend = SimulatedRenderBackend(time_scale=self.config["render_time_scale"])
        return RenderService(
            JobStore[RenderJob](ttl_seconds=self.config["render_job_ttl_seconds"]),
            RenderEngine(backend),
        )

    async def automate(self, request: AutomationRequest) -> int:
        self.ui.display_welcome()

        def on_progress(message: str, percent: int, scenes) -> None:
            self.ui.display_processing_status(f"[{percent:3d}%] {message}")

        result = await self.build_runner().run_full_automation(request, on_progress)
        self.ui.display_scenes(result.scenes, title=result.project.title or "Scenes")

        if result.status == JobStatus.COMPLETED:
            self.ui.display_success(f"Full generation complete! Project id: {result.project.id}")
            return 0

        self.ui.display_error(f"Completed with {result.error_count} errors (project {result.project.id})")
        self.ui.display_errors(result.errors)
        return 1

    async def render(self, project_id: str) -> int:
        project = await self.store.get_project(project_id)
        if project is None:
            self.ui.display_error(f"Project not found: {project_id}")
            return 1

        service = self.build_render_service()
        job_id = await service.start_render(project)
        self.ui.display_processing_status(f"Render job {job_id} started")

        progress_bar = RenderProgressBar()
        try:
            job = await service.wait_for_completion(job_id, interval=1.0, on_poll=progress_bar)
        finally:
            progress_bar.close()

        if job.status != JobStatus.COMPLETED or job.assets is None:
            self.ui.display_error(job.error or "Video rendering failed.")
            return 1

        self.ui.display_assets(job.assets)
        self.ui.display_success("Video rendered successfully!")
        return 0


def serve(host: str, port: int) -> None:
    import uvicorn

    from api.server import app

    uvicorn.run(app, host=host, port=port)


async def run_command(args: argparse.Namespace, config: dict) -> int:
    async with DocuGenApp(config) as app:
        if args.command == "automate":
            request = AutomationRequest(
                user_id=args.user,
                topic=args.topic or "",
                script=args.script_file.read() if args.script_file else None,
                project_id=args.project_id,
                input_language=args.input_language,
                language=args.language,
                style=args.style,
                duration=args.duration,
                voice=args.voice,
            )
            return await app.automate(request)
        return await app.render(args.project_id)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="DocuGen AI video studio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python src/main.py serve --port 8000
  python src/main.py automate --topic "The history of tea" --style documentary
  python src/main.py render --project-id proj_1700000000000
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)

    automate_parser = subparsers.add_parser("automate", help="Run full automation for a topic or script")
    source = automate_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--topic", help="Video topic")
    source.add_argument("--script-file", type=argparse.FileType("r", encoding="utf-8"), help="Manual script file")
    automate_parser.add_argument("--style", choices=sorted(STYLE_IDS), default="documentary")
    automate_parser.add_argument("--duration", choices=list(DURATION_TIERS), default="short")
    automate_parser.add_argument("--language", default="en", help="Narration language code")
    automate_parser.add_argument("--input-language", default="en", help="Language code of the topic/script")
    automate_parser.add_argument("--voice", choices=sorted(VOICE_IDS), default=DEFAULT_VOICE)
    automate_parser.add_argument("--user", default="cli_user", help="Owner user id")
    automate_parser.add_argument("--project-id", help="Update this project instead of creating one")

    render_parser = subparsers.add_parser("render", help="Render a saved project")
    render_parser.add_argument("--project-id", required=True)

    args = parser.parse_args()

    config = load_config()
    setup_logging(config["log_level"], config["log_json"])
    for issue in validate_config(config):
        logger.warning(f"Configuration: {issue}")

    if args.command == "serve":
        serve(args.host, args.port)
        return

    try:
        exit_code = asyncio.run(run_command(args, config))
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        sys.exit(0)
    except DocuGenError as e:
        logger.error(f"Application error: {e}")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
