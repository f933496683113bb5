"""Service singletons and dependency injection for the DocuGen API."""

import logging

from models.jobs import AutomationJob, RenderJob
from production.automation import AutomationRunner, AutomationService
from production.job_store import JobStore
from production.render_engine import RenderEngine, RenderService, SimulatedRenderBackend
from production.script_generator import ScriptGenerator
from services.ai_service import AIService
from services.avatar_service import AvatarService
from services.gemini_proxy import GeminiProxy
from services.image_generation_service import ImageGenerationService
from services.project_store import KeyValueStore, ProjectStore
from services.stock_media_service import StockMediaService
from services.subtitle_service import SubtitleService
from services.tts_service import TTSService
from utils.config import load_config

logger = logging.getLogger(__name__)

# Service singletons
_config: dict | None = None
_ai_service: AIService | None = None
_tts_service: TTSService | None = None
_image_gen_service: ImageGenerationService | None = None
_stock_media_service: StockMediaService | None = None
_script_generator: ScriptGenerator | None = None
_subtitle_service: SubtitleService | None = None
_avatar_service: AvatarService | None = None
_gemini_proxy: GeminiProxy | None = None
_kv_store: KeyValueStore | None = None
_project_store: ProjectStore | None = None
_render_service: RenderService | None = None
_automation_service: AutomationService | None = None


def get_config() -> dict:
    """Get the configuration loaded for this process."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_ai_service() -> AIService:
    """Get or create the AI service instance."""
    global _ai_service
    if _ai_service is None:
        config = get_config()
        _ai_service = AIService(
            api_key=config.get("gemini_api_key", ""),
            model_name=config.get("gemini_model", "gemini-3-flash-preview"),
        )
    return _ai_service


def get_tts_service() -> TTSService:
    """Get or create the TTS service instance."""
    global _tts_service
    if _tts_service is None:
        config = get_config()
        _tts_service = TTSService(
            api_key=config.get("gemini_api_key", ""),
            model_name=config.get("gemini_tts_model", "gemini-2.5-flash-preview-tts"),
        )
    return _tts_service


def get_image_gen_service() -> ImageGenerationService:
    """Get or create the image generation service instance."""
    global _image_gen_service
    if _image_gen_service is None:
        config = get_config()
        _image_gen_service = ImageGenerationService(
            api_key=config.get("gemini_api_key", ""),
            model_name=config.get("gemini_image_model", "gemini-2.5-flash-image"),
        )
    return _image_gen_service


def get_stock_media_service() -> StockMediaService:
    """Get or create the stock media service instance."""
    global _stock_media_service
    if _stock_media_service is None:
        _stock_media_service = StockMediaService.from_config(get_config(), get_ai_service())
    return _stock_media_service


def get_script_generator() -> ScriptGenerator:
    global _script_generator
    if _script_generator is None:
        _script_generator = ScriptGenerator(get_ai_service())
    return _script_generator


def get_subtitle_service() -> SubtitleService:
    global _subtitle_service
    if _subtitle_service is None:
        config = get_config()
        _subtitle_service = SubtitleService(
            max_upload_mb=config.get("max_upload_mb", 100),
            delay=config.get("transcribe_delay", 2.5),
        )
    return _subtitle_service


def get_avatar_service() -> AvatarService:
    global _avatar_service
    if _avatar_service is None:
        config = get_config()
        _avatar_service = AvatarService(
            tts_service=get_tts_service(),
            max_upload_mb=config.get("avatar_max_upload_mb", 10),
            upload_delay=config.get("avatar_upload_delay", 1.0),
            render_delay=config.get("avatar_render_delay", 4.0),
        )
    return _avatar_service


def get_gemini_proxy() -> GeminiProxy:
    global _gemini_proxy
    if _gemini_proxy is None:
        config = get_config()
        _gemini_proxy = GeminiProxy(
            api_key=config.get("gemini_api_key", ""),
            model_name=config.get("gemini_proxy_model", "gemini-1.5-flash"),
        )
    return _gemini_proxy


async def init_project_store() -> ProjectStore:
    """Open the key-value store and create the project store."""
    global _kv_store, _project_store
    if _project_store is None:
        _kv_store = KeyValueStore(get_config()["db_path"])
        await _kv_store.connect()
        _project_store = ProjectStore(_kv_store)
    return _project_store


def get_project_store() -> ProjectStore:
    """Get the project store opened at startup."""
    if _project_store is None:
        raise RuntimeError("Project store not initialized. Call init_project_store() first.")
    return _project_store


def get_render_service() -> RenderService:
    """Get or create the render service with its own job store."""
    global _render_service
    if _render_service is None:
        config = get_config()
        backend = SimulatedRenderBackend(time_scale=config.get("render_time_scale", 1.0))
        _render_service = RenderService(
            job_store=JobStore[RenderJob](ttl_seconds=config.get("render_job_ttl_seconds", 3600)),
            engine=RenderEngine(backend),
        )
    return _render_service


def get_automation_runner() -> AutomationRunner:
    config = get_config()
    return AutomationRunner(
        script_generator=get_script_generator(),
        tts_service=get_tts_service(),
        image_service=get_image_gen_service(),
        stock_media=get_stock_media_service(),
        project_store=get_project_store(),
        scene_delay=config.get("automation_scene_delay", 0.2),
        match_concurrency=config.get("auto_match_concurrency", 5),
    )


def get_automation_service() -> AutomationService:
    """Get or create the automation service with its own job store."""
    global _automation_service
    if _automation_service is None:
        config = get_config()
        _automation_service = AutomationService(
            job_store=JobStore[AutomationJob](ttl_seconds=config.get("render_job_ttl_seconds", 3600)),
            runner=get_automation_runner(),
        )
    return _automation_service


def cleanup_expired_jobs() -> int:
    """Evict expired jobs from every job store that exists."""
    removed = 0
    if _render_service is not None:
        removed += _render_service.job_store.cleanup_expired_jobs()
    if _automation_service is not None:
        removed += _automation_service.job_store.cleanup_expired_jobs()
    return removed


async def shutdown_services() -> None:
    """Close clients and the key-value store."""
    global _kv_store, _project_store
    if _image_gen_service is not None:
        await _image_gen_service.close()
    if _gemini_proxy is not None:
        await _gemini_proxy.close()
    if _kv_store is not None:
        await _kv_store.close()
    _kv_store = None
    _project_store = None
    reset_services()


def reset_services() -> None:
    """Drop every singleton so the next access rebuilds from fresh config."""
    global _config, _ai_service, _tts_service, _image_gen_service, _stock_media_service
    global _script_generator, _subtitle_service, _avatar_service, _gemini_proxy
    global _render_service, _automation_service
    _config = None
    _ai_service = None
    _tts_service = None
    _image_gen_service = None
    _stock_media_service = None
    _script_generator = None
    _subtitle_service = None
    _avatar_service = None
    _gemini_proxy = None
    _render_service = None
    _automation_service = None
