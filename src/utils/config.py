"""Configuration loading and validation for DocuGen."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Get the project root directory (parent of src)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Load environment variables from .env file in project root
load_dotenv(PROJECT_ROOT / ".env")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def load_config() -> dict:
    """Load configuration from environment variables."""

    # Helper function to resolve paths relative to project root
    def resolve_path(path: str | None, default_relative: str) -> str:
        if not path:
            return str(PROJECT_ROOT / default_relative)
        if Path(path).is_absolute():
            return path
        return str(PROJECT_ROOT / path)

    config = {
        # Gemini (script generation, keywords, TTS, images, proxy)
        "gemini_api_key": os.getenv("GEMINI_API_KEY", ""),
        "gemini_model": os.getenv("GEMINI_MODEL", "gemini-3-flash-preview"),
        "gemini_tts_model": os.getenv("GEMINI_TTS_MODEL", "gemini-2.5-flash-preview-tts"),
        "gemini_image_model": os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image"),
        "gemini_proxy_model": os.getenv("GEMINI_PROXY_MODEL", "gemini-1.5-flash"),
        # Stock providers (both optional, mock catalog otherwise)
        "pexels_api_key": os.getenv("PEXELS_API_KEY", ""),
        "pixabay_api_key": os.getenv("PIXABAY_API_KEY", ""),
        # Key-value store for projects and the session user
        "db_path": resolve_path(os.getenv("DOCUGEN_DB_PATH"), ".docugen/store.db"),
        # Render simulation
        "render_time_scale": float(os.getenv("RENDER_TIME_SCALE", "1.0")),
        "render_job_ttl_seconds": int(os.getenv("RENDER_JOB_TTL_SECONDS", "3600")),
        "job_cleanup_interval_seconds": int(os.getenv("JOB_CLEANUP_INTERVAL_SECONDS", "300")),
        # Automation pacing
        "automation_scene_delay": float(os.getenv("AUTOMATION_SCENE_DELAY", "0.2")),
        "auto_match_concurrency": int(os.getenv("AUTO_MATCH_CONCURRENCY", "5")),
        # Uploads
        "max_upload_mb": int(os.getenv("MAX_UPLOAD_MB", "100")),
        "transcribe_delay": float(os.getenv("TRANSCRIBE_DELAY", "2.5")),
        # Avatar studio (simulated lip-sync)
        "avatar_max_upload_mb": int(os.getenv("AVATAR_MAX_UPLOAD_MB", "10")),
        "avatar_upload_delay": float(os.getenv("AVATAR_UPLOAD_DELAY", "1.0")),
        "avatar_render_delay": float(os.getenv("AVATAR_RENDER_DELAY", "4.0")),
        # Logging
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "log_json": _env_bool("LOG_JSON", "false"),
        # HTTP
        "cors_origins": [
            origin.strip()
            for origin in os.getenv(
                "CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"
            ).split(",")
            if origin.strip()
        ],
    }

    return config


def validate_config(config: dict) -> list[str]:
    """Validate configuration and return list of errors."""
    errors = []

    # Gemini is needed for every generation stage; stock search works without it
    if not config.get("gemini_api_key"):
        errors.append("GEMINI_API_KEY is required for script, speech and image generation")

    if config.get("auto_match_concurrency", 0) < 1:
        errors.append("AUTO_MATCH_CONCURRENCY must be at least 1")

    if config.get("render_time_scale", 0) < 0:
        errors.append("RENDER_TIME_SCALE cannot be negative")

    if config.get("automation_scene_delay", 0) < 0:
        errors.append("AUTOMATION_SCENE_DELAY cannot be negative")

    if config.get("render_job_ttl_seconds", 0) <= 0:
        errors.append("RENDER_JOB_TTL_SECONDS must be positive")

    if config.get("max_upload_mb", 0) <= 0:
        errors.append("MAX_UPLOAD_MB must be positive")

    if config.get("avatar_max_upload_mb", 10) <= 0:
        errors.append("AVATAR_MAX_UPLOAD_MB must be positive")

    if min(config.get("avatar_upload_delay", 0), config.get("avatar_render_delay", 0)) < 0:
        errors.append("AVATAR_UPLOAD_DELAY and AVATAR_RENDER_DELAY cannot be negative")

    db_path = config.get("db_path")
    if db_path:
        try:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            errors.append(f"Cannot create data directory: {e}")

    return errors
