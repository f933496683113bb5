#!/usr/bin/env python
"""FastAPI server for the DocuGen web interface."""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

# Add src directory to Python path for imports
src_dir = Path(__file__).parent.parent
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import dependencies
from api.routers import (
    automation,
    avatars,
    core,
    generation,
    projects,
    proxy,
    render,
    stock,
    subtitles,
)
from utils.config import validate_config
from utils.errors import ConfigurationError, NotFoundError, UpstreamServiceError, ValidationError
from utils.logging import setup_logging

logger = logging.getLogger(__name__)


async def _cleanup_jobs_periodically(interval: float) -> None:
    """Evict expired render and automation jobs every ``interval`` seconds."""
    while True:
        await asyncio.sleep(interval)
        removed = dependencies.cleanup_expired_jobs()
        if removed:
            logger.info(f"Evicted {removed} expired jobs")


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = dependencies.get_config()
    for issue in validate_config(config):
        logger.warning(f"Configuration: {issue}")

    await dependencies.init_project_store()
    dependencies.get_render_service()
    dependencies.get_automation_service()

    cleanup_task = asyncio.create_task(
        _cleanup_jobs_periodically(config.get("job_cleanup_interval_seconds", 300))
    )
    logger.info("DocuGen API started")
    try:
        yield
    finally:
        cleanup_task.cancel()
        try:
            await cleanup_task
        except asyncio.CancelledError:
            pass
        await dependencies.shutdown_services()
        logger.info("DocuGen API stopped")


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error(f"Configuration error on {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(UpstreamServiceError)
    async def upstream_error_handler(request: Request, exc: UpstreamServiceError) -> JSONResponse:
        logger.error(f"Upstream error on {request.url.path}: {exc}")
        return JSONResponse(status_code=502, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    config = dependencies.get_config()
    setup_logging(config.get("log_level", "INFO"), config.get("log_json", False))

    app = FastAPI(title="DocuGen API", version="1.0.0", lifespan=lifespan)

    # CORS middleware for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get("cors_origins", ["http://localhost:5173"]),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    for router in (
        core.router,
        projects.router,
        generation.router,
        stock.router,
        automation.router,
        render.router,
        subtitles.router,
        avatars.router,
        proxy.router,
    ):
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
