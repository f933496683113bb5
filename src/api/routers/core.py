"""Core routes for the DocuGen API (root and health check)."""

from api.dependencies import get_config
from api.schemas import HealthResponse, RootResponse
from fastapi import APIRouter
from utils.config import validate_config

router = APIRouter(tags=["Core"])


@router.get(
    "/",
    response_model=RootResponse,
    summary="API root",
    description="Returns API name and version.",
)
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "DocuGen API", "version": "1.0.0"}


@router.get(
    "/api/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns server health status and any configuration problems.",
)
async def health() -> dict:
    """Health check endpoint."""
    issues = validate_config(get_config())
    return {"status": "healthy" if not issues else "degraded", "issues": issues}
