"""Production pipeline - script, media, automation and render jobs."""

from .script_generator import ScriptGenerationError, ScriptGenerator, get_duration_tier
from .job_store import JobStore, new_job_id
from .render_engine import (
    RenderBackend,
    RenderEngine,
    RenderPhase,
    RenderService,
    SimulatedRenderBackend,
)
from .automation import (
    AutomationRequest,
    AutomationResult,
    AutomationRunner,
    AutomationService,
    BatchResult,
)

__all__ = [
    "ScriptGenerator",
    "ScriptGenerationError",
    "get_duration_tier",
    "JobStore",
    "new_job_id",
    "RenderBackend",
    "RenderEngine",
    "RenderPhase",
    "RenderService",
    "SimulatedRenderBackend",
    "AutomationRequest",
    "AutomationResult",
    "AutomationRunner",
    "AutomationService",
    "BatchResult",
]
