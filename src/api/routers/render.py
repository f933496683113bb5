"""Render job routes for the DocuGen API."""

from api.dependencies import get_project_store, get_render_service
from api.schemas import JobAcceptedResponse, RenderRequest
from fastapi import APIRouter, Depends, HTTPException
from production.render_engine import RenderService
from services.project_store import ProjectStore

router = APIRouter(tags=["Render"])


@router.post(
    "/api/render",
    response_model=JobAcceptedResponse,
    status_code=202,
    summary="Start render",
    description="Render an inline project or a saved one (by `projectId`). Poll the job for progress.",
    responses={202: {"description": "Job accepted"}, 404: {"description": "Project not found"}},
)
async def start_render(
    body: RenderRequest,
    service: RenderService = Depends(get_render_service),
    store: ProjectStore = Depends(get_project_store),
) -> dict:
    if body.project is not None:
        project = body.project.to_project()
    else:
        project = await store.get_project(body.project_id)
        if project is None:
            raise HTTPException(status_code=404, detail=f"Project not found: {body.project_id}")

    job_id = await service.start_render(project)
    return {"job_id": job_id, "status": "processing"}


@router.get(
    "/api/render/{job_id}",
    summary="Render job status",
    description="Returns the RenderJob; `assets` is present only once the job completed.",
    responses={404: {"description": "Job not found"}},
)
async def get_render_status(
    job_id: str,
    service: RenderService = Depends(get_render_service),
) -> dict:
    job = service.get_job_status(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail=f"Render job not found: {job_id}")
    return job.to_dict()


@router.get("/api/render", summary="List render jobs")
async def list_render_jobs(service: RenderService = Depends(get_render_service)) -> list[dict]:
    return [job.to_dict() for job in service.list_jobs()]
