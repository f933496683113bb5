"""Full automation routes for the DocuGen API."""

from api.dependencies import get_automation_service
from api.schemas import AutomationRequestBody, JobAcceptedResponse
from fastapi import APIRouter, Depends, HTTPException
from production.automation import AutomationRequest, AutomationService

router = APIRouter(tags=["Automation"])


@router.post(
    "/api/automation",
    response_model=JobAcceptedResponse,
    status_code=202,
    summary="Start full automation",
    description=(
        "Script, narration, visuals and save for a whole project, run in the "
        "background. Poll the returned job id for progress."
    ),
    responses={202: {"description": "Job accepted"}},
)
async def start_automation(
    body: AutomationRequestBody,
    service: AutomationService = Depends(get_automation_service),
) -> dict:
    request = AutomationRequest(**body.model_dump())
    job_id = service.start_automation(request)
    return {"job_id": job_id, "status": "queued"}


@router.get(
    "/api/automation/{job_id}",
    summary="Automation job status",
    responses={404: {"description": "Job not found"}},
)
async def get_automation_status(
    job_id: str,
    service: AutomationService = Depends(get_automation_service),
) -> dict:
    job = service.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail=f"Automation job not found: {job_id}")
    return job.to_dict()
