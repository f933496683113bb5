"""Project and session routes for the DocuGen API."""

import logging

from api.dependencies import (
    get_automation_runner,
    get_project_store,
)
from api.schemas import (
    BatchAudioRequest,
    BatchVisualsRequest,
    DeleteResponse,
    ProjectSchema,
    SceneTextRequest,
    UserSchema,
)
from fastapi import APIRouter, Depends, HTTPException, Query
from production.automation import AutomationRunner
from services.project_store import ProjectStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Projects"])


async def _require_project(store: ProjectStore, project_id: str):
    project = await store.get_project(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail=f"Project not found: {project_id}")
    return project


@router.get(
    "/api/projects",
    summary="List projects",
    description="List a user's projects, most recently updated first.",
)
async def list_projects(
    user_id: str = Query(..., min_length=1),
    store: ProjectStore = Depends(get_project_store),
) -> list[dict]:
    projects = await store.get_user_projects(user_id)
    return [project.to_dict() for project in projects]


@router.get(
    "/api/projects/{project_id}",
    summary="Get project",
    responses={404: {"description": "Project not found"}},
)
async def get_project(
    project_id: str,
    store: ProjectStore = Depends(get_project_store),
) -> dict:
    project = await _require_project(store, project_id)
    return project.to_dict()


@router.post(
    "/api/projects",
    summary="Save project",
    description="Create the project if its id is new, otherwise update it in place.",
)
async def save_project(
    body: ProjectSchema,
    store: ProjectStore = Depends(get_project_store),
) -> dict:
    saved = await store.save_project(body.to_project())
    return saved.to_dict()


@router.delete(
    "/api/projects/{project_id}",
    response_model=DeleteResponse,
    summary="Delete project",
    description="Deleting an unknown id is not an error; `deleted` tells whether anything was removed.",
)
async def delete_project(
    project_id: str,
    store: ProjectStore = Depends(get_project_store),
) -> dict:
    return {"deleted": await store.delete_project(project_id)}


@router.patch(
    "/api/projects/{project_id}/scenes/{scene_id}",
    summary="Edit scene narration",
    description="Replace a scene's narration text, re-estimate its duration and save the project.",
    responses={404: {"description": "Project or scene not found"}},
)
async def update_scene_text(
    project_id: str,
    scene_id: str,
    body: SceneTextRequest,
    store: ProjectStore = Depends(get_project_store),
) -> dict:
    project = await _require_project(store, project_id)
    scene = next((s for s in project.scenes if s.id == scene_id), None)
    if scene is None:
        raise HTTPException(status_code=404, detail=f"Scene not found: {scene_id}")

    scene.set_text(body.text)
    await store.save_project(project)
    return scene.to_dict()


@router.post(
    "/api/projects/{project_id}/audio",
    summary="Generate all audio",
    description="Narrate every scene without audio, then save. Failures are tallied per scene.",
    responses={404: {"description": "Project not found"}},
)
async def generate_project_audio(
    project_id: str,
    body: BatchAudioRequest,
    store: ProjectStore = Depends(get_project_store),
    runner: AutomationRunner = Depends(get_automation_runner),
) -> dict:
    project = await _require_project(store, project_id)
    result = await runner.generate_all_audio(project.scenes, body.voice)
    await store.save_project(project)
    return result.to_dict()


@router.post(
    "/api/projects/{project_id}/visuals",
    summary="Generate all visuals",
    description="Switch every scene to image mode, generate missing images, then save.",
    responses={404: {"description": "Project not found"}},
)
async def generate_project_visuals(
    project_id: str,
    body: BatchVisualsRequest,
    store: ProjectStore = Depends(get_project_store),
    runner: AutomationRunner = Depends(get_automation_runner),
) -> dict:
    project = await _require_project(store, project_id)
    result = await runner.generate_all_visuals(project.scenes, body.style or project.style)
    await store.save_project(project)
    return result.to_dict()


@router.get("/api/session", summary="Current session user")
async def get_session(store: ProjectStore = Depends(get_project_store)) -> dict:
    user = await store.get_current_user()
    return {"user": user.to_dict() if user else None}


@router.put("/api/session", summary="Set session user")
async def set_session(
    body: UserSchema,
    store: ProjectStore = Depends(get_project_store),
) -> dict:
    user = body.to_user()
    await store.set_current_user(user)
    logger.info(f"Session started for {user.id}")
    return {"user": user.to_dict()}


@router.delete("/api/session", summary="Clear session user")
async def clear_session(store: ProjectStore = Depends(get_project_store)) -> dict:
    await store.clear_current_user()
    return {"user": None}
