from fastapi import APIRouter, Depends

from app.api.deps import get_store
from app.controllers import project_controller
from app.db.store import InMemoryStore
from app.models.project import Project
from app.schemas.project import ProjectUpdate

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[Project])
async def list_projects(store: InMemoryStore = Depends(get_store)):
    """List all projects, most recently updated first."""
    return await project_controller.list_projects(store)


@router.put("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    store: InMemoryStore = Depends(get_store),
):
    """Apply a partial update; only the fields sent are changed."""
    changes = {**payload.model_dump(exclude_unset=True), **(payload.model_extra or {})}
    return await project_controller.update_project(project_id, changes, store)
