from typing import Any

from fastapi import HTTPException
from pydantic.alias_generators import to_snake

from app.db.store import InMemoryStore
from app.models.base import utc_now
from app.models.project import Project


async def list_projects(store: InMemoryStore) -> list[Project]:
    return sorted(store.projects.values(), key=lambda p: p.updated_at, reverse=True)


async def get_project(project_id: str, store: InMemoryStore) -> Project:
    project = store.get_project(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


async def update_project(project_id: str, changes: dict[str, Any], store: InMemoryStore) -> Project:
    project = await get_project(project_id, store)
    # Keys may arrive in either spelling; compare on field names
    changes = {to_snake(k): v for k, v in changes.items()}
    changes = {k: v for k, v in changes.items() if k not in ("id", "created_at", "updated_at")}
    updated = project.model_copy(update={**changes, "updated_at": utc_now()})
    store.add_project(updated)
    return updated
