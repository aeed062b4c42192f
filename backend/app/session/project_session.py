import logging
from typing import Any, Protocol

from app.models.project import Project
from app.state.registry import ProjectRegistry

logger = logging.getLogger(__name__)


class ProjectStore(Protocol):
    async def update_project(self, project_id: str, changes: dict[str, Any]) -> Project: ...


class ProjectSession:
    """Binds to one project id in a shared :class:`ProjectRegistry`."""

    def __init__(self, project_id: str, registry: ProjectRegistry, api: ProjectStore):
        self.project_id = project_id
        self.registry = registry
        self.api = api

    @property
    def project(self) -> Project | None:
        return self.registry.find(self.project_id)

    async def update_project(self, changes: dict[str, Any]) -> Project | None:
        """Apply *changes* optimistically, then persist them.

        On failure the project is restored and None is returned; the error
        is logged, not raised.
        """
        project = self.project
        if project is None:
            return None

        original = project.model_copy(deep=True)
        self.registry.merge(self.project_id, **changes)

        try:
            response = await self.api.update_project(self.project_id, changes)
        except Exception:
            logger.error("Error updating project %s", self.project_id, exc_info=True)
            self.registry.replace(original)
            return None

        self.registry.merge(self.project_id, **response.model_dump())
        return response
