from pydantic import ConfigDict

from app.models.base import CamelModel


class ProjectUpdate(CamelModel):
    """Partial project update; only the fields actually sent are applied."""

    model_config = ConfigDict(extra="allow")

    name: str | None = None
