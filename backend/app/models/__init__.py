from app.models.base import BaseRecord, CamelModel, utc_now  # noqa: F401
from app.models.chat import Chat, Message, Role  # noqa: F401
from app.models.project import Project  # noqa: F401
