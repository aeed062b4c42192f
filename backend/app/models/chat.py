from typing import Literal

from pydantic import Field

from app.core.config import settings
from app.models.base import BaseRecord

Role = Literal["user", "assistant"]


class Message(BaseRecord):
    role: Role
    content: str = ""
    chat_id: str | None = None


class Chat(BaseRecord):
    title: str = settings.DEFAULT_CHAT_TITLE
    project_id: str | None = None

    # Ordered oldest-first; mutated in place by ChatSession
    messages: list[Message] = Field(default_factory=list)
