from app.models.base import CamelModel
from app.models.chat import Message, Role


class MessageCreate(CamelModel):
    content: str
    role: Role = "user"


class StreamRequest(CamelModel):
    messages: list[Message]


class TitleRequest(CamelModel):
    message: str


class ChatUpdate(CamelModel):
    project_id: str | None = None
