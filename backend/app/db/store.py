"""In-memory backing store for the reference Message Store server."""

import uuid
from collections.abc import Iterable

from app.models.chat import Chat, Message, Role
from app.models.project import Project


class InMemoryStore:
    def __init__(self, chats: Iterable[Chat] = (), projects: Iterable[Project] = ()):
        self.chats: dict[str, Chat] = {}
        self.projects: dict[str, Project] = {p.id: p for p in projects}
        for chat in chats:
            self.add_chat(chat)

    def add_chat(self, chat: Chat) -> Chat:
        self.chats[chat.id] = chat
        return chat

    def add_project(self, project: Project) -> Project:
        self.projects[project.id] = project
        return project

    def get_chat(self, chat_id: str) -> Chat | None:
        return self.chats.get(chat_id)

    def get_project(self, project_id: str) -> Project | None:
        return self.projects.get(project_id)

    def add_message(self, chat: Chat, role: Role, content: str) -> Message:
        message = Message(id=str(uuid.uuid4()), chat_id=chat.id, role=role, content=content)
        chat.messages.append(message)
        return message


_default_store = InMemoryStore()


def get_default_store() -> InMemoryStore:
    return _default_store
