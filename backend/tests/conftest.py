import asyncio
from datetime import timedelta

import pytest

from app.core.errors import NetworkFailure, StreamInterrupted
from app.models.base import utc_now
from app.models.chat import Chat, Message
from app.models.project import Project
from app.state.registry import ChatRegistry, ProjectRegistry

CHAT_ID = "test-uuid"


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------
def make_message(**overrides) -> Message:
    data = {
        "id": "test-id",
        "content": "Test message",
        "role": "user",
        "chat_id": CHAT_ID,
    }
    data.update(overrides)
    return Message(**data)


def make_chat(**overrides) -> Chat:
    data = {"id": CHAT_ID, "title": "Project help", "project_id": None, "messages": []}
    data.update(overrides)
    return Chat(**data)


def default_messages(chat_id: str = CHAT_ID) -> list[Message]:
    return [
        make_message(id="test-id2", content="Hello, can you help me with my project?", chat_id=chat_id),
        make_message(
            id="test-id3",
            role="assistant",
            content="Of course! What specific questions do you have?",
            chat_id=chat_id,
        ),
    ]


class FakeChatApi:
    """Scriptable stand-in for ChatApiClient that records every call."""

    def __init__(self):
        self.calls = []
        self.listed = default_messages()
        self.list_error = None
        self.list_gate = None
        self.created = None
        self.create_error = None
        self.title = "Generated Title"
        self.title_error = None
        self.title_gate = None
        self.chunks = ["Hello! ", "How can I help you?"]
        self.open_error = None
        self.chunk_error = None
        self.on_chunk = None
        self.streamed_context = None
        self.updated_chat = None
        self.update_chat_error = None
        self.updated_project = None
        self.update_project_error = None

    def names(self):
        return [name for name, _ in self.calls]

    def count(self, name):
        return self.names().count(name)

    async def list_messages(self, chat_id):
        self.calls.append(("list_messages", (chat_id,)))
        if self.list_gate is not None:
            await self.list_gate.wait()
        if self.list_error is not None:
            raise self.list_error
        return [m.model_copy() for m in self.listed]

    async def create_message(self, chat_id, content, role="user"):
        self.calls.append(("create_message", (chat_id, content, role)))
        await asyncio.sleep(0)
        if self.create_error is not None:
            raise self.create_error
        if self.created is not None:
            return self.created
        return make_message(id="user-1", content=content, role=role, chat_id=chat_id)

    async def generate_title(self, chat_id, message):
        self.calls.append(("generate_title", (chat_id, message)))
        await asyncio.sleep(0)
        if self.title_gate is not None:
            await self.title_gate.wait()
        if self.title_error is not None:
            raise self.title_error
        return make_chat(id=chat_id, title=self.title)

    def stream_completion(self, chat_id, messages):
        self.calls.append(("stream_completion", (chat_id,)))
        self.streamed_context = [(m.id, m.role, m.content) for m in messages]
        return self._stream()

    async def _stream(self):
        if self.open_error is not None:
            raise self.open_error
        for chunk in self.chunks:
            await asyncio.sleep(0)
            yield chunk
            if self.on_chunk is not None:
                self.on_chunk(chunk)
        if self.chunk_error is not None:
            raise self.chunk_error

    async def update_chat(self, chat_id, *, project_id):
        self.calls.append(("update_chat", (chat_id, project_id)))
        await asyncio.sleep(0)
        if self.update_chat_error is not None:
            raise self.update_chat_error
        if self.updated_chat is not None:
            return self.updated_chat
        return make_chat(id=chat_id, project_id=project_id, updated_at=utc_now() + timedelta(seconds=1))

    async def update_project(self, project_id, changes):
        self.calls.append(("update_project", (project_id, dict(changes))))
        await asyncio.sleep(0)
        if self.update_project_error is not None:
            raise self.update_project_error
        if self.updated_project is not None:
            return self.updated_project
        return Project(id=project_id, name=changes.get("name", "Server Name"), slug="server-slug")


# -------------------------------------------------------------------
# Fixtures
# -------------------------------------------------------------------
@pytest.fixture
def api():
    return FakeChatApi()


@pytest.fixture
def registry():
    return ChatRegistry([make_chat()])


@pytest.fixture
def project_registry():
    return ProjectRegistry([
        Project(id="p1", name="Research"),
        Project(id="p2", name="Side quest"),
    ])


@pytest.fixture
def network_failure():
    return NetworkFailure("POST /api/chats failed with 500", status_code=500)


@pytest.fixture
def stream_interrupted():
    return StreamInterrupted("stream broke after 1 chunks")
