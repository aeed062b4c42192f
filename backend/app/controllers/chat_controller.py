"""
Chat controller for the reference Message Store.

Owns message persistence and the assistant turn:

- **list / create** messages for a chat
- **stream_completion**: streams a reply and saves it once the stream ends
- **generate_reply**: same reply, returned in one piece
- **generate_title** / **update_chat**: chat metadata
"""

import logging
from collections.abc import AsyncIterator

from fastapi import HTTPException

from app.core.completion import generate_reply as complete, stream_reply, summarize_title
from app.db.store import InMemoryStore
from app.models.base import utc_now
from app.models.chat import Chat, Message, Role

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# 1.  get_chat
# ---------------------------------------------------------------------------

def get_chat(chat_id: str, store: InMemoryStore) -> Chat:
    """Return the chat, or raise 404."""
    chat = store.get_chat(chat_id)
    if chat is None:
        raise HTTPException(status_code=404, detail="Chat not found")
    return chat


# ---------------------------------------------------------------------------
# 2.  messages
# ---------------------------------------------------------------------------

async def get_messages(chat_id: str, store: InMemoryStore) -> list[Message]:
    """Return every message of the chat, oldest first."""
    chat = get_chat(chat_id, store)
    return list(chat.messages)


async def create_message(chat_id: str, content: str, role: Role, store: InMemoryStore) -> Message:
    chat = get_chat(chat_id, store)
    message = store.add_message(chat, role, content)
    chat.updated_at = utc_now()
    return message


# ---------------------------------------------------------------------------
# 3.  assistant turn
# ---------------------------------------------------------------------------

def stream_completion(
    chat_id: str,
    messages: list[Message],
    store: InMemoryStore,
) -> AsyncIterator[str]:
    """Validate the request and return the reply stream.

    Validation happens here, before the response starts, so failures still
    map to a status code.  *messages* is the client's view of the
    conversation (it may include an empty streaming placeholder, which is
    ignored).
    """
    chat = get_chat(chat_id, store)
    history = [m for m in messages if m.content]
    if not history:
        raise HTTPException(status_code=400, detail="Invalid messages format")
    return _stream_and_save(chat, history, store)


async def _stream_and_save(chat: Chat, history: list[Message], store: InMemoryStore) -> AsyncIterator[str]:
    """Yield the reply chunk by chunk, then save it as an assistant message."""
    chat_id = chat.id
    parts: list[str] = []
    async for chunk in stream_reply(history):
        parts.append(chunk)
        yield chunk

    store.add_message(chat, "assistant", "".join(parts).strip())
    chat.updated_at = utc_now()
    logger.info("Streamed %d chunks into chat %s", len(parts), chat_id)


async def generate_reply(chat_id: str, store: InMemoryStore) -> Message:
    """Answer the stored history in one piece and save the reply."""
    chat = get_chat(chat_id, store)
    try:
        reply = complete(chat.messages)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    message = store.add_message(chat, "assistant", reply)
    chat.updated_at = utc_now()
    return message


# ---------------------------------------------------------------------------
# 4.  chat metadata
# ---------------------------------------------------------------------------

async def generate_title(chat_id: str, message: str, store: InMemoryStore) -> Chat:
    chat = get_chat(chat_id, store)
    chat.title = summarize_title(message)
    chat.updated_at = utc_now()
    return chat


async def update_chat(chat_id: str, project_id: str | None, store: InMemoryStore) -> Chat:
    chat = get_chat(chat_id, store)
    if project_id is not None and store.get_project(project_id) is None:
        raise HTTPException(status_code=404, detail="Project not found")
    chat.project_id = project_id
    chat.updated_at = utc_now()
    return chat
