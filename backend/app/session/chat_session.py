"""
Chat session controller.

A :class:`ChatSession` binds to one chat id and keeps the registry's copy of
that chat in step with the Message Store:

- ``fetch_messages`` loads the authoritative message list, at most once
  unless forced with ``refresh=True``.
- ``send_message`` inserts the user message optimistically, persists it,
  streams the assistant reply into a placeholder and finally resyncs from
  the store.  It never raises; failures are logged and rolled back.
- ``assign_to_project`` moves the chat to a project optimistically and
  re-raises on failure after restoring the previous project.
"""

import asyncio
import logging
from typing import Protocol

from app.models.base import utc_now
from app.models.chat import Chat, Message
from app.session.pending import (
    OPTIMISTIC_PREFIX,
    STREAMING_PREFIX,
    PendingMessage,
    local_message,
)
from app.session.streaming import StreamAssembler
from app.state.registry import ChatRegistry

logger = logging.getLogger(__name__)


class MessageStore(Protocol):
    """The slice of :class:`~app.clients.chat_api.ChatApiClient` a session uses."""

    async def list_messages(self, chat_id: str) -> list[Message]: ...

    async def create_message(self, chat_id: str, content: str, role: str = "user") -> Message: ...

    def stream_completion(self, chat_id: str, messages: list[Message]): ...

    async def generate_title(self, chat_id: str, message: str) -> Chat: ...

    async def update_chat(self, chat_id: str, *, project_id: str | None) -> Chat: ...


class ChatSession:
    def __init__(self, chat_id: str, registry: ChatRegistry, api: MessageStore):
        self.chat_id = chat_id
        self.registry = registry
        self.api = api
        self._fetches_in_flight = 0

    # ── Projections ───────────────────────────────────────────

    @property
    def chat(self) -> Chat | None:
        return self.registry.find(self.chat_id)

    @property
    def messages(self) -> list[Message]:
        chat = self.chat
        return chat.messages if chat is not None else []

    @property
    def is_fetching(self) -> bool:
        return self._fetches_in_flight > 0

    # ── Fetch ─────────────────────────────────────────────────

    async def fetch_messages(self, *, refresh: bool = False) -> None:
        """Load the chat's messages from the store.

        Skipped when the chat is unknown, or, unless *refresh* is set, when
        the chat already holds more than one message or a fetch is running.
        Store failures propagate.
        """
        has_existing_messages = len(self.messages) > 1
        should_skip = not refresh and (has_existing_messages or self.is_fetching)
        if should_skip or self.chat is None:
            return

        self._fetches_in_flight += 1
        try:
            messages = await self.api.list_messages(self.chat_id)
        finally:
            self._fetches_in_flight -= 1

        chat = self.chat
        if chat is None:
            logger.info("Chat %s left the registry during fetch; dropping %d messages", self.chat_id, len(messages))
            return
        chat.messages = messages

    # ── Send ──────────────────────────────────────────────────

    async def _generate_title(self, content: str) -> None:
        try:
            updated_chat = await self.api.generate_title(self.chat_id, content)
        except Exception:
            logger.error("Error generating chat title for %s", self.chat_id, exc_info=True)
            return

        chat = self.chat
        if chat is not None:
            chat.title = updated_chat.title

    async def send_message(self, content: str) -> None:
        chat = self.chat
        if chat is None:
            return

        title_task = None
        if len(chat.messages) == 0:
            title_task = asyncio.create_task(self._generate_title(content))

        try:
            await self._exchange(chat, content)
        finally:
            if title_task is not None:
                await title_task

    async def _exchange(self, chat: Chat, content: str) -> None:
        pending = PendingMessage.insert(
            chat.messages,
            local_message(self.chat_id, "user", content, OPTIMISTIC_PREFIX),
        )

        try:
            new_message = await self.api.create_message(self.chat_id, content, role="user")
        except Exception:
            logger.error("Error sending chat message to %s", self.chat_id, exc_info=True)
            pending.rollback()
            return
        pending.commit(new_message)

        # The registry may have swapped the chat object while we were waiting
        current = self.chat
        if current is not None:
            chat = current
        placeholder = local_message(self.chat_id, "assistant", "", STREAMING_PREFIX)
        chat.messages.append(placeholder)

        try:
            chunks = self.api.stream_completion(self.chat_id, list(chat.messages))
            await StreamAssembler(placeholder).consume(chunks)
        except Exception:
            logger.error("Error streaming chat response for %s", self.chat_id, exc_info=True)
        finally:
            try:
                await self.fetch_messages(refresh=True)
            except Exception:
                logger.error("Error refreshing messages for %s", self.chat_id, exc_info=True)

        chat = self.chat
        if chat is not None:
            chat.updated_at = utc_now()

    # ── Projects ──────────────────────────────────────────────

    async def assign_to_project(self, project_id: str | None) -> Chat | None:
        """Move the chat to *project_id* (or out of any project with None).

        Re-raises the store error after restoring the previous project.
        """
        chat = self.chat
        if chat is None:
            return None

        previous_project_id = chat.project_id
        chat.project_id = project_id

        try:
            updated_chat = await self.api.update_chat(self.chat_id, project_id=project_id)
        except Exception:
            logger.error("Error assigning chat %s to project %s", self.chat_id, project_id, exc_info=True)
            self.registry.merge(self.chat_id, project_id=previous_project_id)
            raise

        self.registry.merge(
            self.chat_id,
            project_id=updated_chat.project_id,
            updated_at=updated_chat.updated_at,
        )
        return updated_chat
