"""
Async client for the Message Store, Title Generator and Project Store.

One ``httpx.AsyncClient`` is shared by every call.  Each operation makes a
single attempt; timeouts are the transport's business
(``settings.HTTP_TIMEOUT_SECONDS``).  All failures surface as
:class:`~app.core.errors.ChatApiError` subclasses.
"""

import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python

from app.core.config import settings
from app.core.errors import InvalidResponse, NetworkFailure, StreamInterrupted
from app.models.chat import Chat, Message, Role
from app.models.project import Project
from app.schemas.chat import ChatUpdate, MessageCreate, StreamRequest, TitleRequest

logger = logging.getLogger(__name__)

_chat_adapter = TypeAdapter(Chat)
_message_adapter = TypeAdapter(Message)
_messages_adapter = TypeAdapter(list[Message])
_project_adapter = TypeAdapter(Project)
_projects_adapter = TypeAdapter(list[Project])


class ChatApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        prefix: str | None = None,
        timeout: float | None = None,
    ):
        self.prefix = settings.API_PREFIX if prefix is None else prefix
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS if timeout is None else timeout,
        )

    async def __aenter__(self) -> "ChatApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ── Plumbing ──────────────────────────────────────────────

    def _url(self, path: str) -> str:
        return f"{self.prefix}{path}"

    async def _request(self, method: str, path: str, adapter: TypeAdapter, **kwargs: Any) -> Any:
        url = self._url(path)
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkFailure(
                f"{method} {url} failed with {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise NetworkFailure(f"{method} {url} failed: {e}") from e
        try:
            return adapter.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            raise InvalidResponse(f"{method} {url} returned an unexpected body: {e}") from e

    # ── Chats & messages ──────────────────────────────────────

    async def get_chat(self, chat_id: str) -> Chat:
        return await self._request("GET", f"/chats/{chat_id}", _chat_adapter)

    async def list_messages(self, chat_id: str) -> list[Message]:
        return await self._request("GET", f"/chats/{chat_id}/messages", _messages_adapter)

    async def create_message(self, chat_id: str, content: str, role: Role = "user") -> Message:
        body = MessageCreate(content=content, role=role).to_wire()
        return await self._request("POST", f"/chats/{chat_id}/messages", _message_adapter, json=body)

    async def generate_reply(self, chat_id: str) -> Message:
        """Non-streaming completion: the server answers with the saved reply."""
        return await self._request("POST", f"/chats/{chat_id}/messages/generate", _message_adapter)

    async def stream_completion(
        self,
        chat_id: str,
        messages: Sequence[Message],
    ) -> AsyncIterator[str]:
        """Yield decoded text chunks of the assistant reply until end-of-stream.

        The message list is serialised when the request is opened, so later
        mutations by the caller do not leak into the request body.
        """
        url = self._url(f"/chats/{chat_id}/messages/stream")
        body = StreamRequest(messages=list(messages)).to_wire()
        received = 0
        try:
            async with self._client.stream("POST", url, json=body) as response:
                response.raise_for_status()
                async for text in response.aiter_text():
                    if not text:
                        continue
                    received += 1
                    yield text
        except httpx.HTTPStatusError as e:
            raise NetworkFailure(
                f"POST {url} failed with {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            if received:
                raise StreamInterrupted(f"stream for chat {chat_id} broke after {received} chunks") from e
            raise NetworkFailure(f"POST {url} failed: {e}") from e
        logger.debug("Stream for chat %s finished after %d chunks", chat_id, received)

    async def generate_title(self, chat_id: str, message: str) -> Chat:
        body = TitleRequest(message=message).to_wire()
        return await self._request("POST", f"/chats/{chat_id}/title", _chat_adapter, json=body)

    async def update_chat(self, chat_id: str, *, project_id: str | None) -> Chat:
        body = ChatUpdate(project_id=project_id).to_wire()
        return await self._request("PUT", f"/chats/{chat_id}", _chat_adapter, json=body)

    # ── Projects ──────────────────────────────────────────────

    async def list_projects(self) -> list[Project]:
        return await self._request("GET", "/projects", _projects_adapter)

    async def update_project(self, project_id: str, changes: dict[str, Any]) -> Project:
        body = to_jsonable_python({to_camel(key): value for key, value in changes.items()})
        return await self._request("PUT", f"/projects/{project_id}", _project_adapter, json=body)
