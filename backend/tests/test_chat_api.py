import asyncio
import json

import httpx
import pytest

from app.clients.chat_api import ChatApiClient
from app.core.errors import ChatApiError, InvalidResponse, NetworkFailure, StreamInterrupted
from conftest import make_message

NOW = "2025-01-01T12:00:00Z"


def message_json(**overrides):
    data = {
        "id": "m1",
        "role": "user",
        "content": "hello",
        "chatId": "c1",
        "createdAt": NOW,
        "updatedAt": NOW,
    }
    data.update(overrides)
    return data


def chat_json(**overrides):
    data = {
        "id": "c1",
        "title": "A title",
        "projectId": None,
        "messages": [],
        "createdAt": NOW,
        "updatedAt": NOW,
    }
    data.update(overrides)
    return data


def run_with(handler, call):
    async def scenario():
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://store.test"
        ) as http:
            return await call(ChatApiClient(client=http, prefix="/api"))

    return asyncio.run(scenario())


def collect(api, chat_id, messages):
    async def gather():
        return [chunk async for chunk in api.stream_completion(chat_id, messages)]

    return gather()


# -------------------------------------------------------------------
# Plain requests
# -------------------------------------------------------------------
def test_list_messages_parses_camel_case():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=[message_json(), message_json(id="m2", role="assistant")])

    messages = run_with(handler, lambda api: api.list_messages("c1"))

    assert requests[0].method == "GET"
    assert requests[0].url.path == "/api/chats/c1/messages"
    assert [m.id for m in messages] == ["m1", "m2"]
    assert messages[0].chat_id == "c1"
    assert messages[0].created_at.year == 2025


def test_create_message_sends_content_and_role():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=message_json(id="u1", content="Hi"))

    message = run_with(handler, lambda api: api.create_message("c1", "Hi"))

    assert bodies == [{"content": "Hi", "role": "user"}]
    assert message.id == "u1"


def test_generate_title_posts_message():
    seen = []

    def handler(request):
        seen.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json=chat_json(title="Generated Title"))

    chat = run_with(handler, lambda api: api.generate_title("c1", "Hi there"))

    assert seen == [("POST", "/api/chats/c1/title", {"message": "Hi there"})]
    assert chat.title == "Generated Title"


def test_update_chat_sends_project_id():
    bodies = []

    def handler(request):
        bodies.append((request.method, json.loads(request.content)))
        return httpx.Response(200, json=chat_json(projectId="p1"))

    chat = run_with(handler, lambda api: api.update_chat("c1", project_id="p1"))

    assert bodies == [("PUT", {"projectId": "p1"})]
    assert chat.project_id == "p1"


def test_update_project_camelizes_changes():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(
            200, json={"id": "p1", "name": "New", "colorScheme": "dark", "createdAt": NOW, "updatedAt": NOW}
        )

    project = run_with(handler, lambda api: api.update_project("p1", {"name": "New", "color_scheme": "dark"}))

    assert bodies == [{"name": "New", "colorScheme": "dark"}]
    assert project.name == "New"
    assert project.model_extra == {"color_scheme": "dark"}
    assert project.to_wire()["colorScheme"] == "dark"


def test_list_projects():
    def handler(request):
        return httpx.Response(200, json=[{"id": "p1", "name": "Research", "createdAt": NOW, "updatedAt": NOW}])

    projects = run_with(handler, lambda api: api.list_projects())

    assert [p.name for p in projects] == ["Research"]


def test_error_status_raises_network_failure():
    def handler(request):
        return httpx.Response(500, json={"detail": "Internal server error"})

    with pytest.raises(NetworkFailure) as info:
        run_with(handler, lambda api: api.create_message("c1", "Hi"))

    assert info.value.status_code == 500


def test_transport_error_raises_network_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkFailure) as info:
        run_with(handler, lambda api: api.list_messages("c1"))

    assert info.value.status_code is None
    assert isinstance(info.value.__cause__, httpx.ConnectError)


def test_non_json_body_raises_invalid_response():
    def handler(request):
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(InvalidResponse) as info:
        run_with(handler, lambda api: api.list_messages("c1"))

    assert isinstance(info.value, ChatApiError)
    assert isinstance(info.value.__cause__, ValueError)


def test_wrong_shape_raises_invalid_response():
    def handler(request):
        return httpx.Response(200, json={"title": "no id here"})

    with pytest.raises(InvalidResponse):
        run_with(handler, lambda api: api.update_chat("c1", project_id="p1"))


# -------------------------------------------------------------------
# Streaming
# -------------------------------------------------------------------
def test_stream_completion_yields_decoded_chunks():
    bodies = []

    async def body():
        yield "Hel".encode()
        yield "lo ".encode()
        yield "wörld".encode()

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, content=body())

    context = [make_message(id="u1", content="Hi"), make_message(id="s1", role="assistant", content="")]
    chunks = run_with(handler, lambda api: collect(api, "c1", context))

    assert "".join(chunks) == "Hello wörld"
    assert [m["id"] for m in bodies[0]["messages"]] == ["u1", "s1"]
    assert bodies[0]["messages"][0]["chatId"] == "test-uuid"


def test_stream_completion_error_status():
    def handler(request):
        return httpx.Response(503, text="unavailable")

    with pytest.raises(NetworkFailure) as info:
        run_with(handler, lambda api: collect(api, "c1", [make_message()]))

    assert info.value.status_code == 503


def test_stream_completion_interrupted_midway():
    async def body():
        yield b"partial"
        raise httpx.ReadError("connection reset")

    def handler(request):
        return httpx.Response(200, content=body())

    received = []

    async def call(api):
        async for chunk in api.stream_completion("c1", [make_message()]):
            received.append(chunk)

    with pytest.raises(StreamInterrupted):
        run_with(handler, call)

    assert received == ["partial"]


def test_owned_client_is_closed():
    api = ChatApiClient("http://store.test")

    async def scenario():
        async with api:
            pass

    asyncio.run(scenario())

    assert api._client.is_closed


def test_get_chat_and_generate_reply():
    paths = []

    def handler(request):
        paths.append((request.method, request.url.path))
        if request.url.path.endswith("/generate"):
            return httpx.Response(200, json=message_json(id="a1", role="assistant", content="reply"))
        return httpx.Response(200, json=chat_json(messages=[message_json()]))

    async def call(api):
        return await api.get_chat("c1"), await api.generate_reply("c1")

    chat, reply = run_with(handler, call)

    assert paths == [("GET", "/api/chats/c1"), ("POST", "/api/chats/c1/messages/generate")]
    assert [m.id for m in chat.messages] == ["m1"]
    assert reply.role == "assistant"
