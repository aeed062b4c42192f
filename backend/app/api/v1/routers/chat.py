"""Chat router: thin HTTP layer, delegates all logic to chat_controller."""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.api.deps import get_store
from app.controllers import chat_controller
from app.db.store import InMemoryStore
from app.models.chat import Chat, Message
from app.schemas.chat import ChatUpdate, MessageCreate, StreamRequest, TitleRequest

router = APIRouter(prefix="/chats", tags=["chats"])


@router.get("/{chat_id}", response_model=Chat)
async def get_chat(chat_id: str, store: InMemoryStore = Depends(get_store)):
    """Get a chat with its messages."""
    return chat_controller.get_chat(chat_id, store)


@router.put("/{chat_id}", response_model=Chat)
async def update_chat(
    chat_id: str,
    payload: ChatUpdate,
    store: InMemoryStore = Depends(get_store),
):
    """Assign the chat to a project, or detach it with projectId=null."""
    return await chat_controller.update_chat(chat_id, payload.project_id, store)


@router.post("/{chat_id}/title", response_model=Chat)
async def generate_title(
    chat_id: str,
    payload: TitleRequest,
    store: InMemoryStore = Depends(get_store),
):
    """Summarise the first message into the chat title."""
    return await chat_controller.generate_title(chat_id, payload.message, store)


@router.get("/{chat_id}/messages", response_model=list[Message])
async def get_messages(chat_id: str, store: InMemoryStore = Depends(get_store)):
    """Get all messages for a chat."""
    return await chat_controller.get_messages(chat_id, store)


@router.post("/{chat_id}/messages", response_model=Message)
async def create_message(
    chat_id: str,
    payload: MessageCreate,
    store: InMemoryStore = Depends(get_store),
):
    """Persist a message as-is (no assistant turn)."""
    return await chat_controller.create_message(chat_id, payload.content, payload.role, store)


@router.post("/{chat_id}/messages/stream")
async def stream_completion(
    chat_id: str,
    payload: StreamRequest,
    store: InMemoryStore = Depends(get_store),
):
    """Stream the assistant reply as plain UTF-8 text until EOF."""
    chunks = chat_controller.stream_completion(chat_id, payload.messages, store)
    return StreamingResponse(chunks, media_type="text/plain; charset=utf-8")


@router.post("/{chat_id}/messages/generate", response_model=Message)
async def generate_reply(chat_id: str, store: InMemoryStore = Depends(get_store)):
    """Answer the stored history without streaming."""
    return await chat_controller.generate_reply(chat_id, store)
