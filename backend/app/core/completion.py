"""
Stand-in completion service for the reference Message Store.

The real system talks to a hosted language model; here replies and titles
are derived deterministically from the conversation so the HTTP contract
can be exercised without a provider.

- **summarize_title**   – short chat title from the first user message
- **generate_reply**    – whole assistant reply for a message history
- **stream_reply**      – the same reply, one word at a time
"""

import asyncio
import re
from collections.abc import AsyncIterator, Sequence

from app.core.config import settings
from app.models.chat import Message

_WHITESPACE = re.compile(r"\s+")


def summarize_title(message: str, max_words: int | None = None) -> str:
    """Collapse *message* into a title of at most ``max_words`` words."""
    max_words = max_words or settings.TITLE_MAX_WORDS
    cleaned = _WHITESPACE.sub(" ", message).strip().strip(" \"'")
    words = cleaned.split()
    limited = " ".join(words[:max_words])
    return limited[:80].strip() or settings.DEFAULT_CHAT_TITLE


def generate_reply(messages: Sequence[Message]) -> str:
    if not messages:
        raise ValueError("Invalid messages format")

    last_user = next((m for m in reversed(messages) if m.role == "user"), None)
    if last_user is None:
        return "How can I help you?"
    return f"You said: {last_user.content.strip()}"


async def stream_reply(messages: Sequence[Message]) -> AsyncIterator[str]:
    reply = generate_reply(messages)
    # keep the separating whitespace attached so chunks join back losslessly
    for token in re.findall(r"\S+\s*", reply):
        if settings.STREAM_CHUNK_DELAY_SECONDS:
            await asyncio.sleep(settings.STREAM_CHUNK_DELAY_SECONDS)
        yield token
