import logging
from collections.abc import AsyncIterator
from contextlib import aclosing

from app.models.chat import Message

logger = logging.getLogger(__name__)


class StreamAssembler:
    """Appends streamed text onto a placeholder message, chunk by chunk.

    The placeholder is the very object held in the chat's message list, so
    every chunk is visible to readers of the list as soon as it arrives.
    """

    def __init__(self, message: Message):
        self.message = message
        self.chunks = 0

    async def consume(self, chunks: AsyncIterator[str]) -> int:
        """Pull chunks until end-of-stream; errors from *chunks* propagate."""
        async with aclosing(chunks) as stream:
            async for chunk in stream:
                if not chunk:
                    continue
                self.message.content += chunk
                self.chunks += 1
        logger.debug("Assembled %d chunks into %s", self.chunks, self.message.id)
        return self.chunks
