"""
Optimistic insert bookkeeping.

A :class:`PendingMessage` is created when a local message is appended ahead
of the server call, and resolved exactly once: :meth:`commit` swaps in the
persisted message at the same position, :meth:`rollback` removes it.  The
entry is located by identity at resolution time, so other inserts or
removals that happened during the round-trip never shift it onto an
unrelated message.
"""

import itertools
import logging
import time
from dataclasses import dataclass, field

from app.models.chat import Message, Role

logger = logging.getLogger(__name__)

OPTIMISTIC_PREFIX = "optimistic-message"
STREAMING_PREFIX = "streaming-message"

_sequence = itertools.count()


def local_message_id(prefix: str) -> str:
    """Time-based id that cannot collide with another local id in this process."""
    return f"{prefix}-{time.time_ns()}-{next(_sequence)}"


def is_local_id(message_id: str) -> bool:
    return message_id.startswith((OPTIMISTIC_PREFIX, STREAMING_PREFIX))


def local_message(chat_id: str, role: Role, content: str, prefix: str) -> Message:
    return Message(id=local_message_id(prefix), role=role, content=content, chat_id=chat_id)


@dataclass
class PendingMessage:
    messages: list[Message]
    message: Message
    inserted_at: int
    resolved: bool = field(default=False, init=False)

    @classmethod
    def insert(cls, messages: list[Message], message: Message) -> "PendingMessage":
        messages.append(message)
        return cls(messages=messages, message=message, inserted_at=len(messages) - 1)

    def _locate(self) -> int | None:
        for index, candidate in enumerate(self.messages):
            if candidate is self.message:
                return index
        return None

    def commit(self, persisted: Message) -> None:
        """Replace the optimistic entry with *persisted*, keeping its position."""
        self._resolve()
        index = self._locate()
        if index is None:
            logger.warning("Optimistic message %s vanished before commit", self.message.id)
            return
        self.messages[index] = persisted

    def rollback(self) -> None:
        """Remove the optimistic entry from the list."""
        self._resolve()
        index = self._locate()
        if index is not None:
            del self.messages[index]

    def _resolve(self) -> None:
        if self.resolved:
            raise RuntimeError(f"pending message {self.message.id} already resolved")
        self.resolved = True
