"""
Shared, explicitly owned collections of chats and projects.

One registry instance is created by the application and handed to every
session.  Sessions never keep references to entries: they look their entry
up by id on every access, so replacing the whole collection (e.g. after a
full reload of the sidebar) is safe.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from app.models.chat import Chat
from app.models.project import Project
from app.utils.dates import filter_chats_by_date_range

logger = logging.getLogger(__name__)

T = TypeVar("T", Chat, Project)
Listener = Callable[[list], None]


class _Registry(Generic[T]):
    def __init__(self, items: Iterable[T] = ()):
        self._items: list[T] = list(items)
        self._listeners: list[Listener] = []

    def _get(self) -> list[T]:
        return self._items

    def find(self, item_id: str) -> T | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def add(self, item: T) -> T:
        self.replace_all([*self._items, item])
        return item

    def replace(self, item: T) -> bool:
        """Put *item* in place of the entry sharing its id."""
        if self.find(item.id) is None:
            return False
        self.replace_all(item if existing.id == item.id else existing for existing in self._items)
        return True

    def replace_all(self, items: Iterable[T]) -> None:
        """Swap in a new list object and notify subscribers."""
        self._items = list(items)
        for listener in list(self._listeners):
            listener(self._items)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __len__(self) -> int:
        return len(self._items)


class ChatRegistry(_Registry[Chat]):
    @property
    def chats(self) -> list[Chat]:
        return self._get()

    def merge(self, chat_id: str, **fields: Any) -> Chat | None:
        """Assign *fields* onto the entry with *chat_id* in place."""
        chat = self.find(chat_id)
        if chat is None:
            logger.debug("merge skipped, chat %s not in registry", chat_id)
            return None
        for key, value in fields.items():
            setattr(chat, key, value)
        return chat

    def between_days(self, start_days: int, end_days: int | None = None) -> list[Chat]:
        return filter_chats_by_date_range(self._items, start_days, end_days)


class ProjectRegistry(_Registry[Project]):
    @property
    def projects(self) -> list[Project]:
        return self._get()

    def merge(self, project_id: str, **fields: Any) -> Project | None:
        """Merge *fields* into the matching project by re-creating the list.

        Entries are replaced, not mutated, so anything holding the previous
        list or project object keeps seeing the old values.
        """
        if self.find(project_id) is None:
            return None
        self.replace_all(
            p.model_copy(update=fields) if p.id == project_id else p
            for p in self._items
        )
        return self.find(project_id)
