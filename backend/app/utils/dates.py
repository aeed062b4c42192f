from collections.abc import Iterable
from datetime import datetime, timedelta

from app.models.base import utc_now
from app.models.chat import Chat


def is_within_days(date: datetime, days: float, now: datetime | None = None) -> bool:
    """Return True if *date* falls within the last *days* days of *now*."""
    now = now or utc_now()
    return date >= now - timedelta(days=days)


def filter_chats_by_date_range(
    chats: Iterable[Chat],
    start_days: float,
    end_days: float | None = None,
    now: datetime | None = None,
) -> list[Chat]:
    """Bucket chats by age of ``updated_at``, newest first.

    With no *end_days*, returns chats older than *start_days*.  Otherwise
    returns chats older than *start_days* but within *end_days*.
    """
    now = now or utc_now()

    def keep(chat: Chat) -> bool:
        if end_days is None:
            return not is_within_days(chat.updated_at, start_days, now)
        return not is_within_days(chat.updated_at, start_days, now) and is_within_days(
            chat.updated_at, end_days, now
        )

    return sorted(
        (chat for chat in chats if keep(chat)),
        key=lambda chat: chat.updated_at,
        reverse=True,
    )
