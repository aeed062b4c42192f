"""Errors raised by the Message Store client.

Every failure coming out of :mod:`app.clients.chat_api` is a
:class:`ChatApiError`, so session code can catch one type regardless of
where the request went wrong.
"""


class ChatApiError(Exception):
    """Base class for Message Store client failures."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkFailure(ChatApiError):
    """The request could not be completed or returned a non-2xx status."""


class StreamInterrupted(ChatApiError):
    """The completion stream failed after at least one chunk was received."""


class InvalidResponse(ChatApiError):
    """The store answered 2xx with a body that is not the expected JSON shape."""
