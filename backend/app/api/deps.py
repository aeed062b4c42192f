"""
Shared FastAPI dependencies, the single source of truth for DI.

All routers should import get_store from HERE.
"""

from fastapi import Request

from app.db.store import InMemoryStore

__all__ = ["get_store"]


async def get_store(request: Request) -> InMemoryStore:
    """Return the store the running app was built with."""
    return request.app.state.store
