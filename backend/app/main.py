"""
Reference Message Store server.

Serves the chat/message/project contract the client in
:mod:`app.clients.chat_api` talks to, backed by an in-memory store.

    uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.v1.api import router
from app.core.config import settings
from app.db.store import InMemoryStore, get_default_store

logger = logging.getLogger(__name__)


def create_app(store: InMemoryStore | None = None) -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME)
    app.state.store = store if store is not None else get_default_store()

    # ── Global Exception Handler (unexpected errors still answer in JSON) ──

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # ── Routers ───────────────────────────────────────────────

    app.include_router(router, prefix=settings.API_PREFIX)

    # ── Health / Root ─────────────────────────────────────────

    @app.get("/")
    def read_root():
        return {"message": f"Welcome to the {settings.PROJECT_NAME} API"}

    return app


logging.basicConfig(level=settings.LOG_LEVEL)

app = create_app()
