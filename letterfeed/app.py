"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from letterfeed.config import Settings
from letterfeed.inboxes import InboxService
from letterfeed.router import IngestionRouter
from letterfeed.store import ObjectStore, create_store
from letterfeed.text import now_rfc3339

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: start the feed store. Shutdown: stop it."""
    store: ObjectStore = app.state.store
    await store.start()
    yield
    await store.stop()
    logger.info("shutdown_complete")


def create_app(
    settings: Settings | None = None,
    *,
    store: ObjectStore | None = None,
    clock: Callable[[], str] = now_rfc3339,
) -> FastAPI:
    """Build and return the FastAPI application."""
    if settings is None:
        settings = Settings()
    if store is None:
        store = create_store(settings.storage)

    app = FastAPI(
        title="letterfeed",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.inboxes = InboxService(settings.feed, store, clock=clock)
    app.state.ingestion = IngestionRouter(settings.feed, store, clock=clock)

    from letterfeed.routers.email import router as email_router
    from letterfeed.routers.feeds import router as feeds_router
    from letterfeed.routers.inboxes import router as inboxes_router

    app.include_router(inboxes_router)
    app.include_router(email_router)
    app.include_router(feeds_router)

    @app.get("/health")
    async def health() -> JSONResponse:
        ingestion: IngestionRouter = app.state.ingestion
        return JSONResponse({
            "service": "letterfeed",
            "inboxes_created": app.state.inboxes.inboxes_created,
            "emails_accepted": ingestion.emails_accepted,
            "emails_discarded": ingestion.emails_discarded,
            "emails_failed": ingestion.emails_failed,
        })

    @app.get("/ready")
    async def ready() -> JSONResponse:
        is_ready = app.state.store.is_ready
        return JSONResponse(
            {"ready": is_ready},
            status_code=200 if is_ready else 503,
        )

    return app
