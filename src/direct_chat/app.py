from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from direct_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from direct_chat.api.v1.routers import account, health, messages, ws
from direct_chat.application.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
)
from direct_chat.config import settings
from direct_chat.infrastructure.db.session import create_schema, engine, open_uow
from direct_chat.infrastructure.storage.local import LocalBlobStorage
from direct_chat.infrastructure.ws.manager import ConnectionRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    app.state.blob_storage.ensure_root()
    if settings.DB_CREATE_ALL:
        await create_schema()
        logger.info("Database schema ensured")

    yield

    await app.state.registry.close_all()
    await engine.dispose()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Direct Chat Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.registry = ConnectionRegistry(
        probe_interval=settings.WS_PROBE_INTERVAL_SECONDS,
        probe_grace=settings.WS_PROBE_GRACE_SECONDS,
    )
    app.state.blob_storage = LocalBlobStorage(settings.UPLOAD_DIR)
    app.state.uow_factory = open_uow

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(account.router)
    app.include_router(messages.router)
    app.include_router(ws.router)
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="uploads",
    )

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ConflictError)
    async def _conflict(_req: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.detail})

    @app.exception_handler(AuthenticationError)
    async def _unauthorized(_req: Request, exc: AuthenticationError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": exc.detail})
