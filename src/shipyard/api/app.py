"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shipyard import __version__
from shipyard.api.dependencies import close_engine, init_engine
from shipyard.api.models import APIResponse
from shipyard.api.routes import queue, tickets
from shipyard.config import ConfigError, ShipyardConfig
from shipyard.engine import (
    AssigneeNotFoundError,
    EngineError,
    ShipyardEngine,
    TicketNotFoundError,
)
from shipyard.fetcher import FetcherError
from shipyard.notion import NotionError
from shipyard.state_store import StateStoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    config: ShipyardConfig = app.state.config
    init_engine(ShipyardEngine.from_config(config))
    yield
    await close_engine()


def create_app(config: ShipyardConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Engine configuration. Defaults to the environment.
    """
    app = FastAPI(
        title="Shipyard API",
        description="REST API for the Shipyard ticket work queue",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.config = config if config is not None else ShipyardConfig.from_env()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(TicketNotFoundError)
    async def ticket_not_found_handler(
        _request: Request, exc: TicketNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(AssigneeNotFoundError)
    async def assignee_not_found_handler(
        _request: Request, exc: AssigneeNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))

    @app.exception_handler(ConfigError)
    async def config_error_handler(_request: Request, exc: ConfigError) -> JSONResponse:
        logger.error("Configuration error: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Configuration error: {exc}")

    @app.exception_handler(EngineError)
    async def engine_error_handler(_request: Request, exc: EngineError) -> JSONResponse:
        logger.error("Remote operation failed: %s", exc)
        return _error(status.HTTP_502_BAD_GATEWAY, str(exc))

    @app.exception_handler(FetcherError)
    async def fetcher_error_handler(_request: Request, exc: FetcherError) -> JSONResponse:
        logger.error("Fetch failed: %s", exc)
        return _error(status.HTTP_502_BAD_GATEWAY, str(exc))

    @app.exception_handler(NotionError)
    async def notion_error_handler(_request: Request, exc: NotionError) -> JSONResponse:
        logger.error("Notion request failed: %s", exc)
        return _error(status.HTTP_502_BAD_GATEWAY, str(exc))

    @app.exception_handler(StateStoreError)
    async def state_store_error_handler(_request: Request, exc: StateStoreError) -> JSONResponse:
        logger.error("Snapshot error: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    app.include_router(queue.router, prefix="/api/v1")
    app.include_router(tickets.router, prefix="/api/v1")

    return app
