"""
Main entrypoint for the Rolloff container API.

This module assembles the FastAPI application, sets up logging and
includes the API router.  ``create_app`` builds and configures the
app, which is then instantiated at module import time as ``app`` so it
can be served directly, e.g.::

    uvicorn rolloff_api.app.main:app --reload

The storage backend is chosen by ``settings.storage_backend`` unless a
store is passed explicitly, which is how the tests run the API against
an in-memory list or a temporary SQLite file.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.router import router as api_router
from .core.config import settings
from .core.exceptions import StorageError
from .core.logging_config import setup_logging
from .services.container_service import ContainerService
from .services.container_store import ContainerStore, build_store


logger = logging.getLogger(__name__)


def create_app(store: Optional[ContainerStore] = None, seed: Optional[bool] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[ContainerStore]
        Storage backend to use.  Defaults to the backend named by
        ``settings.storage_backend``.
    seed : Optional[bool]
        Whether to insert the sample container into an empty store at
        startup.  Defaults to ``settings.seed_sample_data``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    if store is None:
        store = build_store(settings.storage_backend, settings.database_url)
    if seed is None:
        seed = settings.seed_sample_data

    service = ContainerService(store, updated_by=settings.updated_by)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Creates the containers table (SQLite) and seeds the sample row.
        await service.initialise(seed=seed)
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.container_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        # The cause was already logged by the store; keep the response generic.
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.__cause__ or exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Database error"},
        )

    @app.get("/", tags=["meta"])
    async def root() -> dict:
        """Return a liveness message."""
        return {"message": f"{settings.project_name} is running!"}

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
