"""
Main entrypoint for the Vehicle History API.

``create_app`` builds and configures the FastAPI application: logging,
CORS for the single-page frontend, error handlers and the ``/api``
routes.  The record store is opened when the application starts and
closed when it stops, and it is reachable from handlers only through
``app.state`` and the dependencies in ``api.deps``.  Run it with::

    uvicorn vehicle_history_api.app.main:app --port 4001
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.router import router as api_router
from .core.config import Settings, settings as default_settings
from .core.db import RecordStore
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .services.mint_client import MintClient

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the process-wide settings
        read from the environment.

    Returns
    -------
    FastAPI
        A configured application.  Its store connects on startup.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store = RecordStore(settings.database_url).connect()
        app.state.store = store
        app.state.mint_client = None
        if settings.token_mint_endpoint:
            app.state.mint_client = MintClient(
                settings.token_mint_endpoint,
                api_key=settings.token_mint_key,
                timeout=settings.token_mint_timeout,
            )
            logger.info("Token minting enabled via %s", settings.token_mint_endpoint)
        try:
            yield
        finally:
            store.close()

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allow_origin],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    return app


# Created at import time so that uvicorn can discover it.
app = create_app()
