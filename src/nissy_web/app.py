"""FastAPI entrypoint for the nissy gateway.

Usage:
    uvicorn --factory nissy_web.app:create_app

    # Or through the console script
    nissy-web
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .config import Settings
from .errors import GatewayError, gateway_error_handler, generic_error_handler
from .log import configure_logging
from .nissy import NissyRunner
from .routes import api, health, static

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # No solver warm-up here: the server must accept health checks immediately.
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)
    logger.info("Using executable: %s", settings.nissy_path.resolve())
    if not os.access(settings.nissy_path, os.X_OK):
        logger.warning("Executable %s is missing or not executable", settings.nissy_path.resolve())
    yield


def create_app(settings: Settings | None = None, runner: NissyRunner | None = None) -> FastAPI:
    """Create the application around an immutable settings object."""
    settings = settings or Settings()

    app = FastAPI(
        title="Nissy Web",
        description="HTTP gateway for the nissy command-line solver",
        version=__version__,
        lifespan=lifespan,
        # Every non-API path belongs to the static tree.
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.runner = runner or NissyRunner(settings.nissy_path, settings.nissy_timeout)

    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    app.include_router(health.router)
    app.include_router(api.router)
    app.include_router(static.router)
    return app
