"""
Main entry point for the FastAPI application.
Configures lifespan events, error envelopes and mounts routers.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shoutbox.api.dependencies import get_storage
from shoutbox.api.routes import router as api_router
from shoutbox.config.settings import settings
from shoutbox.core.message import ValidationError, describe_errors
from shoutbox.services.websocket import manager

# Setup Logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# Disable these warnings as they are false positives caused by fastapi syntax
# pylint: disable=redefined-outer-name
# pylint: disable=unused-argument
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application Lifecycle Manager.
    Opens storage on startup and stops the push listener on shutdown.
    """
    logger.info("Starting Shoutbox...")
    storage = get_storage()
    logger.info("Using database: %s", storage.db_name)

    yield

    logger.info("Shutting down Shoutbox...")
    await manager.shutdown()


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Renders a rejected message as {success: false, errors: {field: reason}}."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"success": False, "errors": exc.errors},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies use the same envelope as rejected messages."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"success": False, "errors": describe_errors(list(exc.errors()))},
    )


async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected is logged and reported as a server fault."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Server Error"},
    )


def create_app() -> FastAPI:
    """Factory to create the app."""
    application = FastAPI(
        title=settings.app_name,
        description="Shoutbox API",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Middleware
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(ValidationError, validation_error_handler)  # type: ignore[arg-type]
    application.add_exception_handler(RequestValidationError, request_validation_error_handler)  # type: ignore[arg-type]
    application.add_exception_handler(Exception, server_error_handler)

    # Routers
    application.include_router(api_router, prefix="/api")

    return application


app = create_app()


def run() -> None:
    """Console entry point: serves the app with uvicorn."""
    uvicorn.run(app, host=settings.server_host, port=settings.server_port)
