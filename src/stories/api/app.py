"""
FastAPI application setup for the stories web UI.

``create_app`` builds an app bound to one database file, one configuration
snapshot and one agent registry, and registers the routes under /api.
"""

import logging
import traceback
from enum import Enum
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from stories import __version__
from stories.api.routes import activities, meta, run, stories
from stories.core.agents import AgentRegistry, CustomAgentStore
from stories.core.config import StoriesConfig
from stories.core.exceptions import DuplicateRecordError, NotFoundError, StoriesError

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for API responses."""

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE = "DUPLICATE"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Server errors (5xx)
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def _error_response(
    http_status: int, error_code: ErrorCode, message: str, detail: str | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=http_status,
        content={
            "error": message,
            "error_code": error_code,
            "detail": detail if detail is not None else message,
        },
    )


async def stories_error_handler(request: Request, exc: StoriesError) -> JSONResponse:
    """Map domain errors to 404 (unknown id), 409 (duplicate id) or 500."""
    if isinstance(exc, NotFoundError):
        logger.info("HTTP 404 on %s %s: %s", request.method, request.url.path, exc)
        return _error_response(status.HTTP_404_NOT_FOUND, ErrorCode.NOT_FOUND, str(exc))
    if isinstance(exc, DuplicateRecordError):
        logger.info("HTTP 409 on %s %s: %s", request.method, request.url.path, exc)
        return _error_response(status.HTTP_409_CONFLICT, ErrorCode.DUPLICATE, str(exc))

    logger.error("HTTP 500 on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCode.INTERNAL_ERROR, str(exc)
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException with the standard error body."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error_code = ErrorCode.NOT_FOUND
    elif exc.status_code < 500:
        error_code = ErrorCode.INVALID_REQUEST
    else:
        error_code = ErrorCode.INTERNAL_ERROR

    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code >= 500:
        logger.error("HTTP %d on %s %s: %s", exc.status_code, request.method, request.url.path, detail)
    else:
        logger.info("HTTP %d on %s %s: %s", exc.status_code, request.method, request.url.path, detail)

    return _error_response(exc.status_code, error_code, detail)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Reports the first failing field without exposing model internals.
    """
    logger.warning(
        "Validation error on %s %s: %s", request.method, request.url.path, exc.errors()
    )

    first_error = exc.errors()[0] if exc.errors() else {}
    field = " -> ".join(str(loc) for loc in first_error.get("loc", []))
    error_msg = first_error.get("msg", "Invalid input")

    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorCode.VALIDATION_ERROR,
        "Request validation failed",
        f"{field}: {error_msg}" if field else error_msg,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all uncaught exceptions.

    Logs the traceback and returns a clean 500 body.
    """
    logger.error(
        "Unhandled exception on %s %s: %s\n%s",
        request.method,
        request.url.path,
        exc,
        traceback.format_exc(),
    )

    error_code = ErrorCode.INTERNAL_ERROR
    message = "An internal server error occurred"
    if "database" in str(exc).lower() or "sqlite" in str(exc).lower():
        error_code = ErrorCode.DATABASE_ERROR
        message = "Database operation failed"

    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, error_code, message, str(exc))


def create_app(
    db_path: Path | str = "stories.db",
    config: StoriesConfig | None = None,
    registry: AgentRegistry | None = None,
    web_dist: Path | None = None,
) -> FastAPI:
    """
    Create the web API.

    Args:
        db_path: SQLite database file
        config: Configuration snapshot (defaults to StoriesConfig())
        registry: Agent registry (defaults to the project custom-agents file)
        web_dist: Built web UI directory to serve at / (defaults to ./web/dist)

    Returns:
        Configured FastAPI application

    Example:
        >>> app = create_app("stories.db")
        >>> uvicorn.run(app, port=3000)  # doctest: +SKIP
    """
    config = config or StoriesConfig()
    if registry is None:
        registry = AgentRegistry.load(CustomAgentStore.project(filename=config.agents_file))

    app = FastAPI(
        title="Stories API",
        description="REST API for managing and running stories",
        version=__version__,
    )
    app.state.db_path = str(db_path)
    app.state.config = config
    app.state.registry = registry

    # Configure CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000"],  # Vite default ports
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StoriesError, stories_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, validation_exception_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(stories.router, prefix="/api", tags=["stories"])
    app.include_router(activities.router, prefix="/api", tags=["activities"])
    app.include_router(run.router, prefix="/api", tags=["run"])
    app.include_router(meta.router, prefix="/api", tags=["meta"])

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    dist = web_dist if web_dist is not None else Path.cwd() / "web" / "dist"
    if dist.is_dir():
        app.mount("/", StaticFiles(directory=dist, html=True), name="web")
    else:
        logger.debug("No web UI build at %s; serving the API only", dist)

    return app
