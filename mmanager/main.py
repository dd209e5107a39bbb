"""Application factory for the m-manager API.

This module configures logging, builds the FastAPI application with its database engine,
session factory and view cache, registers the structured error handlers, and exposes the
Scalar API reference endpoint for interactive OpenAPI documentation.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from scalar_fastapi import get_scalar_api_reference

from mmanager.api.routes import router
from mmanager.core.db import Base, build_session_factory, get_engine
from mmanager.core.errors import MManagerError, ValidationError
from mmanager.core.settings import Settings, get_settings
from mmanager.core.utils import PROJECT_LOGGER, ensure_dir, get_logger
from mmanager.services.view_cache import ViewCache

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
logger = get_logger("mmanager.app")


# --- Logging Setup ---
def setup_logging(settings: Settings) -> None:
    """Configure logging to file and console, and ensure the log directory exists."""
    log_path = Path(settings.log_file).resolve()
    ensure_dir(log_path.parent)
    project_logger = get_logger(PROJECT_LOGGER)
    project_logger.setLevel(settings.log_level.upper())
    # Add file handler for persistent logs (not colorized)
    if not any(
        isinstance(h, logging.FileHandler) and h.baseFilename == str(log_path) for h in project_logger.handlers
    ):
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        project_logger.addHandler(file_handler)


def _field_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "__root__"
        message = str(error.get("msg", "Invalid value.")).removeprefix("Value error, ")
        errors.setdefault(field, []).append(message)
    return errors


async def handle_mmanager_error(request: Request, exc: MManagerError) -> JSONResponse:
    """Return a service failure as a structured result."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures per field, in the same shape as service errors."""
    error = ValidationError("Invalid input.", errors=_field_errors(exc))
    return await handle_mmanager_error(request, error)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan event handler creating the tables on startup and releasing the engine on shutdown."""
    Base.metadata.create_all(app.state.engine)
    logger.info("Database ready")
    yield
    app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application for ``settings`` (environment settings by default)."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        title="m-manager API",
        description="""
    The m-manager API records household transactions, keeps per-category monthly budgets, tracks
    recurring fixed costs and a calendar of holidays.

    **Identity:** mutations and owner-scoped reads need the owner id in the `X-Owner-Id` header
    (configurable with `OWNER_HEADER`).

    **Endpoints:**
    - `GET /dashboard`: Budgeted vs. spent per category for a month.
    - `GET /budgets`, `PUT /budgets/cell`, `PUT /budgets/year`: Yearly budget grid and upserts.
    - `/categories`: List, add, delete and reorder categories.
    - `/transactions`: Ledger entries and CSV export.
    - `/fixed-costs`: Recurring charges and `POST /fixed-costs/materialize`.
    - `/schedules`, `/holidays`: Calendar annotations.
    - `GET /health`: Health check endpoint.
    - `GET /scalar`: Interactive Scalar OpenAPI documentation.
    """,
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.engine = get_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.view_cache = ViewCache(
        enabled=settings.view_cache_enabled, max_entries=settings.view_cache_max_entries
    )

    app.add_exception_handler(MManagerError, handle_mmanager_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.include_router(router)

    @app.get("/scalar", include_in_schema=False)
    async def scalar_docs() -> HTMLResponse:
        """Return Scalar API reference."""
        return get_scalar_api_reference(openapi_url=app.openapi_url, title=app.title)

    return app
