"""FastAPI dependencies for DI (settings, DB session, owner identity, view cache).

Everything is read from ``request.app.state`` so that each application built by
``create_app`` carries its own engine, settings and cache.
"""

from collections.abc import Iterator

from fastapi import Request
from sqlalchemy.orm import Session

from mmanager.core.settings import Settings
from mmanager.services.view_cache import ViewCache


def get_settings(request: Request) -> Settings:
    """Provide the application's settings."""
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    """Provide a SQLAlchemy session for the duration of one request."""
    session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def get_owner_id(request: Request) -> str | None:
    """Provide the authenticated owner id set by the identity provider, if any."""
    return request.headers.get(request.app.state.settings.owner_header)


def get_view_cache(request: Request) -> ViewCache:
    """Provide the application's view cache."""
    return request.app.state.view_cache
