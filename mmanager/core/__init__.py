"""Core package: provides tables, models, errors, settings, and shared utilities."""

from .db import Base, get_engine  # noqa: F401
from .errors import AuthRequired, ConflictError, MManagerError, NotFound, PersistenceError  # noqa: F401
from .settings import Settings  # noqa: F401
from .utils import get_logger  # noqa: F401
