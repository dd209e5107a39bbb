"""Base service holding the request's database session.

Every store-specific service derives from ``BaseService`` so that owner checks and
category lookups behave the same way across the API.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from mmanager.core.db import Category, guarded_read
from mmanager.core.errors import AuthRequired, ValidationError


class BaseService:
    """Common plumbing for services bound to one session."""

    def __init__(self, session: Session) -> None:
        """Bind the service to a SQLAlchemy session."""
        self.session = session

    @staticmethod
    def require_owner(owner_id: str | None) -> str:
        """Return the owner id, or raise ``AuthRequired`` when there is none."""
        if not owner_id or not owner_id.strip():
            raise AuthRequired
        return owner_id.strip()

    def ordered_categories(self) -> list[Category]:
        """Return every category in display order (position, then name)."""
        with guarded_read("Failed to load categories."):
            stmt = select(Category).order_by(Category.order_index.asc(), Category.name.asc())
            return list(self.session.scalars(stmt))

    def check_category(self, category_id: str | None, field: str = "category_id") -> None:
        """Raise ``ValidationError`` on ``field`` unless the category exists."""
        if category_id is None:
            return
        with guarded_read("Failed to load categories."):
            found = self.session.get(Category, category_id)
        if found is None:
            raise ValidationError.for_field(field, "Select a valid category.")
