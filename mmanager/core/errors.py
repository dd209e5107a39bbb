"""Error taxonomy shared by services and the HTTP layer.

Services raise these; the exception handler registered in ``main.create_app``
turns them into structured JSON bodies so nothing escapes the API boundary.
"""


class MManagerError(Exception):
    """Base class for every failure reported to API callers."""

    code = "error"
    status_code = 500

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None) -> None:
        """Store the user-facing message and optional per-field errors."""
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

    def to_dict(self) -> dict:
        """Render the error as the structured result body."""
        return {"success": False, "error": self.code, "message": self.message, "errors": self.errors}


class AuthRequired(MManagerError):
    """No authenticated owner accompanied the request."""

    code = "auth_required"
    status_code = 401

    def __init__(self, message: str = "Authentication required.") -> None:
        """Use the default authentication message."""
        super().__init__(message)


class ValidationError(MManagerError):
    """Malformed input, reported per field."""

    code = "validation_error"
    status_code = 422

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        """Build an error carrying a single field message."""
        return cls("Invalid input.", errors={field: [message]})


class ConflictError(MManagerError):
    """A uniqueness constraint was violated."""

    code = "conflict"
    status_code = 409


class NotFound(MManagerError):
    """The addressed record does not exist (or belongs to someone else)."""

    code = "not_found"
    status_code = 404


class PersistenceError(MManagerError):
    """The database rejected or failed a read or write."""

    code = "persistence_error"
    status_code = 500
