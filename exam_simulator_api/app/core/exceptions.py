"""
Application error types.

Services raise these instead of ``HTTPException`` so they stay usable
outside a request.  Each error carries the HTTP status it maps to;
``main.create_app`` renders them as ``{"success": false, "error": ...}``.
"""

from typing import List, Optional


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppError):
    """A file or record does not exist."""

    status_code = 404


class ConflictError(AppError):
    """A uniqueness rule was violated (e.g. duplicate email)."""

    # Reported as 400, not 409.
    status_code = 400


class ValidationError(AppError):
    """The request body or uploaded content is malformed."""

    status_code = 400

    def __init__(self, message: str, violations: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.violations = violations or []


class UnauthorizedError(AppError):
    """Credentials did not match."""

    status_code = 401


class ParseError(AppError):
    """A stored JSON document is corrupt."""

    status_code = 500


class InternalError(AppError):
    """An external collaborator or the filesystem failed."""

    status_code = 500
