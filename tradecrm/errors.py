"""Domain errors raised by services and translated at the HTTP boundary."""

from __future__ import annotations


class CRMError(Exception):
    status_code = 500
    reason = "Internal server error"

    def __init__(self, reason: str | None = None):
        super().__init__(reason or self.reason)
        self.reason = reason or self.reason


class ValidationError(CRMError):
    status_code = 400
    reason = "Invalid input"


class UnauthorizedError(CRMError):
    status_code = 401
    reason = "Unauthorized"


class ForbiddenError(CRMError):
    status_code = 403
    reason = "Forbidden"


class NotFoundError(CRMError):
    status_code = 404
    reason = "Not found"


class ConflictError(CRMError):
    status_code = 409
    reason = "Conflict"


class PersistenceError(CRMError):
    """Backing-store fault. The original exception is kept on ``__cause__``."""

    status_code = 500
    reason = "Internal server error"
