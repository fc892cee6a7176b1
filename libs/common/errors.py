"""Application error taxonomy.

Routers raise these; ``libs.common.error_handler`` turns them into the
standard error envelope. Each class carries its HTTP status and a stable
machine-readable ``code``.
"""

from typing import Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing required input."""

    status_code = 400
    code = "validation_error"
    default_message = "Invalid request"


class AuthError(AppError):
    """Bad credentials, missing token, or deactivated account."""

    status_code = 401
    code = "auth_error"
    default_message = "Authentication failed"


class ForbiddenError(AuthError):
    """Credentials are valid but the account is not approved yet."""

    code = "account_not_approved"
    default_message = "Account is not approved yet"


class PermissionDeniedError(AppError):
    status_code = 403
    code = "permission_denied"
    default_message = "Admin privileges required"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"

    @classmethod
    def for_resource(cls, resource: str) -> "NotFoundError":
        return cls(f"{resource} not found")


class PersistenceError(AppError):
    """Any data-access failure that is not a capacity problem."""

    status_code = 500
    code = "persistence_error"
    default_message = "Database error"


class ServiceUnavailableError(AppError):
    """The connection pool is exhausted or the database is unreachable."""

    status_code = 503
    code = "service_unavailable"
    default_message = "Database connection limit reached, please retry shortly"
