"""Service-level exceptions and their JSON error handlers.

Services raise these; routes let them propagate and the handlers registered
by :func:`register_error_handlers` turn them into the standard error envelope.
"""

from typing import Any

import structlog
from werkzeug.exceptions import HTTPException

logger = structlog.get_logger()


class AuroraError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "ERROR"
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        error = {"code": self.code, "message": self.message}
        if self.details is not None:
            error["details"] = self.details
        return error


class UnauthorizedError(AuroraError):
    """Missing or bad credentials, or a token for a user that no longer exists."""

    code = "UNAUTHORIZED"
    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(AuroraError):
    """Referenced resource is missing or owned by someone else."""

    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class ForbiddenError(AuroraError):
    """Caller may not perform the action (e.g. level requirement not met)."""

    code = "FORBIDDEN"
    status_code = 403
    default_message = "Access denied"


class ValidationError(AuroraError):
    """Malformed or missing input fields."""

    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Invalid input data"


class ConflictError(AuroraError):
    """Uniqueness violation."""

    code = "CONFLICT"
    status_code = 409
    default_message = "Resource conflict"


class DependencyFailure(AuroraError):
    """A secondary side effect failed after the primary record was persisted."""

    code = "DEPENDENCY_FAILURE"
    status_code = 500
    default_message = "A dependent operation failed"


def register_error_handlers(app):
    """Register JSON error handlers on the Flask app."""
    from aurora.utils.response import error_response

    @app.errorhandler(AuroraError)
    def handle_aurora_error(exc: AuroraError):
        if exc.status_code >= 500:
            logger.error("service_error", code=exc.code, error=exc.message)
        return error_response(
            exc.code, exc.message, exc.details, status_code=exc.status_code
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        return error_response(
            (exc.name or "error").upper().replace(" ", "_"),
            exc.description or exc.name,
            status_code=exc.code or 500,
        )

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("unhandled_exception", error=str(exc))
        return error_response(
            "SERVER_ERROR", "Internal server error", status_code=500
        )


def register_jwt_handlers(jwt):
    """Answer JWT failures with the standard 401 envelope."""
    from aurora.utils.response import unauthorized

    @jwt.unauthorized_loader
    def missing_token(reason: str):
        return unauthorized(reason)

    @jwt.invalid_token_loader
    def invalid_token(reason: str):
        return unauthorized(reason)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return unauthorized("Token has expired")
