"""
Error taxonomy shared by the services, repositories and HTTP layer.

Every error carries a stable ``kind`` and the HTTP status it maps to. Request
handlers never build error responses themselves: they raise, and the handlers
registered by :func:`register_error_handlers` render the JSON envelope.
"""
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    kind = "Internal"
    status_code = 500
    retryable = False
    default_message = "Unexpected error"

    def __init__(self, message=None, details=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details

    def to_dict(self):
        body = {"success": False, "kind": self.kind, "message": self.message}
        if self.details:
            body["details"] = self.details
        if self.retryable:
            body["retryable"] = True
        return body


class ValidationError(ServiceError):
    kind = "ValidationError"
    status_code = 400
    default_message = "Invalid request"


class Unauthenticated(ServiceError):
    kind = "Unauthenticated"
    status_code = 401
    default_message = "Authentication required"


class PermissionDenied(ServiceError):
    kind = "PermissionDenied"
    status_code = 403
    default_message = "Access denied"


class NotFound(ServiceError):
    kind = "NotFound"
    status_code = 404
    default_message = "Not found"


class Conflict(ServiceError):
    kind = "Conflict"
    status_code = 409
    default_message = "Conflicting resource"


class AlreadyRevoked(Conflict):
    kind = "AlreadyRevoked"
    default_message = "Access grant already revoked"


class UpstreamUnavailable(ServiceError):
    kind = "UpstreamUnavailable"
    status_code = 502
    retryable = True
    default_message = "Upstream service unavailable"


class Internal(ServiceError):
    pass


# HTTP errors raised by werkzeug itself (unknown route, wrong method, ...)
_HTTP_KINDS = {
    400: ValidationError,
    401: Unauthenticated,
    403: PermissionDenied,
    404: NotFound,
    405: ValidationError,
    409: Conflict,
    413: ValidationError,
}


def error_response(error):
    return jsonify(error.to_dict()), error.status_code


def register_error_handlers(app):
    """Map every failure to the JSON envelope so no request escapes unhandled."""

    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        if error.status_code >= 500:
            logger.error("[ERROR] %s: %s", error.kind, error.message)
        else:
            logger.info("[DENIED] %s: %s", error.kind, error.message)
        return error_response(error)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        code = error.code or 500
        error_cls = _HTTP_KINDS.get(code, ValidationError if code < 500 else Internal)
        mapped = error_cls(error.description)
        # Status follows the kind, so 405 and 413 go out as 400
        return error_response(mapped)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("[ERROR] Unhandled exception: %s", error)
        return error_response(Internal("Internal server error"))
