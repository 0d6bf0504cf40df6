import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message=None, errors=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.errors = errors

    def to_dict(self):
        payload = {"msg": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class InvalidArgument(ServiceError):
    status_code = 400
    default_message = "Invalid argument"


class PreconditionFailed(ServiceError):
    status_code = 400
    default_message = "Precondition failed"


class Forbidden(ServiceError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(ServiceError):
    status_code = 404
    default_message = "Not found"


class Conflict(ServiceError):
    status_code = 409
    default_message = "Conflict"


class Unavailable(ServiceError):
    """Backing store failed; the whole operation can be retried."""

    status_code = 503
    default_message = "Service temporarily unavailable"


class Internal(ServiceError):
    status_code = 500


def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        if error.status_code >= 500:
            logger.error("%s: %s", type(error).__name__, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"msg": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception("Unhandled error: %s", error)
        internal = Internal()
        return jsonify(internal.to_dict()), internal.status_code
