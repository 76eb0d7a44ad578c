"""Error taxonomy shared by services and routes.

Services raise these; ``register_error_handlers`` turns them into
``{"error": message}`` JSON responses with the matching status code.
"""
import logging
from http import HTTPStatus

from flask import jsonify
from marshmallow import ValidationError as SchemaValidationError
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(ApiError):
    status = HTTPStatus.BAD_REQUEST
    default_message = "Invalid request"


class Unauthenticated(ApiError):
    status = HTTPStatus.UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(ApiError):
    status = HTTPStatus.FORBIDDEN
    default_message = "Forbidden"


class NotFound(ApiError):
    status = HTTPStatus.NOT_FOUND
    default_message = "Not found"


class Conflict(ApiError):
    status = HTTPStatus.CONFLICT
    default_message = "Conflict"


class InternalError(ApiError):
    pass


def register_error_handlers(app):
    logger = logging.getLogger(__name__)

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError):
        if isinstance(error, InternalError):
            logger.error("Internal error: %s", error.message)
            return jsonify({"error": InternalError.default_message}), error.status
        return jsonify({"error": error.message}), error.status

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(error: SchemaValidationError):
        return jsonify({
            "error": "Invalid request",
            "details": error.normalized_messages(),
        }), HTTPStatus.BAD_REQUEST

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"error": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        logger.exception("Unhandled error: %s", error)
        return jsonify({"error": InternalError.default_message}), \
            HTTPStatus.INTERNAL_SERVER_ERROR
