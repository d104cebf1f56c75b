from flask import jsonify, current_app
from pymongo.errors import PyMongoError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from ideahive.domain.invariants.exceptions import InvariantViolation


class ContentError(Exception):
    """Base class for errors a caller can act on."""

    status_code = 400
    error = "ContentError"

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class BadRequestError(ContentError):
    status_code = 400
    error = "BadRequest"


class ForbiddenError(ContentError):
    status_code = 403
    error = "Forbidden"


class NotFoundError(ContentError):
    status_code = 404
    error = "NotFound"


class ConflictError(ContentError):
    status_code = 409
    error = "Conflict"


def _internal_error_response():
    response = jsonify({
        "error": "InternalError",
        "message": "Internal server error"
    })
    response.status_code = 500
    return response


def register_error_handlers(app):
    @app.errorhandler(ContentError)
    def handle_content_error(error):
        response = jsonify({
            "error": error.error,
            "message": error.message
        })
        response.status_code = error.status_code
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "error": error.name.replace(" ", ""),
            "message": error.description
        })
        response.status_code = error.code
        return response

    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        current_app.logger.error("Content invariant violated: %s", error, exc_info=error)
        return _internal_error_response()

    @app.errorhandler(PyMongoError)
    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(error):
        current_app.logger.error("Storage failure: %s", error, exc_info=error)
        return _internal_error_response()

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        current_app.logger.error("Unhandled error: %s", error, exc_info=error)
        return _internal_error_response()
