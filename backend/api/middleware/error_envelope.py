"""
Error envelope middleware - Standardize errors nobody handled in a route.

Route handlers map their own validation (400) and operation (500) errors.
Everything else lands here with a consistent shape:
{
    "error": {
        "code": "NOT_FOUND",
        "message": "The requested resource was not found",
        "requestId": "uuid"
    }
}
"""

import logging
from flask import Flask, jsonify, g
from werkzeug.exceptions import HTTPException


logger = logging.getLogger('api.middleware.error')


def _envelope(code: str, message: str, status_code: int):
    request_id = getattr(g, 'request_id', None)
    response = jsonify({
        "error": {
            "code": code,
            "message": message,
            "requestId": request_id,
        }
    })
    if request_id:
        response.headers['X-Request-ID'] = request_id
    return response, status_code


def setup_error_handlers(app: Flask) -> None:
    """
    Set up standardized error handlers on Flask app.

    Handles:
    - HTTP exceptions (404, 405, etc.) - status code preserved
    - Unhandled Python exceptions - generic 500, detail only logged
    """

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        # "Not Found" -> "NOT_FOUND"
        code = error.name.upper().replace(' ', '_')
        return _envelope(code, error.description, error.code)

    @app.errorhandler(Exception)
    def handle_generic_error(error):
        if isinstance(error, HTTPException):
            return handle_http_error(error)

        logger.exception(
            "Unhandled error: %s",
            error,
            extra={
                "event": "unhandled_error",
                "request_id": getattr(g, 'request_id', None),
                "error_type": type(error).__name__,
            }
        )
        return _envelope("INTERNAL_ERROR", "An unexpected error occurred", 500)
