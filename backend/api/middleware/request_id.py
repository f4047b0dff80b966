"""
Request ID middleware - Inject X-Request-ID for request correlation.

A client-supplied X-Request-ID is reused (truncated to MAX_REQUEST_ID_LENGTH);
otherwise a UUID4 is generated. The id is stored on g.request_id and echoed
on every response.
"""

import uuid
from flask import Flask, request, g

REQUEST_ID_HEADER = 'X-Request-ID'
MAX_REQUEST_ID_LENGTH = 128


def setup_request_id_middleware(app: Flask) -> None:
    """Set up request ID injection and echo on the Flask app."""

    @app.before_request
    def inject_request_id():
        request_id = (request.headers.get(REQUEST_ID_HEADER) or '').strip()
        g.request_id = request_id[:MAX_REQUEST_ID_LENGTH] or str(uuid.uuid4())

    @app.after_request
    def add_request_id_header(response):
        if hasattr(g, 'request_id'):
            response.headers[REQUEST_ID_HEADER] = g.request_id
        return response


def get_request_id() -> str:
    """Current request ID, or a fresh UUID outside a request."""
    if hasattr(g, 'request_id'):
        return g.request_id
    return str(uuid.uuid4())
