"""
Global middleware for API requests.

Provides:
- Request ID injection (X-Request-ID)
- Error envelope standardization
- Request usage logging
"""

from .request_id import setup_request_id_middleware, get_request_id
from .error_envelope import setup_error_handlers
from .request_logging import setup_request_logging_middleware

__all__ = [
    'setup_request_id_middleware',
    'get_request_id',
    'setup_error_handlers',
    'setup_request_logging_middleware',
]
