"""
Shared route utilities for API endpoints.

Goals:
- Structured logger usage instead of ad-hoc print timing/error logs
- Every route log line carries the request id for correlation
- Never leak exception detail to clients on operation errors
"""

import time
import logging
from typing import Any, Dict, Optional

from flask import jsonify

from api.middleware.request_id import get_request_id


def route_logger(name: str) -> logging.Logger:
    """Return namespaced logger for API routes."""
    return logging.getLogger(f"api.{name}")


def elapsed_ms(start_time: float) -> int:
    """Return elapsed milliseconds since a perf_counter() start value."""
    return int((time.perf_counter() - start_time) * 1000)


def _route_payload(route: str, start_time: float, details: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    payload = {
        "route": route,
        "elapsed_ms": elapsed_ms(start_time),
        "request_id": get_request_id(),
    }
    if details:
        payload.update(details)
    return payload


def log_success(
    logger: logging.Logger,
    route: str,
    start_time: float,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    logger.info("route_success %s", _route_payload(route, start_time, details))


def log_error(
    logger: logging.Logger,
    route: str,
    start_time: float,
    err: Exception,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """Log the failure with traceback; the client only ever sees operation_error()."""
    logger.exception(
        "route_error %s error_type=%s err=%s",
        _route_payload(route, start_time, details),
        type(err).__name__,
        err,
    )


def operation_error(message: str, status_code: int = 500):
    """Static client-facing failure; the cause is only logged."""
    return jsonify({"error": message}), status_code
