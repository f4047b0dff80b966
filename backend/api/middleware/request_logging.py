"""
Request logging middleware - lightweight usage sampling.

Logs API requests (path, query string, status, latency, request id) for a
sampled fraction of traffic plus every request under a watchlisted prefix.

Settings (read from app.config):
  - REQUEST_LOG_ENABLED: master switch
  - REQUEST_LOG_SAMPLE_RATE: 0.0 logs nothing unless watchlisted, 1.0 logs everything
  - REQUEST_LOG_ENDPOINTS: comma-separated path prefixes to always log
"""

import logging
import random
import time
from typing import List

from flask import Flask, g, request


logger = logging.getLogger("api.request")


def _parse_watchlist(raw: str) -> List[str]:
    if not raw:
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


def _parse_rate(raw) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return 0.0


def _should_log(path: str, watchlist: List[str], sample_rate: float) -> bool:
    if watchlist:
        return any(path.startswith(prefix) for prefix in watchlist)
    if sample_rate <= 0:
        return False
    if sample_rate >= 1:
        return True
    return random.random() <= sample_rate


def setup_request_logging_middleware(app: Flask, api_prefix: str = "/api") -> None:
    """Install timing and logging hooks for requests under `api_prefix`."""
    if not app.config.get("REQUEST_LOG_ENABLED", True):
        return

    sample_rate = _parse_rate(app.config.get("REQUEST_LOG_SAMPLE_RATE", 0.0))
    watchlist = _parse_watchlist(app.config.get("REQUEST_LOG_ENDPOINTS", ""))

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()

    @app.after_request
    def _log_request(response):
        path = request.path
        if not path.startswith(api_prefix):
            return response

        if not _should_log(path, watchlist, sample_rate):
            return response

        duration_ms = None
        if hasattr(g, "request_start"):
            duration_ms = round((time.perf_counter() - g.request_start) * 1000, 2)

        logger.info(
            "api_request path=%s query=%s status=%s duration_ms=%s request_id=%s",
            path,
            request.query_string.decode("utf-8", "replace") or "-",
            response.status_code,
            duration_ms,
            getattr(g, "request_id", None),
        )
        return response
