"""
Request timing and access log.

Every response gets ``X-Request-ID`` and ``X-Request-Duration-Ms``.
Write requests (program edits, filter changes, login/logout, admin reset)
are logged at INFO so the edit trail is visible without DEBUG; reads are
logged at DEBUG. Slow requests and 5xx responses are always logged.
"""

import logging
import time
import uuid

from flask import Flask, g, request

logger = logging.getLogger(__name__)

WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
QUIET_PATHS = frozenset({"/api/v1/health", "/api/v1/health/ready"})
SLOW_REQUEST_MS = 1000


def _level_for(method: str, status: int, duration_ms: float) -> int:
    if status >= 500:
        return logging.ERROR
    if duration_ms > SLOW_REQUEST_MS:
        return logging.WARNING
    if method in WRITE_METHODS:
        return logging.INFO
    return logging.DEBUG


def init_request_timing(app: Flask):
    """Attach the timing hooks to ``app``."""

    @app.before_request
    def _begin():
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish(response):
        started = g.pop("request_started", None)
        if started is None:
            return response

        elapsed = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = g.request_id
        response.headers["X-Request-Duration-Ms"] = f"{elapsed:.1f}"

        if request.path in QUIET_PATHS:
            return response

        level = _level_for(request.method, response.status_code, elapsed)
        logger.log(
            level, "%s %s -> %d", request.method, request.path, response.status_code,
            extra={
                "method": request.method,
                "path": request.path,
                "status": response.status_code,
                "duration_ms": elapsed,
                "remote_addr": request.remote_addr,
                "request_id": g.request_id,
                "program_id": (request.view_args or {}).get("program_id"),
            },
        )
        return response
