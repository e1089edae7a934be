"""JSON error bodies shared by every blueprint.

Body shape::

    {"error": "<message>", "code": "ERR_...", "details": {...}}   # details optional

Views return ``api_error(E.X, "...")`` directly for request-shape problems;
exceptions raised by the stores are converted by the handlers registered in
``portfolio.blueprints.register_error_handlers``.
"""

from __future__ import annotations

from flask import jsonify


class E:
    """Machine-readable error codes."""

    VALIDATION_REQUIRED = "ERR_VALIDATION_REQUIRED"   # missing request field
    VALIDATION_INVALID = "ERR_VALIDATION_INVALID"     # wrong shape / enum value
    NOT_FOUND = "ERR_NOT_FOUND"
    FORBIDDEN = "ERR_FORBIDDEN"                       # session role may not act
    NOT_READY = "ERR_NOT_READY"                       # stores not started
    STORAGE = "ERR_STORAGE"
    INTERNAL = "ERR_INTERNAL"


STATUS_BY_CODE: dict[str, int] = {
    E.VALIDATION_REQUIRED: 400,
    E.VALIDATION_INVALID: 400,
    E.FORBIDDEN: 403,
    E.NOT_FOUND: 404,
    E.STORAGE: 500,
    E.INTERNAL: 500,
    E.NOT_READY: 503,
}


def api_error(code: str, message: str, *, status: int | None = None, details: dict | None = None):
    """Build ``(response, status)`` for ``code``.

    ``status`` overrides the default for the code; unknown codes map to 400.
    Empty ``details`` are left out of the body.
    """
    body: dict = {"error": message, "code": code}
    if details:
        body["details"] = details
    return jsonify(body), status or STATUS_BY_CODE.get(code, 400)
