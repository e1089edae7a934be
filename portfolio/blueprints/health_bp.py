"""
Health check blueprint.

Endpoints:
    GET /api/v1/health        — simple 200 for load balancers
    GET /api/v1/health/ready  — store readiness + storage backend status
"""

import logging

from flask import Blueprint, current_app, jsonify

from portfolio.context import EXTENSION_KEY

logger = logging.getLogger(__name__)

health_bp = Blueprint("health_bp", __name__, url_prefix="/api/v1/health")


@health_bp.route("", methods=["GET"])
def health():
    return jsonify({"status": "ok", "app": "Clinical R&D Portfolio"}), 200


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Readiness probe — 503 until both stores have been started."""
    ctx = current_app.extensions.get(EXTENSION_KEY)
    checks = {
        "session_store": bool(ctx and ctx.session.ready()),
        "portfolio_store": bool(ctx and ctx.portfolio.ready()),
        "storage_backend": ctx.storage.name if ctx else None,
    }
    try:
        checks["storage_keys"] = ctx.storage.keys() if ctx else []
    except Exception as exc:
        logger.error("Health check — storage failed: %s", exc)
        checks["storage_keys"] = None
        checks["storage_error"] = str(exc)

    is_ready = checks["session_store"] and checks["portfolio_store"] and "storage_error" not in checks
    status = 200 if is_ready else 503
    return jsonify({"status": "ok" if is_ready else "not_ready", "checks": checks}), status
