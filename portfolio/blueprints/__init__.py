"""
Clinical R&D Portfolio Platform
Blueprint registry and shared error handlers.
"""

import logging

from flask import request
from sqlalchemy.exc import SQLAlchemyError

from portfolio.core.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    StoreNotReadyError,
    ValidationError,
)
from portfolio.utils.errors import E, api_error

logger = logging.getLogger(__name__)


def request_list_arg(name):
    """Repeatable / comma-separated query param → list of non-empty strings."""
    values = []
    for raw in request.args.getlist(name):
        values.extend(v.strip() for v in raw.split(",") if v.strip())
    return values


def register_blueprints(app):
    from portfolio.blueprints.admin_bp import admin_bp
    from portfolio.blueprints.analytics_bp import analytics_bp
    from portfolio.blueprints.auth_bp import auth_bp
    from portfolio.blueprints.health_bp import health_bp
    from portfolio.blueprints.program_bp import program_bp

    app.register_blueprint(program_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(health_bp)


def register_error_handlers(app):
    """Map the platform exception hierarchy to JSON error responses."""

    @app.errorhandler(ValidationError)
    def _validation_error(exc):
        return api_error(E.VALIDATION_INVALID, str(exc), details=exc.details)

    @app.errorhandler(NotFoundError)
    def _not_found_error(exc):
        return api_error(E.NOT_FOUND, f"{exc.resource} not found")

    @app.errorhandler(PermissionDeniedError)
    def _permission_error(exc):
        return api_error(E.FORBIDDEN, "Permission denied", details={"role": exc.role})

    @app.errorhandler(StoreNotReadyError)
    def _not_ready_error(exc):
        logger.error("Store accessed before startup: %s", exc)
        return api_error(E.NOT_READY, str(exc))

    @app.errorhandler(SQLAlchemyError)
    def _storage_error(exc):
        logger.exception("Storage backend error")
        return api_error(E.STORAGE, "Storage error")

    @app.errorhandler(404)
    def _route_not_found(e):
        return {"error": "Not found", "path": request.path}, 404

    @app.errorhandler(405)
    def _method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(500)
    def _server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return api_error(E.INTERNAL, "Internal server error")
