"""
Clinical R&D Portfolio Platform
Flask Application Factory.

Usage:
    from portfolio import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask
from flask_cors import CORS

from portfolio.config import config
from portfolio.context import init_portfolio
from portfolio.middleware.logging_config import configure_logging
from portfolio.middleware.timing import init_request_timing
from portfolio.models import db
from portfolio.services.storage import StorageBackend, build_storage

logger = logging.getLogger(__name__)


def create_app(config_name=None, *, storage: StorageBackend | None = None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.
        storage: Optional pre-built storage backend (tests pass a
                 MemoryStorage to simulate a restart over the same data).

    Returns:
        Configured Flask application instance with the portfolio context
        started (session restored, data loaded or generated).
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    # Instantiated so ProductionConfig can check its required variables
    app.config.from_object(config[config_name]())

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Request timing middleware ────────────────────────────────────────
    init_request_timing(app)

    # ── Storage + portfolio context ──────────────────────────────────────
    from portfolio.models import storage as _storage_models  # noqa: F401

    with app.app_context():
        if storage is None and app.config.get("STORAGE_BACKEND", "sql") == "sql":
            uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
            if uri.startswith("sqlite:///") and ":memory:" not in uri:
                os.makedirs(os.path.dirname(uri.replace("sqlite:///", "", 1)), exist_ok=True)
            db.create_all()
            app.logger.info("db.create_all() completed successfully")
        init_portfolio(app, storage or build_storage(app))

    # ── Blueprints & error handlers ──────────────────────────────────────
    from portfolio.blueprints import register_blueprints, register_error_handlers

    register_blueprints(app)
    register_error_handlers(app)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("seed-portfolio")
    def seed_portfolio_cmd():
        """Load the sample portfolio, generating it if storage is empty."""
        from portfolio.context import get_context
        result = get_context().portfolio.initialize(
            count=app.config["PORTFOLIO_PROGRAM_COUNT"],
        )
        state = "generated" if result.generated else "already present"
        click.echo(f"{len(result.programs)} programs {state}.")

    @app.cli.command("reset-portfolio")
    def reset_portfolio_cmd():
        """Discard the persisted portfolio and generate a new one."""
        from portfolio.context import get_context
        result = get_context().reset_portfolio()
        click.echo(f"Regenerated {len(result.programs)} programs.")

    return app
