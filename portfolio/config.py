"""
Clinical R&D Portfolio Platform
Environment configuration.

``create_app`` picks a class from ``config`` by name (APP_ENV, default
"development"). Every setting can be overridden through the environment:

    DATABASE_URL              SQL backend URL (SQLite file in development)
    STORAGE_BACKEND           "sql" | "memory"
    PORTFOLIO_PROGRAM_COUNT   programs generated on first start (50)
    PORTFOLIO_SEED            fixed seed for reproducible sample data
    CORS_ORIGINS              comma-separated origins, "*" for any
    LOG_LEVEL / LOG_FORMAT    see portfolio.middleware.logging_config
    SECRET_KEY
"""

import os
import secrets

_PACKAGE_ROOT = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
_LOCAL_DB = "sqlite:///" + os.path.join(_PACKAGE_ROOT, "instance", "portfolio.db")


def _env_int(name, default=None):
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


def _database_url(fallback=None):
    # SQLAlchemy 2.x rejects the legacy postgres:// scheme
    url = os.getenv("DATABASE_URL", "")
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url or fallback


class Config:
    """Settings shared by every environment."""

    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY") or secrets.token_hex(32)

    SQLALCHEMY_DATABASE_URI = _database_url(_LOCAL_DB)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "sql")

    PORTFOLIO_PROGRAM_COUNT = _env_int("PORTFOLIO_PROGRAM_COUNT", 50)
    PORTFOLIO_SEED = _env_int("PORTFOLIO_SEED")

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Empty values let configure_logging choose by environment
    LOG_LEVEL = os.getenv("LOG_LEVEL", "")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "")


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    """In-memory storage and a fixed seed so runs are repeatable."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    STORAGE_BACKEND = "memory"
    PORTFOLIO_SEED = 1234


class ProductionConfig(Config):
    """Requires DATABASE_URL and SECRET_KEY; CORS origins must be listed."""

    SQLALCHEMY_DATABASE_URI = _database_url()
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")

    def __init__(self):
        missing = [name for name in ("DATABASE_URL", "SECRET_KEY") if not os.getenv(name)]
        if missing:
            raise RuntimeError(f"Production requires environment variables: {', '.join(missing)}")


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
