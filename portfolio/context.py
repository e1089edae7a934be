"""
Application-level portfolio context.

Owns the storage backend and the two stores so no module needs global
state. ``create_app`` builds one, starts it, and keeps it at
``app.extensions["portfolio"]``; request handlers fetch it with
``get_context()``.
"""

import logging
import random

from flask import current_app

from portfolio.services import sample_data
from portfolio.services.portfolio_store import PortfolioStore
from portfolio.services.session_store import SessionStore
from portfolio.services.storage import StorageBackend

logger = logging.getLogger(__name__)

EXTENSION_KEY = "portfolio"


class PortfolioContext:
    """Storage plus session and portfolio stores, started together."""

    def __init__(self, storage: StorageBackend, *, program_count: int = 50,
                 seed: int | None = None, clock=None):
        self.storage = storage
        self.program_count = program_count
        self.seed = seed
        self.session = SessionStore(storage)
        self.portfolio = PortfolioStore(storage, clock=clock)

    def _rng(self):
        return random.Random(self.seed) if self.seed is not None else None

    def start(self):
        """Restore the session and load (or generate) the portfolio."""
        self.session.restore()
        result = self.portfolio.initialize(count=self.program_count, rng=self._rng())
        logger.info("Portfolio ready: %d programs (%s)", len(result.programs),
                    "generated" if result.generated else "restored")
        return result

    def ready(self) -> bool:
        return self.session.ready() and self.portfolio.ready()

    def reset_portfolio(self):
        """Discard the persisted portfolio and generate a fresh one."""
        sample_data.reset(self.storage)
        return self.portfolio.initialize(count=self.program_count, rng=self._rng())


def init_portfolio(app, storage: StorageBackend) -> PortfolioContext:
    """Build and start the context for ``app``; must run inside an app context."""
    ctx = PortfolioContext(
        storage,
        program_count=app.config.get("PORTFOLIO_PROGRAM_COUNT", 50),
        seed=app.config.get("PORTFOLIO_SEED"),
    )
    ctx.start()
    app.extensions[EXTENSION_KEY] = ctx
    return ctx


def get_context() -> PortfolioContext:
    return current_app.extensions[EXTENSION_KEY]
