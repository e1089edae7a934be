"""
Shared pytest fixtures for the portfolio test suite.

Provides:
    - storage: fresh MemoryStorage (function-scoped)
    - rng: seeded random.Random for reproducible generation
    - portfolio_store / session_store: started stores over ``storage``
    - app: Flask application over ``storage`` (function-scoped)
    - client: Flask test client
    - make_program: factory for hand-built Program records
"""

import random
from datetime import date

import pytest

from portfolio import create_app
from portfolio.models.portfolio import (
    DevelopmentPhase,
    Priority,
    Program,
    TherapeuticArea,
)
from portfolio.services.portfolio_store import PortfolioStore
from portfolio.services.session_store import SessionStore
from portfolio.services.storage import MemoryStorage

FIXED_TODAY = date(2025, 3, 14)


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def rng():
    return random.Random(20240101)


@pytest.fixture()
def portfolio_store(storage, rng):
    """PortfolioStore seeded with 20 programs and a fixed clock."""
    store = PortfolioStore(storage, clock=lambda: FIXED_TODAY)
    store.initialize(count=20, rng=rng, today=FIXED_TODAY)
    return store


@pytest.fixture()
def session_store(storage):
    store = SessionStore(storage)
    store.restore()
    return store


# ── App & client ─────────────────────────────────────────────────────────


@pytest.fixture()
def app(storage):
    """Create the Flask application over the test's MemoryStorage."""
    return create_app("testing", storage=storage)


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def editor_client(client):
    res = client.post("/api/v1/auth/login", json={"role": "Editor"})
    assert res.status_code == 200
    return client


# ── Record factories ─────────────────────────────────────────────────────


@pytest.fixture()
def make_program():
    """Build a Program with sensible defaults; override any attribute."""

    def _make(**overrides):
        values = {
            "id": "PROG-9001",
            "code": "ONC-901",
            "name": "Oncology Drug for Lung Cancer",
            "description": "Test program",
            "therapeutic_area": TherapeuticArea.ONCOLOGY,
            "phase": DevelopmentPhase.PHASE_2,
            "target_indication": "Non-Small Cell Lung Cancer",
            "mechanism": "Monoclonal Antibody",
            "project_lead": "Dr. Sarah Chen",
            "therapeutic_lead": "Dr. David Kim",
            "start_date": date(2021, 5, 1),
            "estimated_approval_date": date(2024, 5, 1),
            "priority": Priority.HIGH,
            "budget": 50_000_000,
            "budget_spent": 20_000_000,
            "created_at": date(2021, 5, 1),
            "updated_at": date(2021, 5, 1),
        }
        values.update(overrides)
        return Program(**values)

    return _make
