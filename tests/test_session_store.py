"""
Clinical R&D Portfolio Platform
Tests — session store.

Covers:
    - Login / logout and the synthetic user
    - Role hierarchy and edit permission
    - Persistence across a restart (fresh store over the same storage)
    - Unreadable session entries
    - Accessors before restore()
"""

import json

import pytest

from portfolio.core.exceptions import StoreNotReadyError, ValidationError
from portfolio.models.portfolio import User, UserRole
from portfolio.services.session_store import SessionStore, build_user
from portfolio.services.storage import CURRENT_USER_KEY


def test_starts_unauthenticated(session_store):
    assert session_store.current_user is None
    assert session_store.is_authenticated() is False
    assert session_store.can_edit() is False


@pytest.mark.parametrize("role,name,email", [
    (UserRole.VIEWER, "Viewer User", "viewer@clinicalrd.com"),
    (UserRole.EDITOR, "Editor User", "editor@clinicalrd.com"),
    (UserRole.ADMIN, "Admin User", "admin@clinicalrd.com"),
])
def test_login_builds_synthetic_user(session_store, role, name, email):
    user = session_store.login(role)
    assert user == User(id="USER-001", name=name, email=email, role=role)
    assert session_store.current_user == user
    assert session_store.is_authenticated() is True


def test_login_accepts_role_string(session_store):
    assert session_store.login("Editor").role == UserRole.EDITOR


def test_login_rejects_unknown_role(session_store):
    with pytest.raises(ValidationError):
        session_store.login("Superuser")
    assert session_store.current_user is None


@pytest.mark.parametrize("role,expected", [
    (UserRole.VIEWER, False),
    (UserRole.EDITOR, True),
    (UserRole.ADMIN, True),
])
def test_can_edit_by_role(session_store, role, expected):
    session_store.login(role)
    assert session_store.can_edit() is expected


def test_has_role_follows_hierarchy(session_store):
    session_store.login(UserRole.EDITOR)
    assert session_store.has_role(UserRole.VIEWER)
    assert session_store.has_role(UserRole.EDITOR)
    assert not session_store.has_role(UserRole.ADMIN)

    session_store.login(UserRole.ADMIN)
    assert all(session_store.has_role(r) for r in UserRole)


def test_has_role_false_without_session(session_store):
    assert session_store.has_role(UserRole.VIEWER) is False


def test_login_replaces_existing_session(session_store, storage):
    session_store.login(UserRole.ADMIN)
    session_store.login(UserRole.VIEWER)
    assert session_store.current_user.role == UserRole.VIEWER
    assert json.loads(storage.load(CURRENT_USER_KEY))["role"] == "Viewer"


def test_logout_clears_session_and_storage(session_store, storage):
    session_store.login(UserRole.EDITOR)
    session_store.logout()
    assert session_store.current_user is None
    assert storage.load(CURRENT_USER_KEY) is None


def test_logout_without_session_is_harmless(session_store):
    session_store.logout()
    assert session_store.is_authenticated() is False


# ── Persistence ──────────────────────────────────────────────────────────


def test_session_survives_restart(session_store, storage):
    user = session_store.login(UserRole.EDITOR)

    restarted = SessionStore(storage)
    assert restarted.restore() == user
    assert restarted.current_user == user
    assert restarted.can_edit() is True


def test_logout_survives_restart(session_store, storage):
    session_store.login(UserRole.ADMIN)
    session_store.logout()

    restarted = SessionStore(storage)
    restarted.restore()
    assert restarted.current_user is None


def test_persisted_session_format(session_store, storage):
    session_store.login(UserRole.VIEWER)
    assert json.loads(storage.load(CURRENT_USER_KEY)) == build_user(UserRole.VIEWER).to_dict()


@pytest.mark.parametrize("raw", [
    "{broken",
    json.dumps({"id": "USER-001", "role": "Viewer"}),
    json.dumps({"id": "USER-001", "name": "X", "email": "x@y", "role": "Root"}),
    json.dumps(["not", "an", "object"]),
])
def test_unreadable_session_is_discarded(storage, raw):
    storage.save(CURRENT_USER_KEY, raw)
    store = SessionStore(storage)
    assert store.restore() is None
    assert store.ready() is True
    assert store.current_user is None
    assert storage.load(CURRENT_USER_KEY) is None


# ── Lifecycle ────────────────────────────────────────────────────────────


def test_accessors_require_restore(storage):
    store = SessionStore(storage)
    assert store.ready() is False
    with pytest.raises(StoreNotReadyError):
        store.current_user
    with pytest.raises(StoreNotReadyError):
        store.login(UserRole.EDITOR)
    with pytest.raises(StoreNotReadyError):
        store.can_edit()
