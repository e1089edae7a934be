"""
Session Store — the single authenticated principal.

Holds at most one User, persisted under the ``currentUser`` storage key.
There are no credentials: logging in with a role creates a synthetic user
for that role.

Lifecycle:
    store = SessionStore(storage)   # Uninitialized; accessors raise
    store.restore()                 # Ready; previous session (if any) loaded
    store.login(UserRole.EDITOR)
    store.can_edit()                # True

Role hierarchy: Admin ⊇ Editor ⊇ Viewer. Editing requires Editor or Admin.
"""

import logging

from portfolio.core.exceptions import StorageCorruptionError, StoreNotReadyError, ValidationError
from portfolio.models.portfolio import User, UserRole, coerce_enum
from portfolio.services.storage import CURRENT_USER_KEY, StorageBackend, load_json, save_json

logger = logging.getLogger(__name__)

SESSION_USER_ID = "USER-001"
EMAIL_DOMAIN = "clinicalrd.com"

ROLE_HIERARCHY = {
    UserRole.ADMIN: {UserRole.ADMIN, UserRole.EDITOR, UserRole.VIEWER},
    UserRole.EDITOR: {UserRole.EDITOR, UserRole.VIEWER},
    UserRole.VIEWER: {UserRole.VIEWER},
}

EDIT_ROLES = frozenset({UserRole.EDITOR, UserRole.ADMIN})


def build_user(role: UserRole) -> User:
    """Synthetic user for ``role``: fixed id, role-derived name and email."""
    return User(
        id=SESSION_USER_ID,
        name=f"{role.value} User",
        email=f"{role.value.lower()}@{EMAIL_DOMAIN}",
        role=role,
    )


class SessionStore:
    """Process-wide session holder backed by a storage backend."""

    def __init__(self, storage: StorageBackend):
        self._storage = storage
        self._user: User | None = None
        self._ready = False

    # ── Lifecycle ────────────────────────────────────────────────────────

    def ready(self) -> bool:
        return self._ready

    def restore(self) -> User | None:
        """Load a previously persisted session, if any, and mark the store ready."""
        user = None
        try:
            raw = load_json(self._storage, CURRENT_USER_KEY)
            if raw is not None:
                user = User.from_dict(raw)
        except (StorageCorruptionError, ValidationError) as exc:
            logger.warning("Discarding unreadable session: %s", exc,
                           extra={"storage_key": CURRENT_USER_KEY, "event_type": "storage_corruption"})
            self._storage.remove(CURRENT_USER_KEY)
            user = None

        self._user = user
        self._ready = True
        if user is not None:
            logger.info("Session restored for role=%s", user.role.value,
                        extra={"role": user.role.value})
        return user

    def _require_ready(self):
        if not self._ready:
            raise StoreNotReadyError("SessionStore", "SessionStore.restore()")

    # ── Accessors ────────────────────────────────────────────────────────

    @property
    def current_user(self) -> User | None:
        self._require_ready()
        return self._user

    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def login(self, role) -> User:
        """Start a session for ``role``, replacing any existing one."""
        self._require_ready()
        role = coerce_enum(UserRole, role, "role")
        user = build_user(role)
        self._user = user
        save_json(self._storage, CURRENT_USER_KEY, user.to_dict())
        logger.info("Login as %s", role.value, extra={"role": role.value, "event_type": "login"})
        return user

    def logout(self) -> None:
        self._require_ready()
        previous = self._user
        self._user = None
        self._storage.remove(CURRENT_USER_KEY)
        if previous is not None:
            logger.info("Logout (%s)", previous.role.value,
                        extra={"role": previous.role.value, "event_type": "logout"})

    def has_role(self, role) -> bool:
        """True if the session's role includes ``role`` in the hierarchy."""
        user = self.current_user
        if user is None:
            return False
        return coerce_enum(UserRole, role, "role") in ROLE_HIERARCHY[user.role]

    def can_edit(self) -> bool:
        user = self.current_user
        return user is not None and user.role in EDIT_ROLES
