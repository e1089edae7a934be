"""
Key/Value Storage Service

Repository interface the portfolio core persists through:

    load(key)         → stored text or None
    save(key, value)  → write text
    save_many(items)  → write several keys, all or nothing
    remove(key)       → delete (no error if absent)
    keys() / clear()

Backends:
  - MemoryStorage: plain dict, used by tests and STORAGE_BACKEND=memory
  - SqlStorage:    one row per key in ``storage_entries`` (Flask-SQLAlchemy)

The stores never talk to a backend directly for JSON; they go through
``load_json`` / ``save_json`` so decoding failures surface as
StorageCorruptionError.
"""

import json
import logging

from sqlalchemy.exc import SQLAlchemyError

from portfolio.core.exceptions import StorageCorruptionError
from portfolio.models import db
from portfolio.models.storage import StorageEntry

logger = logging.getLogger(__name__)

# ── Storage keys ─────────────────────────────────────────────────────────

PROGRAMS_KEY = "programs"
PROGRAM_DETAILS_KEY = "programDetails"
CURRENT_USER_KEY = "currentUser"


class StorageBackend:
    """Interface every storage backend implements."""

    name = "abstract"

    def load(self, key: str) -> str | None:
        raise NotImplementedError

    def save(self, key: str, value: str) -> None:
        raise NotImplementedError

    def save_many(self, items: dict[str, str]) -> None:
        """Write several keys so that either all or none of them change.

        Backends without transactions restore the previous values when a
        write fails part way, then re-raise.
        """
        previous = {key: self.load(key) for key in items}
        written = []
        try:
            for key, value in items.items():
                self.save(key, value)
                written.append(key)
        except Exception:
            for key in written:
                if previous[key] is None:
                    self.remove(key)
                else:
                    self.save(key, previous[key])
            raise

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> list[str]:
        raise NotImplementedError

    def clear(self) -> None:
        for key in self.keys():
            self.remove(key)


# ── In-memory backend ────────────────────────────────────────────────────


class MemoryStorage(StorageBackend):
    """Simple dict storage for dev/testing."""

    name = "memory"

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def load(self, key):
        return self._data.get(key)

    def save(self, key, value):
        self._data[key] = value

    def save_many(self, items):
        self._data.update(items)

    def remove(self, key):
        self._data.pop(key, None)

    def keys(self):
        return list(self._data)

    def clear(self):
        self._data.clear()


# ── SQL backend ──────────────────────────────────────────────────────────


class SqlStorage(StorageBackend):
    """Durable storage on the ``storage_entries`` table.

    Every write commits immediately; ``save_many`` commits all keys in one
    transaction. Must be used inside an app context.
    """

    name = "sql"

    def load(self, key):
        entry = db.session.get(StorageEntry, key)
        return entry.value if entry else None

    def save(self, key, value):
        entry = db.session.get(StorageEntry, key)
        if entry is None:
            db.session.add(StorageEntry(key=key, value=value))
        else:
            entry.value = value
        self._commit("save", key)

    def save_many(self, items):
        # Flush happens at commit so a failing row rolls back the whole batch
        with db.session.no_autoflush:
            for key, value in items.items():
                entry = db.session.get(StorageEntry, key)
                if entry is None:
                    db.session.add(StorageEntry(key=key, value=value))
                else:
                    entry.value = value
        self._commit("save_many", ",".join(items))

    def remove(self, key):
        entry = db.session.get(StorageEntry, key)
        if entry is None:
            return
        db.session.delete(entry)
        self._commit("remove", key)

    def keys(self):
        return [row.key for row in StorageEntry.query.order_by(StorageEntry.key).all()]

    def clear(self):
        StorageEntry.query.delete()
        self._commit("clear", "*")

    @staticmethod
    def _commit(action, key):
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Storage %s failed for key=%s", action, key,
                             extra={"storage_key": key})
            raise


def build_storage(app) -> StorageBackend:
    """Select the storage backend from ``STORAGE_BACKEND`` config."""
    backend = (app.config.get("STORAGE_BACKEND") or "sql").lower()
    if backend == "memory":
        storage = MemoryStorage()
    elif backend == "sql":
        storage = SqlStorage()
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r} (expected 'sql' or 'memory')")
    logger.info("Storage: using %s backend", storage.name)
    return storage


# ── JSON helpers ─────────────────────────────────────────────────────────


def load_json(storage: StorageBackend, key: str):
    """Return the decoded JSON value at ``key``, or None if absent.

    Raises:
        StorageCorruptionError: the stored text is not valid JSON.
    """
    raw = storage.load(key)
    if raw is None or raw == "":
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        raise StorageCorruptionError(key, str(exc)) from exc


def save_json(storage: StorageBackend, key: str, value) -> None:
    storage.save(key, json.dumps(value, ensure_ascii=False))


def save_json_many(storage: StorageBackend, values: dict) -> None:
    """Encode and write several keys in one ``save_many`` call."""
    storage.save_many({key: json.dumps(value, ensure_ascii=False) for key, value in values.items()})
