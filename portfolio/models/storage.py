"""
Storage Entry Model

Durable key/value table behind ``SqlStorage``. One row per storage key
(``programs``, ``programDetails``, ``currentUser``); the value is the
JSON text written by the stores.
"""

from datetime import datetime, timezone

from portfolio.models import db


class StorageEntry(db.Model):
    """A single persisted key/value pair."""
    __tablename__ = "storage_entries"

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<StorageEntry {self.key}>"
