"""
Portfolio-wide exception hierarchy.

Services raise these types; blueprints register handlers against them once
(see ``portfolio.blueprints.register_error_handlers``) and get consistent
HTTP status codes everywhere.

Usage:
    from portfolio.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Program", resource_id="PROG-0001")
    raise ValidationError("Unknown field", details={"colour": "not editable"})
"""


class NotFoundError(Exception):
    """Raised when a requested record does not exist.

    Store accessors return ``None`` for a missing id; this exception is
    raised by the API layer when it needs a hard 404.

    Args:
        resource: Human-readable entity name (e.g. "Program").
        resource_id: The id that was looked up.
    """

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when input is not the expected shape.

    Maps to HTTP 400 in blueprint error handlers.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown. Keys are field names;
                 values are error descriptions.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class PermissionDeniedError(Exception):
    """Raised when the current session may not perform an action.

    Maps to HTTP 403.
    """

    def __init__(self, action: str, role: str | None = None) -> None:
        self.action = action
        self.role = role
        who = f"role={role}" if role else "anonymous session"
        super().__init__(f"Permission denied: {action} ({who})")


class StoreNotReadyError(RuntimeError):
    """Raised when a store accessor is called before startup restoration.

    This is a programming error: ``SessionStore.restore()`` and
    ``PortfolioStore.initialize()`` must run before any read or write.
    """

    def __init__(self, store: str, precondition: str) -> None:
        self.store = store
        self.precondition = precondition
        super().__init__(f"{store} is not ready: call {precondition} first")


class StorageCorruptionError(Exception):
    """Raised when a persisted storage entry cannot be decoded."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Storage entry {key!r} is corrupt: {reason}")
