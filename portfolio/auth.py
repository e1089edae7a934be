"""
Clinical R&D Portfolio Platform
Role-based access decorators.

Security model:
    - There are no credentials; the session store holds one synthetic user
      created by POST /api/v1/auth/login with a chosen role
    - Read endpoints are open
    - Write endpoints require an edit-capable session (Editor or Admin)

Usage:
    @program_bp.route("/programs/<program_id>", methods=["PUT"])
    @require_edit
    def update_program(program_id):
        ...
"""

import functools
import logging

from portfolio.context import get_context
from portfolio.core.exceptions import PermissionDeniedError

logger = logging.getLogger(__name__)


def require_edit(f):
    """Decorator: reject the request unless the session may edit."""

    @functools.wraps(f)
    def decorated(*args, **kwargs):
        session = get_context().session
        if not session.can_edit():
            user = session.current_user
            role = user.role.value if user else None
            logger.warning("Edit denied for %s", role or "anonymous session",
                           extra={"role": role, "event_type": "permission_denied"})
            raise PermissionDeniedError(f.__name__, role)
        return f(*args, **kwargs)

    return decorated


def require_role(role):
    """Decorator factory: require ``role`` or a role above it in the hierarchy."""

    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            session = get_context().session
            if not session.has_role(role):
                user = session.current_user
                current = user.role.value if user else None
                logger.warning("Role %s required, session has %s", role, current or "none",
                               extra={"role": current, "event_type": "permission_denied"})
                raise PermissionDeniedError(f.__name__, current)
            return f(*args, **kwargs)

        return decorated

    return decorator
