"""
Auth Blueprint — role-selection session endpoints.

  POST /api/v1/auth/login    — { "role": "Viewer" | "Editor" | "Admin" } → user
  POST /api/v1/auth/logout   — end the session
  GET  /api/v1/auth/me       — current user (or null) + can_edit
  GET  /api/v1/auth/roles    — selectable roles for the login screen
"""

from flask import Blueprint, jsonify, request

from portfolio.context import get_context
from portfolio.models.portfolio import UserRole
from portfolio.utils.errors import E, api_error

auth_bp = Blueprint("auth_bp", __name__, url_prefix="/api/v1/auth")


def _session_payload(session):
    user = session.current_user
    return {
        "user": user.to_dict() if user else None,
        "authenticated": user is not None,
        "can_edit": session.can_edit(),
    }


@auth_bp.route("/login", methods=["POST"])
def login():
    """Start a session for the chosen role, replacing any existing one."""
    data = request.get_json(silent=True) or {}
    role = data.get("role")
    if not role:
        return api_error(E.VALIDATION_REQUIRED, "role is required")

    session = get_context().session
    session.login(role)
    return jsonify(_session_payload(session)), 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    session = get_context().session
    session.logout()
    return jsonify(_session_payload(session)), 200


@auth_bp.route("/me", methods=["GET"])
def me():
    return jsonify(_session_payload(get_context().session)), 200


@auth_bp.route("/roles", methods=["GET"])
def roles():
    return jsonify([r.value for r in UserRole]), 200
