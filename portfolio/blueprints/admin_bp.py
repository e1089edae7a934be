"""
Admin Blueprint — sample data maintenance (Admin role only).

Endpoints:
    POST /api/v1/admin/portfolio/reset   — discard and regenerate the sample portfolio
"""

import logging

from flask import Blueprint, jsonify

from portfolio.auth import require_role
from portfolio.context import get_context
from portfolio.models.portfolio import UserRole

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/api/v1/admin")


@admin_bp.route("/portfolio/reset", methods=["POST"])
@require_role(UserRole.ADMIN)
def reset_portfolio():
    result = get_context().reset_portfolio()
    logger.warning("Sample portfolio regenerated by admin", extra={"event_type": "portfolio_reset"})
    return jsonify({"programs": len(result.programs), "generated": result.generated}), 200
