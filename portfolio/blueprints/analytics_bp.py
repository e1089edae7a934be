"""
Analytics Blueprint — portfolio aggregates for dashboard views.

Endpoints:
    GET /api/v1/analytics           — Full bundle (summary, distributions, budget, top programs)
    GET /api/v1/analytics/summary   — Dashboard KPI cards
"""

from flask import Blueprint, jsonify

from portfolio.context import get_context
from portfolio.services import analytics_service

analytics_bp = Blueprint("analytics", __name__, url_prefix="/api/v1/analytics")


@analytics_bp.route("", methods=["GET"])
def portfolio_analytics():
    programs = get_context().portfolio.list()
    return jsonify(analytics_service.portfolio_analytics(programs)), 200


@analytics_bp.route("/summary", methods=["GET"])
def summary():
    store = get_context().portfolio
    data = analytics_service.portfolio_summary(store.list())
    data["filtered_programs"] = len(store.filtered())
    return jsonify(data), 200
