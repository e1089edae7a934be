"""
Clinical R&D Portfolio Platform
Program Blueprint — read, filter and edit programs.

Endpoints:
    GET    /api/v1/programs              — List (filtered)
    GET    /api/v1/programs/<id>         — Detail (+ studies, milestones, metrics)
    PUT    /api/v1/programs/<id>         — Partial update (Editor/Admin)
    PATCH  /api/v1/programs/<id>         — Same as PUT
    GET    /api/v1/filters               — Current filter criteria
    PUT    /api/v1/filters               — Replace filter criteria
    DELETE /api/v1/filters               — Clear filter criteria

List query params (any present → ad-hoc criteria, store filters untouched):
    therapeutic_area, phase, priority   repeatable or comma-separated
    q                                   search text
"""

from flask import Blueprint, jsonify, request

from portfolio.auth import require_edit
from portfolio.blueprints import request_list_arg
from portfolio.context import get_context
from portfolio.core.exceptions import NotFoundError
from portfolio.models.portfolio import FilterCriteria
from portfolio.services import analytics_service

program_bp = Blueprint("program", __name__, url_prefix="/api/v1")

_CRITERIA_ARGS = ("therapeutic_area", "phase", "priority", "q")


def _criteria_from_args():
    """Build criteria from query params, or None when none were given."""
    if not any(arg in request.args for arg in _CRITERIA_ARGS):
        return None
    return FilterCriteria.from_dict({
        "therapeuticAreas": request_list_arg("therapeutic_area"),
        "phases": request_list_arg("phase"),
        "priorities": request_list_arg("priority"),
        "searchQuery": request.args.get("q", ""),
    })


# ═════════════════════════════════════════════════════════════════════════════
# PROGRAMS
# ═════════════════════════════════════════════════════════════════════════════

@program_bp.route("/programs", methods=["GET"])
def list_programs():
    """Return programs matching the request criteria or the current filters."""
    store = get_context().portfolio
    criteria = _criteria_from_args()
    programs = store.filtered(criteria)
    return jsonify({
        "items": [p.to_dict() for p in programs],
        "total": len(programs),
        "portfolio_total": len(store.list()),
        "filters": (criteria or store.filters).to_dict(),
    }), 200


@program_bp.route("/programs/<program_id>", methods=["GET"])
def get_program(program_id):
    """Return a program with its studies, milestones and detail metrics."""
    detail = get_context().portfolio.detail(program_id)
    if detail is None:
        raise NotFoundError("Program", program_id)
    data = detail.to_dict()
    data["metrics"] = analytics_service.program_detail_metrics(detail)
    data["can_edit"] = get_context().session.can_edit()
    return jsonify(data), 200


@program_bp.route("/programs/<program_id>", methods=["PUT", "PATCH"])
@require_edit
def update_program(program_id):
    """Merge the posted fields into the program."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    program = get_context().portfolio.update(program_id, data)
    if program is None:
        raise NotFoundError("Program", program_id)
    return jsonify(program.to_dict()), 200


# ═════════════════════════════════════════════════════════════════════════════
# FILTERS
# ═════════════════════════════════════════════════════════════════════════════

@program_bp.route("/filters", methods=["GET"])
def get_filters():
    filters = get_context().portfolio.filters
    return jsonify({**filters.to_dict(), "active": filters.is_active()}), 200


@program_bp.route("/filters", methods=["PUT"])
def set_filters():
    """Replace the whole criteria object; omitted dimensions become empty."""
    data = request.get_json(silent=True) or {}
    filters = get_context().portfolio.set_filters(data)
    return jsonify({**filters.to_dict(), "active": filters.is_active()}), 200


@program_bp.route("/filters", methods=["DELETE"])
def clear_filters():
    filters = get_context().portfolio.clear_filters()
    return jsonify({**filters.to_dict(), "active": False}), 200
