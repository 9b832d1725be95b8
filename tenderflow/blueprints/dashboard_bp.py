"""
Dashboard Blueprint — read-only projections.

Endpoints:
    GET /api/v1/dashboard/stats      status counts, total amount, phases, divisions
    GET /api/v1/dashboard/workload   active tenders per current-actor role
"""

from flask import Blueprint, jsonify

from tenderflow.services import dashboard_service
from tenderflow.utils.errors import register_error_handlers

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/v1/dashboard")
register_error_handlers(dashboard_bp)


@dashboard_bp.route("/stats", methods=["GET"])
def stats():
    return jsonify(dashboard_service.get_stats()), 200


@dashboard_bp.route("/workload", methods=["GET"])
def workload():
    return jsonify(dashboard_service.get_actor_workload()), 200
