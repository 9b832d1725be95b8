"""
Task queue Blueprint.

Endpoints:
    GET /api/v1/tasks?actor_id=<id>     tenders waiting on one actor
    GET /api/v1/tasks?role=<ROLE>       tenders waiting on a role (ADMIN: all active)
    GET /api/v1/tasks/unassigned        active tenders with no current actor
    GET /api/v1/tasks/overdue           active tenders past their deadline
"""

from flask import Blueprint, jsonify, request

from tenderflow.blueprints import acting_user_id
from tenderflow.services import dashboard_service, task_service, tender_service
from tenderflow.utils.errors import E, api_error, register_error_handlers

task_bp = Blueprint("task", __name__, url_prefix="/api/v1")
register_error_handlers(task_bp)


@task_bp.route("/tasks", methods=["GET"])
def get_tasks():
    actor_id = request.args.get("actor_id") or None
    role = request.args.get("role") or None
    if not actor_id and not role:
        actor_id = acting_user_id()
    if not actor_id and not role:
        return api_error(E.VALIDATION_REQUIRED, "Query param 'actor_id' or 'role' is required.")

    tasks = tender_service.get_tasks(actor_id=actor_id, role=role)
    return jsonify({"items": tasks, "total": len(tasks)}), 200


@task_bp.route("/tasks/unassigned", methods=["GET"])
def unassigned():
    tenders = task_service.unassigned_tenders()
    return jsonify({"items": [t.to_summary() for t in tenders], "total": len(tenders)}), 200


@task_bp.route("/tasks/overdue", methods=["GET"])
def overdue():
    tenders = dashboard_service.get_overdue_tasks()
    return jsonify({"items": [t.to_summary() for t in tenders], "total": len(tenders)}), 200
