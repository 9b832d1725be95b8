"""
Workflow catalog Blueprint (read-only).

Endpoints:
    GET /api/v1/workflows                  loaded catalogs with phase summary
    GET /api/v1/workflows/<code>/steps     every step of one catalog (?phase= filter)
"""

from flask import Blueprint, jsonify, request

from tenderflow.services.workflow_catalog import get_registry
from tenderflow.utils.errors import E, api_error, register_error_handlers

workflow_bp = Blueprint("workflow", __name__, url_prefix="/api/v1")
register_error_handlers(workflow_bp)


@workflow_bp.route("/workflows", methods=["GET"])
def list_workflows():
    catalogs = get_registry().all()
    return jsonify({"items": [c.to_dict() for c in catalogs], "total": len(catalogs)}), 200


@workflow_bp.route("/workflows/<code>/steps", methods=["GET"])
def list_steps(code):
    catalog = get_registry().get(code)
    phase = request.args.get("phase")
    if phase is None:
        steps = catalog.all_steps()
    else:
        try:
            steps = list(catalog.steps_for_phase(int(phase)))
        except ValueError:
            return api_error(E.VALIDATION_INVALID, "phase must be an integer")
    return jsonify({
        "workflow": catalog.code,
        "items": [s.to_dict() for s in steps],
        "total": len(steps),
    }), 200
