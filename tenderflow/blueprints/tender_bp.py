"""
Tender Blueprint.

Endpoints:
    GET    /api/v1/tenders                     list (status, phase, workflow, limit, offset)
    POST   /api/v1/tenders                     create at (1, 1)
    GET    /api/v1/tenders/<id>                detail
    GET    /api/v1/tenders/<id>/timeline       audit trail with step metadata
    GET    /api/v1/tenders/<id>/comments       free-form remarks
    POST   /api/v1/tenders/<id>/comments

Transitions live in transition_bp so they can be rate limited on their own.

Layer contract:
    - Blueprint: parse + validate input shape, call tender_service, return JSON.
    - NO db.session calls here — all writes owned by the service layer.
"""

import logging

from flask import Blueprint, jsonify, request

from tenderflow.blueprints import acting_user_id, json_object, paginate_query
from tenderflow.services import tender_service
from tenderflow.utils.errors import E, api_error, register_error_handlers

logger = logging.getLogger(__name__)

tender_bp = Blueprint("tender", __name__, url_prefix="/api/v1")
register_error_handlers(tender_bp)


@tender_bp.route("/tenders", methods=["GET"])
def list_tenders():
    phase = request.args.get("phase")
    if phase is not None:
        try:
            phase = int(phase)
        except ValueError:
            return api_error(E.VALIDATION_INVALID, "phase must be an integer")

    query = tender_service.build_tender_query(
        status=request.args.get("status") or None,
        phase=phase,
        workflow_code=request.args.get("workflow") or None,
    )
    items, total = paginate_query(query)
    return jsonify({"items": [t.to_summary() for t in items], "total": total}), 200


@tender_bp.route("/tenders", methods=["POST"])
def create_tender():
    """Create a tender. Body: title, description, amount, direction, division, workflow_code."""
    data = json_object()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "Request body must be a JSON object.")
    if not (data.get("title") or "").strip():
        return api_error(E.VALIDATION_REQUIRED, "Field 'title' is required.")

    created_by = str(data.get("created_by_id") or "").strip() or acting_user_id(data)
    if not created_by:
        return api_error(E.VALIDATION_REQUIRED, "created_by_id or X-User-ID header is required.")

    tender = tender_service.create_tender(
        title=data["title"],
        description=data.get("description"),
        amount=data.get("amount"),
        metadata={
            "direction": data.get("direction"),
            "division": data.get("division"),
        },
        created_by_id=created_by,
        workflow_code=data.get("workflow_code") or "standard",
    )
    return jsonify(tender.to_dict()), 201


@tender_bp.route("/tenders/<tender_id>", methods=["GET"])
def get_tender(tender_id):
    tender = tender_service.get_tender(tender_id)
    return jsonify(tender.to_dict()), 200


@tender_bp.route("/tenders/<tender_id>/timeline", methods=["GET"])
def get_timeline(tender_id):
    """Ordered audit trail, oldest first."""
    timeline = tender_service.get_timeline(tender_id)
    return jsonify({"timeline": timeline, "total": len(timeline)}), 200


@tender_bp.route("/tenders/<tender_id>/comments", methods=["GET"])
def list_comments(tender_id):
    include_private = request.args.get("include_private", "true").lower() != "false"
    comments = tender_service.list_comments(tender_id, include_private=include_private)
    return jsonify({"items": [c.to_dict() for c in comments], "total": len(comments)}), 200


@tender_bp.route("/tenders/<tender_id>/comments", methods=["POST"])
def add_comment(tender_id):
    data = json_object()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "Request body must be a JSON object.")
    author = acting_user_id(data)
    if not author:
        return api_error(E.VALIDATION_REQUIRED, "actor_id or X-User-ID header is required.")
    if not (data.get("content") or "").strip():
        return api_error(E.VALIDATION_REQUIRED, "Field 'content' is required.")

    comment = tender_service.add_comment(
        tender_id,
        author_id=author,
        content=data["content"],
        is_public=bool(data.get("is_public", True)),
    )
    return jsonify(comment.to_dict()), 201
