"""
Transition Blueprint — approve, reject, cancel, reassign.

Endpoints:
    POST   /api/v1/tenders/<id>/approve
           Body: { "actor_id": "...", "comments": "...", "deadline": "2026-05-01",
                   "with_remarks": true|false, "next_actor_id": "..." }
    POST   /api/v1/tenders/<id>/reject
           Body: { "actor_id": "...", "comments": "...", "next_actor_id": "..." }
    POST   /api/v1/tenders/<id>/cancel
           Body: { "actor_id": "...", "comments": "..." }
    POST   /api/v1/tenders/<id>/reassign
           Body: { "actor_id": "...", "new_actor_id": "...", "comments": "..." }

The acting user falls back to the X-User-ID header when ``actor_id`` is absent.
Rate limited as a whole by TRANSITION_RATE_LIMIT.
"""

import logging

from flask import Blueprint, jsonify

from tenderflow.blueprints import acting_user_id, json_object
from tenderflow.services import tender_service
from tenderflow.utils.errors import E, api_error, register_error_handlers
from tenderflow.utils.helpers import parse_datetime_input

logger = logging.getLogger(__name__)

transition_bp = Blueprint("transition", __name__, url_prefix="/api/v1")
register_error_handlers(transition_bp)


def _payload():
    """Return (data, actor_id, error_response)."""
    data = json_object()
    if data is None:
        return {}, None, api_error(E.VALIDATION_INVALID, "Request body must be a JSON object.")
    actor_id = acting_user_id(data)
    if not actor_id:
        return data, None, api_error(E.VALIDATION_REQUIRED, "actor_id or X-User-ID header is required.")
    return data, actor_id, None


def _optional_bool(data, key):
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return value, None
    return None, api_error(E.VALIDATION_INVALID, f"Field '{key}' must be a boolean.")


@transition_bp.route("/tenders/<tender_id>/approve", methods=["POST"])
def approve(tender_id):
    data, actor_id, err = _payload()
    if err:
        return err

    try:
        deadline = parse_datetime_input(data.get("deadline"))
    except ValueError as exc:
        return api_error(E.VALIDATION_INVALID, str(exc))
    with_remarks, err = _optional_bool(data, "with_remarks")
    if err:
        return err

    tender = tender_service.approve(
        tender_id,
        actor_id,
        comments=data.get("comments"),
        deadline_override=deadline,
        with_remarks=with_remarks,
        next_actor_id=data.get("next_actor_id") or None,
    )
    return jsonify(tender.to_dict()), 200


@transition_bp.route("/tenders/<tender_id>/reject", methods=["POST"])
def reject(tender_id):
    data, actor_id, err = _payload()
    if err:
        return err

    tender = tender_service.reject(
        tender_id,
        actor_id,
        comments=data.get("comments"),
        next_actor_id=data.get("next_actor_id") or None,
    )
    return jsonify(tender.to_dict()), 200


@transition_bp.route("/tenders/<tender_id>/cancel", methods=["POST"])
def cancel(tender_id):
    data, actor_id, err = _payload()
    if err:
        return err

    tender = tender_service.cancel(tender_id, actor_id, comments=data.get("comments"))
    return jsonify(tender.to_dict()), 200


@transition_bp.route("/tenders/<tender_id>/reassign", methods=["POST"])
def reassign(tender_id):
    data, actor_id, err = _payload()
    if err:
        return err
    new_actor_id = data.get("new_actor_id")
    if not new_actor_id:
        return api_error(E.VALIDATION_REQUIRED, "Field 'new_actor_id' is required.")

    tender = tender_service.reassign(tender_id, actor_id, new_actor_id, comments=data.get("comments"))
    return jsonify(tender.to_dict()), 200
