"""
User (actor) administration Blueprint.

Endpoints:
    GET    /api/v1/users            ?role=SM&active=true
    POST   /api/v1/users            create
    GET    /api/v1/users/<id>
    PUT    /api/v1/users/<id>       update (role, names, is_active, ...)
    DELETE /api/v1/users/<id>       deactivate (actors are never removed)
"""

from flask import Blueprint, jsonify, request

from tenderflow.blueprints import json_object
from tenderflow.services import user_service
from tenderflow.utils.errors import E, api_error, register_error_handlers

user_bp = Blueprint("user", __name__, url_prefix="/api/v1")
register_error_handlers(user_bp)


@user_bp.route("/users", methods=["GET"])
def list_users():
    active_only = request.args.get("active", "false").lower() == "true"
    users = user_service.list_users(role=request.args.get("role") or None, active_only=active_only)
    return jsonify({"items": [u.to_dict() for u in users], "total": len(users)}), 200


@user_bp.route("/users", methods=["POST"])
def create_user():
    data = json_object()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "Request body must be a JSON object.")
    for field in ("username", "role"):
        if not data.get(field):
            return api_error(E.VALIDATION_REQUIRED, f"Field '{field}' is required.")

    user = user_service.create_user(
        username=data["username"],
        role=data["role"],
        email=data.get("email"),
        first_name=data.get("first_name"),
        last_name=data.get("last_name"),
        direction=data.get("direction"),
        division=data.get("division"),
        is_admin=data.get("is_admin"),
        user_id=data.get("id"),
    )
    return jsonify(user.to_dict()), 201


@user_bp.route("/users/<user_id>", methods=["GET"])
def get_user(user_id):
    return jsonify(user_service.get_user(user_id).to_dict()), 200


@user_bp.route("/users/<user_id>", methods=["PUT"])
def update_user(user_id):
    data = json_object()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "Request body must be a JSON object.")
    if not data:
        return api_error(E.VALIDATION_REQUIRED, "Request body is required.")
    user = user_service.update_user(user_id, data)
    return jsonify(user.to_dict()), 200


@user_bp.route("/users/<user_id>", methods=["DELETE"])
def deactivate_user(user_id):
    """Soft delete: the actor keeps its history and leaves actor resolution."""
    user = user_service.deactivate_user(user_id)
    return jsonify(user.to_dict()), 200
