"""
User Service — actor administration (create, update, deactivate, list).

Actors are never deleted: a deactivated user keeps its history entries and
simply stops being picked by the actor resolver.
"""

import logging
import uuid

from email_validator import EmailNotValidError, validate_email

from tenderflow.core.exceptions import ConflictError, NotFoundError, ValidationError
from tenderflow.models import db
from tenderflow.models.auth import VALID_ROLES, User

logger = logging.getLogger(__name__)

_UPDATABLE = {"email", "first_name", "last_name", "role", "direction", "division", "is_admin", "is_active"}
_BOOLEAN_FIELDS = {"is_admin", "is_active"}


def _normalize_email(email):
    if not email:
        return None
    try:
        return validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email: {e}", details={"email": "invalid"}) from None


def _check_role(role):
    if role not in VALID_ROLES:
        raise ValidationError(f"Invalid role: {role}", details={"role": sorted(VALID_ROLES)})


# ═══════════════════════════════════════════════════════════════
# User CRUD
# ═══════════════════════════════════════════════════════════════
def create_user(
    username: str,
    role: str,
    email: str = None,
    first_name: str = None,
    last_name: str = None,
    direction: str = None,
    division: str = None,
    is_admin: bool = None,
    user_id: str = None,
) -> User:
    """Create an actor. ``is_admin`` defaults to True for the ADMIN role."""
    username = (username or "").strip()
    if not username:
        raise ValidationError("username is required", details={"username": "required"})
    _check_role(role)
    if is_admin is not None and not isinstance(is_admin, bool):
        raise ValidationError("is_admin must be a boolean", details={"is_admin": "not_boolean"})
    email = _normalize_email(email)

    if User.query.filter_by(username=username).first():
        raise ConflictError(resource="User", resource_id=username, message=f"Username '{username}' already exists")
    if email and User.query.filter_by(email=email).first():
        raise ConflictError(resource="User", resource_id=email, message=f"Email '{email}' already exists")
    if user_id and db.session.get(User, user_id):
        raise ConflictError(resource="User", resource_id=user_id, message=f"User id '{user_id}' already exists")

    user = User(
        id=user_id or uuid.uuid4().hex,
        username=username,
        email=email,
        first_name=first_name,
        last_name=last_name,
        role=role,
        direction=direction,
        division=division,
        is_admin=(role == "ADMIN") if is_admin is None else bool(is_admin),
        is_active=True,
    )
    db.session.add(user)
    db.session.commit()
    logger.info("User created id=%s username=%s role=%s", user.id, username, role)
    return user


def get_user(user_id: str) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError(resource="User", resource_id=user_id)
    return user


def update_user(user_id: str, changes: dict) -> User:
    """Update whitelisted fields from ``changes``. Unknown keys are ignored.

    Every value is checked before the user is touched, so a rejected update
    leaves nothing half-applied.
    """
    user = get_user(user_id)
    updates = {}
    for key, value in changes.items():
        if key not in _UPDATABLE:
            continue
        if key in _BOOLEAN_FIELDS and not isinstance(value, bool):
            raise ValidationError(f"{key} must be a boolean", details={key: "not_boolean"})
        if key == "role":
            _check_role(value)
        if key == "email":
            value = _normalize_email(value)
            clash = User.query.filter(User.email == value, User.id != user.id).first() if value else None
            if clash:
                raise ConflictError(resource="User", resource_id=value, message=f"Email '{value}' already exists")
        updates[key] = value

    for key, value in updates.items():
        setattr(user, key, value)
    db.session.commit()
    logger.info("User updated id=%s fields=%s", user.id, sorted(updates))
    return user


def deactivate_user(user_id: str) -> User:
    """Deactivate an actor. Tenders already assigned to them stay assigned."""
    return update_user(user_id, {"is_active": False})


def list_users(role: str = None, active_only: bool = False) -> list[User]:
    query = User.query
    if role:
        _check_role(role)
        query = query.filter_by(role=role)
    if active_only:
        query = query.filter(User.is_active.is_(True))
    return query.order_by(User.role, User.created_at, User.id).all()
