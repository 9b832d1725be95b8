"""
Task queues — which active tenders are waiting on whom.

Pure reads: nothing here writes or commits. A queue reflects the assignment
committed by the last transition.

    tasks_for_actor(actor_id)   active tenders assigned to the actor
    tasks_for_role(role)        active tenders whose current actor holds role;
                                supervisory roles (ADMIN) see every active tender
    unassigned_tenders()        active tenders with no current actor
"""

from __future__ import annotations

from tenderflow.core.exceptions import ValidationError
from tenderflow.models.auth import SUPERVISORY_ROLES, VALID_ROLES, User
from tenderflow.models.tender import Tender


def _active():
    return Tender.query.filter(Tender.status == "active")


def _by_deadline(query):
    # NULL deadlines sort last on both SQLite and PostgreSQL
    return query.order_by(
        Tender.deadline.is_(None),
        Tender.deadline,
        Tender.created_at,
    )


def tasks_for_actor(actor_id: str) -> list[Tender]:
    return _by_deadline(_active().filter(Tender.current_actor_id == actor_id)).all()


def tasks_for_role(role: str) -> list[Tender]:
    if role not in VALID_ROLES:
        raise ValidationError(f"Unknown role: {role}", details={"role": sorted(VALID_ROLES)})
    query = _active()
    if role not in SUPERVISORY_ROLES:
        query = query.join(User, Tender.current_actor_id == User.id).filter(User.role == role)
    return _by_deadline(query).all()


def unassigned_tenders() -> list[Tender]:
    return _by_deadline(_active().filter(Tender.current_actor_id.is_(None))).all()
