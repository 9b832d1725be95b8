"""
Transition engine — the only code that moves a tender through its workflow.

Operations:
    approve   advance to the next position (or complete the tender)
    reject    roll back to the previous position (or the step's reject target)
    cancel    terminate an active tender
    reassign  hand the current step to another holder of the step's role

Approve target, first match wins:
    1. on_remarks_target   if the approver flagged remarks
    2. on_approve_target   unconditional override (loop-backs)
    3. (phase, step + 1)
    4. (phase + 1, 1)
    5. terminal            status=completed, position kept, actor cleared

Reject target, first match wins:
    1. on_reject_target
    2. (phase, step - 1)
    3. (phase - 1, last step of phase - 1)
    4. at (1, 1)           position, actor and deadline unchanged; still logged

Unit of work:
    The tender row is loaded with SELECT … FOR UPDATE, the history entry is
    appended, the tender is mutated and the session is committed exactly once.
    Any failure rolls back both. ``tenders.version`` is the optimistic lock;
    a concurrent writer surfaces as ConflictError. Nothing is retried here.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from flask import current_app
from sqlalchemy.orm.exc import StaleDataError

from tenderflow.core.exceptions import (
    ConflictError,
    InternalInconsistencyError,
    InvalidStateError,
    NotFoundError,
)
from tenderflow.models import db
from tenderflow.models.auth import User
from tenderflow.models.tender import Tender
from tenderflow.services import history_ledger
from tenderflow.services.actor_resolver import get_resolver
from tenderflow.services.workflow_catalog import get_registry
from tenderflow.utils.helpers import ensure_utc

logger = logging.getLogger(__name__)

DEFAULT_STEP_DEADLINE_DAYS = 7


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Private helpers ────────────────────────────────────────────────────────────


def _config(key, default=None):
    return current_app.config.get(key, default)


def _lock_tender(tender_id: str) -> Tender:
    tender = (
        Tender.query
        .filter(Tender.id == tender_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if tender is None:
        raise NotFoundError(resource="Tender", resource_id=tender_id)
    return tender


def _require_actor(actor_id: str) -> User:
    actor = db.session.get(User, actor_id) if actor_id else None
    if actor is None:
        raise NotFoundError(resource="User", resource_id=actor_id)
    return actor


def _ensure_active(tender: Tender, action: str) -> None:
    if tender.status != "active":
        raise InvalidStateError(
            f"Cannot {action} tender {tender.reference}: status is '{tender.status}'",
            status=tender.status,
        )


def _ensure_assigned(tender: Tender, action: str) -> None:
    if tender.current_actor_id is None and _config("BLOCK_UNASSIGNED_TRANSITIONS", False):
        raise InvalidStateError(
            f"Cannot {action} tender {tender.reference}: current step has no assigned actor",
            status="unassigned",
        )


def _inconsistent(tender: Tender, message: str) -> InternalInconsistencyError:
    db.session.rollback()
    logger.error(
        "Tender %s state disagrees with catalog: %s", tender.id, message,
        extra={
            "tender_id": tender.id,
            "workflow": tender.workflow_code,
            "phase": tender.current_phase,
            "step": tender.current_step,
        },
    )
    return InternalInconsistencyError(message)


def _catalog_for(tender: Tender, registry):
    registry = registry or get_registry()
    if tender.workflow_code not in registry:
        raise _inconsistent(tender, f"unknown workflow '{tender.workflow_code}'")
    return registry.get(tender.workflow_code)


def _current_step(tender: Tender, catalog):
    try:
        return catalog.get_step(tender.current_phase, tender.current_step)
    except NotFoundError:
        raise _inconsistent(
            tender,
            f"position {tender.current_phase}.{tender.current_step} "
            f"does not exist in workflow '{catalog.code}'",
        ) from None


def _validated_target(tender: Tender, catalog, position):
    """Look the computed target up in the catalog before anything is written."""
    try:
        return catalog.get_step(*position)
    except NotFoundError:
        raise _inconsistent(
            tender,
            f"computed target {position[0]}.{position[1]} does not exist in workflow '{catalog.code}'",
        ) from None


def has_remarks(comments: str | None, keywords=None) -> bool:
    """True when ``comments`` contains one of the configured remark keywords."""
    if not comments:
        return False
    if keywords is None:
        raw = _config("REMARKS_KEYWORDS", "remarque,remark")
        keywords = [k.strip() for k in raw.split(",") if k.strip()]
    text = comments.lower()
    return any(k.lower() in text for k in keywords)


def next_position(catalog, step, with_remarks: bool = False):
    """Approve target for ``step``; None means the workflow is complete."""
    if with_remarks and step.on_remarks_target:
        return tuple(step.on_remarks_target)
    if step.on_approve_target:
        return tuple(step.on_approve_target)
    if catalog.has_step(step.phase, step.step_number + 1):
        return (step.phase, step.step_number + 1)
    if catalog.has_step(step.phase + 1, 1):
        return (step.phase + 1, 1)
    return None


def previous_position(catalog, step):
    """Reject target for ``step``; None means there is nothing before it."""
    if step.on_reject_target:
        return tuple(step.on_reject_target)
    if step.step_number > 1:
        return (step.phase, step.step_number - 1)
    if step.phase > 1:
        return (step.phase - 1, catalog.last_step_number(step.phase - 1))
    return None


def compute_deadline(step, override=None, now=None) -> datetime:
    if override is not None:
        return ensure_utc(override)
    now = now or _utcnow()
    days = step.estimated_duration or _config("DEFAULT_STEP_DEADLINE_DAYS", DEFAULT_STEP_DEADLINE_DAYS)
    return now + timedelta(days=days)


def _assign(target, next_actor_id, resolver):
    resolver = resolver or get_resolver()
    if next_actor_id:
        return resolver.validate_explicit(next_actor_id, target.responsible_role).id
    return resolver.resolve(target.responsible_role)


def _commit(tender: Tender) -> None:
    try:
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        logger.warning("Concurrent modification of tender %s", tender.id, extra={"tender_id": tender.id})
        raise ConflictError(resource="Tender", resource_id=tender.id) from None
    except Exception:
        db.session.rollback()
        raise


def _log_transition(tender: Tender, actor_id: str, action: str, from_position) -> None:
    logger.info(
        "Tender %s %s at %s.%s → %s.%s (actor=%s, next=%s, status=%s)",
        tender.reference, action, from_position[0], from_position[1],
        tender.current_phase, tender.current_step,
        actor_id, tender.current_actor_id, tender.status,
        extra={
            "tender_id": tender.id,
            "actor_id": actor_id,
            "workflow": tender.workflow_code,
            "phase": tender.current_phase,
            "step": tender.current_step,
            "action": action,
        },
    )


# ═════════════════════════════════════════════════════════════════════════════
# Public operations
# ═════════════════════════════════════════════════════════════════════════════


def approve(
    tender_id: str,
    actor_id: str,
    comments: str | None = None,
    deadline_override: datetime | None = None,
    with_remarks: bool | None = None,
    next_actor_id: str | None = None,
    *,
    registry=None,
    resolver=None,
) -> Tender:
    """Approve the tender's current step.

    Args:
        with_remarks: Take the step's remarks branch. None → detect from
            ``comments`` using REMARKS_KEYWORDS.
        next_actor_id: Explicit assignee for the target step (role checked).

    Raises:
        NotFoundError: unknown tender or actor.
        InvalidStateError: tender is not active (or unassigned while blocking).
        InternalInconsistencyError: tender position not in the catalog.
        ConflictError: the tender was modified concurrently.
    """
    _require_actor(actor_id)
    tender = _lock_tender(tender_id)
    _ensure_active(tender, "approve")
    _ensure_assigned(tender, "approve")

    catalog = _catalog_for(tender, registry)
    step = _current_step(tender, catalog)
    from_position = step.position
    if with_remarks is None:
        with_remarks = has_remarks(comments)

    now = _utcnow()
    position = next_position(catalog, step, with_remarks=with_remarks)

    if position is None:
        history_ledger.append(
            tender.id, step.id, actor_id, "approved",
            comments=comments, completed_at=now,
        )
        tender.status = "completed"
        tender.current_actor_id = None
        tender.deadline = None
        tender.updated_at = now
        _commit(tender)
        _log_transition(tender, actor_id, "completed", from_position)
        return tender

    target = _validated_target(tender, catalog, position)
    next_actor = _assign(target, next_actor_id, resolver)
    deadline = compute_deadline(target, deadline_override, now)

    history_ledger.append(
        tender.id, step.id, actor_id, "approved",
        comments=comments, deadline=deadline, completed_at=now,
    )
    tender.current_phase, tender.current_step = target.position
    tender.current_actor_id = next_actor
    tender.deadline = deadline
    tender.updated_at = now
    _commit(tender)
    _log_transition(tender, actor_id, "approved", from_position)
    return tender


def reject(
    tender_id: str,
    actor_id: str,
    comments: str | None = None,
    next_actor_id: str | None = None,
    *,
    registry=None,
    resolver=None,
) -> Tender:
    """Reject the tender's current step and roll it back.

    At the very first step there is nowhere to go: the rejection is logged and
    the tender keeps its position, actor and deadline.
    """
    _require_actor(actor_id)
    tender = _lock_tender(tender_id)
    _ensure_active(tender, "reject")
    _ensure_assigned(tender, "reject")

    catalog = _catalog_for(tender, registry)
    step = _current_step(tender, catalog)
    from_position = step.position
    now = _utcnow()
    position = previous_position(catalog, step)

    if position is None:
        history_ledger.append(
            tender.id, step.id, actor_id, "rejected",
            comments=comments, deadline=tender.deadline, completed_at=now,
        )
        tender.updated_at = now
        _commit(tender)
        _log_transition(tender, actor_id, "rejected", from_position)
        return tender

    target = _validated_target(tender, catalog, position)
    next_actor = _assign(target, next_actor_id, resolver)
    deadline = compute_deadline(target, now=now)

    history_ledger.append(
        tender.id, step.id, actor_id, "rejected",
        comments=comments, deadline=deadline, completed_at=now,
    )
    tender.current_phase, tender.current_step = target.position
    tender.current_actor_id = next_actor
    tender.deadline = deadline
    tender.updated_at = now
    _commit(tender)
    _log_transition(tender, actor_id, "rejected", from_position)
    return tender


def cancel(tender_id: str, actor_id: str, comments: str | None = None, *, registry=None) -> Tender:
    """Terminate an active tender. Position is frozen, actor cleared."""
    _require_actor(actor_id)
    tender = _lock_tender(tender_id)
    _ensure_active(tender, "cancel")

    catalog = _catalog_for(tender, registry)
    step = _current_step(tender, catalog)
    now = _utcnow()

    history_ledger.append(
        tender.id, step.id, actor_id, "cancelled",
        comments=comments, completed_at=now,
    )
    tender.status = "cancelled"
    tender.current_actor_id = None
    tender.deadline = None
    tender.updated_at = now
    _commit(tender)
    _log_transition(tender, actor_id, "cancelled", step.position)
    return tender


def reassign(
    tender_id: str,
    actor_id: str,
    new_actor_id: str,
    comments: str | None = None,
    *,
    registry=None,
    resolver=None,
) -> Tender:
    """Hand the current step to ``new_actor_id``; position and deadline unchanged."""
    _require_actor(actor_id)
    tender = _lock_tender(tender_id)
    _ensure_active(tender, "reassign")

    catalog = _catalog_for(tender, registry)
    step = _current_step(tender, catalog)
    resolver = resolver or get_resolver()
    new_actor = resolver.validate_explicit(new_actor_id, step.responsible_role)

    history_ledger.append(
        tender.id, step.id, actor_id, "reassigned",
        comments=comments or f"Réaffecté à {new_actor.full_name}",
        deadline=tender.deadline,
    )
    tender.current_actor_id = new_actor.id
    tender.updated_at = _utcnow()
    _commit(tender)
    _log_transition(tender, actor_id, "reassigned", step.position)
    return tender
