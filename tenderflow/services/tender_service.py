"""
Tender facade — the external contract of the workflow core.

Blueprints, CLI commands and scripts go through this module; only the
transition engine mutates workflow position.

    create_tender   insert at (1, 1), resolve first actor, log "created"
    approve/reject/cancel/reassign   delegate to transition_engine
    get_timeline    history entries joined with their step, ascending
    get_tasks       task queue for an actor or a role
    comments        free-form remarks outside the transition flow
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from flask import current_app
from sqlalchemy.exc import IntegrityError

from tenderflow.core.exceptions import ConflictError, NotFoundError, ValidationError
from tenderflow.models import db
from tenderflow.models.auth import User
from tenderflow.models.tender import TENDER_STATUSES, Tender, TenderComment
from tenderflow.services import history_ledger, task_service, transition_engine
from tenderflow.services.actor_resolver import get_resolver
from tenderflow.services.workflow_catalog import get_registry

logger = logging.getLogger(__name__)

UNKNOWN_STEP_TITLE = "Étape inconnue"


# ── Reference generation ───────────────────────────────────────────────────────


def generate_reference(year: int | None = None) -> str:
    """Next tender reference: AO-2026-001, AO-2026-002, ...

    Sequence restarts every year. Based on the highest existing suffix so
    gaps left by deletions are never reused.
    """
    prefix = current_app.config.get("TENDER_REFERENCE_PREFIX", "AO")
    year = year or datetime.now(timezone.utc).year
    stem = f"{prefix}-{year}-"
    refs = db.session.query(Tender.reference).filter(Tender.reference.like(f"{stem}%")).all()
    highest = 0
    for (ref,) in refs:
        suffix = ref[len(stem):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{stem}{highest + 1:03d}"


def _parse_amount(value):
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError("amount must be a number", details={"amount": "invalid"}) from None
    if amount < 0:
        raise ValidationError("amount must not be negative", details={"amount": "negative"})
    return amount.quantize(Decimal("0.01"))


# ═════════════════════════════════════════════════════════════════════════════
# Tender lifecycle
# ═════════════════════════════════════════════════════════════════════════════


def create_tender(
    title: str,
    description: str | None,
    amount,
    metadata: dict | None,
    created_by_id: str,
    workflow_code: str = "standard",
) -> Tender:
    """Create a tender at (1, 1) of ``workflow_code`` and commit.

    ``metadata`` carries organisational fields (direction, division).
    """
    title = (title or "").strip()
    if not title:
        raise ValidationError("title is required", details={"title": "required"})
    metadata = metadata or {}

    creator = db.session.get(User, created_by_id) if created_by_id else None
    if creator is None:
        raise NotFoundError(resource="User", resource_id=created_by_id)

    registry = get_registry()
    if workflow_code not in registry:
        raise ValidationError(
            f"Unknown workflow: {workflow_code}",
            details={"workflow_code": registry.codes()},
        )
    catalog = registry.get(workflow_code)
    first = catalog.first_step()

    now = datetime.now(timezone.utc)
    deadline = transition_engine.compute_deadline(first, now=now)
    tender = Tender(
        reference=generate_reference(now.year),
        title=title,
        description=description,
        amount=_parse_amount(amount),
        direction=metadata.get("direction") or creator.direction,
        division=metadata.get("division") or creator.division,
        workflow_code=workflow_code,
        current_phase=first.phase,
        current_step=first.step_number,
        current_actor_id=get_resolver().resolve(first.responsible_role),
        status="active",
        deadline=deadline,
        created_by_id=creator.id,
        created_at=now,
        updated_at=now,
    )
    db.session.add(tender)
    try:
        db.session.flush()
        history_ledger.append(
            tender.id, first.id, creator.id, "created",
            comments="Appel d'offres créé", deadline=deadline,
        )
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.warning("Tender reference collision for %s", tender.reference)
        raise ConflictError(
            resource="Tender", resource_id=tender.reference,
            message=f"Tender reference {tender.reference} already exists, retry",
        ) from None

    logger.info(
        "Tender created %s workflow=%s actor=%s", tender.reference, workflow_code,
        tender.current_actor_id,
        extra={
            "tender_id": tender.id,
            "actor_id": creator.id,
            "workflow": workflow_code,
            "phase": tender.current_phase,
            "step": tender.current_step,
            "action": "created",
        },
    )
    return tender


def approve(tender_id, actor_id, comments=None, deadline_override=None, with_remarks=None, next_actor_id=None) -> Tender:
    return transition_engine.approve(
        tender_id, actor_id, comments,
        deadline_override=deadline_override,
        with_remarks=with_remarks,
        next_actor_id=next_actor_id,
    )


def reject(tender_id, actor_id, comments=None, next_actor_id=None) -> Tender:
    return transition_engine.reject(tender_id, actor_id, comments, next_actor_id=next_actor_id)


def cancel(tender_id, actor_id, comments=None) -> Tender:
    return transition_engine.cancel(tender_id, actor_id, comments)


def reassign(tender_id, actor_id, new_actor_id, comments=None) -> Tender:
    return transition_engine.reassign(tender_id, actor_id, new_actor_id, comments)


# ═════════════════════════════════════════════════════════════════════════════
# Reads
# ═════════════════════════════════════════════════════════════════════════════


def get_tender(tender_id: str) -> Tender:
    tender = db.session.get(Tender, tender_id)
    if tender is None:
        raise NotFoundError(resource="Tender", resource_id=tender_id)
    return tender


def build_tender_query(status=None, phase=None, workflow_code=None):
    """Filtered tender query, newest first. Used by list endpoints with pagination."""
    query = Tender.query
    if status:
        if status not in TENDER_STATUSES:
            raise ValidationError(f"Unknown status: {status}", details={"status": sorted(TENDER_STATUSES)})
        query = query.filter(Tender.status == status)
    if phase is not None:
        query = query.filter(Tender.current_phase == phase)
    if workflow_code:
        query = query.filter(Tender.workflow_code == workflow_code)
    return query.order_by(Tender.created_at.desc(), Tender.reference.desc())


def list_tenders(status=None, phase=None, workflow_code=None) -> list[Tender]:
    return build_tender_query(status, phase, workflow_code).all()


def get_timeline(tender_id: str) -> list[dict]:
    """Full audit trail with step metadata, oldest first. Read-only."""
    get_tender(tender_id)
    timeline = []
    for entry in history_ledger.list_for_tender(tender_id):
        item = entry.to_dict()
        step = entry.step
        item.update({
            "step_title": step.title if step else UNKNOWN_STEP_TITLE,
            "phase": step.phase if step else None,
            "step_number": step.step_number if step else None,
            "responsible_role": step.responsible_role if step else None,
            "actor_name": entry.actor.full_name if entry.actor else None,
        })
        timeline.append(item)
    return timeline


def get_tasks(actor_id: str | None = None, role: str | None = None) -> list[dict]:
    """Task queue for an actor (preferred) or a role, as tender summaries."""
    if actor_id:
        tenders = task_service.tasks_for_actor(actor_id)
    elif role:
        tenders = task_service.tasks_for_role(role)
    else:
        raise ValidationError("actor_id or role is required", details={"actor_id": "required"})
    return [t.to_summary() for t in tenders]


# ═════════════════════════════════════════════════════════════════════════════
# Comments
# ═════════════════════════════════════════════════════════════════════════════


def add_comment(tender_id: str, author_id: str, content: str, is_public: bool = True) -> TenderComment:
    tender = get_tender(tender_id)
    if db.session.get(User, author_id) is None:
        raise NotFoundError(resource="User", resource_id=author_id)
    content = (content or "").strip()
    if not content:
        raise ValidationError("content is required", details={"content": "required"})

    comment = TenderComment(tender_id=tender.id, author_id=author_id, content=content, is_public=is_public)
    db.session.add(comment)
    db.session.commit()
    logger.info("Comment added to tender %s by %s", tender.reference, author_id,
                extra={"tender_id": tender.id, "actor_id": author_id})
    return comment


def list_comments(tender_id: str, include_private: bool = True) -> list[TenderComment]:
    get_tender(tender_id)
    query = TenderComment.query.filter_by(tender_id=tender_id)
    if not include_private:
        query = query.filter(TenderComment.is_public.is_(True))
    return query.order_by(TenderComment.created_at, TenderComment.id).all()
