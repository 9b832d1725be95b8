"""
History ledger — append-only audit trail of tender transitions.

Design decisions:
    - TenderStepHistory is APPEND-ONLY: there is no update or delete helper.
    - append() flushes (to obtain the id) but never commits; the caller owns
      the unit of work so the entry and the tender mutation land together.
    - Ordering is (created_at, id); ids break ties between entries written in
      the same clock tick.
"""

from __future__ import annotations

from datetime import datetime, timezone

from tenderflow.core.exceptions import ValidationError
from tenderflow.models import db
from tenderflow.models.tender import HISTORY_ACTIONS, TenderStepHistory


def append(
    tender_id: str,
    step_id: int,
    actor_id: str | None,
    action: str,
    comments: str | None = None,
    deadline: datetime | None = None,
    completed_at: datetime | None = None,
) -> TenderStepHistory:
    if action not in HISTORY_ACTIONS:
        raise ValidationError(
            f"Invalid history action: {action}",
            details={"action": sorted(HISTORY_ACTIONS)},
        )
    entry = TenderStepHistory(
        tender_id=tender_id,
        step_id=step_id,
        actor_id=actor_id,
        action=action,
        comments=comments,
        deadline=deadline,
        completed_at=completed_at,
        created_at=datetime.now(timezone.utc),
    )
    db.session.add(entry)
    db.session.flush()
    return entry


def _ordered(tender_id: str):
    return (
        TenderStepHistory.query
        .filter_by(tender_id=tender_id)
        .order_by(TenderStepHistory.created_at, TenderStepHistory.id)
    )


def list_for_tender(tender_id: str) -> list[TenderStepHistory]:
    return _ordered(tender_id).all()


def latest_for_tender(tender_id: str) -> TenderStepHistory | None:
    return (
        TenderStepHistory.query
        .filter_by(tender_id=tender_id)
        .order_by(TenderStepHistory.created_at.desc(), TenderStepHistory.id.desc())
        .first()
    )


def count_for_tender(tender_id: str) -> int:
    return TenderStepHistory.query.filter_by(tender_id=tender_id).count()
