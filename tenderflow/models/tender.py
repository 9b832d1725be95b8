"""
Tenderflow
Tender domain models.

Models:
    - Tender:             mutable aggregate; current (phase, step), actor, status
    - TenderStepHistory:  append-only audit trail, one row per transition attempt
    - TenderComment:      free-form remarks attached to a tender

Architecture:
    Tender ──1:N──▶ TenderStepHistory ──N:1──▶ WorkflowStep
    Tender ──1:N──▶ TenderComment
    Tender ──N:1──▶ User (current actor, creator)

Lifecycle:
    Tender:  active → completed | cancelled   (both terminal, position frozen)
"""

from datetime import datetime, timezone
import uuid

from tenderflow.models import db
from tenderflow.utils.helpers import ensure_utc

# ── Constants ────────────────────────────────────────────────────────────────

TENDER_STATUSES = {"active", "completed", "cancelled"}

HISTORY_ACTIONS = frozenset({
    "created",
    "approved",
    "rejected",
    "pending",
    "cancelled",
    "reassigned",
})


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Tender(db.Model):
    """
    A procurement request moving through an approval workflow.

    Business rules:
    - (current_phase, current_step) always names a step of ``workflow_code``'s
      catalog while status is 'active'.
    - Only the transition engine mutates position, actor and status.
    - ``version`` is the optimistic-lock counter; two writers that read the
      same version cannot both commit.
    """

    __tablename__ = "tenders"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    reference = db.Column(db.String(30), nullable=False, unique=True)
    title = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text)
    amount = db.Column(db.Numeric(15, 2))
    direction = db.Column(db.String(20))
    division = db.Column(db.String(20))

    workflow_code = db.Column(db.String(30), nullable=False, default="standard")
    current_phase = db.Column(db.Integer, nullable=False, default=1)
    current_step = db.Column(db.Integer, nullable=False, default=1)
    current_actor_id = db.Column(
        db.String(64),
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="NULL = unassigned (no eligible actor for the step's role)",
    )
    status = db.Column(db.String(20), nullable=False, default="active")
    deadline = db.Column(db.DateTime(timezone=True))

    created_by_id = db.Column(db.String(64), db.ForeignKey("users.id", ondelete="SET NULL"))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
    version = db.Column(db.Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        db.Index("ix_tenders_actor_status", "current_actor_id", "status"),
        db.Index("ix_tenders_status_phase", "status", "current_phase"),
    )

    current_actor = db.relationship("User", foreign_keys=[current_actor_id])
    created_by = db.relationship("User", foreign_keys=[created_by_id])
    history = db.relationship(
        "TenderStepHistory",
        back_populates="tender",
        lazy="dynamic",
    )
    comments = db.relationship(
        "TenderComment", back_populates="tender", lazy="dynamic",
        cascade="all, delete-orphan",
    )

    @property
    def is_active(self):
        return self.status == "active"

    @property
    def is_overdue(self):
        if not self.is_active or self.deadline is None:
            return False
        return ensure_utc(self.deadline) < _utcnow()

    def to_summary(self):
        """Compact projection used by task queues."""
        return {
            "id": self.id,
            "reference": self.reference,
            "title": self.title,
            "amount": str(self.amount) if self.amount is not None else None,
            "direction": self.direction,
            "division": self.division,
            "workflow_code": self.workflow_code,
            "current_phase": self.current_phase,
            "current_step": self.current_step,
            "current_actor_id": self.current_actor_id,
            "status": self.status,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "is_overdue": self.is_overdue,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def to_dict(self):
        d = self.to_summary()
        d.update({
            "description": self.description,
            "created_by_id": self.created_by_id,
            "current_actor": self.current_actor.to_dict() if self.current_actor else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "version": self.version,
        })
        return d

    def __repr__(self):
        return f"<Tender {self.reference} {self.current_phase}.{self.current_step} {self.status}>"


class TenderStepHistory(db.Model):
    """
    Immutable audit entry for one transition attempt.

    Business rules:
    - Rows are NEVER updated or deleted; HistoryLedger exposes append only.
    - ``step_id`` is the step being left (approve/reject) or the step the
      tender sits on (created/cancelled/reassigned).
    - Ordering by (created_at, id) defines the audit trail.
    """

    __tablename__ = "tender_step_history"

    id = db.Column(db.Integer, primary_key=True)
    tender_id = db.Column(
        db.String(36),
        db.ForeignKey("tenders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    step_id = db.Column(
        db.Integer,
        db.ForeignKey("step_definitions.id"),
        nullable=False,
    )
    actor_id = db.Column(
        db.String(64),
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    action = db.Column(
        db.String(20),
        nullable=False,
        comment="created | approved | rejected | pending | cancelled | reassigned",
    )
    comments = db.Column(db.Text)
    deadline = db.Column(db.DateTime(timezone=True))
    completed_at = db.Column(db.DateTime(timezone=True))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        db.Index("ix_history_tender_created", "tender_id", "created_at"),
    )

    tender = db.relationship("Tender", back_populates="history")
    step = db.relationship("WorkflowStep")
    actor = db.relationship("User")

    def to_dict(self):
        return {
            "id": self.id,
            "tender_id": self.tender_id,
            "step_id": self.step_id,
            "actor_id": self.actor_id,
            "action": self.action,
            "comments": self.comments,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<TenderStepHistory #{self.id} {self.tender_id} {self.action}>"


class TenderComment(db.Model):
    __tablename__ = "tender_comments"

    id = db.Column(db.Integer, primary_key=True)
    tender_id = db.Column(
        db.String(36),
        db.ForeignKey("tenders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id = db.Column(db.String(64), db.ForeignKey("users.id", ondelete="SET NULL"))
    content = db.Column(db.Text, nullable=False)
    is_public = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    tender = db.relationship("Tender", back_populates="comments")

    def to_dict(self):
        return {
            "id": self.id,
            "tender_id": self.tender_id,
            "author_id": self.author_id,
            "content": self.content,
            "is_public": self.is_public,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
