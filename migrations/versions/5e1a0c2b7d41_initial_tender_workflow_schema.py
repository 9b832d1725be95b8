"""initial_tender_workflow_schema

Creates the tender workflow tables:
  - users                 — actors holding one workflow role
  - step_definitions      — persisted workflow catalogs (one row per step)
  - tenders               — workflow position, current actor, status, version
  - tender_step_history   — append-only transition audit trail
  - tender_comments       — free-form remarks

Tables created conditionally (IF NOT EXISTS semantics) to support idempotent
execution against databases that already received these tables via
db.create_all() in a development environment.

Revision ID: 5e1a0c2b7d41
Revises:
Create Date: 2026-03-02 09:12:44.118203
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect as sa_inspect


# revision identifiers, used by Alembic.
revision = '5e1a0c2b7d41'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    inspector = sa_inspect(bind)
    existing = set(inspector.get_table_names())

    # ── Users ─────────────────────────────────────────────────────────────
    if "users" not in existing:
        op.create_table(
            "users",
            sa.Column("id", sa.String(length=64), nullable=False),
            sa.Column("username", sa.String(length=100), nullable=False),
            sa.Column("email", sa.String(length=200), nullable=True),
            sa.Column("first_name", sa.String(length=100), nullable=True),
            sa.Column("last_name", sa.String(length=100), nullable=True),
            sa.Column("role", sa.String(length=20), nullable=False,
                      comment="ST | SM | CE | SB | SOR | TP | ADMIN (+ variant roles)"),
            sa.Column("direction", sa.String(length=20), nullable=True),
            sa.Column("division", sa.String(length=20), nullable=True),
            sa.Column("is_admin", sa.Boolean(), nullable=False, server_default="0"),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("username"),
            sa.UniqueConstraint("email"),
        )
        op.create_index("ix_users_role_active", "users", ["role", "is_active"])

    # ── Step definitions ──────────────────────────────────────────────────
    if "step_definitions" not in existing:
        op.create_table(
            "step_definitions",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("workflow_code", sa.String(length=30), nullable=False),
            sa.Column("phase", sa.Integer(), nullable=False),
            sa.Column("step_number", sa.Integer(), nullable=False),
            sa.Column("title", sa.Text(), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("responsible_role", sa.String(length=20), nullable=False),
            sa.Column("estimated_duration", sa.Integer(), nullable=True, comment="days"),
            sa.Column("max_duration", sa.Integer(), nullable=True, comment="days"),
            sa.Column("is_internal", sa.Boolean(), nullable=False, server_default="0"),
            sa.Column("on_reject_phase", sa.Integer(), nullable=True),
            sa.Column("on_reject_step", sa.Integer(), nullable=True),
            sa.Column("on_approve_phase", sa.Integer(), nullable=True),
            sa.Column("on_approve_step", sa.Integer(), nullable=True),
            sa.Column("on_remarks_phase", sa.Integer(), nullable=True),
            sa.Column("on_remarks_step", sa.Integer(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("workflow_code", "phase", "step_number", name="uq_step_position"),
        )
        op.create_index("ix_step_definitions_workflow", "step_definitions", ["workflow_code"])

    # ── Tenders ───────────────────────────────────────────────────────────
    if "tenders" not in existing:
        op.create_table(
            "tenders",
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("reference", sa.String(length=30), nullable=False),
            sa.Column("title", sa.Text(), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("amount", sa.Numeric(15, 2), nullable=True),
            sa.Column("direction", sa.String(length=20), nullable=True),
            sa.Column("division", sa.String(length=20), nullable=True),
            sa.Column("workflow_code", sa.String(length=30), nullable=False, server_default="standard"),
            sa.Column("current_phase", sa.Integer(), nullable=False, server_default="1"),
            sa.Column("current_step", sa.Integer(), nullable=False, server_default="1"),
            sa.Column("current_actor_id", sa.String(length=64), nullable=True,
                      comment="NULL = unassigned (no eligible actor for the step's role)"),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
            sa.Column("deadline", sa.DateTime(timezone=True), nullable=True),
            sa.Column("created_by_id", sa.String(length=64), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
            sa.ForeignKeyConstraint(["current_actor_id"], ["users.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("reference"),
        )
        op.create_index("ix_tenders_actor_status", "tenders", ["current_actor_id", "status"])
        op.create_index("ix_tenders_status_phase", "tenders", ["status", "current_phase"])

    # ── Tender step history ───────────────────────────────────────────────
    if "tender_step_history" not in existing:
        op.create_table(
            "tender_step_history",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("tender_id", sa.String(length=36), nullable=False),
            sa.Column("step_id", sa.Integer(), nullable=False),
            sa.Column("actor_id", sa.String(length=64), nullable=True),
            sa.Column("action", sa.String(length=20), nullable=False,
                      comment="created | approved | rejected | pending | cancelled | reassigned"),
            sa.Column("comments", sa.Text(), nullable=True),
            sa.Column("deadline", sa.DateTime(timezone=True), nullable=True),
            sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(["tender_id"], ["tenders.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["step_id"], ["step_definitions.id"]),
            sa.ForeignKeyConstraint(["actor_id"], ["users.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_tender_step_history_tender_id", "tender_step_history", ["tender_id"])
        op.create_index("ix_history_tender_created", "tender_step_history", ["tender_id", "created_at"])

    # ── Tender comments ───────────────────────────────────────────────────
    if "tender_comments" not in existing:
        op.create_table(
            "tender_comments",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("tender_id", sa.String(length=36), nullable=False),
            sa.Column("author_id", sa.String(length=64), nullable=True),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("is_public", sa.Boolean(), nullable=False, server_default="1"),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(["tender_id"], ["tenders.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_tender_comments_tender_id", "tender_comments", ["tender_id"])


def downgrade():
    op.drop_table("tender_comments")
    op.drop_table("tender_step_history")
    op.drop_table("tenders")
    op.drop_table("step_definitions")
    op.drop_table("users")
