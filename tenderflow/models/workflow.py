"""
Workflow step definitions — persisted reference data.

Rows are written once by ``seed_step_definitions`` and never updated at
runtime. The in-memory ``WorkflowCatalog`` (services/workflow_catalog.py) is
rebuilt from these rows at startup; history entries point at them through
``tender_step_history.step_id``.

Override targets are stored as two nullable integer columns each
(phase + step) so the table stays portable across SQLite and PostgreSQL.
"""

from tenderflow.models import db


class WorkflowStep(db.Model):
    __tablename__ = "step_definitions"

    id = db.Column(db.Integer, primary_key=True)
    workflow_code = db.Column(db.String(30), nullable=False, default="standard")
    phase = db.Column(db.Integer, nullable=False)
    step_number = db.Column(db.Integer, nullable=False)
    title = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text)
    responsible_role = db.Column(db.String(20), nullable=False)
    estimated_duration = db.Column(db.Integer, comment="days")
    max_duration = db.Column(db.Integer, comment="days")
    is_internal = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        comment="Internal processing step (no hand-off to another service)",
    )

    on_reject_phase = db.Column(db.Integer)
    on_reject_step = db.Column(db.Integer)
    on_approve_phase = db.Column(db.Integer)
    on_approve_step = db.Column(db.Integer)
    on_remarks_phase = db.Column(db.Integer)
    on_remarks_step = db.Column(db.Integer)

    __table_args__ = (
        db.UniqueConstraint("workflow_code", "phase", "step_number", name="uq_step_position"),
        db.Index("ix_step_definitions_workflow", "workflow_code"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "workflow_code": self.workflow_code,
            "phase": self.phase,
            "step_number": self.step_number,
            "title": self.title,
            "description": self.description,
            "responsible_role": self.responsible_role,
            "estimated_duration": self.estimated_duration,
            "max_duration": self.max_duration,
            "is_internal": self.is_internal,
        }

    def __repr__(self):
        return f"<WorkflowStep {self.workflow_code} {self.phase}.{self.step_number}>"
