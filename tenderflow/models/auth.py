"""
Actor model — users holding one workflow role.

Roles are flat (no hierarchy). Every StepDefinition names exactly one
responsible role; several users may share a role and the ActorResolver
decides which of them receives a step.
"""

from datetime import datetime, timezone

from tenderflow.models import db

# ── Constants ─────────────────────────────────────────────────────────────────

WORKFLOW_ROLES = frozenset({
    "ST",     # Service Technique
    "SM",     # Service Marchés
    "CE",     # Contrôle d'État
    "SB",     # Service Budgétaire
    "SOR",    # Service Ordonnateur
    "TP",     # Trésorier Payeur
    "ADMIN",
})

# External parties named by variant workflows (onssa)
EXTERNAL_ROLES = frozenset({"COMMISSION", "DIRECTION", "PRESTATAIRE"})

VALID_ROLES = WORKFLOW_ROLES | EXTERNAL_ROLES

# Roles that see every active tender regardless of assignment
SUPERVISORY_ROLES = frozenset({"ADMIN"})

ROLE_LABELS = {
    "ST": "Service Technique",
    "SM": "Service Marchés",
    "CE": "Contrôle d'État",
    "SB": "Service Budgétaire",
    "SOR": "Service Ordonnateur",
    "TP": "Trésorier Payeur",
    "ADMIN": "Administrateur",
    "COMMISSION": "Commission d'appel d'offres",
    "DIRECTION": "Direction",
    "PRESTATAIRE": "Prestataire",
}


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(64), primary_key=True)
    username = db.Column(db.String(100), nullable=False, unique=True)
    email = db.Column(db.String(200), unique=True)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    role = db.Column(
        db.String(20),
        nullable=False,
        comment="ST | SM | CE | SB | SOR | TP | ADMIN (+ variant roles)",
    )
    direction = db.Column(db.String(20))
    division = db.Column(db.String(20))
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.Index("ix_users_role_active", "role", "is_active"),
    )

    @property
    def full_name(self):
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or self.username

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "role": self.role,
            "role_label": ROLE_LABELS.get(self.role, self.role),
            "direction": self.direction,
            "division": self.division,
            "is_admin": self.is_admin,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"
