"""
Dashboard projections — read-only aggregates over tenders.

  - status counts and total amount
  - active tenders per phase
  - active workload per role of the current actor (plus "unassigned")
  - overdue tasks
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import func

from tenderflow.models import db
from tenderflow.models.auth import User
from tenderflow.models.tender import Tender

logger = logging.getLogger(__name__)


def get_stats():
    """Tender KPIs for the dashboard header."""
    by_status = dict(
        db.session.query(Tender.status, func.count(Tender.id))
        .group_by(Tender.status)
        .all()
    )
    total_amount = db.session.query(func.coalesce(func.sum(Tender.amount), 0)).scalar()

    phase_rows = (
        db.session.query(Tender.current_phase, func.count(Tender.id))
        .filter(Tender.status == "active")
        .group_by(Tender.current_phase)
        .order_by(Tender.current_phase)
        .all()
    )
    divisions = [
        d for (d,) in
        db.session.query(Tender.division).filter(Tender.division.isnot(None)).distinct().order_by(Tender.division).all()
    ]

    return {
        "total": sum(by_status.values()),
        "active": by_status.get("active", 0),
        "completed": by_status.get("completed", 0),
        "cancelled": by_status.get("cancelled", 0),
        "total_amount": str(total_amount),
        "by_phase": {str(phase): count for phase, count in phase_rows},
        "divisions": divisions,
    }


def get_actor_workload():
    """Active tender count per role of the current actor; unassigned separately."""
    rows = (
        db.session.query(User.role, func.count(Tender.id))
        .select_from(Tender)
        .join(User, Tender.current_actor_id == User.id)
        .filter(Tender.status == "active")
        .group_by(User.role)
        .all()
    )
    workload = {role: count for role, count in rows}
    workload["unassigned"] = (
        Tender.query
        .filter(Tender.status == "active", Tender.current_actor_id.is_(None))
        .count()
    )
    return workload


def get_overdue_tasks(now=None):
    """Active tenders whose deadline has passed, most overdue first."""
    now = now or datetime.now(timezone.utc)
    return (
        Tender.query
        .filter(
            Tender.status == "active",
            Tender.deadline.isnot(None),
            Tender.deadline < now,
        )
        .order_by(Tender.deadline)
        .all()
    )
