"""
Dashboard projection tests.
"""

from datetime import datetime, timedelta, timezone

from tenderflow.models import db
from tenderflow.services import dashboard_service, tender_service, transition_engine


def _create(actors, amount="1000", division="DIV-A"):
    return tender_service.create_tender("Marché", None, amount, {"division": division}, actors["ST"].id)


class TestStats:
    def test_empty(self):
        stats = dashboard_service.get_stats()
        assert stats["total"] == 0
        assert stats["active"] == 0
        assert stats["by_phase"] == {}
        assert stats["divisions"] == []

    def test_counts_and_amount(self, actors):
        _create(actors, "1000.50", "DIV-A")
        t2 = _create(actors, "2000", "DIV-B")
        t3 = _create(actors, "500", "DIV-A")
        transition_engine.cancel(t3.id, actors["ADMIN"].id)
        t2.current_phase, t2.current_step = 2, 1
        db.session.commit()

        stats = dashboard_service.get_stats()
        assert stats["total"] == 3
        assert stats["active"] == 2
        assert stats["cancelled"] == 1
        assert stats["completed"] == 0
        assert float(stats["total_amount"]) == 3500.50
        assert stats["by_phase"] == {"1": 1, "2": 1}
        assert stats["divisions"] == ["DIV-A", "DIV-B"]


class TestWorkload:
    def test_per_role_and_unassigned(self, actors):
        _create(actors)
        t2 = _create(actors)
        transition_engine.approve(t2.id, actors["SM"].id)
        t3 = _create(actors)
        t3.current_actor_id = None
        db.session.commit()

        workload = dashboard_service.get_actor_workload()
        assert workload["SM"] == 1
        assert workload["CE"] == 1
        assert workload["unassigned"] == 1


class TestOverdue:
    def test_only_past_deadlines(self, actors):
        overdue = _create(actors)
        _create(actors)
        overdue.deadline = datetime.now(timezone.utc) - timedelta(days=2)
        db.session.commit()

        result = dashboard_service.get_overdue_tasks()
        assert [t.id for t in result] == [overdue.id]
        assert result[0].is_overdue is True

    def test_reference_time(self, actors):
        _create(actors)
        future = datetime.now(timezone.utc) + timedelta(days=30)
        assert len(dashboard_service.get_overdue_tasks(now=future)) == 1
