"""
Task queue tests — actor queues, role queues, unassigned and ordering.
"""

from datetime import datetime, timedelta, timezone

import pytest

from tenderflow.core.exceptions import ValidationError
from tenderflow.models import db
from tenderflow.services import task_service, tender_service, transition_engine


def _create(creator_id, title="Travaux"):
    return tender_service.create_tender(title, None, None, {}, creator_id)


class TestActorQueue:
    def test_new_tender_lands_in_first_actor_queue(self, actors):
        tender = _create(actors["ST"].id)
        assert [t.id for t in task_service.tasks_for_actor(actors["SM"].id)] == [tender.id]
        assert task_service.tasks_for_actor(actors["CE"].id) == []

    def test_queue_follows_transition(self, actors):
        tender = _create(actors["ST"].id)
        transition_engine.approve(tender.id, actors["SM"].id)
        assert task_service.tasks_for_actor(actors["SM"].id) == []
        assert [t.id for t in task_service.tasks_for_actor(actors["CE"].id)] == [tender.id]

    def test_terminal_tenders_leave_queue(self, actors):
        tender = _create(actors["ST"].id)
        transition_engine.cancel(tender.id, actors["ADMIN"].id)
        assert task_service.tasks_for_actor(actors["SM"].id) == []

    def test_ordered_by_deadline_then_creation(self, actors):
        late = _create(actors["ST"].id, "Late")
        early = _create(actors["ST"].id, "Early")
        no_deadline = _create(actors["ST"].id, "Open")
        now = datetime.now(timezone.utc)
        late.deadline = now + timedelta(days=10)
        early.deadline = now + timedelta(days=1)
        no_deadline.deadline = None
        db.session.commit()

        titles = [t.title for t in task_service.tasks_for_actor(actors["SM"].id)]
        assert titles == ["Early", "Late", "Open"]


class TestRoleQueue:
    def test_role_queue_matches_current_actor_role(self, actors, make_user):
        make_user("sm2", "SM")
        first = _create(actors["ST"].id)
        second = _create(actors["ST"].id)
        transition_engine.reassign(second.id, actors["ADMIN"].id, "sm2")

        ids = {t.id for t in task_service.tasks_for_role("SM")}
        assert ids == {first.id, second.id}
        assert task_service.tasks_for_role("CE") == []

    def test_supervisor_sees_all_active(self, actors):
        a = _create(actors["ST"].id)
        b = _create(actors["ST"].id)
        transition_engine.approve(b.id, actors["SM"].id)
        c = _create(actors["ST"].id)
        transition_engine.cancel(c.id, actors["ADMIN"].id)

        ids = {t.id for t in task_service.tasks_for_role("ADMIN")}
        assert ids == {a.id, b.id}

    def test_unknown_role(self):
        with pytest.raises(ValidationError):
            task_service.tasks_for_role("JANITOR")


class TestUnassigned:
    def test_only_active_without_actor(self, actors):
        a = _create(actors["ST"].id)
        b = _create(actors["ST"].id)
        a.current_actor_id = None
        b.current_actor_id = None
        b.status = "cancelled"
        db.session.commit()

        assert [t.id for t in task_service.unassigned_tenders()] == [a.id]


class TestFacadeTasks:
    def test_get_tasks_by_actor_returns_summaries(self, actors):
        tender = _create(actors["ST"].id)
        tasks = tender_service.get_tasks(actor_id=actors["SM"].id)
        assert tasks[0]["id"] == tender.id
        assert tasks[0]["current_phase"] == 1
        assert tasks[0]["is_overdue"] is False

    def test_get_tasks_by_role(self, actors):
        _create(actors["ST"].id)
        assert len(tender_service.get_tasks(role="SM")) == 1

    def test_get_tasks_requires_a_filter(self):
        with pytest.raises(ValidationError):
            tender_service.get_tasks()
