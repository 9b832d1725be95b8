"""
Actor resolver tests — strategies, fail-soft behaviour and explicit assignment.
"""

import pytest

from tenderflow.core.exceptions import NotFoundError, ValidationError
from tenderflow.models import db
from tenderflow.models.tender import Tender
from tenderflow.services.actor_resolver import (
    ActorResolver,
    LeastLoadedStrategy,
    RoundRobinStrategy,
    build_resolver,
)


def _tender(ref, actor_id, status="active"):
    t = Tender(reference=ref, title=ref, current_actor_id=actor_id, status=status)
    db.session.add(t)
    db.session.commit()
    return t


class TestFirstMatch:
    def test_picks_earliest_active_user(self, make_user):
        make_user("sm-a", "SM")
        make_user("sm-b", "SM")
        assert ActorResolver().resolve("SM") == "sm-a"

    def test_skips_inactive(self, make_user):
        make_user("sm-a", "SM", is_active=False)
        make_user("sm-b", "SM")
        assert ActorResolver().resolve("SM") == "sm-b"

    def test_no_candidate_returns_none(self, make_user):
        make_user("st-a", "ST")
        assert ActorResolver().resolve("TP") is None

    def test_other_roles_ignored(self, make_user):
        make_user("ce-a", "CE")
        make_user("sm-a", "SM")
        assert ActorResolver().resolve("SM") == "sm-a"


class TestLeastLoaded:
    def test_prefers_fewest_active_tenders(self, make_user):
        make_user("sm-a", "SM")
        make_user("sm-b", "SM")
        _tender("AO-T-1", "sm-a")
        _tender("AO-T-2", "sm-a")
        _tender("AO-T-3", "sm-b")
        assert ActorResolver(LeastLoadedStrategy()).resolve("SM") == "sm-b"

    def test_completed_tenders_do_not_count(self, make_user):
        make_user("sm-a", "SM")
        make_user("sm-b", "SM")
        _tender("AO-T-1", "sm-a", status="completed")
        _tender("AO-T-2", "sm-b")
        assert ActorResolver(LeastLoadedStrategy()).resolve("SM") == "sm-a"

    def test_tie_falls_back_to_first_match(self, make_user):
        make_user("sm-a", "SM")
        make_user("sm-b", "SM")
        assert ActorResolver(LeastLoadedStrategy()).resolve("SM") == "sm-a"


class TestRoundRobin:
    def test_starts_with_first(self, make_user):
        make_user("sm-a", "SM")
        make_user("sm-b", "SM")
        assert ActorResolver(RoundRobinStrategy()).resolve("SM") == "sm-a"

    def test_rotates_after_last_assignment(self, make_user):
        make_user("sm-a", "SM")
        make_user("sm-b", "SM")
        make_user("sm-c", "SM")
        _tender("AO-T-1", "sm-b")
        assert ActorResolver(RoundRobinStrategy()).resolve("SM") == "sm-c"

    def test_wraps_around(self, make_user):
        make_user("sm-a", "SM")
        make_user("sm-b", "SM")
        _tender("AO-T-1", "sm-b")
        assert ActorResolver(RoundRobinStrategy()).resolve("SM") == "sm-a"


class TestExplicitAssignment:
    def test_valid(self, make_user):
        make_user("ce-x", "CE")
        assert ActorResolver().validate_explicit("ce-x", "CE").id == "ce-x"

    def test_unknown_user(self):
        with pytest.raises(NotFoundError):
            ActorResolver().validate_explicit("ghost", "CE")

    def test_inactive_user(self, make_user):
        make_user("ce-x", "CE", is_active=False)
        with pytest.raises(ValidationError):
            ActorResolver().validate_explicit("ce-x", "CE")

    def test_role_mismatch(self, make_user):
        make_user("sm-x", "SM")
        with pytest.raises(ValidationError) as exc_info:
            ActorResolver().validate_explicit("sm-x", "CE")
        assert exc_info.value.details["required_role"] == "CE"


class TestBuildResolver:
    @pytest.mark.parametrize("name", ["first_match", "least_loaded", "round_robin"])
    def test_known_strategies(self, name):
        assert build_resolver(name).strategy.name == name

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            build_resolver("random")
