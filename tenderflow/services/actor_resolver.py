"""
Actor resolution — who receives a step once the tender reaches it.

Strategies (config ACTOR_RESOLUTION_STRATEGY):
    first_match    first active user of the role by (created_at, id). Default.
    least_loaded   fewest active tenders currently assigned; ties → first_match order
    round_robin    the user after the one most recently handed a tender, wrapping

Resolution fails soft: no eligible user → None (the step is "unassigned"),
logged at warning level. The transition still commits.

Explicit assignment (``next_actor_id``) bypasses the strategy but is checked:
the user must exist, be active and hold the step's role.
"""

from __future__ import annotations

import logging

from flask import current_app
from sqlalchemy import func

from tenderflow.core.exceptions import NotFoundError, ValidationError
from tenderflow.models import db
from tenderflow.models.auth import User
from tenderflow.models.tender import Tender

logger = logging.getLogger(__name__)


def _candidates(role: str) -> list[User]:
    return (
        User.query
        .filter(User.role == role, User.is_active.is_(True))
        .order_by(User.created_at, User.id)
        .all()
    )


class FirstMatchStrategy:
    name = "first_match"

    def select(self, role: str, candidates: list[User]) -> User | None:
        return candidates[0] if candidates else None


class LeastLoadedStrategy:
    name = "least_loaded"

    def select(self, role: str, candidates: list[User]) -> User | None:
        if not candidates:
            return None
        ids = [u.id for u in candidates]
        rows = (
            db.session.query(Tender.current_actor_id, func.count(Tender.id))
            .filter(Tender.status == "active", Tender.current_actor_id.in_(ids))
            .group_by(Tender.current_actor_id)
            .all()
        )
        load = dict(rows)
        # min() keeps the first candidate on ties, i.e. first_match order
        return min(candidates, key=lambda u: load.get(u.id, 0))


class RoundRobinStrategy:
    name = "round_robin"

    def select(self, role: str, candidates: list[User]) -> User | None:
        if not candidates:
            return None
        ids = [u.id for u in candidates]
        last = (
            Tender.query
            .filter(Tender.current_actor_id.in_(ids))
            .order_by(Tender.updated_at.desc(), Tender.id.desc())
            .first()
        )
        if last is None:
            return candidates[0]
        idx = ids.index(last.current_actor_id)
        return candidates[(idx + 1) % len(candidates)]


STRATEGIES = {
    FirstMatchStrategy.name: FirstMatchStrategy,
    LeastLoadedStrategy.name: LeastLoadedStrategy,
    RoundRobinStrategy.name: RoundRobinStrategy,
}


class ActorResolver:
    """Map a responsible role to a concrete actor id."""

    def __init__(self, strategy=None):
        self.strategy = strategy or FirstMatchStrategy()

    def resolve(self, role: str) -> str | None:
        user = self.strategy.select(role, _candidates(role))
        if user is None:
            logger.warning(
                "No active actor for role %s, step left unassigned", role,
                extra={"role": role},
            )
            return None
        return user.id

    def validate_explicit(self, actor_id: str, role: str) -> User:
        """Check an explicitly chosen actor can take a step owned by ``role``."""
        user = db.session.get(User, actor_id)
        if user is None:
            raise NotFoundError(resource="User", resource_id=actor_id)
        if not user.is_active:
            raise ValidationError(
                f"User {actor_id} is inactive",
                details={"next_actor_id": "inactive"},
            )
        if user.role != role:
            raise ValidationError(
                f"User {actor_id} holds role {user.role}, step requires {role}",
                details={"next_actor_id": "role_mismatch", "required_role": role},
            )
        return user


def build_resolver(strategy_name: str = "first_match") -> ActorResolver:
    try:
        strategy_cls = STRATEGIES[strategy_name]
    except KeyError:
        raise ValueError(
            f"Unknown actor resolution strategy '{strategy_name}'. "
            f"Valid: {', '.join(sorted(STRATEGIES))}"
        ) from None
    return ActorResolver(strategy_cls())


def get_resolver() -> ActorResolver:
    """Resolver configured for the current app."""
    return build_resolver(current_app.config.get("ACTOR_RESOLUTION_STRATEGY", "first_match"))
