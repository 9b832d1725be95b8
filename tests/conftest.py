"""
Shared pytest fixtures for the Tenderflow test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate + catalog reload (autouse)
    - client: Flask test client (function-scoped)
    - actors: one active user per standard workflow role
    - make_user: factory for extra users
"""

from datetime import datetime, timedelta, timezone

import pytest

from tenderflow import create_app, init_catalogs
from tenderflow.models import db as _db
from tenderflow.models.auth import User


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, reload catalogs, rollback + recreate tables after."""
    with app.app_context():
        # Tables are recreated per test; step rows must be re-seeded
        init_catalogs(app)
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def config_override(app):
    """Temporarily override app.config keys; restored after the test."""
    saved = {}

    def _set(**kwargs):
        for key, value in kwargs.items():
            saved.setdefault(key, app.config.get(key))
            app.config[key] = value

    yield _set
    for key, value in saved.items():
        app.config[key] = value


# ── Actor helpers ────────────────────────────────────────────────────────

_CLOCK = {"t": datetime(2026, 1, 1, tzinfo=timezone.utc)}


def _make_user(user_id, role, **kw):
    """Insert a user with a strictly increasing created_at (first-match order)."""
    _CLOCK["t"] += timedelta(seconds=1)
    user = User(
        id=user_id,
        username=kw.pop("username", user_id),
        role=role,
        is_admin=kw.pop("is_admin", role == "ADMIN"),
        is_active=kw.pop("is_active", True),
        created_at=kw.pop("created_at", _CLOCK["t"]),
        **kw,
    )
    _db.session.add(user)
    _db.session.commit()
    return user


@pytest.fixture()
def make_user():
    return _make_user


@pytest.fixture()
def actors():
    """One active user per standard role, keyed by role."""
    return {
        role: _make_user(f"{role.lower()}1", role)
        for role in ("ADMIN", "ST", "SM", "CE", "SB", "SOR", "TP")
    }
