"""
Tenderflow
Flask Application Factory.

Usage:
    from tenderflow import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate

from tenderflow.config import config
from tenderflow.models import db
from tenderflow.middleware.logging_config import configure_logging
from tenderflow.middleware.rate_limiter import init_rate_limits
from tenderflow.middleware.timing import init_request_timing

logger = logging.getLogger(__name__)

# ── SQLite FK enforcement (global engine event) ─────────────────────────
from sqlalchemy import event as _sa_event, engine as _sa_engine


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit; applied per blueprint
    storage_uri=os.getenv("REDIS_URL", "memory://"),  # Redis in production, memory for dev
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name])

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Request timing middleware ────────────────────────────────────────
    init_request_timing(app)

    app.config.setdefault("MAX_CONTENT_LENGTH", 2 * 1024 * 1024)  # 2 MB

    # ── Import all models so Alembic can detect them ─────────────────────
    from tenderflow.models import auth as _auth_models          # noqa: F401
    from tenderflow.models import workflow as _workflow_models  # noqa: F401
    from tenderflow.models import tender as _tender_models      # noqa: F401

    # ── Tables + workflow catalogs ───────────────────────────────────────
    if config_name != "testing" and app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///"):
        os.makedirs(app.instance_path, exist_ok=True)

    with app.app_context():
        db.create_all()
        init_catalogs(app)

    # ── Blueprints ───────────────────────────────────────────────────────
    from tenderflow.blueprints.dashboard_bp import dashboard_bp
    from tenderflow.blueprints.health_bp import health_bp
    from tenderflow.blueprints.task_bp import task_bp
    from tenderflow.blueprints.tender_bp import tender_bp
    from tenderflow.blueprints.transition_bp import transition_bp
    from tenderflow.blueprints.user_bp import user_bp
    from tenderflow.blueprints.workflow_bp import workflow_bp

    app.register_blueprint(tender_bp)
    app.register_blueprint(transition_bp)
    app.register_blueprint(task_bp)
    app.register_blueprint(workflow_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(health_bp)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("seed-workflows")
    def seed_workflows_cmd():
        """Seed built-in workflow step catalogs (idempotent)."""
        registry = init_catalogs(app)
        for catalog in registry.all():
            logger.info("Workflow %s: %d steps", catalog.code, catalog.total_steps())

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(404)
    def not_found(e):
        return {"error": "Not found", "path": request.path}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return {"error": "Internal server error"}, 500

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(429)
    def rate_limited(e):
        return {"error": "Too many requests", "retry_after": e.description}, 429

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app


def init_catalogs(app):
    """Seed + load workflow catalogs and attach the registry to ``app``.

    Called at startup and again by tests after tables are recreated.
    Must run inside an application context.
    """
    from tenderflow.services.workflow_catalog import bootstrap_catalogs, install_registry

    registry = bootstrap_catalogs()
    install_registry(app, registry)
    return registry
