"""
Rate limiting configuration.

Applies per-blueprint rate limits using Flask-Limiter.
The Limiter instance is created in tenderflow/__init__.py with no default
limits; this module applies limits per route category.

Usage:
    from tenderflow.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

import logging

logger = logging.getLogger(__name__)


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits (per remote IP):
        - Transition endpoints: TRANSITION_RATE_LIMIT (default 60/minute)
        - Health check:         exempt

    Rate limiting is disabled in testing mode.
    """
    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    transition_limit = app.config.get("TRANSITION_RATE_LIMIT", "60/minute")
    bp = app.blueprints.get("transition")
    if bp:
        limiter.limit(transition_limit)(bp)

    bp = app.blueprints.get("health")
    if bp:
        limiter.exempt(bp)

    app.logger.info("Rate limiter configured: transitions=%s", transition_limit)
