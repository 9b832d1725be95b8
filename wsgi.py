"""
WSGI entry point (gunicorn) and Flask-Migrate / Alembic target.

Usage:
    flask --app wsgi db upgrade
    flask --app wsgi seed-workflows
    gunicorn wsgi:app
"""

from tenderflow import create_app

app = create_app()
