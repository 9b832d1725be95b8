"""
Tenderflow
Blueprint registry and shared request helpers.
"""

from flask import request


def paginate_query(query, default_limit=200, max_limit=1000):
    """Apply limit/offset pagination to a SQLAlchemy query.

    Query params:
        limit  — max items (default 200, capped at max_limit)
        offset — starting position (default 0)

    Returns:
        (items_list, total_count)
    """
    total = query.count()
    try:
        limit = min(int(request.args.get("limit", default_limit)), max_limit)
    except (ValueError, TypeError):
        limit = default_limit
    try:
        offset = max(int(request.args.get("offset", 0)), 0)
    except (ValueError, TypeError):
        offset = 0
    items = query.limit(limit).offset(offset).all()
    return items, total


def json_object():
    """Request JSON body as a dict.

    A missing or unparsable body reads as ``{}``. Returns None when the body
    is valid JSON but not an object; callers answer that with a 400.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def acting_user_id(data=None):
    """Acting user: body ``actor_id`` first, then the X-User-ID header. No auth."""
    data = data if isinstance(data, dict) else {}
    return (
        str(data.get("actor_id") or "").strip()
        or request.headers.get("X-User-ID", "").strip()
        or None
    )
