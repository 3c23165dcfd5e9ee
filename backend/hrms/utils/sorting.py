from __future__ import annotations
from flask import abort

def apply_multi_sort(query, sort_expr: str | None, allowed: dict, tie_breaker):
    """Order a query by a comma-separated sort expression such as ``-startDate,status``.
    Unknown keys are a 400; ``tie_breaker`` is appended (descending, newest first) for stable paging.
    """
    if not sort_expr:
        return query.order_by(tie_breaker.desc())
    clauses = []
    for token in (t.strip() for t in sort_expr.split(',')):
        if not token:
            continue
        key = token.lstrip('-')
        col = allowed.get(key)
        if col is None:
            abort(400, description=f'Invalid sort field {key}')
        clauses.append(col.desc() if token.startswith('-') else col.asc())
    clauses.append(tie_breaker.desc())
    return query.order_by(*clauses)
