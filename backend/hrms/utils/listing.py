from __future__ import annotations
from typing import Any, Callable, List, Tuple
from flask import request, abort
from sqlalchemy.orm import Query
from hrms.config.pagination import normalize_pagination


def apply_pagination(q: Query) -> Tuple[Query, int, int, int]:
    try:
        page, limit, offset = normalize_pagination(request.args.get('page'), request.args.get('limit'))
    except ValueError as e:
        abort(400, description=str(e))
    total = q.count()
    return q.offset(offset).limit(limit), total, page, limit


def build_list_payload(rows: list, total: int, page: int, limit: int):
    total_pages = -(-total // limit) if limit else 0
    return {
        'success': True,
        'count': len(rows),
        'data': rows,
        'pagination': {
            'currentPage': page,
            'totalPages': total_pages,
            'totalItems': total,
            'itemsPerPage': limit,
            'hasNextPage': page < total_pages,
            'hasPrevPage': page > 1,
        }
    }


def paginated_response(q: Query, serialize: Callable[[Any], dict]):
    paged_q, total, page, limit = apply_pagination(q)
    rows: List[dict] = [serialize(r) for r in paged_q.all()]
    return build_list_payload(rows, total, page, limit)
