# Overview: Page/limit/sort handling for list endpoints.

from __future__ import annotations

import math
from typing import Callable


def paginate(query, params: dict, sortable: dict, default_sort: str = "created_at",
             serialize: Callable | None = None) -> dict:
    """
    Apply sorting and paging to a query and wrap the page.

    sort_by is looked up in the per-resource whitelist `sortable`
    (name -> column); anything else falls back to default_sort.

    Returns {"items", "page", "limit", "total", "total_pages"}.
    """
    page = params.get("page", 1)
    limit = params.get("limit", 20)

    sort_key = params.get("sort_by")
    if sort_key not in sortable:
        sort_key = default_sort
    column = sortable[sort_key]
    ordering = column.asc() if params.get("sort_order") == "asc" else column.desc()

    total = query.order_by(None).count()
    rows = query.order_by(ordering).offset((page - 1) * limit).limit(limit).all()

    serialize = serialize or (lambda row: row.to_dict())
    return {
        "items": [serialize(row) for row in rows],
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit) if limit else 0,
    }


def like_pattern(search: str) -> str:
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
