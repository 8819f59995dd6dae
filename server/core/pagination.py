# server/core/pagination.py

import math
from typing import Any, Callable, Optional
from urllib.parse import urlencode
from sqlalchemy.orm import Query


def page_href(path: str, page: int, params: Optional[dict] = None) -> dict:
    query = {k: v for k, v in (params or {}).items() if v is not None}
    query["page"] = page
    return {"href": f"{path}?{urlencode(query)}"}


def paginate(
    query: Query,
    page: int,
    per_page: int,
    path: str,
    serialize: Callable[[Any], dict],
    params: Optional[dict] = None,
) -> dict:
    """
    Slices ``query`` into page ``page`` (1-based) of ``per_page`` rows.
    ``next``/``prev`` links only appear when that page exists.
    """
    total = query.count()
    total_pages = max(1, math.ceil(total / per_page))
    rows = query.offset((page - 1) * per_page).limit(per_page).all()

    links = {"self": page_href(path, page, params)}
    if page < total_pages:
        links["next"] = page_href(path, page + 1, params)
    if page > 1:
        links["prev"] = page_href(path, page - 1, params)

    return {
        "items": [serialize(row) for row in rows],
        "page": page,
        "perPage": per_page,
        "total": total,
        "totalPages": total_pages,
        "links": links,
    }
