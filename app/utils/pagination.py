# app/utils/pagination.py
import math
from typing import List, Tuple

from sqlalchemy.orm import Query

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Keeps the offset well inside a 64-bit integer
MAX_PAGE = 1_000_000


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def build_pagination(page: int, limit: int, total: int) -> dict:
    """Summary block returned next to a page of records.

    A page past the end is not an error: the caller gets an empty list and
    this summary still describes the real result set.
    """
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "current_page": page,
        "total_pages": total_pages,
        "total_tasks": total,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }


def paginate(query: Query, page: int, limit: int) -> Tuple[List, dict]:
    """Run an already ordered query for one page and count the full match"""
    total = query.order_by(None).count()
    items = query.offset(page_offset(page, limit)).limit(limit).all()
    return items, build_pagination(page, limit, total)
