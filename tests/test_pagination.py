# tests/test_pagination.py

import pytest

from app.models import Task
from app.utils.pagination import build_pagination, page_offset, paginate


@pytest.mark.parametrize("page, limit, offset", [(1, 10, 0), (2, 10, 10), (3, 5, 10)])
def test_page_offset(page, limit, offset):
    assert page_offset(page, limit) == offset


def test_last_partial_page():
    assert build_pagination(3, 10, 25) == {
        "current_page": 3,
        "total_pages": 3,
        "total_tasks": 25,
        "has_next": False,
        "has_prev": True,
    }


def test_first_page_of_many():
    summary = build_pagination(1, 10, 25)
    assert summary["has_next"] is True
    assert summary["has_prev"] is False


def test_empty_result():
    assert build_pagination(1, 10, 0) == {
        "current_page": 1,
        "total_pages": 0,
        "total_tasks": 0,
        "has_next": False,
        "has_prev": False,
    }


def test_exact_multiple():
    summary = build_pagination(2, 10, 20)
    assert summary["total_pages"] == 2
    assert summary["has_next"] is False


def test_paginate_past_the_end_returns_empty_page(db, alice, make_task):
    for _ in range(3):
        make_task(alice)
    items, summary = paginate(db.query(Task).order_by(Task.id), page=5, limit=2)
    assert items == []
    assert summary["total_tasks"] == 3
    assert summary["total_pages"] == 2
    assert summary["has_prev"] is True
    assert summary["has_next"] is False
