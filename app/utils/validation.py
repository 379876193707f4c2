# app/utils/validation.py
import re

from fastapi import HTTPException, Path, status
from fastapi.exceptions import RequestValidationError

_ID_PATTERN = re.compile(r"^\d{1,18}$")

# Largest value a 64-bit INTEGER column holds
MAX_ID = 2**63 - 1


def parse_id(raw: str, label: str) -> int:
    """Turn a path segment into a record id, 400 if it can't be one"""
    if not _ID_PATTERN.match(raw):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} ID format",
        )
    return int(raw)


def valid_task_id(task_id: str = Path(...)) -> int:
    return parse_id(task_id, "task")


def valid_user_id(user_id: str = Path(...)) -> int:
    return parse_id(user_id, "user")


def format_validation_errors(exc: RequestValidationError) -> list:
    """Flatten FastAPI's validation errors into field/message pairs"""
    errors = []
    for error in exc.errors():
        # loc looks like ("body", "title") or ("query", "page")
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(loc) or None,
            "message": error.get("msg", "Invalid value"),
        })
    return errors
