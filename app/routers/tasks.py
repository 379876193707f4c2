import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.models import Task, TaskPriority, TaskStatus, User
from app.schemas import TaskCreate, TaskUpdate, TaskStatusUpdate, TaskOut, TaskPage
from app.utils.auth import get_current_user
from app.utils.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, MAX_PAGE, paginate
from app.utils.permissions import (
    TaskAction,
    Verdict,
    decide,
    ensure_allowed,
    strip_reassignment,
    visible_tasks,
)
from app.utils.validation import valid_task_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["Tasks"])


def _task_query(db: Session):
    return db.query(Task).options(
        joinedload(Task.assignee),
        joinedload(Task.creator),
    )


def _get_task_or_404(db: Session, task_id: int) -> Task:
    task = _task_query(db).filter(Task.id == task_id).first()
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


def _require_assignee(db: Session, user_id: int) -> User:
    """Assigned users are looked up, not trusted"""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Assigned user not found")
    return user


def _check(verdict: Verdict, user: User, action: TaskAction, task_id=None, detail: str = "Access denied"):
    if not verdict.allowed:
        logger.info(
            "User %s denied %s on task %s (%s)",
            user.id, action.value, task_id, verdict.value,
        )
    ensure_allowed(verdict, detail)


def _list_page(query, page: int, limit: int) -> dict:
    query = query.order_by(Task.created_at.desc(), Task.id.desc())
    tasks, pagination = paginate(query, page, limit)
    return {"tasks": tasks, "pagination": pagination}


@router.get("", response_model=TaskPage)
def get_tasks(
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = None,
    assigned_user: Optional[str] = Query(None, alias="assignedUser"),
    page: int = Query(DEFAULT_PAGE, ge=1, le=MAX_PAGE),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List tasks, newest first.

    Admins see every task and may filter by assignedUser. Everyone else
    only sees tasks assigned to them.
    """
    query = visible_tasks(
        _task_query(db),
        current_user,
        status_filter=status_filter,
        priority=priority,
        assigned_user=assigned_user,
    )
    return _list_page(query, page, limit)


@router.get("/priority/{priority}", response_model=TaskPage)
def get_tasks_by_priority(
    priority: TaskPriority,
    page: int = Query(DEFAULT_PAGE, ge=1, le=MAX_PAGE),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """One priority column of the board, same visibility as the full list"""
    query = visible_tasks(_task_query(db), current_user, priority=priority)
    return _list_page(query, page, limit)


@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    task_id: int = Depends(valid_task_id),
):
    task = _get_task_or_404(db, task_id)
    _check(decide(current_user, TaskAction.VIEW, task=task), current_user, TaskAction.VIEW, task_id)
    return task


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    _require_assignee(db, task_in.assigned_user)
    _check(
        decide(current_user, TaskAction.ASSIGN, assignee_id=task_in.assigned_user),
        current_user,
        TaskAction.ASSIGN,
        detail="You can only assign tasks to yourself",
    )

    try:
        db_task = Task(
            title=task_in.title,
            description=task_in.description,
            due_date=task_in.due_date,
            priority=task_in.priority,
            assigned_user_id=task_in.assigned_user,
            created_by_id=current_user.id,
        )
        db.add(db_task)
        db.commit()
        db.refresh(db_task)
    except SQLAlchemyError:
        # Unhandled-error handler in main.py logs it and answers 500
        db.rollback()
        raise

    logger.info(
        "Task %s created by user %s, assigned to user %s",
        db_task.id, current_user.id, db_task.assigned_user_id,
    )
    return _get_task_or_404(db, db_task.id)


@router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_update: TaskUpdate,  # partial update, unset fields are left alone
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    task_id: int = Depends(valid_task_id),
):
    task = _get_task_or_404(db, task_id)
    _check(decide(current_user, TaskAction.UPDATE, task=task), current_user, TaskAction.UPDATE, task_id)

    update_data = {
        key: value
        for key, value in task_update.model_dump(exclude_unset=True).items()
        if value is not None
    }
    requested = set(update_data)
    update_data = strip_reassignment(current_user, update_data)
    if requested - set(update_data):
        logger.info("Ignored assignedUser change on task %s from user %s", task_id, current_user.id)

    if "assigned_user" in update_data:
        _require_assignee(db, update_data["assigned_user"])
        task.assigned_user_id = update_data.pop("assigned_user")

    try:
        for key, value in update_data.items():
            setattr(task, key, value)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Task %s updated by user %s: %s", task_id, current_user.id, sorted(requested))
    return _get_task_or_404(db, task_id)


@router.patch("/{task_id}/status", response_model=TaskOut)
def update_task_status(
    status_update: TaskStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    task_id: int = Depends(valid_task_id),
):
    task = _get_task_or_404(db, task_id)
    _check(decide(current_user, TaskAction.UPDATE, task=task), current_user, TaskAction.UPDATE, task_id)

    old_status = task.status
    try:
        task.status = status_update.status
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Task %s status %s -> %s by user %s",
        task_id, old_status.value, status_update.status.value, current_user.id,
    )
    return _get_task_or_404(db, task_id)


@router.delete("/{task_id}")
def delete_task(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    task_id: int = Depends(valid_task_id),
):
    task = _get_task_or_404(db, task_id)
    # Stricter than update: being the assignee is not enough
    _check(decide(current_user, TaskAction.DELETE, task=task), current_user, TaskAction.DELETE, task_id)

    try:
        db.delete(task)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Task %s deleted by user %s", task_id, current_user.id)
    return {"message": "Task deleted successfully"}
