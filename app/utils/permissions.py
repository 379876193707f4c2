# app/utils/permissions.py
"""
Task visibility and permission rules.

Every ownership/role check the task routes perform goes through `decide`,
which returns a `Verdict` instead of a bare boolean so the reason for a
denial is kept. Two roles exist: admins can do anything, everyone else is
limited by their relation to the task (assigned user or creator).

    action      admin   assigned user   creator   anyone else
    VIEW        allow   allow           deny      deny
    UPDATE      allow   allow           allow     deny
    DELETE      allow   deny            allow     deny

ASSIGN (create a task for someone) and REASSIGN (change assignedUser on an
existing task) depend on role only: non-admins may assign to themselves and
may never reassign.
"""

import enum
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Query

from app.models.task import Task, TaskPriority, TaskStatus
from app.models.user import User, UserRole
from app.utils.validation import parse_id


class TaskAction(str, enum.Enum):
    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"
    ASSIGN = "assign"
    REASSIGN = "reassign"


class Verdict(str, enum.Enum):
    ALLOW = "allow"
    DENY_NOT_OWNER = "deny_not_owner"
    DENY_ROLE_INSUFFICIENT = "deny_role_insufficient"

    @property
    def allowed(self) -> bool:
        return self is Verdict.ALLOW


# Which task relations grant each ownership-based action to a non-admin
_OWNER_RULES = {
    TaskAction.VIEW: {"assignee"},
    TaskAction.UPDATE: {"assignee", "creator"},
    TaskAction.DELETE: {"creator"},
}


def is_admin(user: User) -> bool:
    return user.role == UserRole.ADMIN


def _relations(user: User, task: Task) -> set:
    relations = set()
    if task.assigned_user_id == user.id:
        relations.add("assignee")
    if task.created_by_id == user.id:
        relations.add("creator")
    return relations


def decide(
    user: User,
    action: TaskAction,
    task: Optional[Task] = None,
    assignee_id: Optional[int] = None,
) -> Verdict:
    """Decide whether `user` may perform `action`.

    VIEW/UPDATE/DELETE need the target `task`. ASSIGN needs the
    `assignee_id` the task would be given. REASSIGN needs neither.
    """
    if is_admin(user):
        return Verdict.ALLOW

    if action == TaskAction.ASSIGN:
        if assignee_id is None:
            raise ValueError("ASSIGN decisions need an assignee_id")
        return Verdict.ALLOW if assignee_id == user.id else Verdict.DENY_ROLE_INSUFFICIENT

    if action == TaskAction.REASSIGN:
        return Verdict.DENY_ROLE_INSUFFICIENT

    if task is None:
        raise ValueError(f"{action.value} decisions need a task")

    if _relations(user, task) & _OWNER_RULES[action]:
        return Verdict.ALLOW
    return Verdict.DENY_NOT_OWNER


def ensure_allowed(verdict: Verdict, detail: str = "Access denied") -> None:
    """Turn a deny verdict into a 403"""
    if not verdict.allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def visible_tasks(
    query: Query,
    user: User,
    status_filter: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    assigned_user: Optional[str] = None,
) -> Query:
    """Narrow a Task query to what `user` may list.

    Non-admins only ever see tasks assigned to them; an `assigned_user`
    filter from a non-admin is ignored rather than rejected, so it is only
    parsed (400 if malformed) on the admin branch.
    """
    if is_admin(user):
        if assigned_user is not None:
            query = query.filter(Task.assigned_user_id == parse_id(assigned_user, "user"))
    else:
        query = query.filter(Task.assigned_user_id == user.id)

    if status_filter is not None:
        query = query.filter(Task.status == status_filter)
    if priority is not None:
        query = query.filter(Task.priority == priority)
    return query


def strip_reassignment(user: User, update_data: dict) -> dict:
    """Drop an assigned_user change the user is not allowed to make.

    Non-admin reassignment is silently ignored; the rest of the update
    still applies.
    """
    if "assigned_user" in update_data and not decide(user, TaskAction.REASSIGN).allowed:
        update_data = {k: v for k, v in update_data.items() if k != "assigned_user"}
    return update_data
