# app/schemas/task.py
from pydantic import BaseModel, ConfigDict, Field, validator
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from typing import Optional, List

from app.models.task import TaskStatus, TaskPriority
from app.schemas.user import UserBasic
from app.utils.validation import MAX_ID

# Request and response bodies use camelCase on the wire
camel_config = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    from_attributes=True,
)

def _naive_utc(value):
    # Stored columns are timezone-naive UTC
    if value is not None and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

def _not_blank(value, message):
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError(message)
    return value

class TaskCreate(BaseModel):
    # createdBy is never read from the client
    title: str = Field(..., max_length=100)
    description: str = Field(..., max_length=500)
    due_date: datetime
    priority: TaskPriority
    assigned_user: int = Field(..., le=MAX_ID)

    model_config = camel_config

    @validator("title")
    def title_required(cls, v):
        return _not_blank(v, "Title is required")

    @validator("description")
    def description_required(cls, v):
        return _not_blank(v, "Description is required")

    @validator("due_date")
    def due_date_utc(cls, v):
        return _naive_utc(v)

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    due_date: Optional[datetime] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    assigned_user: Optional[int] = Field(None, le=MAX_ID)

    model_config = camel_config

    @validator("title")
    def title_not_empty(cls, v):
        return _not_blank(v, "Title cannot be empty")

    @validator("description")
    def description_not_empty(cls, v):
        return _not_blank(v, "Description cannot be empty")

    @validator("due_date")
    def due_date_utc(cls, v):
        return _naive_utc(v)

class TaskStatusUpdate(BaseModel):
    status: TaskStatus

class TaskOut(BaseModel):
    id: int
    title: str
    description: str
    due_date: datetime
    priority: TaskPriority
    status: TaskStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    # Related users, embedded
    assigned_user: UserBasic = Field(validation_alias="assignee")
    created_by: UserBasic = Field(validation_alias="creator")

    model_config = camel_config

class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_tasks: int
    has_next: bool
    has_prev: bool

    model_config = camel_config

class TaskPage(BaseModel):
    tasks: List[TaskOut]
    pagination: Pagination

    model_config = camel_config
