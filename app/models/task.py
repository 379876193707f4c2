from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, Text
from sqlalchemy.orm import relationship
from app.database import Base
import enum
from datetime import datetime

class TaskStatus(str, enum.Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"

class TaskPriority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

def _enum_values(enum_cls):
    return [member.value for member in enum_cls]

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    due_date = Column(DateTime, nullable=False)

    # Task properties
    status = Column(Enum(TaskStatus, values_callable=_enum_values), default=TaskStatus.PENDING, nullable=False, index=True)
    priority = Column(Enum(TaskPriority, values_callable=_enum_values), default=TaskPriority.MEDIUM, nullable=False, index=True)

    # Ownership
    assigned_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # System dates
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    creator = relationship("User", foreign_keys=[created_by_id], back_populates="created_tasks")
    assignee = relationship("User", foreign_keys=[assigned_user_id], back_populates="assigned_tasks")
