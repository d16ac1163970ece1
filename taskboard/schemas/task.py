from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..models import Priority, TaskStatus
from .base import CamelModel
from .tag import Tag


def _require_title(value: Optional[str]) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("Title is required")
    return value


class TaskBase(CamelModel):
    """Base task schema with common fields."""
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Priority = Priority.MEDIUM
    category: Optional[str] = None


class TaskCreate(TaskBase):
    """Schema for creating new tasks. Status and order are assigned by the server."""
    tag_ids: Optional[List[str]] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        return _require_title(value)


class TaskUpdate(CamelModel):
    """Schema for updating existing tasks. Only fields that are sent are changed."""
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
    due_date: Optional[datetime] = None
    status: Optional[TaskStatus] = None
    order: Optional[int] = None
    tag_ids: Optional[List[str]] = None
    priority: Optional[Priority] = None
    category: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> str:
        return _require_title(value)


class TaskReorder(CamelModel):
    """Schema for inserting a task at an exact position in a column."""
    status: TaskStatus
    order: int = Field(ge=0)


class Task(TaskBase):
    """Complete task schema with all fields."""
    id: str
    completed: bool = False
    status: TaskStatus = TaskStatus.TODO
    order: int = 0
    created_at: datetime
    updated_at: datetime
    user_id: str
    tags: List[Tag] = []
