from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4
import enum

class TaskStatus(str, enum.Enum):
    """Workflow state; also the identifier of a board column."""
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

class Priority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

class TaskTagLink(SQLModel, table=True):
    """Association row between a task and a tag."""
    __tablename__ = "task_tags"

    task_id: str = Field(foreign_key="tasks.id", primary_key=True)
    tag_id: str = Field(foreign_key="tags.id", primary_key=True)

class Task(SQLModel, table=True):
    """Task model for todo items placed on the board."""
    __tablename__ = "tasks"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Priority = Field(default=Priority.MEDIUM)
    category: Optional[str] = None
    completed: bool = Field(default=False)
    status: TaskStatus = Field(default=TaskStatus.TODO, index=True)
    # Position inside the status column, ascending
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str = Field(foreign_key="users.id", index=True)

    # Relationships
    user: Optional["User"] = Relationship(back_populates="tasks")
    tags: List["Tag"] = Relationship(back_populates="tasks", link_model=TaskTagLink)
