from .task import Priority, Task, TaskStatus, TaskTagLink
from .tag import Tag
from .user import User

# Export all models for easy importing
__all__ = ["Priority", "Tag", "Task", "TaskStatus", "TaskTagLink", "User"]
