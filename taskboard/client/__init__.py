from .api import TaskBoardClient
from .board import DragPhase, KanbanBoard
from .cache import OptimisticMutation, QueryCache
from .forms import TaskForm, normalize_due_date
from .notifications import Notification, NotificationCenter
from .tags import TagManager

__all__ = [
    "DragPhase",
    "KanbanBoard",
    "Notification",
    "NotificationCenter",
    "OptimisticMutation",
    "QueryCache",
    "TagManager",
    "TaskBoardClient",
    "TaskForm",
    "normalize_due_date",
]
