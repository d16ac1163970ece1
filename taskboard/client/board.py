"""Kanban board model: columns, drag gestures, and task actions.

The board shows the cached task list. While a drag is in progress it shows a
working copy instead, which ``drag_over`` rewrites as the pointer moves. A
drop is committed through ``reorder`` as an optimistic mutation; if the
server rejects it the cached list goes back to its snapshot and the error is
posted to ``notifications``.
"""
import enum
import logging
from typing import Dict, List, Optional

from ..errors import ProcedureError
from ..models import TaskStatus
from ..ordering import DropTarget, Placement, find_task, insert_at, move_to, partition_columns, resolve_drop
from ..schemas.task import Task
from .api import TaskBoardClient
from .cache import OptimisticMutation, QueryCache
from .forms import TaskForm
from .notifications import NotificationCenter

logger = logging.getLogger(__name__)


class DragPhase(str, enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTING = "committing"


class KanbanBoard:
    def __init__(self, client: TaskBoardClient, notifications: Optional[NotificationCenter] = None):
        self.client = client
        self.notifications = notifications or NotificationCenter()
        self.cache: QueryCache[Task] = QueryCache(client.list_tasks)
        self.phase = DragPhase.IDLE
        self.active_id: Optional[str] = None
        self._origin: Optional[Task] = None
        self._working: Optional[List[Task]] = None

    async def load(self) -> List[Task]:
        try:
            return await self.cache.fetch()
        except ProcedureError as exc:
            self.notifications.error(exc.message)
            raise

    @property
    def tasks(self) -> List[Task]:
        if self._working is not None:
            return list(self._working)
        return self.cache.get_data() or []

    @property
    def active_task(self) -> Optional[Task]:
        return find_task(self.tasks, self.active_id)

    def columns(self) -> Dict[TaskStatus, List[Task]]:
        return partition_columns(self.tasks)

    # drag and drop

    def drag_start(self, task_id: str) -> None:
        if self.phase is not DragPhase.IDLE:
            raise RuntimeError(f"Cannot start a drag while {self.phase.value}")
        tasks = self.tasks
        origin = find_task(tasks, task_id)
        if origin is None:
            raise ValueError(f"Unknown task: {task_id}")
        self.phase = DragPhase.DRAGGING
        self.active_id = task_id
        self._origin = origin
        self._working = tasks

    def drag_over(self, target: Optional[DropTarget]) -> Optional[Placement]:
        """Move the dragged task in the working copy only."""
        if self.phase is not DragPhase.DRAGGING:
            return None
        placement = resolve_drop(self._working, self.active_id, target)
        if placement is not None:
            self._working = move_to(self._working, self.active_id, placement)
        return placement

    def drag_cancel(self) -> None:
        if self.phase is DragPhase.DRAGGING:
            logger.debug("Drag of %s cancelled", self.active_id)
            self._reset()

    async def drag_end(self, target: Optional[DropTarget]) -> Optional[Task]:
        """Commit the drop, or discard the gesture when there is nothing to do.

        Returns the task as saved by the server, or None when no mutation was
        made or it failed.
        """
        if self.phase is not DragPhase.DRAGGING:
            return None

        task_id = self.active_id
        placement = resolve_drop(self._working, task_id, target, origin_status=self._origin.status)
        if placement is None:
            logger.debug("Drop of %s on %r changes nothing", task_id, target)
            self._reset()
            return None

        self.phase = DragPhase.COMMITTING
        self._working = None
        mutation: OptimisticMutation[Task] = OptimisticMutation(self.cache)
        try:
            return await mutation.run(
                lambda tasks: insert_at(tasks, task_id, placement),
                lambda: self.client.reorder_task(task_id, placement.status, placement.order),
            )
        except ProcedureError as exc:
            self.notifications.error(exc.message)
            return None
        finally:
            self._reset()

    def _reset(self) -> None:
        self.phase = DragPhase.IDLE
        self.active_id = None
        self._origin = None
        self._working = None

    # task actions

    async def create_task(self, form: TaskForm) -> Optional[Task]:
        try:
            task = await self.client.create_task(form.to_create())
            await self.cache.invalidate()
        except ProcedureError as exc:
            self.notifications.error(exc.message)
            return None
        self.notifications.success("Task created")
        return task

    async def save_task(self, task_id: str, form: TaskForm) -> Optional[Task]:
        try:
            task = await self.client.update_task(task_id, form.to_update())
            await self.cache.invalidate()
        except ProcedureError as exc:
            self.notifications.error(exc.message)
            return None
        self.notifications.success("Task updated")
        return task

    async def delete_task(self, task_id: str) -> bool:
        try:
            await self.client.delete_task(task_id)
            await self.cache.invalidate()
        except ProcedureError as exc:
            self.notifications.error(exc.message)
            return False
        self.notifications.success("Task deleted")
        return True
