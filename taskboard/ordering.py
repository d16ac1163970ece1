"""Placement rules for moving tasks on the board.

A drop target is either a column (one of the ``TaskStatus`` values, or its
string form) or the id of another task. The functions here never mutate the
tasks they are given; they return new lists built with ``model_copy`` so a
caller can keep the previous list as a snapshot.

Two ways of applying a placement exist:

* ``move_to`` only changes the moved task. It is used for the tentative state
  while a drag is hovering, where it must be idempotent, and may leave two
  tasks sharing an order value.
* ``insert_at`` also shifts every peer at or after the insertion point, which
  is what the server does for ``reorder``. Committed drops always go through
  it so client and server agree.
"""
from typing import Dict, List, NamedTuple, Optional, Sequence, TypeVar, Union

from pydantic import BaseModel

from .models import TaskStatus

COLUMNS = (TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.DONE)
STATUS_RANK = {status: rank for rank, status in enumerate(COLUMNS)}

TaskT = TypeVar("TaskT", bound=BaseModel)
DropTarget = Union[TaskStatus, str]


class Placement(NamedTuple):
    status: TaskStatus
    order: int


def as_column(target: Optional[DropTarget]) -> Optional[TaskStatus]:
    """Return the column a target names, or None when it is not a column."""
    if target is None:
        return None
    if isinstance(target, TaskStatus):
        return target
    try:
        return TaskStatus(target)
    except ValueError:
        return None


def next_order(current_max: Optional[int]) -> int:
    return 0 if current_max is None else current_max + 1


def find_task(tasks: Sequence[TaskT], task_id: Optional[str]) -> Optional[TaskT]:
    for task in tasks:
        if task.id == task_id:
            return task
    return None


def column_tail(tasks: Sequence[TaskT], status: TaskStatus, exclude_id: Optional[str] = None) -> int:
    """Order value that places a task at the end of ``status``'s column."""
    orders = [t.order for t in tasks if t.status == status and t.id != exclude_id]
    return next_order(max(orders) if orders else None)


def resolve_drop(
    tasks: Sequence[TaskT],
    active_id: str,
    target: Optional[DropTarget],
    origin_status: Optional[TaskStatus] = None,
) -> Optional[Placement]:
    """Compute where ``active_id`` lands when dropped on ``target``.

    Dropping on a column appends to that column. Dropping on a task from a
    different column takes that task's status and order. Dropping on a task
    from the same column is a no-op and returns None. ``origin_status`` is the
    column the gesture started from; it defaults to the task's current status.
    """
    active = find_task(tasks, active_id)
    if active is None or target is None:
        return None

    column = as_column(target)
    if column is not None:
        return Placement(column, column_tail(tasks, column, exclude_id=active.id))

    over = find_task(tasks, str(target))
    if over is None or over.id == active.id:
        return None
    if over.status == (origin_status or active.status):
        return None
    return Placement(over.status, over.order)


def move_to(tasks: Sequence[TaskT], task_id: str, placement: Placement) -> List[TaskT]:
    return [
        t.model_copy(update={"status": placement.status, "order": placement.order}) if t.id == task_id else t
        for t in tasks
    ]


def insert_at(tasks: Sequence[TaskT], task_id: str, placement: Placement) -> List[TaskT]:
    """Place ``task_id`` at ``placement`` and shift later peers down by one."""
    result = []
    for task in tasks:
        if task.id == task_id:
            task = task.model_copy(update={"status": placement.status, "order": placement.order})
        elif task.status == placement.status and task.order >= placement.order:
            task = task.model_copy(update={"order": task.order + 1})
        result.append(task)
    return result


def partition_columns(tasks: Sequence[TaskT]) -> Dict[TaskStatus, List[TaskT]]:
    """Group tasks by status, each column sorted by ascending order.

    The sort is stable, so tasks sharing an order keep their list order.
    """
    columns: Dict[TaskStatus, List[TaskT]] = {status: [] for status in COLUMNS}
    for task in tasks:
        columns[TaskStatus(task.status)].append(task)
    for column in columns.values():
        column.sort(key=lambda t: t.order)
    return columns


def sort_for_display(tasks: Sequence[TaskT]) -> List[TaskT]:
    """Flatten tasks into board order: column by column, then by order."""
    columns = partition_columns(tasks)
    return [task for status in COLUMNS for task in columns[status]]
