"""Task procedures: ownership checks, placement, and tag association.

Every query is scoped to ``ctx.user`` at the query boundary; a task owned by
someone else is reported as Forbidden, a missing one as NotFound.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, List

from sqlalchemy import case, func

from ..context import RequestContext
from ..database import storage_errors, transaction
from ..errors import Forbidden, NotFound, ValidationFailed
from ..models import Tag, Task, TaskStatus
from ..ordering import STATUS_RANK, next_order
from ..schemas.task import TaskCreate, TaskReorder, TaskUpdate

logger = logging.getLogger(__name__)

# Columns that may be left out of an update but never cleared
NON_NULLABLE_FIELDS = ("title", "completed", "status", "order", "priority")

_status_rank = case(
    *[(Task.status == status, rank) for status, rank in STATUS_RANK.items()],
    else_=len(STATUS_RANK),
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def get_owned_task(ctx: RequestContext, task_id: str) -> Task:
    task = ctx.db.get(Task, task_id)
    if task is None:
        raise NotFound("Task not found")
    if task.user_id != ctx.user_id:
        raise Forbidden("You are not allowed to modify this task")
    return task


def load_tags(ctx: RequestContext, tag_ids: Iterable[str]) -> List[Tag]:
    """Fetch tags by id, failing with NotFound if any id is unknown."""
    wanted = list(dict.fromkeys(tag_ids))
    if not wanted:
        return []
    tags = ctx.db.query(Tag).filter(Tag.id.in_(wanted)).all()
    missing = set(wanted) - {tag.id for tag in tags}
    if missing:
        raise NotFound(f"Tag not found: {', '.join(sorted(missing))}")
    by_id = {tag.id: tag for tag in tags}
    return [by_id[tag_id] for tag_id in wanted]


def list_tasks(ctx: RequestContext) -> List[Task]:
    """The caller's tasks, column by column, each column by ascending order."""
    with storage_errors(ctx.db, "Failed to load tasks"):
        return (
            ctx.db.query(Task)
            .filter(Task.user_id == ctx.user_id)
            .order_by(_status_rank, Task.order.asc(), Task.created_at.asc())
            .all()
        )


def get_task(ctx: RequestContext, task_id: str) -> Task:
    with storage_errors(ctx.db, "Failed to load task"):
        return get_owned_task(ctx, task_id)


def create_task(ctx: RequestContext, data: TaskCreate) -> Task:
    """Create a task at the end of the caller's TODO column."""
    db = ctx.db
    with transaction(db, "Failed to create task"):
        current_max = (
            db.query(func.max(Task.order))
            .filter(Task.user_id == ctx.user_id, Task.status == TaskStatus.TODO)
            .scalar()
        )
        task = Task(
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            priority=data.priority,
            category=data.category,
            completed=False,
            status=TaskStatus.TODO,
            order=next_order(current_max),
            user_id=ctx.user_id,
        )
        if data.tag_ids:
            task.tags = load_tags(ctx, data.tag_ids)
        db.add(task)

    db.refresh(task)
    logger.info("Created task %s for user %s at order %d", task.id, ctx.user_id, task.order)
    return task


def update_task(ctx: RequestContext, task_id: str, data: TaskUpdate) -> Task:
    """Apply the fields that were sent; ``tag_ids`` replaces the whole tag set.

    Status and order are written as given, without moving any other task.
    """
    changes = data.model_dump(exclude_unset=True)
    tag_ids = changes.pop("tag_ids", None)
    for field in NON_NULLABLE_FIELDS:
        if field in changes and changes[field] is None:
            raise ValidationFailed(f"{field}: cannot be null")

    db = ctx.db
    with transaction(db, "Failed to update task"):
        task = get_owned_task(ctx, task_id)
        for field, value in changes.items():
            setattr(task, field, value)
        if tag_ids is not None:
            task.tags = load_tags(ctx, tag_ids)
        task.updated_at = _now()

    db.refresh(task)
    logger.info("Updated task %s (%s)", task_id, ", ".join(sorted(changes)) or "tags")
    return task


def delete_task(ctx: RequestContext, task_id: str) -> None:
    """Delete a task; its tag links go with it."""
    with transaction(ctx.db, "Failed to delete task"):
        task = get_owned_task(ctx, task_id)
        ctx.db.delete(task)
    logger.info("Deleted task %s", task_id)


def reorder_task(ctx: RequestContext, task_id: str, data: TaskReorder) -> Task:
    """Insert a task at ``data.order`` in ``data.status``.

    Every other task of the caller in that column whose order is at or after
    the insertion point moves down by one, so the slot is free.
    """
    db = ctx.db
    now = _now()
    with transaction(db, "Failed to reorder task"):
        task = get_owned_task(ctx, task_id)
        shifted = (
            db.query(Task)
            .filter(
                Task.user_id == ctx.user_id,
                Task.status == data.status,
                Task.order >= data.order,
                Task.id != task_id,
            )
            .update({Task.order: Task.order + 1, Task.updated_at: now}, synchronize_session=False)
        )
        task.status = data.status
        task.order = data.order
        task.updated_at = now

    db.refresh(task)
    logger.info(
        "Moved task %s to %s at %d (%d peers shifted)",
        task_id, data.status.value, data.order, shifted,
    )
    return task
