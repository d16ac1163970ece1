from typing import List

from fastapi import APIRouter, Depends, status

from ..context import RequestContext, get_context
from ..schemas.tag import SuccessResponse
from ..schemas.task import Task as TaskSchema, TaskCreate, TaskReorder, TaskUpdate
from ..services import tasks as task_service

router = APIRouter()


@router.get("/tasks", response_model=List[TaskSchema])
def list_tasks(ctx: RequestContext = Depends(get_context)):
    """List the caller's tasks with their tags, sorted by status then order."""
    return task_service.list_tasks(ctx)


@router.post("/tasks", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, ctx: RequestContext = Depends(get_context)):
    """Create a task at the end of the TODO column."""
    return task_service.create_task(ctx, task)


@router.get("/tasks/{task_id}", response_model=TaskSchema)
def get_task(task_id: str, ctx: RequestContext = Depends(get_context)):
    return task_service.get_task(ctx, task_id)


@router.put("/tasks/{task_id}", response_model=TaskSchema)
def update_task(task_id: str, task_update: TaskUpdate, ctx: RequestContext = Depends(get_context)):
    """Update a task. Only provided fields are changed; tagIds replaces the tag set."""
    return task_service.update_task(ctx, task_id, task_update)


@router.delete("/tasks/{task_id}", response_model=SuccessResponse)
def delete_task(task_id: str, ctx: RequestContext = Depends(get_context)):
    task_service.delete_task(ctx, task_id)
    return SuccessResponse()


@router.post("/tasks/{task_id}/reorder", response_model=TaskSchema)
def reorder_task(task_id: str, placement: TaskReorder, ctx: RequestContext = Depends(get_context)):
    """Insert a task at an exact position, shifting the peers after it."""
    return task_service.reorder_task(ctx, task_id, placement)
