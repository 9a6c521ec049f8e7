"""
Task endpoints for API v1.

These routes expose CRUD operations over the calling user's tasks plus
a paginated, filterable and sortable listing.  The caller is identified
by the optional ``X-User-Id`` header (see ``core.security``).  A task
that does not exist and a task owned by another user both produce the
same 404 response.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from taskforge_api.app.core.config import settings
from taskforge_api.app.core.security import get_owner_id
from taskforge_api.app.schemas.task import (
    PageResponse,
    TaskCreate,
    TaskPriority,
    TaskRead,
    TaskStatus,
    TaskUpdate,
)
from taskforge_api.app.services.task_service import TaskService
from taskforge_api.app.services.task_store import TaskStore

router = APIRouter()


def get_task_service() -> TaskService:
    """Dependency returning a service bound to the configured database."""
    return TaskService(TaskStore())


def _not_found(task_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Task not found or not owned by user: {task_id}",
    )


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    owner_id: int = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    """Create a task owned by the caller."""
    return await service.create_task(task_in, owner_id)


@router.get("", response_model=PageResponse[TaskRead])
async def list_tasks(
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = Query(None),
    page: int = Query(0, ge=0, description="0-indexed page number"),
    size: int = Query(settings.default_page_size, ge=0, le=settings.max_page_size),
    sort_by: str = Query("id", alias="sortBy"),
    sort_dir: str = Query("asc", alias="sortDir"),
    owner_id: int = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
) -> PageResponse[TaskRead]:
    """Return a page of the caller's tasks.

    ``status`` and ``priority`` filter independently.  ``sortBy``
    accepts ``id``, ``title``, ``status``, ``priority``, ``dueDate``,
    ``createdAt`` and ``updatedAt``; unknown values sort by ``id``.
    """
    return await service.list_tasks(
        owner_id,
        status=status_filter,
        priority=priority,
        page=page,
        size=size,
        sort_by=sort_by,
        sort_dir=sort_dir,
    )


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: int,
    owner_id: int = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    """Retrieve one of the caller's tasks.  Returns 404 if not accessible."""
    task = await service.get_task(task_id, owner_id)
    if task is None:
        raise _not_found(task_id)
    return task


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    task_in: TaskUpdate,
    owner_id: int = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    """Partially update one of the caller's tasks."""
    task = await service.update_task(task_id, owner_id, task_in)
    if task is None:
        raise _not_found(task_id)
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    owner_id: int = Depends(get_owner_id),
    service: TaskService = Depends(get_task_service),
) -> None:
    """Delete one of the caller's tasks."""
    deleted = await service.delete_task(task_id, owner_id)
    if not deleted:
        raise _not_found(task_id)
    return None
