"""
Service for managing a user's tasks.

Every operation takes the id of the requesting owner and only ever
touches that owner's tasks.  A task that does not exist and a task that
belongs to somebody else are reported identically: lookups and updates
return ``None`` and deletes return ``False``.  The API layer turns
either into a 404 without learning which case occurred.

Storage errors raised by ``TaskStore`` are not handled here.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from taskforge_api.app.schemas.task import (
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    PageResponse,
    TaskCreate,
    TaskPriority,
    TaskRead,
    TaskStatus,
    TaskUpdate,
)
from taskforge_api.app.services.task_store import DEFAULT_SORT, TaskStore


logger = logging.getLogger(__name__)


class TaskService:
    """Owner-scoped create, read, update, delete and listing of tasks."""

    def __init__(self, store: TaskStore) -> None:
        self.store = store

    async def create_task(self, data: TaskCreate, owner_id: int) -> TaskRead:
        """Create a task owned by ``owner_id``.

        New tasks always start as ``TODO``; the priority defaults to
        ``MEDIUM`` when the request leaves it out.
        """
        task = self.store.insert(
            owner_id=owner_id,
            title=data.title,
            description=data.description,
            status=DEFAULT_STATUS,
            priority=data.priority or DEFAULT_PRIORITY,
            due_date=data.due_date,
        )
        logger.info("User %s created task %s", owner_id, task.id)
        return task

    async def get_task(self, task_id: int, owner_id: int) -> Optional[TaskRead]:
        """Return the task if it exists and belongs to ``owner_id``."""
        task = self.store.find_by_id_and_owner(task_id, owner_id)
        if task is None:
            logger.debug("Task %s not found for user %s", task_id, owner_id)
        return task

    async def list_tasks(
        self,
        owner_id: int,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        page: int = 0,
        size: int = 10,
        sort_by: str = DEFAULT_SORT,
        sort_dir: str = "asc",
    ) -> PageResponse[TaskRead]:
        """Return one page of the owner's tasks.

        Parameters
        ----------
        owner_id : int
            Owner whose tasks are listed.
        status, priority : optional
            Independent filters; when both are given a task must match
            both.
        page : int
            0-indexed page number.  Pages past the end are empty.
        size : int
            Page size.  A size of 0 returns no content but still
            reports the total.
        sort_by, sort_dir : str
            Single sort key and ``asc``/``desc``.  Ties are ordered by
            id ascending.
        """
        result = self.store.find_by_owner(
            owner_id,
            status=status,
            priority=priority,
            sort_by=sort_by,
            sort_dir=sort_dir,
            page=page,
            size=size,
        )
        total_pages = math.ceil(result.total / size) if size > 0 else 1
        return PageResponse[TaskRead](
            content=result.content,
            page_number=page,
            page_size=size,
            total_elements=result.total,
            total_pages=total_pages,
            is_last=page + 1 >= total_pages,
        )

    async def update_task(
        self,
        task_id: int,
        owner_id: int,
        data: TaskUpdate,
    ) -> Optional[TaskRead]:
        """Apply a partial update to one of the owner's tasks.

        Only fields present in ``data`` with a non-null value replace
        the stored ones.  Returns ``None`` without writing anything if
        the task is not accessible, or if it disappeared before the
        write landed.
        """
        current = self.store.find_by_id_and_owner(task_id, owner_id)
        if current is None:
            logger.debug("Task %s not found for user %s", task_id, owner_id)
            return None
        changes = {
            name: value
            for name, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        updated = self.store.save(current.model_copy(update=changes))
        if updated is None:
            logger.info("Task %s vanished before update by user %s", task_id, owner_id)
            return None
        logger.info("User %s updated task %s: %s", owner_id, task_id, sorted(changes))
        return updated

    async def delete_task(self, task_id: int, owner_id: int) -> bool:
        """Delete one of the owner's tasks.

        Returns ``False`` and leaves storage untouched when the task is
        not accessible.
        """
        task = self.store.find_by_id_and_owner(task_id, owner_id)
        if task is None:
            logger.debug("Task %s not found for user %s", task_id, owner_id)
            return False
        deleted = self.store.delete_by_id(task.id)
        if deleted:
            logger.info("User %s deleted task %s", owner_id, task_id)
        return deleted
