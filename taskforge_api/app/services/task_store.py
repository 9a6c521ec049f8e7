"""
SQLite storage for tasks.

``TaskStore`` is the persistence layer behind ``TaskService``.  It is
deliberately unaware of ownership rules: it offers lookups by id, by
id and owner, a filtered/sorted/paginated listing by owner, and
insert/save/delete primitives.  The service decides which of them to
call and how to interpret a missing row.

Filtering, ordering and pagination all happen in SQL so the cost of a
listing does not depend on how many tasks an owner has.  All queries
use parameterized statements; the only interpolated fragments are
sort expressions taken from a fixed whitelist.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional, Type

from taskforge_api.app.core.db import fits_integer, get_connection
from taskforge_api.app.schemas.task import (
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    TaskPriority,
    TaskRead,
    TaskStatus,
)


def _enum_rank(column: str, enum_cls: Type[Enum]) -> str:
    """SQL expression ordering an enum column by declaration order."""
    cases = " ".join(f"WHEN '{member.value}' THEN {rank}" for rank, member in enumerate(enum_cls))
    return f"CASE {column} {cases} END"


# Accepted sort keys, in both the wire (camelCase) and column spelling.
SORT_EXPRESSIONS = {
    "id": "id",
    "title": "title",
    "status": _enum_rank("status", TaskStatus),
    "priority": _enum_rank("priority", TaskPriority),
    "dueDate": "due_date",
    "due_date": "due_date",
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
}
DEFAULT_SORT = "id"


@dataclass
class TaskPage:
    """A slice of an owner's tasks plus the total number of matches."""

    content: List[TaskRead] = field(default_factory=list)
    page: int = 0
    size: int = 0
    total: int = 0


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class TaskStore:
    """Data access object for the ``tasks`` table."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        return get_connection(self.db_path)

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> TaskRead:
        return TaskRead(
            id=row["id"],
            owner_id=row["owner_id"],
            title=row["title"],
            description=row["description"],
            status=row["status"],
            priority=row["priority"],
            due_date=row["due_date"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def order_by_clause(sort_by: Optional[str], sort_dir: Optional[str]) -> str:
        """Build the ORDER BY clause for a single sort key.

        Unknown keys fall back to ``id`` and unknown directions to
        ``ASC``.  Every ordering ends with ``id ASC`` so rows with equal
        sort values always come back in the same order.
        """
        expression = SORT_EXPRESSIONS.get(sort_by or DEFAULT_SORT, SORT_EXPRESSIONS[DEFAULT_SORT])
        direction = "DESC" if (sort_dir or "").lower() == "desc" else "ASC"
        if expression == "id":
            return f"ORDER BY id {direction}"
        return f"ORDER BY {expression} {direction}, id ASC"

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def find_by_id(self, task_id: int) -> Optional[TaskRead]:
        """Return the task with ``task_id`` regardless of its owner."""
        if not fits_integer(task_id):
            return None
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def find_by_id_and_owner(self, task_id: int, owner_id: int) -> Optional[TaskRead]:
        # Ids outside the INTEGER range can never have been stored.
        if not fits_integer(task_id, owner_id):
            return None
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT * FROM tasks WHERE id = ? AND owner_id = ?",
                (task_id, owner_id),
            ).fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def find_by_owner(
        self,
        owner_id: int,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        sort_by: str = DEFAULT_SORT,
        sort_dir: str = "asc",
        page: int = 0,
        size: int = 10,
    ) -> TaskPage:
        """Return one page of an owner's tasks.

        ``status`` and ``priority`` each narrow the result when given;
        together they are combined with AND.  ``page`` is 0-indexed and
        ``size`` may be 0, in which case only the total is computed.
        The row query is skipped when the requested page starts at or
        past the last match, so arbitrarily large page numbers are safe.
        """
        if not fits_integer(owner_id):
            return TaskPage(page=page, size=size, total=0)
        where_clauses = ["owner_id = ?"]
        params: list = [owner_id]
        if status is not None:
            where_clauses.append("status = ?")
            params.append(TaskStatus(status).value)
        if priority is not None:
            where_clauses.append("priority = ?")
            params.append(TaskPriority(priority).value)
        where = " WHERE " + " AND ".join(where_clauses)

        conn = self._connect()
        try:
            total = conn.execute(
                "SELECT COUNT(*) AS total FROM tasks" + where, tuple(params)
            ).fetchone()["total"]
            offset = page * size
            if size == 0 or offset >= total:
                return TaskPage(page=page, size=size, total=total)
            query = (
                "SELECT * FROM tasks"
                + where
                + " "
                + self.order_by_clause(sort_by, sort_dir)
                + " LIMIT ? OFFSET ?"
            )
            rows = conn.execute(query, tuple(params + [min(size, total), offset])).fetchall()
            return TaskPage(
                content=[self._row_to_task(row) for row in rows],
                page=page,
                size=size,
                total=total,
            )
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def insert(
        self,
        *,
        owner_id: int,
        title: str,
        description: Optional[str] = None,
        status: TaskStatus = DEFAULT_STATUS,
        priority: TaskPriority = DEFAULT_PRIORITY,
        due_date: Optional[date] = None,
    ) -> TaskRead:
        """Insert a new task, assigning its id and timestamps."""
        now = _now()
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO tasks (owner_id, title, description, status, priority, due_date, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    owner_id,
                    title,
                    description,
                    TaskStatus(status).value,
                    TaskPriority(priority).value,
                    due_date.isoformat() if due_date else None,
                    now,
                    now,
                ),
            )
            task_id = cursor.lastrowid
            conn.commit()
            row = cursor.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
            return self._row_to_task(row)
        finally:
            conn.close()

    def save(self, task: TaskRead) -> Optional[TaskRead]:
        """Write every mutable field of ``task`` back to its row.

        The row is matched on both ``id`` and ``owner_id``.  Returns the
        stored record, or ``None`` if the row no longer exists (for
        example because it was deleted concurrently); a missing row is
        never recreated.
        """
        if not fits_integer(task.id, task.owner_id):
            return None
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE tasks
                SET title = ?, description = ?, status = ?, priority = ?, due_date = ?, updated_at = ?
                WHERE id = ? AND owner_id = ?
                """,
                (
                    task.title,
                    task.description,
                    TaskStatus(task.status).value,
                    TaskPriority(task.priority).value,
                    task.due_date.isoformat() if task.due_date else None,
                    _now(),
                    task.id,
                    task.owner_id,
                ),
            )
            affected = cursor.rowcount
            conn.commit()
            if not affected:
                return None
            row = cursor.execute("SELECT * FROM tasks WHERE id = ?", (task.id,)).fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def delete_by_id(self, task_id: int) -> bool:
        """Delete a task.  Returns ``True`` if a row was removed."""
        if not fits_integer(task_id):
            return False
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            affected = cursor.rowcount
            conn.commit()
            return bool(affected)
        finally:
            conn.close()

