"""
Pydantic models for user tasks.

A task belongs to exactly one owner and carries a title, an optional
description, a workflow ``status``, a ``priority`` and an optional due
date.  The request schemas (``TaskCreate``/``TaskUpdate``) enforce the
field constraints before any service code runs; ``TaskRead`` is both
the stored record and the response body.  Paginated listings are
wrapped in ``PageResponse``.

All models serialise with camelCase keys (``ownerId``, ``dueDate``,
``totalElements``) and accept either camelCase or snake_case on input.
"""

from datetime import date, datetime
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


TITLE_MAX_LENGTH = 140
DESCRIPTION_MAX_LENGTH = 10000


class TaskStatus(str, Enum):
    """Workflow state of a task.  Any state may be set from any other."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


DEFAULT_STATUS = TaskStatus.TODO
DEFAULT_PRIORITY = TaskPriority.MEDIUM


class CamelModel(BaseModel):
    """Base model using camelCase aliases on the wire."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class TaskCreate(CamelModel):
    """Schema for creating a task.

    The status of a new task is always ``TODO``; it cannot be chosen
    at creation time.
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        description="Short title of the task (1-140 characters)",
    )
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    priority: Optional[TaskPriority] = Field(None, description="Defaults to MEDIUM")
    due_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v


class TaskUpdate(CamelModel):
    """Schema for updating an existing task.

    All fields are optional; only provided, non-null values are applied.
    An explicit empty ``description`` is a value and replaces the old one.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None


class TaskRead(CamelModel):
    """A stored task as returned by the API."""

    id: int
    owner_id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


T = TypeVar("T")


class PageResponse(CamelModel, Generic[T]):
    """One page of a listing together with pagination metadata.

    ``page_number`` is 0-indexed.  ``is_last`` is true for the final
    page, for any page past the end and for the only page of an empty
    result.
    """

    content: List[T]
    page_number: int
    page_size: int
    total_elements: int
    total_pages: int
    is_last: bool
