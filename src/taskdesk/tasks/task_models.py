# src/taskdesk/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Task lifecycle status as stored by the remote store."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskFilter(StrEnum):
    """Client-side view predicate. Filters by status only."""

    ALL = "all"
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class LoadState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    LOAD_FAILED = "load-failed"


@dataclass(frozen=True, slots=True)
class Task:
    """
    Snapshot of one task as returned by the remote store.

    Notes:
    - id is opaque and only ever comes from the server (the reference backend
      uses decimal strings).
    - status/priority are kept exactly as the server sent them (None when
      absent); StrEnum members compare equal to the raw strings.
    - any JSON object the server returns becomes a Task; a record without a
      status matches no status filter.
    """

    id: Any
    title: str = ""
    description: str = ""
    priority: str | None = None
    status: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> Task:
        if not isinstance(data, dict):
            raise ValueError(f"Task payload must be a JSON object, got {type(data).__name__}")
        return cls(
            id=data.get("id"),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            priority=data.get("priority"),
            status=data.get("status"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass(frozen=True, slots=True)
class TaskDraft:
    """New-task form state. Not a Task until the server accepts it."""

    title: str = ""
    description: str = ""
    priority: str = TaskPriority.MEDIUM.value

    def to_json(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "priority": str(self.priority),
        }


def parse_task_list(data: Any) -> list[Task]:
    if not isinstance(data, list):
        raise ValueError(f"Task list payload must be a JSON array, got {type(data).__name__}")
    return [Task.from_json(item) for item in data]


def filter_tasks(tasks: list[Task], task_filter: str) -> list[Task]:
    """Pure status filter: 'all' keeps everything; priority is never consulted."""
    if task_filter == TaskFilter.ALL:
        return list(tasks)
    return [t for t in tasks if t.status == task_filter]

