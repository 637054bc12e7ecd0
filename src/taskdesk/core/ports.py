# src/taskdesk/core/ports.py

"""
Ports (interfaces) used by the core.

The controller depends on a Protocol instead of the concrete HTTP client.
This keeps the remote store swappable and makes testing easier.
"""

from __future__ import annotations

from typing import Any, Protocol

from ..tasks.task_models import Task, TaskDraft


class TaskRepo(Protocol):
    """Remote store of tasks (authoritative owner of Task state)."""

    async def list_tasks(self) -> list[Task]: ...
    async def create_task(self, draft: TaskDraft) -> Task: ...
    async def update_status(self, task_id: Any, status: str) -> Task: ...
    async def delete_task(self, task_id: Any) -> None: ...
    async def aclose(self) -> None: ...
