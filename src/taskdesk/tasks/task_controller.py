# src/taskdesk/tasks/task_controller.py

"""
Task list controller.

Owns the in-memory task collection, the display filter, the new-task draft
and the list-load flags. Every read/write goes to the remote store; the local
collection is only patched from server responses:

- refresh()       -> replace wholesale (load errors are surfaced via .error)
- submit_draft()  -> append the created task, reset the draft
- change_status() -> replace matching rows with the returned record
- delete()        -> drop matching rows

Mutation failures are written to the log only. The user-visible state does
not change and .error is not touched.

All methods run on the event loop thread. Patches are applied against the
current collection when each response arrives, so concurrent mutations land
in arrival order (last writer wins).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from ..core.ports import TaskRepo
from .task_models import LoadState, Task, TaskDraft, TaskFilter, filter_tasks

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], None]


class TaskListController:
    def __init__(self, repo: TaskRepo) -> None:
        self._repo = repo
        self._tasks: list[Task] = []
        self._filter: str = TaskFilter.ALL.value
        self._draft = TaskDraft()
        self._load_state = LoadState.IDLE
        self._error: str | None = None
        self._listeners: list[ChangeListener] = []
        self._started = False

    # ---- read-only view state ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def filter(self) -> str:
        return self._filter

    @property
    def draft(self) -> TaskDraft:
        return self._draft

    @property
    def load_state(self) -> LoadState:
        return self._load_state

    @property
    def loading(self) -> bool:
        return self._load_state is LoadState.LOADING

    @property
    def error(self) -> str | None:
        return self._error

    def visible_tasks(self) -> list[Task]:
        return filter_tasks(self._tasks, self._filter)

    # ---- change notification ----

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener called after every state change. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Task list listener failed.")

    # ---- user-input handlers (synchronous) ----

    def set_filter(self, task_filter: str) -> None:
        self._filter = TaskFilter(task_filter).value
        self._notify()

    def update_draft(
        self,
        *,
        title: str | None = None,
        description: str | None = None,
        priority: str | None = None,
    ) -> TaskDraft:
        draft = self._draft
        if title is not None:
            draft = replace(draft, title=title)
        if description is not None:
            draft = replace(draft, description=description)
        if priority is not None:
            draft = replace(draft, priority=priority)
        self._draft = draft
        self._notify()
        return draft

    # ---- remote operations ----

    async def start(self) -> None:
        """Initial full fetch. Runs once per controller; later calls are no-ops."""
        if self._started:
            return
        self._started = True
        await self.refresh()

    async def refresh(self) -> None:
        self._load_state = LoadState.LOADING
        self._error = None
        self._notify()
        ok = False
        try:
            tasks = await self._repo.list_tasks()
            self._tasks = list(tasks)
            ok = True
            logger.info("Loaded %d tasks.", len(self._tasks))
        except Exception as e:
            self._error = str(e) or e.__class__.__name__
            logger.exception("Error fetching tasks")
        finally:
            self._load_state = LoadState.LOADED if ok else LoadState.LOAD_FAILED
            self._notify()

    async def submit_draft(self) -> Task | None:
        draft = self._draft
        try:
            created = await self._repo.create_task(draft)
        except Exception:
            logger.exception("Error creating task")
            return None

        self._tasks.append(created)
        self._draft = TaskDraft()
        logger.info("Created task id=%s", created.id)
        self._notify()
        return created

    async def change_status(self, task_id: Any, status: str) -> Task | None:
        try:
            updated = await self._repo.update_status(task_id, status)
        except Exception:
            logger.exception("Error updating task id=%s", task_id)
            return None

        self._tasks = [updated if t.id == task_id else t for t in self._tasks]
        logger.info("Updated task id=%s status=%s", task_id, updated.status)
        self._notify()
        return updated

    async def delete(self, task_id: Any) -> bool:
        try:
            await self._repo.delete_task(task_id)
        except Exception:
            logger.exception("Error deleting task id=%s", task_id)
            return False

        self._tasks = [t for t in self._tasks if t.id != task_id]
        logger.info("Deleted task id=%s", task_id)
        self._notify()
        return True
