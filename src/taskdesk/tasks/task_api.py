# src/taskdesk/tasks/task_api.py

"""
HTTP client for the remote task store.

Contract (JSON bodies, relative to the configured base URL):
- GET    /tasks         -> [Task]
- POST   /tasks         -> Task           body: {title, description, priority}
- PATCH  /tasks/{id}    -> Task           body: {status}
- DELETE /tasks/{id}    -> any 2xx, body ignored

Only list_tasks() checks the HTTP status. The mutating calls treat any
response that arrives as success; a body that is not JSON still fails
to decode and raises.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .task_models import Task, TaskDraft, parse_task_list

logger = logging.getLogger(__name__)


class TaskApiError(RuntimeError):
    """Application-level failure reported by the remote store (non-2xx)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def make_timeout(timeout_seconds: float | None) -> httpx.Timeout:
    """None means no timeout at all (requests wait for the server indefinitely)."""
    if timeout_seconds is None:
        return httpx.Timeout(None)
    return httpx.Timeout(timeout_seconds)


class RemoteTaskStore:
    """
    Thin pass-through client for the /tasks endpoints.

    The underlying httpx.AsyncClient is owned by this object unless one is
    injected (tests pass a client built on httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=make_timeout(timeout_seconds))
        logger.info("RemoteTaskStore ready base_url=%s", self._base_url)

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _task_url(self, task_id: Any) -> str:
        return self._url(f"/tasks/{task_id}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def list_tasks(self) -> list[Task]:
        resp = await self._client.get(self._url("/tasks"))
        if not resp.is_success:
            raise TaskApiError(
                f"Failed to fetch tasks: HTTP {resp.status_code} {resp.reason_phrase}".rstrip(),
                status_code=resp.status_code,
            )
        tasks = parse_task_list(resp.json())
        logger.debug("GET /tasks -> %d tasks", len(tasks))
        return tasks

    async def create_task(self, draft: TaskDraft) -> Task:
        resp = await self._client.post(self._url("/tasks"), json=draft.to_json())
        logger.debug("POST /tasks -> HTTP %s", resp.status_code)
        return Task.from_json(resp.json())

    async def update_status(self, task_id: Any, status: str) -> Task:
        resp = await self._client.patch(self._task_url(task_id), json={"status": str(status)})
        logger.debug("PATCH /tasks/%s -> HTTP %s", task_id, resp.status_code)
        return Task.from_json(resp.json())

    async def delete_task(self, task_id: Any) -> None:
        resp = await self._client.delete(self._task_url(task_id))
        logger.debug("DELETE /tasks/%s -> HTTP %s", task_id, resp.status_code)
