# src/taskdesk/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the remote store and the task list controller into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import TaskRepo
from ..core.state import AppState
from ..tasks.task_api import RemoteTaskStore
from ..tasks.task_controller import TaskListController

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, repo: TaskRepo | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Settings and repo are injectable so tests can run without a backend.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if repo is None:
        repo = RemoteTaskStore(
            settings.api_base_url,
            timeout_seconds=getattr(settings, "request_timeout_seconds", None),
        )

    return AppState(
        settings=settings,
        repo=repo,
        controller=TaskListController(repo),
    )


async def shutdown_state(state: AppState) -> None:
    """Let outstanding requests resolve, then close the HTTP client."""
    try:
        await state.drain()
    finally:
        await state.repo.aclose()
        logger.debug("Remote store client closed.")
