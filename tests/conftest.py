# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdesk.cli.bootstrap import create_initial_state
from taskdesk.core.state import AppState
from taskdesk.tasks.task_controller import TaskListController

from .fakes import FakeTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="Task Manager",
        log_level="INFO",
        api_base_url="http://backend.test/api",
        request_timeout_seconds=None,
        data_dir=tmp_path / "data",
    )


@pytest.fixture()
def repo() -> FakeTaskRepo:
    return FakeTaskRepo()


@pytest.fixture()
def controller(repo: FakeTaskRepo) -> TaskListController:
    return TaskListController(repo)


@pytest.fixture()
def state(settings: SimpleNamespace, repo: FakeTaskRepo) -> AppState:
    """AppState wired with the fake repo (no HTTP)."""
    return create_initial_state(settings=settings, repo=repo)
