# src/taskdesk/core/state.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass, field
from typing import Any

from ..core.ports import TaskRepo
from ..tasks.task_controller import TaskListController

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    # Settings object (real Settings or a SimpleNamespace in tests).
    settings: Any

    repo: TaskRepo
    controller: TaskListController

    # Outstanding remote calls started from user input. Held here so they are
    # not garbage collected mid-flight and so shutdown can drain them.
    in_flight: set[asyncio.Task[Any]] = field(default_factory=set)

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Run a controller coroutine in the background (must be called from the event loop)."""
        task = asyncio.get_running_loop().create_task(coro)
        self.in_flight.add(task)
        task.add_done_callback(self.in_flight.discard)
        return task

    async def drain(self) -> None:
        """Wait for every outstanding remote call to resolve."""
        while self.in_flight:
            pending = list(self.in_flight)
            results = await asyncio.gather(*pending, return_exceptions=True)
            for r in results:
                if isinstance(r, BaseException) and not isinstance(r, asyncio.CancelledError):
                    logger.error("Background task failed: %r", r)
