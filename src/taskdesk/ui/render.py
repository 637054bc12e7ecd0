# src/taskdesk/ui/render.py

"""Plain-text rendering of the task list view."""

from __future__ import annotations

from ..tasks.task_controller import TaskListController
from ..tasks.task_models import Task, TaskFilter

STATUS_LABELS = {
    "pending": "Pending",
    "in-progress": "In Progress",
    "completed": "Completed",
}

FILTER_LABELS = {"all": "All", **STATUS_LABELS}

PRIORITY_LABELS = {
    "low": "Low",
    "medium": "Medium",
    "high": "High",
}


def render_task(task: Task) -> str:
    # Fields the server left out render blank.
    status = STATUS_LABELS.get(task.status or "", task.status or "")
    priority = task.priority or ""
    lines = [f"[{task.id}] {task.title}  ({priority})  <{status}>"]
    if task.description:
        lines.append(f"      {task.description}")

    stamps = []
    if task.created_at:
        stamps.append(f"created {task.created_at}")
    if task.updated_at:
        stamps.append(f"updated {task.updated_at}")
    if stamps:
        lines.append("      " + ", ".join(stamps))
    return "\n".join(lines)


def render_draft(controller: TaskListController) -> str:
    d = controller.draft
    priority = PRIORITY_LABELS.get(d.priority, d.priority)
    return (
        "Create New Task:\n"
        f"  title: {d.title or '-'}\n"
        f"  description: {d.description or '-'}\n"
        f"  priority: {priority}"
    )


def render_task_list(controller: TaskListController) -> str:
    """
    Render the task list section.

    Order of precedence mirrors the page layout:
    - the error banner is shown whenever an error is recorded (stale rows stay visible)
    - while loading, the loading message replaces the grid
    - an empty view gets a hint to change the filter unless the filter is 'all'
    """
    visible = controller.visible_tasks()
    label = FILTER_LABELS.get(controller.filter, controller.filter)

    lines = [f"Tasks ({len(visible)})  [filter: {label}]"]

    if controller.error:
        lines.append(f"!! {controller.error}")

    if controller.loading:
        lines.append("Loading tasks...")
    elif not visible:
        hint = "" if controller.filter == TaskFilter.ALL else " Try changing the filter."
        lines.append(f"No tasks found.{hint}")
    else:
        lines.extend(render_task(t) for t in visible)

    return "\n".join(lines)


def render_board(controller: TaskListController, *, app_name: str = "Task Manager") -> str:
    return "\n\n".join(
        [
            f"== {app_name} ==",
            render_draft(controller),
            render_task_list(controller),
        ]
    )
