# tests/test_task_controller.py

from __future__ import annotations

import asyncio

import httpx
import pytest

from taskdesk.tasks.task_api import RemoteTaskStore, TaskApiError
from taskdesk.tasks.task_controller import TaskListController
from taskdesk.tasks.task_models import LoadState, TaskDraft

from .fakes import FakeTaskRepo, make_task


async def _loaded(repo: FakeTaskRepo, tasks) -> TaskListController:
    repo.list_result = list(tasks)
    ctrl = TaskListController(repo)
    await ctrl.start()
    return ctrl


@pytest.mark.asyncio
async def test_start_fetches_once_and_replaces_tasks(repo: FakeTaskRepo) -> None:
    ctrl = await _loaded(repo, [make_task("1", "A"), make_task("2", "B")])
    await ctrl.start()

    assert [c.op for c in repo.calls] == ["list"]
    assert [t.id for t in ctrl.tasks] == ["1", "2"]
    assert ctrl.load_state is LoadState.LOADED
    assert ctrl.loading is False
    assert ctrl.error is None


@pytest.mark.asyncio
async def test_loading_flag_is_set_while_fetch_is_outstanding(repo: FakeTaskRepo) -> None:
    gate = asyncio.Event()
    repo.gates["list"] = gate
    ctrl = TaskListController(repo)

    runner = asyncio.create_task(ctrl.start())
    await asyncio.sleep(0)
    assert ctrl.loading is True
    assert ctrl.load_state is LoadState.LOADING

    gate.set()
    await runner
    assert ctrl.loading is False


def test_visible_tasks_filters_by_status_only(controller: TaskListController) -> None:
    tasks = [
        make_task("1", status="pending", priority="high"),
        make_task("2", status="completed", priority="low"),
        make_task("3", status="in-progress", priority="high"),
        make_task("4", status="completed", priority="medium"),
    ]
    controller._tasks = list(tasks)

    assert controller.visible_tasks() == tasks

    for f in ("pending", "in-progress", "completed"):
        controller.set_filter(f)
        assert controller.visible_tasks() == [t for t in tasks if t.status == f]

    # Two collections differing only in priority produce the same ids.
    controller._tasks = [make_task(t.id, status=t.status, priority="low") for t in tasks]
    controller.set_filter("completed")
    assert [t.id for t in controller.visible_tasks()] == ["2", "4"]


def test_visible_tasks_is_pure(controller: TaskListController) -> None:
    controller._tasks = [make_task("1", status="pending"), make_task("2", status="completed")]
    controller.set_filter("pending")
    before = controller.tasks

    first = controller.visible_tasks()
    second = controller.visible_tasks()

    assert first == second
    assert controller.tasks == before


def test_set_filter_rejects_unknown_value(controller: TaskListController) -> None:
    with pytest.raises(ValueError):
        controller.set_filter("high")
    assert controller.filter == "all"


@pytest.mark.asyncio
async def test_filter_scenario_single_pending_task(repo: FakeTaskRepo) -> None:
    ctrl = await _loaded(repo, [make_task(1, "A", status="pending", priority="low")])

    ctrl.set_filter("completed")
    assert ctrl.visible_tasks() == []

    ctrl.set_filter("all")
    assert [t.title for t in ctrl.visible_tasks()] == ["A"]


@pytest.mark.asyncio
async def test_fetch_network_error_sets_error_and_keeps_tasks(repo: FakeTaskRepo) -> None:
    repo.list_error = httpx.ConnectError("Connection refused")
    ctrl = TaskListController(repo)

    await ctrl.start()

    assert ctrl.loading is False
    assert ctrl.load_state is LoadState.LOAD_FAILED
    assert ctrl.error == "Connection refused"
    assert ctrl.tasks == []


@pytest.mark.asyncio
async def test_refresh_failure_keeps_previous_tasks_and_next_success_clears_error(
    repo: FakeTaskRepo,
) -> None:
    ctrl = await _loaded(repo, [make_task("1", "A")])

    repo.list_error = TaskApiError("Failed to fetch tasks: HTTP 500 Internal Server Error", status_code=500)
    await ctrl.refresh()
    assert ctrl.error == "Failed to fetch tasks: HTTP 500 Internal Server Error"
    assert [t.id for t in ctrl.tasks] == ["1"]

    repo.list_error = None
    repo.list_result = [make_task("7", "Z")]
    await ctrl.refresh()
    assert ctrl.error is None
    assert [t.id for t in ctrl.tasks] == ["7"]


@pytest.mark.asyncio
async def test_submit_draft_appends_server_task_and_resets_draft(repo: FakeTaskRepo) -> None:
    ctrl = await _loaded(repo, [make_task("1", "A")])
    ctrl.update_draft(title="Write report", priority="high")

    created = make_task("2", "Write report", priority="high")
    repo.create_result = created
    result = await ctrl.submit_draft()

    assert result == created
    assert ctrl.tasks == [make_task("1", "A"), created]
    assert ctrl.draft == TaskDraft(title="", description="", priority="medium")

    sent = repo.calls[-1]
    assert sent.op == "create"
    assert sent.args[0] == TaskDraft(title="Write report", description="", priority="high")


@pytest.mark.asyncio
async def test_submit_draft_does_not_validate_title(repo: FakeTaskRepo) -> None:
    ctrl = await _loaded(repo, [])
    repo.create_result = make_task("9", "")

    await ctrl.submit_draft()

    assert repo.calls[-1].args[0] == TaskDraft()
    assert [t.id for t in ctrl.tasks] == ["9"]


@pytest.mark.asyncio
async def test_change_status_replaces_whole_record_in_place(repo: FakeTaskRepo) -> None:
    ctrl = await _loaded(
        repo,
        [make_task("1", "A"), make_task("2", "B", description="old"), make_task("3", "C")],
    )
    server_record = make_task("2", "B renamed", status="completed", priority="high", description="new")
    repo.update_results["2"] = server_record

    await ctrl.change_status("2", "completed")

    assert ctrl.tasks == [make_task("1", "A"), server_record, make_task("3", "C")]
    assert repo.calls[-1].args == ("2", "completed")


@pytest.mark.asyncio
async def test_change_status_for_unknown_id_is_silent_noop(repo: FakeTaskRepo) -> None:
    ctrl = await _loaded(repo, [make_task("1", "A")])
    repo.update_results["42"] = make_task("42", "ghost", status="completed")

    await ctrl.change_status("42", "completed")

    assert ctrl.tasks == [make_task("1", "A")]
    assert ctrl.error is None


@pytest.mark.asyncio
async def test_delete_removes_matching_id_and_keeps_order(repo: FakeTaskRepo) -> None:
    ctrl = await _loaded(repo, [make_task("1"), make_task("2"), make_task("3")])

    assert await ctrl.delete("2") is True

    assert [t.id for t in ctrl.tasks] == ["1", "3"]


@pytest.mark.asyncio
@pytest.mark.parametrize("op", ["create", "update", "delete"])
async def test_failed_mutation_leaves_state_untouched(
    repo: FakeTaskRepo, op: str, caplog: pytest.LogCaptureFixture
) -> None:
    ctrl = await _loaded(repo, [make_task("1", "A"), make_task("2", "B")])
    ctrl.update_draft(title="draft", description="d", priority="low")
    before_tasks = ctrl.tasks
    before_draft = ctrl.draft

    err = httpx.ConnectError("boom")
    repo.create_error = err
    repo.update_error = err
    repo.delete_error = err

    with caplog.at_level("ERROR", logger="taskdesk.tasks.task_controller"):
        if op == "create":
            assert await ctrl.submit_draft() is None
        elif op == "update":
            assert await ctrl.change_status("1", "completed") is None
        else:
            assert await ctrl.delete("1") is False

    assert ctrl.tasks == before_tasks
    assert ctrl.draft == before_draft
    assert ctrl.error is None
    assert ctrl.load_state is LoadState.LOADED
    assert any(r.exc_info for r in caplog.records)


@pytest.mark.asyncio
async def test_concurrent_updates_apply_in_arrival_order(repo: FakeTaskRepo) -> None:
    ctrl = await _loaded(repo, [make_task("1", status="pending"), make_task("2", status="pending")])
    gate1, gate2 = asyncio.Event(), asyncio.Event()
    repo.gates["update:1"] = gate1
    repo.gates["update:2"] = gate2
    repo.update_results["1"] = make_task("1", status="completed")
    repo.update_results["2"] = make_task("2", status="in-progress")

    t1 = asyncio.create_task(ctrl.change_status("1", "completed"))
    t2 = asyncio.create_task(ctrl.change_status("2", "in-progress"))
    await asyncio.sleep(0)

    # Second response arrives first; the first one must not clobber it.
    gate2.set()
    await t2
    assert [t.status for t in ctrl.tasks] == ["pending", "in-progress"]

    gate1.set()
    await t1
    assert [t.status for t in ctrl.tasks] == ["completed", "in-progress"]


@pytest.mark.asyncio
async def test_late_update_after_delete_does_not_resurrect_row(repo: FakeTaskRepo) -> None:
    ctrl = await _loaded(repo, [make_task("1"), make_task("2")])
    gate = asyncio.Event()
    repo.gates["update:1"] = gate
    repo.update_results["1"] = make_task("1", status="completed")

    pending_update = asyncio.create_task(ctrl.change_status("1", "completed"))
    await asyncio.sleep(0)
    await ctrl.delete("1")

    gate.set()
    await pending_update
    assert [t.id for t in ctrl.tasks] == ["2"]


@pytest.mark.asyncio
async def test_listeners_are_notified_and_can_unsubscribe(repo: FakeTaskRepo) -> None:
    ctrl = TaskListController(repo)
    seen: list[bool] = []
    unsubscribe = ctrl.subscribe(lambda: seen.append(ctrl.loading))

    await ctrl.start()
    assert seen == [True, False]

    unsubscribe()
    ctrl.set_filter("pending")
    assert seen == [True, False]


@pytest.mark.asyncio
async def test_broken_listener_does_not_break_controller(repo: FakeTaskRepo) -> None:
    ctrl = TaskListController(repo)
    repo.list_result = [make_task("1")]

    def bad() -> None:
        raise RuntimeError("render failed")

    ctrl.subscribe(bad)
    await ctrl.start()

    assert [t.id for t in ctrl.tasks] == ["1"]


@pytest.mark.asyncio
async def test_error_body_from_create_is_not_shown_under_status_filters() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=[])
        return httpx.Response(400, json={"error": "title is required"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    ctrl = TaskListController(RemoteTaskStore("http://backend.test/api", client=client))

    await ctrl.start()
    await ctrl.submit_draft()

    # The error body is appended as-is, without an invented status.
    assert len(ctrl.tasks) == 1
    assert ctrl.tasks[0].status is None
    ctrl.set_filter("pending")
    assert ctrl.visible_tasks() == []
    ctrl.set_filter("all")
    assert len(ctrl.visible_tasks()) == 1
    await client.aclose()
