"""Tests for the dashboard controller."""

import threading
from dataclasses import replace

import pytest

from taskboard.dashboard import (
    ConfirmingDelete,
    Dashboard,
    Editing,
    Idle,
    InvalidTransition,
    TaskFilter,
    UnknownTask,
    Viewing,
)
from taskboard.dashboard.controller import LOAD_ERROR
from tests.fakes import FakeTaskClient, make_item


@pytest.fixture
def api():
    return FakeTaskClient(
        [
            make_item("1", "Buy milk"),
            make_item("2", "Walk dog", completed=True),
            make_item("3", "Write report", description="Q3 numbers"),
        ]
    )


@pytest.fixture
def alerts():
    return []


@pytest.fixture
def board(api, alerts):
    dashboard = Dashboard(api, alert=alerts.append)
    dashboard.load()
    yield dashboard
    dashboard.shutdown()


class TestLoad:
    def test_load(self, board, api):
        assert board.loading is False
        assert board.error == ""
        assert [task.id for task in board.tasks] == ["1", "2", "3"]

    def test_load_failure_sets_persistent_error(self, api, alerts):
        api.fail.add("get_tasks")
        dashboard = Dashboard(api, alert=alerts.append)

        assert dashboard.load() is False
        assert dashboard.error == LOAD_ERROR
        assert dashboard.loading is False
        assert alerts == []
        dashboard.shutdown()

    def test_reload_closes_view_of_removed_task(self, board, api):
        board.open_details("1")
        board.start_edit()
        api.tasks = [task for task in api.tasks if task.id != "1"]

        assert board.load() is True

        assert board.view == Idle()
        assert [task.id for task in board.tasks] == ["2", "3"]

    def test_reload_keeps_view_of_surviving_task(self, board, api):
        board.request_delete("3")
        api.tasks = [task for task in api.tasks if task.id != "1"]

        board.load()

        assert board.view == ConfirmingDelete("3")


class TestFilter:
    def test_completed_filter_is_local(self, board, api):
        calls_before = len(api.calls)

        board.set_filter(TaskFilter.COMPLETED)

        assert [task.id for task in board.visible_tasks()] == ["2"]
        assert len(api.calls) == calls_before

    def test_pending_filter(self, board):
        board.set_filter(TaskFilter.PENDING)
        assert [task.id for task in board.visible_tasks()] == ["1", "3"]

    def test_all_filter(self, board):
        assert len(board.visible_tasks()) == 3


class TestCreate:
    def test_blank_title_is_blocked(self, board, api):
        board.new_title = "   "
        assert board.create() is False
        assert api.count("create_task") == 0

    def test_blocked_while_in_flight(self, board, api):
        board.new_title = "Buy bread"
        board.creating = True
        assert board.create() is False
        assert api.count("create_task") == 0

    def test_create_refetches_and_clears_form(self, board, api):
        board.new_title = "Buy bread"
        board.new_description = "Sourdough"

        assert board.create() is True

        assert api.count("get_tasks") == 2
        assert board.tasks[0].title == "Buy bread"
        assert board.new_title == ""
        assert board.new_description == ""
        assert board.creating is False

    def test_create_failure_alerts_and_keeps_form(self, board, api, alerts):
        api.fail.add("create_task")
        board.new_title = "Buy bread"

        assert board.create() is False

        assert alerts == ["Failed to create task"]
        assert board.new_title == "Buy bread"
        assert board.creating is False
        assert api.count("get_tasks") == 1


class TestToggle:
    def test_toggle_is_optimistic(self, board, api):
        gate = threading.Event()
        api.gates["update_task"] = gate

        future = board.toggle_complete("1")

        # Local state flips before the server answers
        assert board.get_task("1").completed is True
        assert not future.done()

        gate.set()
        assert future.result(timeout=5) is True
        assert api.calls[-1] == ("update_task", "1", {"completed": True})

    def test_toggle_failure_rolls_back(self, board, api, alerts):
        api.fail.add("update_task")

        future = board.toggle_complete("2")

        assert future.result(timeout=5) is False
        assert board.get_task("2").completed is True
        assert alerts == ["Failed to update task"]

    def test_rapid_toggles_are_serialised(self, board, api):
        gate = threading.Event()
        api.gates["update_task"] = gate

        first = board.toggle_complete("1")
        api.update_started.wait(timeout=5)
        second = board.toggle_complete("1")

        assert board.get_task("1").completed is False
        gate.set()
        first.result(timeout=5)
        second.result(timeout=5)

        sent = [call[2] for call in api.calls if call[0] == "update_task"]
        assert sent == [{"completed": True}, {"completed": False}]
        assert api.max_in_flight == 1

    def test_toggle_unknown_task(self, board):
        with pytest.raises(UnknownTask):
            board.toggle_complete("missing")


class TestDetails:
    def test_view_edit_cancel_close(self, board):
        board.open_details("3")
        assert board.view == Viewing("3")

        board.start_edit()
        assert board.view == Editing("3", "Write report", "Q3 numbers")

        board.cancel_edit()
        assert board.view == Viewing("3")

        board.close_details()
        assert board.view == Idle()

    def test_edit_prefills_empty_description(self, board):
        board.open_details("1")
        board.start_edit()
        assert board.view == Editing("1", "Buy milk", "")

    def test_save_uses_server_row(self, board, api):
        def normalising_update(task_id, **fields):
            current = next(task for task in api.tasks if task.id == task_id)
            return replace(current, title=fields["title"].strip(), description=fields["description"])

        api.update_task = normalising_update
        board.open_details("1")
        board.start_edit()
        board.change_edit(title="  Buy oat milk  ", description="Brand X")

        assert board.save_edit() is True

        task = board.get_task("1")
        assert task.title == "Buy oat milk"
        assert task.description == "Brand X"
        assert board.view == Idle()

    def test_save_blank_title_is_blocked(self, board, api):
        board.open_details("1")
        board.start_edit()
        board.change_edit(title="  ")

        assert board.save_edit() is False
        assert api.count("update_task") == 0
        assert isinstance(board.view, Editing)

    def test_save_failure_stays_in_edit(self, board, api, alerts):
        api.fail.add("update_task")
        board.open_details("1")
        board.start_edit()
        board.change_edit(title="Buy oat milk")

        assert board.save_edit() is False

        assert alerts == ["Failed to update task"]
        assert board.get_task("1").title == "Buy milk"
        assert board.view == Editing("1", "Buy oat milk", "")

    def test_invalid_transitions(self, board):
        with pytest.raises(InvalidTransition):
            board.start_edit()
        with pytest.raises(InvalidTransition):
            board.save_edit()

        board.open_details("1")
        with pytest.raises(InvalidTransition):
            board.request_delete("2")
        with pytest.raises(InvalidTransition):
            board.open_details("2")

    def test_open_unknown_task(self, board):
        with pytest.raises(UnknownTask):
            board.open_details("missing")
        assert board.view == Idle()


class TestDelete:
    def test_confirm_delete(self, board, api):
        board.request_delete("2")
        assert board.view == ConfirmingDelete("2")

        assert board.confirm_delete() is True

        assert [task.id for task in board.tasks] == ["1", "3"]
        assert board.view == Idle()
        assert api.calls[-1] == ("delete_task", "2")

    def test_cancel_delete(self, board, api):
        board.request_delete("2")
        board.cancel_delete()

        assert board.view == Idle()
        assert len(board.tasks) == 3
        assert api.count("delete_task") == 0

    def test_delete_failure_keeps_dialog(self, board, api, alerts):
        api.fail.add("delete_task")
        board.request_delete("2")

        assert board.confirm_delete() is False

        assert alerts == ["Failed to delete task"]
        assert board.view == ConfirmingDelete("2")
        assert len(board.tasks) == 3
