"""Terminal front end for the task dashboard.

Row numbers refer to the currently filtered list, starting at 1.
"""

import argparse
import logging
import os
import threading
from collections.abc import Callable

from taskboard.client import API_URL, TaskClient, TaskItem
from taskboard.dashboard.controller import Dashboard
from taskboard.dashboard.state import (
    ConfirmingDelete,
    Editing,
    InvalidTransition,
    TaskFilter,
    UnknownTask,
    Viewing,
)


CLEAR_MARK = "-"

HELP = """Commands:
  add                    Add a task (prompts for title and description)
  toggle <n>             Mark task n done / not done
  view <n>               Open task n
  edit                   Edit the open task (prompts for new values; Enter keeps a value, - clears the description)
  save                   Save the edit
  back                   Leave edit mode without saving
  close                  Close the open task
  delete <n>             Delete task n (asks for confirmation)
  yes / no               Confirm or cancel a pending delete
  filter <all|pending|completed>
  refresh                Reload the list from the server
  help                   Show this help
  exit                   Quit"""


class DashboardCLI:
    """Read-eval-render loop over a :class:`Dashboard`.

    ``input_fn`` and ``print_fn`` default to the builtins and exist so the
    loop can be driven from tests.
    """

    def __init__(
        self,
        client: TaskClient,
        input_fn: Callable[[str], str] = input,
        print_fn: Callable[..., None] = print,
    ):
        self._input = input_fn
        self._print = print_fn
        self._alerts: list[str] = []
        self._alerts_lock = threading.Lock()
        self.dashboard = Dashboard(client, alert=self._queue_alert)

    def _queue_alert(self, message: str) -> None:
        # Called from worker threads too; shown before the next prompt
        with self._alerts_lock:
            self._alerts.append(message)

    def _flush_alerts(self) -> None:
        with self._alerts_lock:
            pending, self._alerts = self._alerts, []
        for message in pending:
            self._print(f"\n! {message}")
            self._input("Press Enter to continue...")

    def run(self) -> None:
        self.dashboard.load()
        try:
            while True:
                self._flush_alerts()
                if self.dashboard.error:
                    self._print(self.dashboard.error)
                    return
                self.render()
                line = self._input("\n: ").strip()
                if not line:
                    continue
                if line.lower() == "exit":
                    break
                self.handle(line)
        except (KeyboardInterrupt, EOFError):
            self._print("Interrupted.")
        finally:
            self.dashboard.shutdown()

    # -------------------- rendering --------------------

    def render(self) -> None:
        board = self.dashboard
        self._print("\nMy Tasks")
        self._print(
            "Filter: "
            + "  ".join(f"[{f.label}]" if f is board.filter else f.label for f in TaskFilter)
        )

        visible = board.visible_tasks()
        if not visible:
            self._print(f"No {board.filter.value.lower()} tasks found.")
        for number, task in enumerate(visible, start=1):
            self._print(self._format_row(number, task))

        view = board.view
        if isinstance(view, Viewing):
            task = board.get_task(view.task_id)
            self._print("\n-- Task Details --")
            self._print(task.title)
            self._print(task.description or "No description provided.")
            self._print(f"Created: {task.created_at:%Y-%m-%d %H:%M}")
            self._print("(edit / close)")
        elif isinstance(view, Editing):
            self._print("\n-- Edit Task --")
            self._print(f"Title: {view.title}")
            self._print(f"Description: {view.description}")
            self._print("(save / back)")
        elif isinstance(view, ConfirmingDelete):
            task = board.get_task(view.task_id)
            self._print(f'\nDelete "{task.title}"? This action cannot be undone. (yes / no)')

    @staticmethod
    def _format_row(number: int, task: TaskItem) -> str:
        mark = "x" if task.completed else " "
        row = f"{number:>3}. [{mark}] {task.title}  ({task.created_at:%Y-%m-%d})"
        if task.description:
            row += f"\n       {task.description.splitlines()[0]}"
        return row

    # -------------------- command dispatch --------------------

    def handle(self, line: str) -> None:
        tokens = line.split()
        cmd, args = tokens[0].lower(), tokens[1:]
        board = self.dashboard
        try:
            if cmd == "add":
                self._add()
            elif cmd == "toggle":
                board.toggle_complete(self._task_id(args))
            elif cmd == "view":
                board.open_details(self._task_id(args))
            elif cmd == "edit":
                self._edit()
            elif cmd == "save":
                board.save_edit()
            elif cmd == "back":
                board.cancel_edit()
            elif cmd == "close":
                board.close_details()
            elif cmd == "delete":
                board.request_delete(self._task_id(args))
            elif cmd == "yes":
                board.confirm_delete()
            elif cmd == "no":
                board.cancel_delete()
            elif cmd == "filter":
                board.set_filter(self._filter(args))
            elif cmd == "refresh":
                board.load()
            elif cmd == "help":
                self._print(HELP)
            else:
                self._print("Unknown command. Type 'help' for instructions.")
        except (InvalidTransition, UnknownTask, ValueError) as exc:
            self._print(f"Cannot {cmd}: {exc}")

    def _task_id(self, args: list[str]) -> str:
        if len(args) != 1 or not args[0].isdigit():
            raise ValueError("expected a task number")
        visible = self.dashboard.visible_tasks()
        index = int(args[0]) - 1
        if not 0 <= index < len(visible):
            raise ValueError(f"no task number {args[0]}")
        return visible[index].id

    @staticmethod
    def _filter(args: list[str]) -> TaskFilter:
        if len(args) != 1:
            raise ValueError("expected all, pending or completed")
        try:
            return TaskFilter(args[0].upper())
        except ValueError:
            raise ValueError("expected all, pending or completed") from None

    def _add(self) -> None:
        board = self.dashboard
        board.new_title = self._input("Title: ")
        board.new_description = self._input("Description (optional): ")
        if not board.new_title.strip():
            self._print("Title required.")
            return
        board.create()

    def _edit(self) -> None:
        board = self.dashboard
        board.start_edit()
        view = board.view
        title = self._input(f"Title [{view.title}]: ")
        description = self._input(f"Description [{view.description}] (- to clear): ")
        if description.strip() == CLEAR_MARK:
            description = ""
        elif not description:
            description = None
        board.change_edit(title=title or None, description=description)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="taskboard-dashboard", description="Terminal task dashboard")
    parser.add_argument(
        "--api-url",
        default=os.getenv("TASKBOARD_API_URL", API_URL),
        help="Task collection URL (default: %(default)s)",
    )
    ns = parser.parse_args(argv)

    logging.basicConfig(level=logging.ERROR)
    DashboardCLI(TaskClient(ns.api_url)).run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
