"""Dashboard controller: task list state driven through the API client."""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import replace

from taskboard.client import TaskClient, TaskClientError, TaskItem
from taskboard.dashboard.queue import MutationQueue
from taskboard.dashboard.state import (
    ConfirmingDelete,
    Editing,
    Idle,
    InvalidTransition,
    TaskFilter,
    UnknownTask,
    Viewing,
    ViewState,
)


logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load tasks. Ensure backend is running."

Alert = Callable[[str], None]


class Dashboard:
    """Holds everything the task view renders and performs its actions.

    Mutations go through a :class:`MutationQueue` keyed by task id, so two
    quick toggles of one task reach the server in order. Completions run on
    worker threads; all state access is guarded by ``self._lock``.

    Args:
        client: API client used for every network call.
        alert: Called with a message whenever an action fails.
        queue: Mutation queue; a private one is created if omitted.
    """

    def __init__(self, client: TaskClient, alert: Alert, queue: MutationQueue | None = None):
        self._client = client
        self._alert = alert
        self._queue = queue or MutationQueue()
        self._lock = threading.RLock()

        self.tasks: list[TaskItem] = []
        self.loading = True
        self.error = ""

        self.new_title = ""
        self.new_description = ""
        self.creating = False

        self.filter = TaskFilter.ALL
        self.view: ViewState = Idle()

    # -------------------- list --------------------

    def load(self) -> bool:
        """Fetch the whole list; on failure set the persistent error."""
        try:
            tasks = self._client.get_tasks()
        except TaskClientError:
            logger.warning("Task list could not be loaded", exc_info=True)
            with self._lock:
                self.error = LOAD_ERROR
                self.loading = False
            return False

        with self._lock:
            self.tasks = tasks
            self.error = ""
            self.loading = False
            # The open dialog may point at a task removed elsewhere
            open_id = getattr(self.view, "task_id", None)
            if open_id is not None and all(task.id != open_id for task in tasks):
                self.view = Idle()
        return True

    def set_filter(self, task_filter: TaskFilter) -> None:
        with self._lock:
            self.filter = task_filter

    def visible_tasks(self) -> list[TaskItem]:
        """Tasks passing the active filter. Never touches the network."""
        with self._lock:
            return [task for task in self.tasks if self.filter.matches(task)]

    def get_task(self, task_id: str) -> TaskItem:
        with self._lock:
            for task in self.tasks:
                if task.id == task_id:
                    return task
        raise UnknownTask(task_id)

    def _put(self, updated: TaskItem) -> None:
        self.tasks = [updated if task.id == updated.id else task for task in self.tasks]

    # -------------------- create --------------------

    def create(self) -> bool:
        """Create a task from the form fields, then refetch the list.

        Returns:
            False without doing anything when the title is blank or a create
            is already in flight; otherwise whether the create succeeded.
        """
        with self._lock:
            if self.creating or not self.new_title.strip():
                return False
            self.creating = True
            title, description = self.new_title, self.new_description

        try:
            self._client.create_task(title, description)
        except TaskClientError as exc:
            self._alert(str(exc))
            return False
        else:
            self.load()
            with self._lock:
                self.new_title = ""
                self.new_description = ""
            return True
        finally:
            with self._lock:
                self.creating = False

    # -------------------- toggle --------------------

    def toggle_complete(self, task_id: str) -> Future:
        """Flip ``completed`` locally now and send it in the background.

        Returns:
            Future resolving to True once the server accepted the change, or
            False after it was rolled back.
        """
        with self._lock:
            task = self.get_task(task_id)
            previous = task.completed
            self._put(replace(task, completed=not previous))

        return self._queue.submit(task_id, self._send_toggle, task_id, previous)

    def _send_toggle(self, task_id: str, previous: bool) -> bool:
        try:
            self._client.update_task(task_id, completed=not previous)
        except TaskClientError as exc:
            with self._lock:
                try:
                    self._put(replace(self.get_task(task_id), completed=previous))
                except UnknownTask:
                    logger.debug("Task %s left the list before rollback", task_id)
            self._alert(str(exc))
            return False
        return True

    # -------------------- details / edit --------------------

    def open_details(self, task_id: str) -> None:
        with self._lock:
            self._expect(Idle)
            self.get_task(task_id)
            self.view = Viewing(task_id)

    def start_edit(self) -> None:
        with self._lock:
            view = self._expect(Viewing)
            task = self.get_task(view.task_id)
            self.view = Editing(task.id, task.title, task.description or "")

    def change_edit(self, title: str | None = None, description: str | None = None) -> None:
        with self._lock:
            view = self._expect(Editing)
            self.view = Editing(
                view.task_id,
                view.title if title is None else title,
                view.description if description is None else description,
            )

    def cancel_edit(self) -> None:
        with self._lock:
            view = self._expect(Editing)
            self.view = Viewing(view.task_id)

    def close_details(self) -> None:
        with self._lock:
            self._expect(Viewing, Editing)
            self.view = Idle()

    def save_edit(self) -> bool:
        """Send the edited title and description and wait for the answer.

        The local copy is replaced with the row the server returns.
        """
        with self._lock:
            view = self._expect(Editing)
            if not view.title.strip():
                return False

        future = self._queue.submit(
            view.task_id,
            self._client.update_task,
            view.task_id,
            title=view.title,
            description=view.description,
        )
        try:
            updated = future.result()
        except TaskClientError as exc:
            self._alert(str(exc))
            return False

        with self._lock:
            self._put(updated)
            if self.view == view:
                self.view = Idle()
        return True

    # -------------------- delete --------------------

    def request_delete(self, task_id: str) -> None:
        with self._lock:
            self._expect(Idle)
            self.get_task(task_id)
            self.view = ConfirmingDelete(task_id)

    def cancel_delete(self) -> None:
        with self._lock:
            self._expect(ConfirmingDelete)
            self.view = Idle()

    def confirm_delete(self) -> bool:
        with self._lock:
            view = self._expect(ConfirmingDelete)

        future = self._queue.submit(view.task_id, self._client.delete_task, view.task_id)
        try:
            future.result()
        except TaskClientError as exc:
            self._alert(str(exc))
            return False

        with self._lock:
            self.tasks = [task for task in self.tasks if task.id != view.task_id]
            if self.view == view:
                self.view = Idle()
        return True

    # -------------------- lifecycle --------------------

    def shutdown(self) -> None:
        """Wait for queued mutations, then release the client."""
        self._queue.shutdown(wait=True)
        self._client.close()

    def _expect(self, *states: type) -> ViewState:
        if not isinstance(self.view, states):
            expected = " or ".join(state.__name__ for state in states)
            raise InvalidTransition(f"expected {expected}, current view is {type(self.view).__name__}")
        return self.view
