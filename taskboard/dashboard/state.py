"""Dashboard view state and list filter."""

from dataclasses import dataclass
from enum import Enum

from taskboard.client import TaskItem


class TaskFilter(str, Enum):
    ALL = "ALL"
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"

    def matches(self, task: TaskItem) -> bool:
        if self is TaskFilter.PENDING:
            return not task.completed
        if self is TaskFilter.COMPLETED:
            return task.completed
        return True

    @property
    def label(self) -> str:
        return self.value.capitalize()


class InvalidTransition(ValueError):
    """The requested dialog change is not possible from the current view."""


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Viewing:
    task_id: str


@dataclass(frozen=True)
class Editing:
    task_id: str
    title: str
    description: str


@dataclass(frozen=True)
class ConfirmingDelete:
    task_id: str


ViewState = Idle | Viewing | Editing | ConfirmingDelete


class UnknownTask(LookupError):
    """No task with that id is in the loaded list."""
