"""Task dashboard: view state, controller and terminal front end."""

from taskboard.dashboard.controller import Dashboard
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


__all__ = [
    "Dashboard",
    "MutationQueue",
    "TaskFilter",
    "ViewState",
    "Idle",
    "Viewing",
    "Editing",
    "ConfirmingDelete",
    "InvalidTransition",
    "UnknownTask",
]
