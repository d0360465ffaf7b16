"""Task persistence handle.

``TaskStore`` is built once by the application factory and registered on
``app.extensions``; route handlers fetch it with :func:`get_task_store`.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, ClassVar

from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select

from taskboard.models import Task
from taskboard.models.task import new_task_id


logger = logging.getLogger(__name__)

EXTENSION_KEY = "task_store"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


@dataclass(frozen=True)
class TaskUpdate:
    """Partial update for a task.

    Only names listed in ``fields_set`` are applied. A field can be present
    with a ``None`` value (``description`` cleared), which is different from
    the field being absent.
    """

    UPDATABLE: ClassVar[tuple[str, ...]] = ("title", "description", "completed")

    title: str | None = None
    description: str | None = None
    completed: bool | None = None
    fields_set: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "TaskUpdate":
        present = frozenset(name for name in cls.UPDATABLE if name in data)
        return cls(fields_set=present, **{name: data[name] for name in present})

    def changes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.UPDATABLE if name in self.fields_set}


class TaskStore:
    """CRUD over the ``Task`` table.

    Every statement goes through SQLAlchemy with bound parameters. Database
    errors are not handled here; they propagate to the HTTP error handlers.
    """

    def __init__(self, database: SQLAlchemy, clock: Clock = utc_now):
        self._db = database
        self.clock = clock

    @property
    def session(self):
        return self._db.session

    def list_tasks(self) -> list[Task]:
        """All tasks, newest first."""
        return list(self.session.scalars(select(Task).order_by(Task.created_at.desc())))

    def get_task(self, task_id: str) -> Task | None:
        return self.session.get(Task, task_id)

    def create_task(self, title: str, description: str | None = None) -> Task:
        """Insert a new pending task.

        Args:
            title: Non-empty task title.
            description: Optional description; empty strings are stored as NULL.

        Returns:
            The persisted task.
        """
        now = self.clock()
        task = Task(
            id=new_task_id(),
            title=title,
            description=description or None,
            completed=False,
            created_at=now,
            updated_at=now,
        )
        self.session.add(task)
        self.session.commit()
        logger.debug("Inserted task %s", task.id)
        return task

    def update_task(self, task_id: str, changes: TaskUpdate) -> Task | None:
        """Apply ``changes`` to a task and refresh ``updatedAt``.

        Returns:
            The updated task, or None if no task has that id.
        """
        task = self.get_task(task_id)
        if task is None:
            return None

        for name, value in changes.changes().items():
            setattr(task, name, value)
        task.updated_at = self.clock()

        self.session.commit()
        return task

    def delete_task(self, task_id: str) -> bool:
        """Remove a task.

        Returns:
            True if a row was deleted, False if no task has that id.
        """
        task = self.get_task(task_id)
        if task is None:
            return False

        self.session.delete(task)
        self.session.commit()
        return True


def get_task_store() -> TaskStore:
    """Return the store registered on the current application."""
    return current_app.extensions[EXTENSION_KEY]
