"""Task model."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.extensions import db


def new_task_id() -> str:
    """Generate a fresh task identifier."""
    return str(uuid.uuid4())


class Task(db.Model):
    """A single to-do item."""

    __tablename__ = "Task"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_task_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column("createdAt", DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column("updatedAt", DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<Task {self.id}>"
