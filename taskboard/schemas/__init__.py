"""Marshmallow schemas for serialization and validation."""

from taskboard.schemas.task import TaskCreateSchema, TaskSchema, TaskUpdateSchema


__all__ = ["TaskSchema", "TaskCreateSchema", "TaskUpdateSchema"]
