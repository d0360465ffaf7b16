"""Task CRUD endpoints."""

import logging

from flask import Blueprint, jsonify, request
from marshmallow import ValidationError

from taskboard.errors import error_response
from taskboard.schemas import TaskCreateSchema, TaskSchema, TaskUpdateSchema
from taskboard.store import get_task_store
from taskboard.telemetry import get_meter, get_tracer


logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)
meter = get_meter(__name__)

tasks_created = meter.create_counter(
    name="tasks.created",
    description="Tasks created",
    unit="1",
)
tasks_updated = meter.create_counter(
    name="tasks.updated",
    description="Tasks updated",
    unit="1",
)
tasks_deleted = meter.create_counter(
    name="tasks.deleted",
    description="Tasks deleted",
    unit="1",
)

tasks_bp = Blueprint("tasks", __name__, url_prefix="/api/tasks")


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


@tasks_bp.route("", methods=["GET"], strict_slashes=False)
def list_tasks():
    """List all tasks, newest first."""
    with tracer.start_as_current_span("task.list") as span:
        tasks = get_task_store().list_tasks()
        span.set_attribute("task.count", len(tasks))
        return jsonify(TaskSchema(many=True).dump(tasks))


@tasks_bp.route("", methods=["POST"], strict_slashes=False)
def create_task():
    """Create a new task.

    Returns:
        JSON response with the created task and 201 status.
    """
    with tracer.start_as_current_span("task.create") as span:
        try:
            data = TaskCreateSchema().load(_json_body())
        except ValidationError as err:
            if "title" in err.messages:
                span.set_attribute("task.validation", "missing_title")
                return error_response("Title is required", 400)
            return error_response("Invalid request", 400, details=err.messages)

        task = get_task_store().create_task(data["title"], data.get("description"))

        span.set_attribute("task.id", task.id)
        tasks_created.add(1)
        logger.info("Task created: %s", task.id)

        return jsonify(TaskSchema().dump(task)), 201


@tasks_bp.route("/<task_id>", methods=["PUT"])
def update_task(task_id: str):
    """Update the fields present in the request body.

    Args:
        task_id: Task identifier.

    Returns:
        JSON response with the updated task.
    """
    with tracer.start_as_current_span("task.update") as span:
        span.set_attribute("task.id", task_id)

        try:
            changes = TaskUpdateSchema().load(_json_body())
        except ValidationError as err:
            return error_response("Invalid request", 400, details=err.messages)

        task = get_task_store().update_task(task_id, changes)
        if task is None:
            return error_response("Task not found", 404)

        span.set_attribute("task.fields", sorted(changes.fields_set))
        tasks_updated.add(1)
        logger.info("Task updated: %s", task_id)

        return jsonify(TaskSchema().dump(task))


@tasks_bp.route("/<task_id>", methods=["DELETE"])
def delete_task(task_id: str):
    """Delete a task.

    Args:
        task_id: Task identifier.

    Returns:
        Empty response with 204 status.
    """
    with tracer.start_as_current_span("task.delete") as span:
        span.set_attribute("task.id", task_id)

        if not get_task_store().delete_task(task_id):
            return error_response("Task not found", 404)

        tasks_deleted.add(1)
        logger.info("Task deleted: %s", task_id)

        return "", 204
