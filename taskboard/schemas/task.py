"""Task-related Marshmallow schemas."""

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from taskboard.store import TaskUpdate


class TaskSchema(Schema):
    """Schema for task serialization."""

    id = fields.Str(dump_only=True)
    title = fields.Str(required=True)
    description = fields.Str(allow_none=True)
    completed = fields.Bool()
    created_at = fields.DateTime(dump_only=True, format="iso", data_key="createdAt")
    updated_at = fields.DateTime(dump_only=True, format="iso", data_key="updatedAt")


class TaskCreateSchema(Schema):
    """Schema for task creation validation."""

    class Meta:
        unknown = EXCLUDE

    title = fields.Str(
        required=True,
        validate=validate.Length(min=1),
        error_messages={"required": "Title is required", "null": "Title is required"},
    )
    description = fields.Str(allow_none=True, load_default=None)


class TaskUpdateSchema(Schema):
    """Schema for partial task updates.

    Loads into a :class:`TaskUpdate` carrying only the keys the client sent.
    """

    class Meta:
        unknown = EXCLUDE

    title = fields.Str()
    description = fields.Str(allow_none=True)
    completed = fields.Bool()

    @post_load
    def make_update(self, data, **kwargs) -> TaskUpdate:
        return TaskUpdate.from_payload(data)
