"""HTTP client for the task API."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx


logger = logging.getLogger(__name__)

API_URL = "http://localhost:5000/api/tasks"


class TaskClientError(Exception):
    """A task API call failed or answered with a non-2xx status."""


@dataclass(frozen=True)
class TaskItem:
    id: str
    title: str
    description: str | None
    completed: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "TaskItem":
        return cls(
            id=data["id"],
            title=data["title"],
            description=data.get("description"),
            completed=bool(data["completed"]),
            created_at=datetime.fromisoformat(data["createdAt"]),
            updated_at=datetime.fromisoformat(data["updatedAt"]),
        )


class TaskClient:
    """Thin wrapper over the four task endpoints.

    Args:
        base_url: Collection URL, e.g. ``http://localhost:5000/api/tasks``.
        http: Optional preconfigured ``httpx.Client``; one is created if omitted.
    """

    def __init__(self, base_url: str = API_URL, http: httpx.Client | None = None):
        self.base_url = base_url.rstrip("/")
        self._http = http or httpx.Client()

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "TaskClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, url: str, failure: str, **kwargs) -> httpx.Response:
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TaskClientError(failure) from exc

        if response.is_error:
            logger.warning("%s %s answered %s", method, url, response.status_code)
            raise TaskClientError(failure)
        return response

    def get_tasks(self) -> list[TaskItem]:
        response = self._request("GET", self.base_url, "Failed to fetch tasks")
        return [TaskItem.from_json(item) for item in response.json()]

    def create_task(self, title: str, description: str | None = None) -> TaskItem:
        payload: dict[str, Any] = {"title": title}
        if description is not None:
            payload["description"] = description
        response = self._request("POST", self.base_url, "Failed to create task", json=payload)
        return TaskItem.from_json(response.json())

    def update_task(self, task_id: str, **fields: Any) -> TaskItem:
        """Send a partial update; only the keyword arguments given are sent."""
        response = self._request(
            "PUT", f"{self.base_url}/{task_id}", "Failed to update task", json=fields
        )
        return TaskItem.from_json(response.json())

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"{self.base_url}/{task_id}", "Failed to delete task")
