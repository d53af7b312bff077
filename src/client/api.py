"""HTTP client for the Task Manager API.

Requests are sent once; failures surface as ApiError and are never retried.
"""

import logging
import os
from datetime import datetime
from typing import Any

import httpx

from client.state import TaskView

logger = logging.getLogger(__name__)

API_URL = os.getenv("TASKS_API_URL", "http://localhost:3000")
API_TIMEOUT_SECONDS = 10.0
AUTH_HEADER = "x-auth-token"


class ApiError(Exception):
    """Non-2xx response (status > 0) or transport failure (status 0)."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}" if status_code else message)


class TaskApiClient:
    def __init__(
        self,
        base_url: str = API_URL,
        token: str | None = None,
        timeout: float = API_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ):
        self.token = token
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TaskApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ── HTTP helpers ─────────────────────────────────────────

    def _request(self, method: str, path: str, json: dict | None = None) -> Any:
        headers = {AUTH_HEADER: self.token} if self.token else {}
        try:
            response = self._client.request(method, path, json=json, headers=headers)
        except httpx.RequestError as e:
            logger.warning("Task API request error", extra={"method": method, "path": path, "error_type": type(e).__name__})
            raise ApiError(0, f"Could not reach the server ({type(e).__name__})") from e

        try:
            data = response.json() if response.content else None
        except ValueError:
            data = None

        if response.is_error:
            message = data.get("error") if isinstance(data, dict) else None
            logger.debug("Task API error response", extra={"path": path, "status_code": response.status_code})
            raise ApiError(response.status_code, message or response.reason_phrase)
        return data

    # ── auth ─────────────────────────────────────────────────

    def register(self, username: str, password: str) -> str:
        data = self._request("POST", "/register", {"username": username, "password": password})
        return data["userId"]

    def login(self, username: str, password: str) -> dict:
        """Log in; keeps the returned token for later requests."""
        data = self._request("POST", "/login", {"username": username, "password": password})
        self.token = data["token"]
        return data

    def logout(self) -> None:
        self._request("POST", "/logout")
        self.token = None

    # ── tasks ────────────────────────────────────────────────

    def list_tasks(self) -> list[TaskView]:
        return [TaskView.from_json(item) for item in self._request("GET", "/tasks")]

    def create_task(self, text: str, due_date: datetime | None = None) -> str:
        body = {"text": text, "dueDate": due_date.isoformat() if due_date else None}
        return self._request("POST", "/tasks", body)["id"]

    def update_task(self, task_id: str, **fields: Any) -> str:
        """PUT only the given fields (text, done, due_date, order)."""
        body: dict[str, Any] = {}
        for name, value in fields.items():
            if name == "due_date":
                body["dueDate"] = value.isoformat() if value else None
            else:
                body[name] = value
        return self._request("PUT", f"/tasks/{task_id}", body)["id"]

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{task_id}")
