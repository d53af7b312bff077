"""Client application state: who is logged in, and the last task snapshot."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from client.storage import AUTH_TOKEN_KEY, THEME_KEY, USERNAME_KEY, LocalStorage

LIGHT = "light"
DARK = "dark"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO timestamp from the API; naive values are read as UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class TaskView:
    """A task as the client sees it."""
    id: str
    text: str
    done: bool = False
    created_at: datetime | None = None
    due_date: datetime | None = None
    order: int = 0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "TaskView":
        return cls(
            id=data["id"],
            text=data.get("text", ""),
            done=bool(data.get("done", False)),
            created_at=parse_timestamp(data.get("createdAt")),
            due_date=parse_timestamp(data.get("dueDate")),
            order=data.get("order") or 0,
        )

    def is_overdue(self, now: datetime) -> bool:
        return not self.done and self.due_date is not None and self.due_date < now


@dataclass
class AppState:
    token: str | None = None
    username: str | None = None
    theme: str = LIGHT
    tasks: list[TaskView] = field(default_factory=list)
    status: str = ""
    status_is_error: bool = False

    @property
    def logged_in(self) -> bool:
        return bool(self.token)

    @classmethod
    def from_storage(cls, storage: LocalStorage) -> "AppState":
        """Restore auth and theme before the first render."""
        state = cls(
            token=storage.get(AUTH_TOKEN_KEY),
            username=storage.get(USERNAME_KEY),
            theme=DARK if storage.get(THEME_KEY) == DARK else LIGHT,
        )
        if state.token and state.username:
            state.set_status(f"Logged in as {state.username}")
        return state

    def set_status(self, message: str, is_error: bool = False) -> None:
        self.status = message
        self.status_is_error = is_error

    @property
    def done_count(self) -> int:
        return sum(1 for t in self.tasks if t.done)
