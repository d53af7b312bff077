"""Port definition for the session store (token -> user id)."""

from typing import Protocol


class SessionStore(Protocol):
    def get(self, token: str) -> str | None: ...
    def put(self, token: str, user_id: str) -> None: ...
    def delete(self, token: str) -> None: ...
