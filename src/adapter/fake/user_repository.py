"""In-memory implementation of UserRepository for testing."""

import uuid
from datetime import datetime, timezone
from domain.model.errors import ConflictError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self, enforce_unique: bool = True):
        self.store: dict[str, User] = {}
        # False mimics a database without the unique username index
        self.enforce_unique = enforce_unique

    # ── write operations ─────────────────────────────────────

    def create(self, username: str, password_hash: str) -> User:
        if self.enforce_unique and self.get_by_username(username):
            raise ConflictError("Username already taken")

        user = User(
            id=uuid.uuid4().hex,
            username=username,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        self.store[user.id] = user
        return user

    # ── read operations ──────────────────────────────────────

    def get_by_username(self, username: str) -> User | None:
        for user in self.store.values():
            if user.username == username:
                return user
        return None
