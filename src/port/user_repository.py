from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access."""
    def create(self, username: str, password_hash: str) -> User:
        """Create a new user. Raise ConflictError if the store rejects a duplicate username."""
        ...

    def get_by_username(self, username: str) -> User | None:
        """Find a user by username. Return User or None if not found."""
        ...
