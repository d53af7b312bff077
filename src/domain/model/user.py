from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    username: str
    password_hash: str
    created_at: datetime
