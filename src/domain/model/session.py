import secrets
from dataclasses import dataclass

TOKEN_BYTES = 24


def new_token() -> str:
    """Generate an opaque bearer token (48 hex chars)."""
    return secrets.token_hex(TOKEN_BYTES)


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login."""
    token: str
    user_id: str
    username: str
