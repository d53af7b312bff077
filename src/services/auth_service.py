"""Auth service: registration, login and session authorization.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

import bcrypt

from domain.model.errors import AuthError, ConflictError, ValidationError
from domain.model.session import LoginResult, new_token
from port.session_store import SessionStore
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def _require_credentials(username: str | None, password: str | None) -> str:
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("Username and password required")
    return username


def register(repo: UserRepository, username: str, password: str) -> str:
    """Register a new user and return its ID.

    The existence check and the insert are two separate store calls. The
    MongoDB adapter backs them with a unique index; without one, two
    concurrent registrations of the same name can both succeed.

    Raises:
        ValidationError: username or password empty
        ConflictError: username already taken
    """
    username = _require_credentials(username, password)

    if repo.get_by_username(username):
        raise ConflictError("Username already taken")

    user = repo.create(username=username, password_hash=_hash_password(password))
    logger.info("User registered", extra={"userId": user.id, "username": username})
    return user.id


def login(
    repo: UserRepository,
    sessions: SessionStore,
    username: str,
    password: str,
) -> LoginResult:
    """Verify credentials and open a session.

    Unknown username and wrong password raise the same AuthError.

    Raises:
        ValidationError: username or password empty
        AuthError: invalid credentials
    """
    username = _require_credentials(username, password)

    user = repo.get_by_username(username)
    if not user or not _verify_password(password, user.password_hash):
        raise AuthError("Invalid credentials")

    token = new_token()
    sessions.put(token, user.id)
    logger.info("User logged in", extra={"userId": user.id, "username": user.username})
    return LoginResult(token=token, user_id=user.id, username=user.username)


def authorize(sessions: SessionStore, token: str | None) -> str:
    """Return the user ID bound to token, or raise AuthError."""
    if not token:
        raise AuthError("Unauthorized")
    user_id = sessions.get(token)
    if not user_id:
        raise AuthError("Unauthorized")
    return user_id


def logout(sessions: SessionStore, token: str) -> None:
    """Forget a session token. Unknown tokens are ignored."""
    sessions.delete(token)
