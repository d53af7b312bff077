import logging
import os

from fastapi import HTTPException

from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.task_repository import MongoTaskRepository
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.session.memory_session_store import InMemorySessionStore
from adapter.session.redis_session_store import RedisSessionStore
from domain.model.task import OwnershipPolicy
from port.session_store import SessionStore
from port.task_repository import TaskRepository
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

SESSION_BACKEND = os.getenv("SESSION_BACKEND", "memory").lower()
if SESSION_BACKEND not in ("memory", "redis"):
    raise ValueError(f"SESSION_BACKEND must be 'memory' or 'redis', got {SESSION_BACKEND!r}")

_policy_env = os.getenv("TASK_OWNERSHIP_POLICY", OwnershipPolicy.SHARED.value).lower()
try:
    TASK_OWNERSHIP_POLICY = OwnershipPolicy(_policy_env)
except ValueError:
    raise ValueError(
        f"TASK_OWNERSHIP_POLICY must be 'shared' or 'owner', got {_policy_env!r}"
    ) from None

_session_store: SessionStore | None = None


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_task_repo() -> TaskRepository:
    return MongoTaskRepository(_get_db())


def get_session_store() -> SessionStore:
    """Process-wide session store, built on first use."""
    global _session_store
    if _session_store is None:
        if SESSION_BACKEND == "redis":
            _session_store = RedisSessionStore()
        else:
            _session_store = InMemorySessionStore()
        logger.info("Session store initialised", extra={"backend": SESSION_BACKEND})
    return _session_store


def get_ownership_policy() -> OwnershipPolicy:
    return TASK_OWNERSHIP_POLICY
