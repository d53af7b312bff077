"""Session-token authentication dependency."""

import logging

from fastapi import Depends, Security
from fastapi.security import APIKeyHeader

from api.dependencies import get_session_store
from api.errors import http_error
from domain.model.errors import DomainError
from port.session_store import SessionStore
from services import auth_service

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-auth-token"

token_header = APIKeyHeader(name=AUTH_HEADER, auto_error=False)


def get_auth_token(token: str | None = Security(token_header)) -> str | None:
    return token


def get_current_user_id(
    token: str | None = Depends(get_auth_token),
    sessions: SessionStore = Depends(get_session_store),
) -> str:
    """Resolve the x-auth-token header to a user ID. Raises 401 if not authenticated."""
    try:
        return auth_service.authorize(sessions, token)
    except DomainError as e:
        logger.debug("Rejected request token", extra={"error": str(e)})
        raise http_error(e)
