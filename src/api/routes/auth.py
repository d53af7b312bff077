"""Authentication routes (register, login, logout)."""

import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import get_session_store, get_user_repo
from api.errors import http_error
from api.models import CredentialsRequest, LoginResponse, RegisterResponse, SuccessResponse
from api.security import get_auth_token, get_current_user_id
from domain.model.errors import DomainError
from port.session_store import SessionStore
from port.user_repository import UserRepository
from services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(request: CredentialsRequest, repo: UserRepository = Depends(get_user_repo)):
    """Register a new user.

    Raises:
        HTTPException: 400 if a field is empty, 409 if the username is taken
    """
    try:
        user_id = auth_service.register(repo, request.username, request.password)
    except DomainError as e:
        raise http_error(e)

    return RegisterResponse(user_id=user_id)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: CredentialsRequest,
    repo: UserRepository = Depends(get_user_repo),
    sessions: SessionStore = Depends(get_session_store),
):
    """Login and return a session token.

    Raises:
        HTTPException: 400 if a field is empty, 401 if credentials are invalid
    """
    try:
        result = auth_service.login(repo, sessions, request.username, request.password)
    except DomainError as e:
        raise http_error(e)

    return LoginResponse(token=result.token, user_id=result.user_id, username=result.username)


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    user_id: str = Depends(get_current_user_id),
    token: str | None = Depends(get_auth_token),
    sessions: SessionStore = Depends(get_session_store),
):
    """Invalidate the caller's session token."""
    try:
        auth_service.logout(sessions, token)
    except DomainError as e:
        raise http_error(e)

    logger.info("User logged out", extra={"userId": user_id})
    return SuccessResponse()
