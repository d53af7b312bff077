"""Task routes.

Endpoints:
- GET /tasks: List the caller's tasks in order
- POST /tasks: Create a task at the end of the list
- PUT /tasks/{id}: Partially update a task
- DELETE /tasks/{id}: Delete a task
"""

import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import get_ownership_policy, get_task_repo
from api.errors import http_error
from api.models import (
    SuccessResponse,
    TaskCreateRequest,
    TaskResponse,
    TaskUpdateRequest,
    TaskWriteResponse,
)
from api.security import get_current_user_id
from domain.model.errors import DomainError
from domain.model.task import OwnershipPolicy
from port.task_repository import TaskRepository
from services import task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
async def get_tasks(
    user_id: str = Depends(get_current_user_id),
    repo: TaskRepository = Depends(get_task_repo),
):
    """List the caller's tasks, ascending by order."""
    try:
        tasks = task_service.list_tasks(repo, user_id)
    except DomainError as e:
        raise http_error(e)

    return [TaskResponse.from_domain(t) for t in tasks]


@router.post("", response_model=TaskWriteResponse, status_code=status.HTTP_201_CREATED)
async def add_task(
    request: TaskCreateRequest,
    user_id: str = Depends(get_current_user_id),
    repo: TaskRepository = Depends(get_task_repo),
):
    """Create a task owned by the caller."""
    try:
        task_id = task_service.create_task(repo, user_id, request.text, request.due_date)
    except DomainError as e:
        raise http_error(e)

    return TaskWriteResponse(id=task_id)


@router.put("/{task_id}", response_model=TaskWriteResponse)
async def update_task(
    task_id: str,
    request: TaskUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    repo: TaskRepository = Depends(get_task_repo),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
):
    """Apply the fields present in the body (text, done, dueDate, order)."""
    try:
        task_service.update_task(repo, task_id, user_id, request.to_patch(), policy)
    except DomainError as e:
        raise http_error(e)

    return TaskWriteResponse(id=task_id)


@router.delete("/{task_id}", response_model=SuccessResponse)
async def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: TaskRepository = Depends(get_task_repo),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
):
    """Delete a task."""
    try:
        task_service.delete_task(repo, task_id, user_id, policy)
    except DomainError as e:
        raise http_error(e)

    return SuccessResponse()
