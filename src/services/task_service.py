"""Task service: per-user task list operations.

Ownership rules live here: listing is always filtered by owner, while
update and delete follow the configured OwnershipPolicy.
"""

import logging
from datetime import datetime

from domain.model.errors import NotFoundError
from domain.model.task import OwnershipPolicy, Task, TaskPatch
from port.task_repository import TaskRepository

logger = logging.getLogger(__name__)


def list_tasks(repo: TaskRepository, owner_id: str) -> list[Task]:
    """Owner's tasks, ascending by order (missing order counts as 0)."""
    tasks = repo.find_by_owner(owner_id)
    return sorted(tasks, key=lambda t: t.order or 0)


def create_task(
    repo: TaskRepository,
    owner_id: str,
    text: str,
    due_date: datetime | None = None,
) -> str:
    """Create a task at the end of the owner's list and return its ID.

    Raises:
        ValidationError: text is empty after trimming
    """
    max_order = max((t.order or 0 for t in repo.find_by_owner(owner_id)), default=0)
    task = Task.create(owner_id=owner_id, text=text, order=max_order + 1, due_date=due_date)
    task_id = repo.insert(task)
    logger.info("Task created", extra={"taskId": task_id, "ownerId": owner_id, "order": task.order})
    return task_id


def update_task(
    repo: TaskRepository,
    task_id: str,
    user_id: str,
    patch: TaskPatch,
    policy: OwnershipPolicy = OwnershipPolicy.SHARED,
) -> str:
    """Apply the supplied fields of patch and return the task ID.

    Raises:
        NotFoundError: no task with task_id
        PermissionDeniedError: policy is OWNER and user_id is not the owner
        ValidationError: supplied text is empty after trimming
        ConflictError: the task changed between read and write
    """
    task = repo.get_by_id(task_id)
    if not task:
        raise NotFoundError("Task not found")
    task.check_ownership(user_id, policy)

    task.apply(patch)
    repo.replace(task)
    logger.info("Task updated", extra={"taskId": task_id, "userId": user_id, "fields": patch.supplied})
    return task_id


def delete_task(
    repo: TaskRepository,
    task_id: str,
    user_id: str,
    policy: OwnershipPolicy = OwnershipPolicy.SHARED,
) -> None:
    """Delete a task at the revision read just before.

    Raises:
        NotFoundError: no task with task_id
        PermissionDeniedError: policy is OWNER and user_id is not the owner
        ConflictError: the task changed between read and delete
    """
    task = repo.get_by_id(task_id)
    if not task:
        raise NotFoundError("Task not found")
    task.check_ownership(user_id, policy)

    repo.delete(task.id, task.rev)
    logger.info("Task deleted", extra={"taskId": task_id, "userId": user_id})
