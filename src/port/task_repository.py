"""Port for task data access."""

from typing import Protocol

from domain.model.task import Task


class TaskRepository(Protocol):
    """Protocol for task document access.

    Writes carry the revision token read with the document; a mismatch
    raises ConflictError instead of overwriting.
    """

    def insert(self, task: Task) -> str:
        """Insert a new task. Returns its ID."""
        ...

    def get_by_id(self, task_id: str) -> Task | None:
        """Get a single task (with its current revision) or None."""
        ...

    def find_by_owner(self, owner_id: str) -> list[Task]:
        """All tasks of an owner, sorted ascending by order."""
        ...

    def replace(self, task: Task) -> str:
        """Overwrite a task if task.rev is still current. Returns the new revision."""
        ...

    def delete(self, task_id: str, rev: str) -> None:
        """Delete a task at revision rev."""
        ...
