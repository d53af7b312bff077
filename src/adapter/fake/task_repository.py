"""In-memory implementation of TaskRepository for testing."""

from dataclasses import replace

from domain.model.errors import ConflictError, NotFoundError
from domain.model.task import Task, next_revision


class FakeTaskRepository:
    def __init__(self):
        self.store: dict[str, Task] = {}

    # ── write operations ─────────────────────────────────────

    def insert(self, task: Task) -> str:
        task.rev = next_revision(None)
        self.store[task.id] = replace(task)
        return task.id

    def replace(self, task: Task) -> str:
        current = self._current(task.id, task.rev)
        new_rev = next_revision(current.rev)
        task.rev = new_rev
        self.store[task.id] = replace(task)
        return new_rev

    def delete(self, task_id: str, rev: str) -> None:
        self._current(task_id, rev)
        del self.store[task_id]

    def _current(self, task_id: str, rev: str | None) -> Task:
        current = self.store.get(task_id)
        if current is None:
            raise NotFoundError("Task not found")
        if current.rev != rev:
            raise ConflictError("Document update conflict")
        return current

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, task_id: str) -> Task | None:
        task = self.store.get(task_id)
        # Copies, so callers mutate their snapshot and not the stored version
        return replace(task) if task else None

    def find_by_owner(self, owner_id: str) -> list[Task]:
        tasks = [replace(t) for t in self.store.values() if t.owner_id == owner_id]
        return sorted(tasks, key=lambda t: t.order)
