"""MongoDB implementation of TaskRepository.

Every document carries a ``_rev`` revision token. Writes filter on the
revision that was read, so a concurrent writer turns the second write into
a ConflictError instead of a silent overwrite.
"""

from logging import getLogger

from pymongo.database import Database
from pymongo.errors import OperationFailure, PyMongoError

from adapter.mongodb import TASKS_COLLECTION_NAME
from domain.model.errors import ConflictError, NotFoundError, StoreError
from domain.model.task import Task, next_revision

logger = getLogger(__name__)


class MongoTaskRepository:
    def __init__(self, db: Database):
        self.collection = db[TASKS_COLLECTION_NAME]

    # ── indexes ──────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for tasks collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('owner_id', 1), ('order', 1)], 'idx_tasks_owner_order')
            return True
        except Exception as e:
            logger.error("Failed to create tasks indexes", extra={"error": str(e)})
            return False

    # ── helpers ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> Task:
        """Convert MongoDB document to Task domain model."""
        return Task(
            id=doc['_id'],
            owner_id=doc.get('owner_id'),
            text=doc.get('text', ''),
            created_at=doc.get('created_at'),
            done=doc.get('done') or False,
            due_date=doc.get('due_date'),
            order=doc.get('order') or 0,
            updated_at=doc.get('updated_at'),
            rev=doc.get('_rev'),
        )

    def _to_document(self, task: Task, rev: str) -> dict:
        return {
            '_id': task.id,
            '_rev': rev,
            'type': 'task',
            'owner_id': task.owner_id,
            'text': task.text,
            'done': task.done,
            'due_date': task.due_date,
            'order': task.order,
            'created_at': task.created_at,
            'updated_at': task.updated_at,
        }

    def _missing_or_stale(self, task_id: str) -> Exception:
        """Pick the error for a write whose (_id, _rev) filter matched nothing."""
        if self.collection.count_documents({'_id': task_id}, limit=1):
            return ConflictError("Document update conflict")
        return NotFoundError("Task not found")

    # ── write operations ─────────────────────────────────────

    def insert(self, task: Task) -> str:
        """Insert a new task document."""
        rev = next_revision(None)
        try:
            self.collection.insert_one(self._to_document(task, rev))
        except PyMongoError as e:
            logger.error("Failed to insert task", extra={"taskId": task.id, "error": str(e)})
            raise StoreError(str(e)) from e

        task.rev = rev
        logger.info("Task inserted", extra={"taskId": task.id, "ownerId": task.owner_id})
        return task.id

    def replace(self, task: Task) -> str:
        """Overwrite the task at its current revision."""
        new_rev = next_revision(task.rev)
        try:
            result = self.collection.replace_one(
                {'_id': task.id, '_rev': task.rev},
                self._to_document(task, new_rev),
            )
            if result.matched_count == 0:
                raise self._missing_or_stale(task.id)
        except PyMongoError as e:
            logger.error("Failed to update task", extra={"taskId": task.id, "error": str(e)})
            raise StoreError(str(e)) from e

        task.rev = new_rev
        logger.debug("Task updated", extra={"taskId": task.id, "rev": new_rev})
        return new_rev

    def delete(self, task_id: str, rev: str) -> None:
        """Delete the task at revision rev."""
        try:
            result = self.collection.delete_one({'_id': task_id, '_rev': rev})
            if result.deleted_count == 0:
                raise self._missing_or_stale(task_id)
        except PyMongoError as e:
            logger.error("Failed to delete task", extra={"taskId": task_id, "error": str(e)})
            raise StoreError(str(e)) from e

        logger.info("Task deleted", extra={"taskId": task_id})

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, task_id: str) -> Task | None:
        """Retrieve task by ID."""
        try:
            doc = self.collection.find_one({'_id': task_id})
        except PyMongoError as e:
            logger.error("Failed to retrieve task", extra={"taskId": task_id, "error": str(e)})
            raise StoreError(str(e)) from e
        return self._to_domain(doc) if doc else None

    def find_by_owner(self, owner_id: str) -> list[Task]:
        """All tasks of an owner, ascending by order.

        Falls back to sorting in Python when the server refuses the sorted
        query (e.g. the index is still being built).
        """
        try:
            try:
                docs = list(self.collection.find({'owner_id': owner_id}).sort('order', 1))
                return [self._to_domain(doc) for doc in docs]
            except OperationFailure as e:
                logger.warning("Sorted task query failed, sorting locally", extra={"ownerId": owner_id, "error": str(e)})
                docs = list(self.collection.find({'owner_id': owner_id}))
        except PyMongoError as e:
            logger.error("Failed to list tasks", extra={"ownerId": owner_id, "error": str(e)})
            raise StoreError(str(e)) from e

        tasks = [self._to_domain(doc) for doc in docs]
        return sorted(tasks, key=lambda t: t.order)
