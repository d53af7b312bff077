"""MongoDB index management for the users and tasks collections."""

from logging import getLogger

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

logger = getLogger(__name__)


def _find_conflicting(collection: Collection, keys: list, name: str) -> str | None:
    """Name of an existing index that clashes with (keys, name), if any.

    A clash is either the same name over other keys, or the same keys under
    another name.
    """
    wanted = dict(keys)
    for idx_name, info in collection.index_information().items():
        if idx_name == '_id_':
            continue
        same_keys = dict(info.get('key', [])) == wanted
        if (idx_name == name) != same_keys:
            return idx_name
    return None


def create_index_safe(collection: Collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, replacing a clashing definition left by an older schema."""
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except PyMongoError as e:
        if "already exists" not in str(e) and "Conflict" not in str(e):
            raise

    stale = _find_conflicting(collection, keys, name)
    if stale is None:
        logger.error("Failed to resolve index conflict", extra={"index": name})
        return False

    logger.warning("Dropping conflicting index", extra={"index": stale})
    collection.drop_index(stale)
    collection.create_index(keys, name=name, **kwargs)
    logger.info("Recreated index", extra={"index": name})
    return True


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.task_repository import MongoTaskRepository
    from adapter.mongodb.user_repository import MongoUserRepository

    results = [
        MongoUserRepository(db).ensure_indexes(),
        MongoTaskRepository(db).ensure_indexes(),
    ]
    return all(results)
