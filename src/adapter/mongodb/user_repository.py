"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import ConflictError, StoreError
from domain.model.user import User

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection.

        The unique username index closes the window between the
        registration pre-check and the insert.
        """
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('username', 1)], 'idx_users_username', unique=True)
            return True
        except Exception as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            username=doc['username'],
            password_hash=doc['password_hash'],
            created_at=doc['created_at'],
        )

    def create(self, username: str, password_hash: str) -> User:
        """Create a new user and return the User object."""
        user_doc = {
            '_id': uuid.uuid4().hex,
            'type': 'user',
            'username': username,
            'password_hash': password_hash,
            'created_at': datetime.now(timezone.utc),
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: username already exists", extra={"username": username})
            raise ConflictError("Username already taken")
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"username": username, "error": str(e)})
            raise StoreError(str(e)) from e

        logger.info("User created", extra={"userId": user_doc['_id'], "username": username})
        return self._to_domain(user_doc)

    def get_by_username(self, username: str) -> User | None:
        """Find a user by username. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'username': username})
        except PyMongoError as e:
            logger.error("Failed to get user by username", extra={"username": username, "error": str(e)})
            raise StoreError(str(e)) from e
        return self._to_domain(doc) if doc else None
