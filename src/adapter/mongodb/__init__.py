"""MongoDB adapters: collection names shared by the repositories."""

TASKS_COLLECTION_NAME = 'tasks'
USERS_COLLECTION_NAME = 'users'
