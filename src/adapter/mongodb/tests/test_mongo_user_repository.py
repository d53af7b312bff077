"""Tests for MongoUserRepository and index helpers."""

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from adapter.mongodb.indexes import create_index_safe, ensure_all_indexes
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import ConflictError, StoreError


class TestMongoUserRepository(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        db = MagicMock()
        db.__getitem__.return_value = self.collection
        self.repo = MongoUserRepository(db)
        db.__getitem__.assert_called_with(USERS_COLLECTION_NAME)

    def test_create_inserts_user_document(self):
        user = self.repo.create('alice', '$2b$hash')

        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['username'], 'alice')
        self.assertEqual(doc['password_hash'], '$2b$hash')
        self.assertEqual(doc['type'], 'user')
        self.assertEqual(user.id, doc['_id'])

    def test_duplicate_key_becomes_conflict(self):
        self.collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
        with self.assertRaises(ConflictError):
            self.repo.create('alice', 'h')

    def test_other_failures_become_store_error(self):
        self.collection.insert_one.side_effect = PyMongoError("down")
        with self.assertRaises(StoreError):
            self.repo.create('alice', 'h')

    def test_get_by_username(self):
        self.collection.find_one.return_value = {
            '_id': 'u1',
            'username': 'alice',
            'password_hash': 'h',
            'created_at': datetime(2026, 1, 1, tzinfo=timezone.utc),
        }

        user = self.repo.get_by_username('alice')

        self.assertEqual(user.id, 'u1')
        self.collection.find_one.assert_called_once_with({'username': 'alice'})

    def test_get_by_username_missing(self):
        self.collection.find_one.return_value = None
        self.assertIsNone(self.repo.get_by_username('nobody'))

    def test_ensure_indexes_creates_unique_username_index(self):
        self.assertTrue(self.repo.ensure_indexes())
        self.collection.create_index.assert_called_once_with(
            [('username', 1)], name='idx_users_username', unique=True,
        )


class TestCreateIndexSafe(unittest.TestCase):

    def test_recreates_index_with_same_name_and_other_keys(self):
        collection = MagicMock()
        collection.create_index.side_effect = [OperationFailure("Index already exists with different options"), None]
        collection.index_information.return_value = {
            '_id_': {'key': [('_id', 1)]},
            'idx_tasks_owner_order': {'key': [('owner_id', 1)]},
        }

        self.assertTrue(create_index_safe(collection, [('owner_id', 1), ('order', 1)], 'idx_tasks_owner_order'))
        collection.drop_index.assert_called_once_with('idx_tasks_owner_order')
        self.assertEqual(collection.create_index.call_count, 2)

    def test_unrelated_errors_propagate(self):
        collection = MagicMock()
        collection.create_index.side_effect = PyMongoError("not authorized")
        with self.assertRaises(PyMongoError):
            create_index_safe(collection, [('username', 1)], 'idx_users_username')

    def test_ensure_all_indexes(self):
        db = MagicMock()
        self.assertTrue(ensure_all_indexes(db))


if __name__ == '__main__':
    unittest.main()
