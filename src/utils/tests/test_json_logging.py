"""Tests for the JSON log formatter."""

import json
import sys
import logging
import unittest

from utils.logging import JSONFormatter


def _record(msg, *args, extra=None, exc_info=None):
    return logging.getLogger("tasks.test").makeRecord(
        "tasks.test", logging.INFO, __file__, 1, msg, args, exc_info, extra=extra,
    )


class TestJSONFormatter(unittest.TestCase):

    def test_base_fields(self):
        entry = json.loads(JSONFormatter().format(_record("Task %s created", "t1")))

        self.assertEqual(entry["level"], "INFO")
        self.assertEqual(entry["logger"], "tasks.test")
        self.assertEqual(entry["message"], "Task t1 created")
        self.assertTrue(entry["timestamp"].endswith("Z"))

    def test_extra_fields_are_included(self):
        entry = json.loads(JSONFormatter().format(_record("Task created", extra={"taskId": "t1", "order": 3})))

        self.assertEqual(entry["taskId"], "t1")
        self.assertEqual(entry["order"], 3)
        self.assertNotIn("lineno", entry)

    def test_exception_is_formatted(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record("failed", exc_info=sys.exc_info())

        entry = json.loads(JSONFormatter().format(record))
        self.assertIn("RuntimeError: boom", entry["exception"])


if __name__ == '__main__':
    unittest.main()
