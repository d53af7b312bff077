"""Tests for the task client controller."""

import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from client.api import ApiError
from client.app import TaskClientApp
from client.state import DARK, LIGHT, TaskView
from client.storage import AUTH_TOKEN_KEY, THEME_KEY, USERNAME_KEY, LocalStorage

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeApi:
    """In-memory stand-in for TaskApiClient that records every call."""

    def __init__(self):
        self.token = None
        self.valid_tokens = {"tok-alice"}
        self.tasks: dict[str, TaskView] = {}
        self.calls = []
        self.fail_update_on = None
        self._next_id = 1

    def _check(self):
        if self.token not in self.valid_tokens:
            raise ApiError(401, "Unauthorized")

    def register(self, username, password):
        self.calls.append(("register", username))
        if username == "taken":
            raise ApiError(400, "Username taken")
        return "u1"

    def login(self, username, password):
        self.calls.append(("login", username))
        if password != "pw":
            raise ApiError(400, "Invalid credentials")
        self.token = "tok-alice"
        return {"token": "tok-alice", "userId": "u1", "username": username}

    def logout(self):
        self.calls.append(("logout",))
        self.token = None

    def list_tasks(self):
        self._check()
        self.calls.append(("list",))
        return [TaskView(**vars(t)) for t in self.tasks.values()]

    def create_task(self, text, due_date=None):
        self._check()
        task_id = f"t{self._next_id}"
        self._next_id += 1
        self.tasks[task_id] = TaskView(id=task_id, text=text, due_date=due_date)
        self.calls.append(("create", text))
        return task_id

    def update_task(self, task_id, **fields):
        self._check()
        self.calls.append(("update", task_id, fields))
        if task_id == self.fail_update_on:
            raise ApiError(500, "boom")
        if task_id not in self.tasks:
            raise ApiError(404, "Not found")
        for name, value in fields.items():
            setattr(self.tasks[task_id], name, value)
        return task_id

    def delete_task(self, task_id):
        self._check()
        self.calls.append(("delete", task_id))
        if task_id not in self.tasks:
            raise ApiError(404, "Not found")
        del self.tasks[task_id]

    def seed(self, *texts):
        for order, text in enumerate(texts, start=1):
            task_id = f"t{self._next_id}"
            self._next_id += 1
            self.tasks[task_id] = TaskView(id=task_id, text=text, order=order)


class FakePrompter:
    def __init__(self, confirm=True, answer=None):
        self.alerts = []
        self.confirm_answer = confirm
        self.answer = answer
        self.confirm_asked = []

    def alert(self, message):
        self.alerts.append(message)

    def confirm(self, message):
        self.confirm_asked.append(message)
        return self.confirm_answer

    def prompt(self, message, default=""):
        return self.answer


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def permission_granted(self):
        return True

    def notify(self, title, body):
        self.sent.append(body)


class ClientAppTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.storage_path = Path(self._tmp.name) / "storage.json"
        self.api = FakeApi()
        self.prompter = FakePrompter()
        self.notifier = RecordingNotifier()

    def tearDown(self):
        self._tmp.cleanup()

    def _app(self):
        return TaskClientApp(
            api=self.api,
            storage=LocalStorage(self.storage_path),
            notifier=self.notifier,
            prompter=self.prompter,
            clock=lambda: NOW,
        )

    def _logged_in_app(self):
        app = self._app()
        app.login("alice", "pw")
        self.api.calls.clear()
        return app

    def _texts(self, app):
        return [t.text for t in app.state.tasks]


class TestAuthFlow(ClientAppTestCase):

    def test_login_persists_session_and_loads(self):
        self.api.seed("buy milk")
        app = self._app()

        app.login(" alice ", "pw")

        self.assertEqual(app.state.username, "alice")
        self.assertEqual(app.state.status, "Logged in as alice")
        self.assertEqual(self._texts(app), ["buy milk"])
        storage = LocalStorage(self.storage_path)
        self.assertEqual(storage.get(AUTH_TOKEN_KEY), "tok-alice")
        self.assertEqual(storage.get(USERNAME_KEY), "alice")

    def test_session_restored_on_next_start(self):
        self._app().login("alice", "pw")
        self.api.token = None

        app = self._app()

        self.assertTrue(app.state.logged_in)
        self.assertEqual(self.api.token, "tok-alice")
        self.assertEqual(app.state.status, "Logged in as alice")

    def test_blank_credentials_are_not_sent(self):
        app = self._app()
        app.login("alice", "   ")
        app.register("", "pw")

        self.assertEqual(self.api.calls, [])
        self.assertTrue(app.state.status_is_error)
        self.assertEqual(app.state.status, "Enter username and password")

    def test_failed_login_shows_server_message(self):
        app = self._app()
        app.login("alice", "wrong")

        self.assertFalse(app.state.logged_in)
        self.assertEqual(app.state.status, "Invalid credentials")
        self.assertTrue(app.state.status_is_error)

    def test_register(self):
        app = self._app()
        app.register("alice", "pw")
        self.assertEqual(app.state.status, "Registered successfully. Now login.")

        app.register("taken", "pw")
        self.assertEqual(app.state.status, "Username taken")

    def test_logout_clears_everything(self):
        self.api.seed("buy milk")
        app = self._logged_in_app()

        app.logout()

        self.assertFalse(app.state.logged_in)
        self.assertEqual(app.state.tasks, [])
        self.assertIn(("logout",), self.api.calls)
        self.assertIsNone(LocalStorage(self.storage_path).get(AUTH_TOKEN_KEY))

    def test_expired_session_on_load(self):
        app = self._logged_in_app()
        self.api.valid_tokens.clear()

        app.load()

        self.assertFalse(app.state.logged_in)
        self.assertEqual(app.state.status, "Session expired. Login again.")
        self.assertIsNone(LocalStorage(self.storage_path).get(AUTH_TOKEN_KEY))

    def test_load_without_login(self):
        app = self._app()
        app.load()
        self.assertEqual(app.state.status, "Login to see your tasks.")
        self.assertEqual(self.api.calls, [])


class TestMutations(ClientAppTestCase):

    def test_mutations_require_login(self):
        app = self._app()
        app.add("buy milk")
        self.assertEqual(self.prompter.alerts, ["Login first"])
        self.assertEqual(self.api.calls, [])

    def test_add_refetches_list(self):
        app = self._logged_in_app()

        app.add("  buy milk  ")

        self.assertEqual(self.api.calls, [("create", "buy milk"), ("list",)])
        self.assertEqual(self._texts(app), ["buy milk"])

    def test_add_blank_text(self):
        app = self._logged_in_app()
        app.add("   ")
        self.assertEqual(self.prompter.alerts, ["Enter task"])
        self.assertEqual(self.api.calls, [])

    def test_toggle_flips_done(self):
        self.api.seed("buy milk")
        app = self._logged_in_app()

        app.toggle(1)
        self.assertTrue(app.state.tasks[0].done)
        app.toggle(1)
        self.assertFalse(app.state.tasks[0].done)
        app.toggle(1, done=True)
        self.assertTrue(app.state.tasks[0].done)

    def test_unknown_position(self):
        self.api.seed("buy milk")
        app = self._logged_in_app()

        app.toggle(5)

        self.assertEqual(self.prompter.alerts, ["No task number 5"])
        self.assertEqual(self.api.calls, [])

    def test_edit_prompts_when_no_text_given(self):
        self.api.seed("buy milk")
        app = self._logged_in_app()
        self.prompter.answer = "buy oat milk"

        app.edit(1)

        self.assertEqual(self._texts(app), ["buy oat milk"])

    def test_edit_cancelled(self):
        self.api.seed("buy milk")
        app = self._logged_in_app()
        self.prompter.answer = None

        app.edit(1)

        self.assertEqual(self.api.calls, [])

    def test_delete_requires_confirmation(self):
        self.api.seed("buy milk")
        app = self._logged_in_app()

        self.prompter.confirm_answer = False
        app.delete(1)
        self.assertEqual(self._texts(app), ["buy milk"])

        self.prompter.confirm_answer = True
        app.delete(1)
        self.assertEqual(self._texts(app), [])
        self.assertEqual(self.prompter.confirm_asked, ["Delete this task?"] * 2)

    def test_failed_mutation_alerts_and_reloads(self):
        self.api.seed("buy milk")
        app = self._logged_in_app()
        del self.api.tasks["t1"]

        app.toggle(1)

        self.assertEqual(self.prompter.alerts, ["Not found"])
        self.assertEqual(app.state.tasks, [])


class TestReorder(ClientAppTestCase):

    def test_sends_one_put_per_row_in_order_then_reloads(self):
        self.api.seed("A", "B", "C")
        app = self._logged_in_app()

        app.reorder(1, 3)

        self.assertEqual(self.api.calls, [
            ("update", "t2", {"order": 1}),
            ("update", "t3", {"order": 2}),
            ("update", "t1", {"order": 3}),
            ("list",),
        ])
        self.assertEqual(self._texts(app), ["B", "C", "A"])

    def test_same_position_sends_nothing(self):
        self.api.seed("A", "B")
        app = self._logged_in_app()
        app.reorder(2, 2)
        self.assertEqual(self.api.calls, [])

    def test_interrupted_reorder_stops_and_reloads(self):
        self.api.seed("A", "B", "C")
        app = self._logged_in_app()
        self.api.fail_update_on = "t3"

        app.reorder(1, 3)

        updates = [c for c in self.api.calls if c[0] == "update"]
        self.assertEqual([c[1] for c in updates], ["t2", "t3"])
        self.assertEqual(self.prompter.alerts, ["boom"])
        self.assertEqual(self.api.calls[-1], ("list",))


class TestRemindersAndTheme(ClientAppTestCase):

    def test_load_notifies_due_soon_tasks(self):
        self.api.seed("soon", "later")
        self.api.tasks["t1"].due_date = NOW + timedelta(minutes=5)
        self.api.tasks["t2"].due_date = NOW + timedelta(hours=2)
        app = self._logged_in_app()
        self.notifier.sent.clear()

        app.load()

        self.assertEqual(len(self.notifier.sent), 1)
        self.assertIn("soon is due soon", self.notifier.sent[0])

    def test_load_without_reminders(self):
        self.api.seed("soon")
        self.api.tasks["t1"].due_date = NOW + timedelta(minutes=5)
        app = self._logged_in_app()
        self.notifier.sent.clear()

        app.load(remind=False)

        self.assertEqual(self.notifier.sent, [])

    def test_theme_is_persisted_and_applied_on_next_start(self):
        app = self._app()
        self.assertEqual(app.state.theme, LIGHT)

        self.assertEqual(app.toggle_theme(), DARK)

        self.assertEqual(LocalStorage(self.storage_path).get(THEME_KEY), DARK)
        self.assertEqual(self._app().state.theme, DARK)
        self.assertIn("░", self._app().view())


if __name__ == '__main__':
    unittest.main()
