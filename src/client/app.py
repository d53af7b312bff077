"""Task client controller.

Every mutation sends its request(s) and then reloads the whole list from
the server; nothing is patched locally.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Protocol

from client.api import ApiError, TaskApiClient
from client.reminders import Notifier, schedule_reminders
from client.render import render
from client.reorder import move, renumber
from client.state import DARK, LIGHT, AppState, TaskView
from client.storage import AUTH_TOKEN_KEY, THEME_KEY, USERNAME_KEY, LocalStorage

logger = logging.getLogger(__name__)


class Prompter(Protocol):
    """Blocking dialogs: guard messages, confirmations and text input."""
    def alert(self, message: str) -> None: ...
    def confirm(self, message: str) -> bool: ...
    def prompt(self, message: str, default: str = "") -> str | None: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskClientApp:
    def __init__(
        self,
        api: TaskApiClient,
        storage: LocalStorage,
        notifier: Notifier,
        prompter: Prompter,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.api = api
        self.storage = storage
        self.notifier = notifier
        self.prompter = prompter
        self.clock = clock
        self.state = AppState.from_storage(storage)
        self.api.token = self.state.token

    def view(self) -> str:
        return render(self.state, self.clock())

    # ── auth ─────────────────────────────────────────────────

    def register(self, username: str, password: str) -> None:
        username, password = username.strip(), password.strip()
        if not username or not password:
            self.state.set_status("Enter username and password", is_error=True)
            return

        try:
            self.api.register(username, password)
        except ApiError as e:
            self.state.set_status(e.message or "Register failed", is_error=True)
            return
        self.state.set_status("Registered successfully. Now login.")

    def login(self, username: str, password: str) -> None:
        username, password = username.strip(), password.strip()
        if not username or not password:
            self.state.set_status("Enter username and password", is_error=True)
            return

        try:
            data = self.api.login(username, password)
        except ApiError as e:
            self.state.set_status(e.message or "Login failed", is_error=True)
            return

        self.state.token = data["token"]
        self.state.username = data["username"]
        self.storage.set(AUTH_TOKEN_KEY, self.state.token)
        self.storage.set(USERNAME_KEY, self.state.username)
        self.state.set_status(f"Logged in as {self.state.username}")
        self.load()

    def logout(self) -> None:
        if self.state.logged_in:
            try:
                self.api.logout()
            except ApiError as e:
                # The local session is dropped either way
                logger.warning("Server logout failed", extra={"status_code": e.status_code})
        self._forget_session()
        self.state.set_status("Logged out.")
        self.state.tasks = []

    def _forget_session(self) -> None:
        self.state.token = None
        self.state.username = None
        self.api.token = None
        self.storage.remove(AUTH_TOKEN_KEY)
        self.storage.remove(USERNAME_KEY)

    # ── tasks ────────────────────────────────────────────────

    def load(self, remind: bool = True) -> None:
        """Fetch the list, replace the snapshot and fire due-soon reminders."""
        if not self.state.logged_in:
            self.state.set_status("Login to see your tasks.", is_error=True)
            self.state.tasks = []
            return

        try:
            tasks = self.api.list_tasks()
        except ApiError as e:
            if e.status_code == 401:
                self._forget_session()
                self.state.tasks = []
                self.state.set_status("Session expired. Login again.", is_error=True)
            else:
                self.state.set_status(e.message, is_error=True)
            return

        self.state.tasks = sorted(tasks, key=lambda t: t.order or 0)
        if remind:
            schedule_reminders(self.state.tasks, self.notifier, self.clock())

    def _require_login(self) -> bool:
        if not self.state.logged_in:
            self.prompter.alert("Login first")
            return False
        return True

    def _task_at(self, position: int) -> TaskView | None:
        if not 1 <= position <= len(self.state.tasks):
            self.prompter.alert(f"No task number {position}")
            return None
        return self.state.tasks[position - 1]

    def _mutate(self, request: Callable[[], object]) -> None:
        try:
            request()
        except ApiError as e:
            self.prompter.alert(e.message)
        self.load()

    def add(self, text: str, due_date: datetime | None = None) -> None:
        if not self._require_login():
            return
        text = text.strip()
        if not text:
            self.prompter.alert("Enter task")
            return
        self._mutate(lambda: self.api.create_task(text, due_date))

    def toggle(self, position: int, done: bool | None = None) -> None:
        if not self._require_login():
            return
        task = self._task_at(position)
        if task is None:
            return
        new_done = (not task.done) if done is None else done
        self._mutate(lambda: self.api.update_task(task.id, done=new_done))

    def edit(self, position: int, text: str | None = None) -> None:
        if not self._require_login():
            return
        task = self._task_at(position)
        if task is None:
            return
        if text is None:
            text = self.prompter.prompt("Edit task", task.text)
        if not text:
            return
        self._mutate(lambda: self.api.update_task(task.id, text=text))

    def delete(self, position: int) -> None:
        if not self._require_login():
            return
        task = self._task_at(position)
        if task is None:
            return
        if not self.prompter.confirm("Delete this task?"):
            return
        self._mutate(lambda: self.api.delete_task(task.id))

    def reorder(self, src: int, dest: int) -> None:
        """Move the task at position src onto position dest and persist every order.

        One PUT per row, in sequence; an interruption leaves the list
        partially renumbered.
        """
        if not self._require_login():
            return
        if self._task_at(src) is None or self._task_at(dest) is None or src == dest:
            return

        ids = move([t.id for t in self.state.tasks], src - 1, dest - 1)
        try:
            for task_id, order in renumber(ids):
                self.api.update_task(task_id, order=order)
        except ApiError as e:
            self.prompter.alert(e.message)
        self.load()

    # ── theme ────────────────────────────────────────────────

    def toggle_theme(self) -> str:
        self.state.theme = LIGHT if self.state.theme == DARK else DARK
        self.storage.set(THEME_KEY, self.state.theme)
        return self.state.theme
