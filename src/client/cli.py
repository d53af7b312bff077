#!/usr/bin/env python
"""Command line front end for the task client.

Usage examples:
    tasks register alice
    tasks login alice
    tasks add "buy milk" --due "2026-01-01 18:00"
    tasks done 1
    tasks move 1 3
"""

import argparse
import getpass
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# cli.py is at <root>/src/client/cli.py, src is two levels up
sys.path.insert(0, str(Path(__file__).parent.parent))

from client.api import API_URL, TaskApiClient
from client.app import TaskClientApp
from client.reminders import ConsoleNotifier
from client.storage import STORAGE_PATH, LocalStorage
from utils.logging import setup_structured_logging


class ConsolePrompter:
    """Prompter backed by stdin/stdout. With assume_yes, confirmations pass."""

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def alert(self, message: str) -> None:
        print(message, file=sys.stderr)

    def confirm(self, message: str) -> bool:
        if self.assume_yes:
            return True
        return input(f"{message} [y/N] ").strip().lower() in ("y", "yes")

    def prompt(self, message: str, default: str = "") -> str | None:
        answer = input(f"{message} [{default}]: ")
        return answer.strip() or None


def parse_due(value: str) -> datetime:
    """Parse a local date/time ("2026-01-01 18:00"); naive input is local time."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date/time: {value!r}")
    return parsed if parsed.tzinfo else parsed.astimezone()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tasks", description="Personal task list")
    parser.add_argument("--api-url", default=API_URL, help=f"API base URL (default: {API_URL})")
    parser.add_argument("--storage", type=Path, default=STORAGE_PATH, help="Local storage file")
    parser.add_argument("--no-notify", action="store_true", help="Suppress due-soon reminders")
    parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    sub = parser.add_subparsers(dest="command")

    for name in ("register", "login"):
        p = sub.add_parser(name)
        p.add_argument("username")
        p.add_argument("--password", help="Read interactively when omitted")
    sub.add_parser("logout")
    sub.add_parser("list")

    p = sub.add_parser("add")
    p.add_argument("text")
    p.add_argument("--due", type=parse_due)

    for name in ("done", "undone", "rm"):
        p = sub.add_parser(name)
        p.add_argument("position", type=int)

    p = sub.add_parser("edit")
    p.add_argument("position", type=int)
    p.add_argument("text", nargs="?")

    p = sub.add_parser("move")
    p.add_argument("src", type=int)
    p.add_argument("dest", type=int)

    sub.add_parser("theme")
    return parser


def run(app: TaskClientApp, args: argparse.Namespace) -> None:
    command = args.command or "list"

    if command in ("register", "login"):
        password = args.password if args.password is not None else getpass.getpass()
        getattr(app, command)(args.username, password)
        return
    if command == "logout":
        app.logout()
        return
    if command == "theme":
        app.toggle_theme()
        app.load()
        return

    if command == "list":
        app.load()
        return

    # Positions refer to the list as it is now
    app.load(remind=False)
    if command == "add":
        app.add(args.text, args.due)
    elif command in ("done", "undone"):
        app.toggle(args.position, done=command == "done")
    elif command == "edit":
        app.edit(args.position, args.text)
    elif command == "rm":
        app.delete(args.position)
    elif command == "move":
        app.reorder(args.src, args.dest)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_structured_logging("WARNING")

    with TaskApiClient(base_url=args.api_url) as api:
        app = TaskClientApp(
            api=api,
            storage=LocalStorage(args.storage),
            notifier=ConsoleNotifier(enabled=not args.no_notify),
            prompter=ConsolePrompter(assume_yes=args.yes),
        )
        run(app, args)
        print(app.view())
        return 1 if app.state.status_is_error else 0


if __name__ == "__main__":
    sys.exit(main())
