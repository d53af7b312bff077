"""Text rendering of the client state.

render() is a pure projection of AppState: it reads nothing else and is
called again after every change.
"""

from dataclasses import dataclass
from datetime import datetime

from client.state import DARK, AppState

PROGRESS_BAR_WIDTH = 20


@dataclass(frozen=True)
class Palette:
    done: str
    todo: str
    overdue: str
    bar_fill: str
    bar_empty: str
    error: str


THEMES = {
    "light": Palette(done="[x]", todo="[ ]", overdue="!! overdue", bar_fill="#", bar_empty="-", error="! "),
    DARK: Palette(done="■", todo="□", overdue="▲ overdue", bar_fill="█", bar_empty="░", error="▲ "),
}


def format_due(due: datetime) -> str:
    return "Due: " + due.astimezone().strftime("%Y-%m-%d %H:%M")


def render_progress(total: int, done: int, palette: Palette) -> str:
    percent = 0 if total == 0 else done * 100 // total
    filled = 0 if total == 0 else done * PROGRESS_BAR_WIDTH // total
    bar = palette.bar_fill * filled + palette.bar_empty * (PROGRESS_BAR_WIDTH - filled)
    return f"{done} of {total} tasks done  [{bar}] {percent}%"


def render(state: AppState, now: datetime) -> str:
    palette = THEMES.get(state.theme, THEMES["light"])
    lines = []

    if state.status:
        prefix = palette.error if state.status_is_error else ""
        lines.append(prefix + state.status)

    width = len(str(len(state.tasks)))
    for position, task in enumerate(state.tasks, start=1):
        row = f"{position:>{width}}. {palette.done if task.done else palette.todo} {task.text}"
        if task.due_date:
            row += f"  ({format_due(task.due_date)})"
            if task.is_overdue(now):
                row += f"  {palette.overdue}"
        lines.append(row)

    lines.append(render_progress(len(state.tasks), state.done_count, palette))
    return "\n".join(lines)
