# domain/model/task.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from domain.model.errors import PermissionDeniedError, ValidationError


class OwnershipPolicy(str, Enum):
    """Who may update or delete a task.

    SHARED: any authenticated user who knows the task id.
    OWNER: only the user who created it.
    """
    SHARED = 'shared'
    OWNER = 'owner'


class _Unset:
    """Marker for a patch field the caller did not supply."""

    def __repr__(self) -> str:
        return 'UNSET'


UNSET = _Unset()


def normalize_text(text: str | None) -> str:
    """Trim task text; raise ValidationError if nothing is left."""
    cleaned = (text or '').strip()
    if not cleaned:
        raise ValidationError("Text is required")
    return cleaned


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def next_revision(rev: str | None) -> str:
    """Bump a "<n>-<hex>" revision token."""
    generation = 0
    if rev:
        head, _, _ = rev.partition('-')
        if head.isdigit():
            generation = int(head)
    return f"{generation + 1}-{uuid.uuid4().hex}"


# ── Value Objects ────────────────────────────────────────


@dataclass(frozen=True)
class TaskPatch:
    """Partial update; fields left as UNSET are not touched."""
    text: str | _Unset = UNSET
    done: bool | _Unset = UNSET
    due_date: datetime | None | _Unset = UNSET
    order: int | _Unset = UNSET

    @property
    def supplied(self) -> list[str]:
        return [
            name for name in ('text', 'done', 'due_date', 'order')
            if getattr(self, name) is not UNSET
        ]


# ── Task Domain Model ────────────────────────────────────


@dataclass
class Task:
    """Domain model representing a user-owned to-do item."""
    id: str
    owner_id: str
    text: str
    created_at: datetime
    done: bool = False
    due_date: datetime | None = None
    order: int = 0
    updated_at: datetime | None = None
    rev: str | None = None

    # ── factory ───────────────────────────────────────────

    @staticmethod
    def create(owner_id: str, text: str, order: int, due_date: datetime | None = None) -> 'Task':
        """Create a new, not-done Task with a generated ID."""
        return Task(
            id=uuid.uuid4().hex,
            owner_id=owner_id,
            text=normalize_text(text),
            created_at=datetime.now(timezone.utc),
            done=False,
            due_date=as_utc(due_date),
            order=order,
        )

    # ── queries ───────────────────────────────────────────

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id

    def is_overdue(self, now: datetime) -> bool:
        return not self.done and self.due_date is not None and self.due_date < now

    def check_ownership(self, user_id: str, policy: OwnershipPolicy) -> None:
        """Raise PermissionDeniedError if the policy forbids user_id from changing this task."""
        if policy is OwnershipPolicy.OWNER and not self.is_owned_by(user_id):
            raise PermissionDeniedError("Task belongs to another user")

    # ── state transitions ─────────────────────────────────

    def apply(self, patch: TaskPatch) -> None:
        """Apply supplied patch fields and stamp updated_at."""
        if patch.text is not UNSET:
            self.text = normalize_text(patch.text)
        if patch.done is not UNSET:
            self.done = patch.done
        if patch.due_date is not UNSET:
            self.due_date = as_utc(patch.due_date)
        if patch.order is not UNSET:
            self.order = patch.order
        self.updated_at = datetime.now(timezone.utc)
