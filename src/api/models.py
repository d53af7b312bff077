"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from domain.model.task import Task, TaskPatch


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Auth ─────────────────────────────────────────────────────


class CredentialsRequest(CamelModel):
    """Request model for register and login."""
    username: Optional[str] = None
    password: Optional[str] = None


class RegisterResponse(CamelModel):
    success: bool = True
    user_id: str


class LoginResponse(CamelModel):
    token: str
    user_id: str
    username: str


class SuccessResponse(CamelModel):
    success: bool = True


# ── Tasks ────────────────────────────────────────────────────


class TaskCreateRequest(CamelModel):
    """Request model for creating a task."""
    text: Optional[str] = None
    due_date: Optional[datetime] = Field(None, description="Due date; naive values are read as UTC")

    @field_validator('due_date', mode='before')
    @classmethod
    def blank_due_date_is_none(cls, v):
        """Empty date inputs arrive as ""."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class TaskUpdateRequest(CamelModel):
    """Partial update: only fields present in the body are applied."""
    text: Optional[str] = None
    done: Optional[bool] = None
    due_date: Optional[datetime] = None
    order: Optional[int] = None

    @field_validator('due_date', mode='before')
    @classmethod
    def blank_due_date_is_none(cls, v):
        """Empty date inputs arrive as ""."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_patch(self) -> TaskPatch:
        """Build a TaskPatch from the explicitly supplied fields.

        An explicit null is kept for dueDate (clears it) and text (rejected
        later as empty); for done and order it is ignored.
        """
        supplied = {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None or name in ('due_date', 'text')
        }
        return TaskPatch(**supplied)


class TaskResponse(CamelModel):
    """Response model for a task."""
    id: str
    text: str
    done: bool = False
    created_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    order: int = 0

    @classmethod
    def from_domain(cls, task: Task) -> 'TaskResponse':
        return cls(
            id=task.id,
            text=task.text,
            done=task.done,
            created_at=task.created_at,
            due_date=task.due_date,
            order=task.order or 0,
        )


class TaskWriteResponse(CamelModel):
    success: bool = True
    id: str
