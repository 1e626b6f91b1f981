"""
Pydantic schemas for the task API.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ═══════════════════════════════════════════════════════════════════════════════
# Users
# ═══════════════════════════════════════════════════════════════════════════════


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: uuid.UUID
    name: str
    email: str


class AuthResponse(BaseModel):
    token: str
    user: UserOut


# ═══════════════════════════════════════════════════════════════════════════════
# Tasks
# ═══════════════════════════════════════════════════════════════════════════════


class TaskCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


class TaskUpdate(BaseModel):
    """
    Partial update.  Only fields present in the request body are applied;
    anything else in the body (``user_id``, ``created_at``…) is ignored.
    """

    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: Optional[str]) -> str:
        if value is None or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("completed")
    @classmethod
    def _completed_not_null(cls, value: Optional[bool]) -> bool:
        if value is None:
            raise ValueError("must be true or false")
        return value


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    task_id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: Optional[str] = None
    completed: bool
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive timestamps; they are stored as UTC
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class MessageResponse(BaseModel):
    message: str
