"""
Database helper functions — credential store and task store.

Helpers only flush; committing is left to the caller.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Task, User


def _to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    return uuid.UUID(value) if isinstance(value, str) else value


# ── Users ───────────────────────────────────────────────────────────


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: str | uuid.UUID) -> Optional[User]:
    return await session.get(User, _to_uuid(user_id))


async def create_user(
    session: AsyncSession,
    name: str,
    email: str,
    password_hash: str,
) -> User:
    """Insert a ``User`` row.  *email* must already be normalised."""
    user = User(
        user_id=uuid.uuid4(),
        name=name,
        email=email,
        password_hash=password_hash,
    )
    session.add(user)
    await session.flush()
    return user


# ── Tasks ───────────────────────────────────────────────────────────


async def insert_task(
    session: AsyncSession,
    user_id: str | uuid.UUID,
    title: str,
    description: str | None = None,
) -> Task:
    task = Task(
        task_id=uuid.uuid4(),
        user_id=_to_uuid(user_id),
        title=title,
        description=description,
        completed=False,
    )
    session.add(task)
    await session.flush()
    return task


async def get_task(session: AsyncSession, task_id: str | uuid.UUID) -> Optional[Task]:
    return await session.get(Task, _to_uuid(task_id))


async def list_tasks_for_user(
    session: AsyncSession,
    user_id: str | uuid.UUID,
) -> List[Task]:
    """All tasks owned by *user_id*, newest first; equal timestamps fall back to id order."""
    result = await session.execute(
        select(Task)
        .where(Task.user_id == _to_uuid(user_id))
        .order_by(Task.created_at.desc(), Task.task_id.desc())
    )
    return list(result.scalars().all())


async def apply_task_patch(
    session: AsyncSession,
    task: Task,
    patch: Dict[str, Any],
) -> Task:
    """Set the patched columns on *task*.  Unknown keys are ignored."""
    for field in ("title", "description", "completed"):
        if field in patch:
            setattr(task, field, patch[field])
    await session.flush()
    return task


async def remove_task(session: AsyncSession, task: Task) -> None:
    await session.delete(task)
    await session.flush()
