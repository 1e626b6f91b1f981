"""
TaskService — task CRUD scoped to the owning user.

A task is only visible, mutable or deletable through its owner.  Lookups
distinguish "no such task" (``NotFound``) from "someone else's task"
(``Forbidden``); neither outcome reveals anything about the task itself.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import Forbidden, NotFound, StorageError, ValidationError
from database.helpers import (
    apply_task_patch,
    get_task,
    insert_task,
    list_tasks_for_user,
    remove_task,
)
from database.models import Task
from utils.validators import clean_description, validate_title

logger = logging.getLogger(__name__)

_PATCHABLE = ("title", "description", "completed")


def parse_id(value: str | uuid.UUID) -> uuid.UUID:
    """Canonical identifier, or ``NotFound`` for anything that is not a UUID."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFound() from None


class TaskService:
    def __init__(self, session: AsyncSession):
        self._session = session

    @asynccontextmanager
    async def _storage(self, action: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.exception("Storage failure while trying to %s", action)
            await self._session.rollback()
            raise StorageError() from exc

    async def _owned_task(self, task_id: str | uuid.UUID, owner_id: str | uuid.UUID) -> Task:
        tid = parse_id(task_id)
        oid = parse_id(owner_id)
        async with self._storage("load task"):
            task = await get_task(self._session, tid)
        if task is None:
            raise NotFound()
        if task.user_id != oid:
            logger.warning("User %s denied access to task %s", oid, tid)
            raise Forbidden()
        return task

    async def create(
        self,
        owner_id: str | uuid.UUID,
        title: str,
        description: Optional[str] = None,
    ) -> Task:
        title = validate_title(title)
        async with self._storage("create task"):
            task = await insert_task(
                self._session, parse_id(owner_id), title, clean_description(description),
            )
            await self._session.commit()
        logger.info("Created task %s for user %s", task.task_id, task.user_id)
        return task

    async def list_for_owner(self, owner_id: str | uuid.UUID) -> List[Task]:
        async with self._storage("list tasks"):
            return await list_tasks_for_user(self._session, parse_id(owner_id))

    async def get(self, task_id: str | uuid.UUID, owner_id: str | uuid.UUID) -> Task:
        return await self._owned_task(task_id, owner_id)

    async def update(
        self,
        task_id: str | uuid.UUID,
        owner_id: str | uuid.UUID,
        patch: Dict[str, Any],
    ) -> Task:
        """
        Apply *patch* to an owned task.

        Only ``title``, ``description`` and ``completed`` are honoured; the
        owner and creation time never change.
        """
        task = await self._owned_task(task_id, owner_id)
        changes = {k: v for k, v in patch.items() if k in _PATCHABLE}
        if "title" in changes:
            changes["title"] = validate_title(changes["title"])
        if "description" in changes:
            changes["description"] = clean_description(changes["description"])
        if "completed" in changes and not isinstance(changes["completed"], bool):
            raise ValidationError("completed: must be a boolean")

        async with self._storage("update task"):
            await apply_task_patch(self._session, task, changes)
            await self._session.commit()
        logger.info("Updated task %s (%s)", task.task_id, ", ".join(changes) or "no changes")
        return task

    async def delete(self, task_id: str | uuid.UUID, owner_id: str | uuid.UUID) -> None:
        task = await self._owned_task(task_id, owner_id)
        async with self._storage("delete task"):
            await remove_task(self._session, task)
            await self._session.commit()
        logger.info("Deleted task %s", task.task_id)
