"""
Task API routes — every endpoint requires a bearer token.

Route prefix: /api/v1/tasks
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_current_user_id
from core.task_service import TaskService
from utils.schemas import MessageResponse, TaskCreate, TaskOut, TaskUpdate

router = APIRouter(tags=["tasks"])


async def task_service(session: AsyncSession = Depends(db_session)) -> TaskService:
    return TaskService(session)


@router.post("/tasks", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
async def create_task(
    req: TaskCreate,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(task_service),
):
    return await service.create(user_id, req.title, req.description)


@router.get("/tasks", response_model=List[TaskOut])
async def list_tasks(
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(task_service),
):
    """All of the caller's tasks, newest first."""
    return await service.list_for_owner(user_id)


@router.get("/tasks/{task_id}", response_model=TaskOut)
async def get_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(task_service),
):
    return await service.get(task_id, user_id)


@router.put("/tasks/{task_id}", response_model=TaskOut)
async def update_task(
    task_id: str,
    req: TaskUpdate,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(task_service),
):
    return await service.update(task_id, user_id, req.model_dump(exclude_unset=True))


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(task_service),
) -> Dict[str, Any]:
    await service.delete(task_id, user_id)
    return {"message": "Task deleted"}
