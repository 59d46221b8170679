from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from weekplanner_api.database import get_session
from weekplanner_api.models import (
    ErrorResponse,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from weekplanner_api.services import task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    session: Annotated[Session, Depends(get_session)],
) -> list[TaskResponse]:
    """List all tasks in creation order"""
    tasks = task_service.list_tasks(session)
    return [TaskResponse.model_validate(task) for task in tasks]


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse, "description": "Task not found"}},
)
async def get_task(
    task_id: str,
    session: Annotated[Session, Depends(get_session)],
) -> TaskResponse:
    """Get a single task"""
    task = task_service.get_task(session, task_id)
    return TaskResponse.model_validate(task)


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    task_data: TaskCreate,
    session: Annotated[Session, Depends(get_session)],
) -> TaskResponse:
    """Create a new task"""
    task = task_service.create_task(session, task_data)
    return TaskResponse.model_validate(task)


@router.patch(
    "/{task_id}",
    response_model=TaskResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Task not found"},
        422: {"model": ErrorResponse, "description": "Invalid schedule"},
    },
)
async def update_task(
    task_id: str,
    task_data: TaskUpdate,
    session: Annotated[Session, Depends(get_session)],
) -> TaskResponse:
    """Update a task; completing it or clearing its start frees its calendar blocks"""
    task = task_service.update_task(session, task_id, task_data)
    return TaskResponse.model_validate(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Task not found"}},
)
async def delete_task(
    task_id: str,
    session: Annotated[Session, Depends(get_session)],
) -> None:
    """Delete a task and its calendar blocks"""
    task_service.delete_task(session, task_id)
