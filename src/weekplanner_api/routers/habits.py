from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from weekplanner_api.database import get_session
from weekplanner_api.models import (
    ErrorResponse,
    HabitCreate,
    HabitResponse,
    HabitUpdate,
    TimeBlockResponse,
)
from weekplanner_api.scheduling import week_start_of
from weekplanner_api.services import habit_service

router = APIRouter(prefix="/api/habits", tags=["habits"])


@router.get("", response_model=list[HabitResponse])
async def list_habits(
    session: Annotated[Session, Depends(get_session)],
) -> list[HabitResponse]:
    """List all habits"""
    habits = habit_service.list_habits(session)
    return [HabitResponse.model_validate(habit) for habit in habits]


@router.post(
    "/materialize",
    response_model=list[TimeBlockResponse],
    status_code=status.HTTP_201_CREATED,
)
async def materialize_habit_blocks(
    session: Annotated[Session, Depends(get_session)],
    week_start: Annotated[date | None, Query()] = None,
    days: Annotated[int, Query(ge=1, le=31)] = 7,
) -> list[TimeBlockResponse]:
    """Create the week's habit blocks that do not exist yet"""
    blocks = habit_service.materialize_blocks(
        session, week_start or week_start_of(date.today()), days
    )
    return [TimeBlockResponse.model_validate(block) for block in blocks]


@router.get(
    "/{habit_id}",
    response_model=HabitResponse,
    responses={404: {"model": ErrorResponse, "description": "Habit not found"}},
)
async def get_habit(
    habit_id: str,
    session: Annotated[Session, Depends(get_session)],
) -> HabitResponse:
    """Get a single habit"""
    habit = habit_service.get_habit(session, habit_id)
    return HabitResponse.model_validate(habit)


@router.post(
    "",
    response_model=HabitResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_habit(
    habit_data: HabitCreate,
    session: Annotated[Session, Depends(get_session)],
) -> HabitResponse:
    """Create a new habit"""
    habit = habit_service.create_habit(session, habit_data)
    return HabitResponse.model_validate(habit)


@router.patch(
    "/{habit_id}",
    response_model=HabitResponse,
    responses={404: {"model": ErrorResponse, "description": "Habit not found"}},
)
async def update_habit(
    habit_id: str,
    habit_data: HabitUpdate,
    session: Annotated[Session, Depends(get_session)],
) -> HabitResponse:
    """Update a habit"""
    habit = habit_service.update_habit(session, habit_id, habit_data)
    return HabitResponse.model_validate(habit)


@router.delete(
    "/{habit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Habit not found"}},
)
async def delete_habit(
    habit_id: str,
    session: Annotated[Session, Depends(get_session)],
) -> None:
    """Delete a habit and its calendar blocks"""
    habit_service.delete_habit(session, habit_id)
