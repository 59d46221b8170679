"""
Auto-schedule API endpoint
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlmodel import Session

from weekplanner_api.database import get_session
from weekplanner_api.models import (
    AutoScheduleResponse,
    ErrorResponse,
    PlacementResponse,
    UnplacedResponse,
)
from weekplanner_api.scheduler_service import run_auto_schedule

router = APIRouter(prefix="/api", tags=["scheduler"])


# Plain def: FastAPI runs it in the threadpool, so waiting on the run lock
# never blocks the event loop
@router.post(
    "/auto-schedule",
    response_model=AutoScheduleResponse,
    responses={
        409: {"model": ErrorResponse, "description": "Another run is in progress"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
def auto_schedule_tasks(
    session: Annotated[Session, Depends(get_session)],
) -> AutoScheduleResponse:
    """Place every unscheduled, unfinished task into the earliest free slot"""
    result = run_auto_schedule(session)

    return AutoScheduleResponse(
        success=True,
        scheduled=len(result.placed),
        unscheduled=len(result.unplaced),
        placements=[
            PlacementResponse(
                task_id=placed.task_id,
                title=placed.title,
                start=placed.slot.start,
                end=placed.slot.end,
            )
            for placed in result.placed
        ],
        skipped=[
            UnplacedResponse(
                task_id=unplaced.task_id,
                title=unplaced.title,
                reason=unplaced.reason,
            )
            for unplaced in result.unplaced
        ],
    )
