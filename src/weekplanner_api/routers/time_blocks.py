from datetime import datetime, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from weekplanner_api.common.error_handlers import ValidationError
from weekplanner_api.database import get_session
from weekplanner_api.models import ErrorResponse, TimeBlockCreate, TimeBlockResponse
from weekplanner_api.services import time_block_service

router = APIRouter(prefix="/api/time-blocks", tags=["time-blocks"])

DEFAULT_WINDOW_DAYS = 7


@router.get("", response_model=list[TimeBlockResponse])
async def list_time_blocks(
    session: Annotated[Session, Depends(get_session)],
    start: Annotated[datetime | None, Query()] = None,
    end: Annotated[datetime | None, Query()] = None,
) -> list[TimeBlockResponse]:
    """List blocks that fall entirely within [start, end] (default: the next 7 days)"""
    range_start = start or datetime.now()
    range_end = end or range_start + timedelta(days=DEFAULT_WINDOW_DAYS)
    if range_end <= range_start:
        raise ValidationError("end must be after start", field="end")

    blocks = time_block_service.list_blocks(session, range_start, range_end)
    return [TimeBlockResponse.model_validate(block) for block in blocks]


@router.post(
    "",
    response_model=TimeBlockResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_time_block(
    block_data: TimeBlockCreate,
    session: Annotated[Session, Depends(get_session)],
) -> TimeBlockResponse:
    """Create a calendar block"""
    block = time_block_service.create_block(session, block_data)
    return TimeBlockResponse.model_validate(block)


@router.delete(
    "/{block_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Block not found"}},
)
async def delete_time_block(
    block_id: str,
    session: Annotated[Session, Depends(get_session)],
) -> None:
    """Delete a calendar block"""
    time_block_service.delete_block(session, block_id)
