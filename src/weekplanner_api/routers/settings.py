"""Work-hour settings API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlmodel import Session

from weekplanner_api.database import get_session
from weekplanner_api.models import (
    ErrorResponse,
    ScheduleSettingsResponse,
    ScheduleSettingsUpdate,
)
from weekplanner_api.services import settings_service

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=ScheduleSettingsResponse)
async def get_settings(
    session: Annotated[Session, Depends(get_session)],
) -> ScheduleSettingsResponse:
    """Get work-hour settings, storing the defaults on first access."""
    settings_row = settings_service.get_or_create_settings(session)
    return ScheduleSettingsResponse.model_validate(settings_row)


@router.patch(
    "",
    response_model=ScheduleSettingsResponse,
    responses={422: {"model": ErrorResponse, "description": "Unusable work window"}},
)
async def update_settings(
    settings_data: ScheduleSettingsUpdate,
    session: Annotated[Session, Depends(get_session)],
) -> ScheduleSettingsResponse:
    """Update work hours, work days or the minimum block length."""
    settings_row = settings_service.update_settings(session, settings_data)
    return ScheduleSettingsResponse.model_validate(settings_row)
