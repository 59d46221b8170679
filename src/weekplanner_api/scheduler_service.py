"""
Database-backed store for the auto-scheduler
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from weekplanner_api.common.error_handlers import StorageError
from weekplanner_api.config import settings
from weekplanner_api.models import (
    ScheduleSettings,
    ScheduleSettingsCreate,
    Task,
    TimeBlock,
    TimeBlockCreate,
)
from weekplanner_api.scheduling import ScheduleRunResult, auto_schedule
from weekplanner_api.services import (
    settings_service,
    task_service,
    time_block_service,
)

logger = logging.getLogger(__name__)


class SessionSchedulerStore:
    """Scheduler persistence over one SQLModel session.

    Writes go through the services and commit one at a time. Every store
    call turns driver errors into ``StorageError``, including the lookups
    and refreshes around a commit, so a failed run reports a single error
    type.
    """

    def __init__(self, session: Session):
        self.session = session

    def _guard(self, description: str, operation):
        try:
            return operation()
        except SQLAlchemyError as e:
            logger.error(f"Failed to {description}: {e}")
            raise StorageError(f"Failed to {description}: {e}") from e

    def list_tasks(self) -> list[Task]:
        return self._guard("load tasks", lambda: task_service.list_tasks(self.session))

    def update_task(
        self, task_id: UUID, scheduled_start: datetime, scheduled_end: datetime
    ) -> Task:
        return self._guard(
            f"schedule task {task_id}",
            lambda: task_service.set_schedule(
                self.session, task_id, scheduled_start, scheduled_end
            ),
        )

    def list_time_blocks(
        self, range_start: datetime, range_end: datetime
    ) -> list[TimeBlock]:
        """Every block that overlaps the range, including ones crossing its edges"""
        return self._guard(
            "load calendar blocks",
            lambda: time_block_service.list_overlapping(
                self.session, range_start, range_end
            ),
        )

    def create_time_block(self, block: TimeBlockCreate) -> TimeBlock:
        return self._guard(
            "create calendar block",
            lambda: time_block_service.create_block(self.session, block),
        )

    def get_settings(self) -> ScheduleSettings | None:
        return self._guard(
            "load settings", lambda: settings_service.get_settings(self.session)
        )

    def upsert_settings(self, data: ScheduleSettingsCreate) -> ScheduleSettings:
        return self._guard(
            "store settings",
            lambda: settings_service.upsert_settings(self.session, data),
        )


def run_auto_schedule(session: Session) -> ScheduleRunResult:
    """Run the auto-scheduler against the database with configured limits"""
    return auto_schedule(
        SessionSchedulerStore(session),
        lock_timeout=settings.schedule_lock_timeout_seconds,
        horizon_days=settings.schedule_horizon_days,
        step_minutes=settings.slot_granularity_minutes,
    )
