"""
Services for tasks, habits, calendar blocks and work-hour settings
"""

import logging
from datetime import date, datetime, time, timedelta, UTC
from uuid import UUID, uuid4

from sqlmodel import Session, select

from weekplanner_api.base_service import BaseService
from weekplanner_api.common.error_handlers import (
    ValidationError,
    safe_execute,
)
from weekplanner_api.models import (
    BlockType,
    Habit,
    HabitCreate,
    HabitUpdate,
    PreferredTime,
    ScheduleSettings,
    ScheduleSettingsCreate,
    ScheduleSettingsUpdate,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
    TimeBlock,
    TimeBlockCreate,
    check_work_window,
    parse_time_of_day,
)
from weekplanner_api.scheduling.slots import calendar_weekday

logger = logging.getLogger(__name__)

PREFERRED_START_TIMES = {
    PreferredTime.MORNING: time(8, 0),
    PreferredTime.AFTERNOON: time(13, 0),
    PreferredTime.EVENING: time(18, 0),
}


class TimeBlockService(BaseService[TimeBlock, TimeBlockCreate, TimeBlockCreate]):
    """Calendar block service"""

    def __init__(self):
        super().__init__(TimeBlock)

    def _create_instance(self, data: TimeBlockCreate, **kwargs) -> TimeBlock:
        return TimeBlock.model_validate(data.model_dump())

    def list_blocks(
        self, session: Session, range_start: datetime, range_end: datetime
    ) -> list[TimeBlock]:
        """Blocks that lie entirely inside [range_start, range_end]"""
        statement = (
            select(TimeBlock)
            .where(TimeBlock.start_time >= range_start, TimeBlock.end_time <= range_end)
            .order_by(TimeBlock.start_time)
        )
        return list(session.exec(statement).all())

    def list_overlapping(
        self, session: Session, range_start: datetime, range_end: datetime
    ) -> list[TimeBlock]:
        """Blocks that occupy any time inside [range_start, range_end)"""
        statement = (
            select(TimeBlock)
            .where(TimeBlock.start_time < range_end, TimeBlock.end_time > range_start)
            .order_by(TimeBlock.start_time)
        )
        return list(session.exec(statement).all())

    def create_block(self, session: Session, data: TimeBlockCreate) -> TimeBlock:
        return self.create(session, data)

    def delete_block(self, session: Session, block_id: str | UUID) -> bool:
        return self.delete(session, block_id)

    def delete_by_reference(self, session: Session, reference_id: UUID) -> None:
        """Queue deletion of every block owned by a task or habit (no commit)"""
        statement = select(TimeBlock).where(TimeBlock.reference_id == reference_id)
        for block in session.exec(statement).all():
            session.delete(block)


time_block_service = TimeBlockService()


class TaskService(BaseService[Task, TaskCreate, TaskUpdate]):
    """Task service using base service"""

    def __init__(self):
        super().__init__(Task)

    def _create_instance(self, data: TaskCreate, **kwargs) -> Task:
        return Task.model_validate(data.model_dump())

    def list_tasks(self, session: Session) -> list[Task]:
        return self.get_all(session)

    def get_task(self, session: Session, task_id: str | UUID) -> Task:
        return self.get_by_id(session, task_id)

    def create_task(self, session: Session, task_data: TaskCreate) -> Task:
        task = self.create(session, task_data)
        logger.info(f"Created task {task.id} ({task.title})")
        return task

    def update_task(
        self, session: Session, task_id: str | UUID, task_data: TaskUpdate
    ) -> Task:
        """Update a task and keep its calendar blocks consistent.

        Marking a task done or clearing its scheduled start removes the
        task's blocks; done also clears the schedule itself.
        """
        task = self.get_by_id(session, task_id)
        update_data = task_data.model_dump(exclude_unset=True)

        marked_done = update_data.get("status") == TaskStatus.DONE
        schedule_cleared = (
            "scheduled_start" in update_data and update_data["scheduled_start"] is None
        )
        if marked_done or schedule_cleared:
            update_data["scheduled_start"] = None
            update_data["scheduled_end"] = None

        start = update_data.get("scheduled_start", task.scheduled_start)
        end = update_data.get("scheduled_end", task.scheduled_end)
        if start is not None and end is not None and end <= start:
            raise ValidationError(
                "scheduled_end must be after scheduled_start", field="scheduled_end"
            )

        def update_operation():
            for field, value in update_data.items():
                setattr(task, field, value)
            task.updated_at = datetime.now(UTC)
            session.add(task)
            if marked_done or schedule_cleared:
                time_block_service.delete_by_reference(session, task.id)
            session.flush()
            return task

        task = safe_execute(session, update_operation)
        session.refresh(task)
        return task

    def set_schedule(
        self,
        session: Session,
        task_id: str | UUID,
        scheduled_start: datetime,
        scheduled_end: datetime,
    ) -> Task:
        """Write a placement onto a task without touching its blocks"""
        return self.update(
            session,
            task_id,
            TaskUpdate(scheduled_start=scheduled_start, scheduled_end=scheduled_end),
        )

    def delete_task(self, session: Session, task_id: str | UUID) -> bool:
        """Delete a task together with its calendar blocks"""
        task = self.get_by_id(session, task_id)

        def delete_operation():
            time_block_service.delete_by_reference(session, task.id)
            session.delete(task)
            return True

        return safe_execute(session, delete_operation)


task_service = TaskService()


class HabitService(BaseService[Habit, HabitCreate, HabitUpdate]):
    """Habit service using base service"""

    def __init__(self):
        super().__init__(Habit)

    def _create_instance(self, data: HabitCreate, **kwargs) -> Habit:
        return Habit.model_validate(data.model_dump())

    def list_habits(self, session: Session) -> list[Habit]:
        return self.get_all(session)

    def get_habit(self, session: Session, habit_id: str | UUID) -> Habit:
        return self.get_by_id(session, habit_id)

    def create_habit(self, session: Session, habit_data: HabitCreate) -> Habit:
        return self.create(session, habit_data)

    def update_habit(
        self, session: Session, habit_id: str | UUID, habit_data: HabitUpdate
    ) -> Habit:
        return self.update(session, habit_id, habit_data)

    def delete_habit(self, session: Session, habit_id: str | UUID) -> bool:
        """Delete a habit together with its calendar blocks"""
        habit = self.get_by_id(session, habit_id)

        def delete_operation():
            time_block_service.delete_by_reference(session, habit.id)
            session.delete(habit)
            return True

        return safe_execute(session, delete_operation)

    @staticmethod
    def start_time_for(habit: Habit) -> time:
        """Fixed start time, or the default for the habit's preferred part of day"""
        if habit.start_time:
            return parse_time_of_day(habit.start_time)
        return PREFERRED_START_TIMES.get(
            PreferredTime(habit.preferred_time), PREFERRED_START_TIMES[PreferredTime.EVENING]
        )

    def materialize_blocks(
        self, session: Session, week_start: date, days: int = 7
    ) -> list[TimeBlock]:
        """Create habit blocks for each active habit on its days in the range.

        A block that already exists for the same habit and start time is not
        created again, so calling this twice for one week is harmless.
        """
        habits = [habit for habit in self.list_habits(session) if habit.active]
        range_start = datetime.combine(week_start, time.min)
        range_end = range_start + timedelta(days=days)

        existing = {
            (block.reference_id, block.start_time)
            for block in time_block_service.list_overlapping(
                session, range_start, range_end
            )
            if block.block_type == BlockType.HABIT
        }

        def materialize_operation():
            created: list[TimeBlock] = []
            for offset in range(days):
                day = week_start + timedelta(days=offset)
                weekday = calendar_weekday(day)
                for habit in habits:
                    if weekday not in habit.days_of_week:
                        continue
                    block_start = datetime.combine(day, self.start_time_for(habit))
                    if (habit.id, block_start) in existing:
                        continue
                    block = TimeBlock(
                        id=uuid4(),
                        title=habit.title,
                        start_time=block_start,
                        end_time=block_start + timedelta(minutes=habit.duration),
                        block_type=BlockType.HABIT,
                        reference_id=habit.id,
                        color=habit.color,
                    )
                    session.add(block)
                    created.append(block)
            session.flush()
            return created

        created = safe_execute(session, materialize_operation)
        logger.info(
            f"Materialized {len(created)} habit block(s) for the week of {week_start}"
        )
        return created


habit_service = HabitService()


class SettingsService:
    """Work-hour settings service; the table holds a single row"""

    @staticmethod
    def get_settings(session: Session) -> ScheduleSettings | None:
        return session.exec(select(ScheduleSettings)).first()

    @staticmethod
    def upsert_settings(
        session: Session, settings_data: ScheduleSettingsCreate
    ) -> ScheduleSettings:
        """Create the settings row or overwrite every field of the existing one"""
        existing = SettingsService.get_settings(session)

        def upsert_operation():
            if existing is None:
                row = ScheduleSettings.model_validate(settings_data.model_dump())
                row.id = uuid4()
            else:
                row = existing
                for field, value in settings_data.model_dump().items():
                    setattr(row, field, value)
                row.updated_at = datetime.now(UTC)
            session.add(row)
            session.flush()
            return row

        row = safe_execute(session, upsert_operation)
        session.refresh(row)
        return row

    @staticmethod
    def get_or_create_settings(session: Session) -> ScheduleSettings:
        settings_row = SettingsService.get_settings(session)
        if settings_row is None:
            settings_row = SettingsService.upsert_settings(
                session, ScheduleSettingsCreate()
            )
        return settings_row

    @staticmethod
    def update_settings(
        session: Session, settings_data: ScheduleSettingsUpdate
    ) -> ScheduleSettings:
        """Apply a partial update, rejecting a merged window that cannot hold work"""
        current = SettingsService.get_or_create_settings(session)
        merged = {
            "work_start": current.work_start,
            "work_end": current.work_end,
            "work_days": list(current.work_days),
            "min_block_minutes": current.min_block_minutes,
        }
        merged.update(settings_data.model_dump(exclude_unset=True, exclude_none=True))

        try:
            check_work_window(merged["work_start"], merged["work_end"], merged["work_days"])
        except ValueError as e:
            raise ValidationError(str(e)) from None

        return SettingsService.upsert_settings(
            session, ScheduleSettingsCreate(**merged)
        )


settings_service = SettingsService()
