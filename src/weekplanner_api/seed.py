"""
Demo data for a fresh database
"""

import logging
from datetime import datetime, timedelta

from sqlmodel import Session

from weekplanner_api.models import (
    HabitCreate,
    PreferredTime,
    ScheduleSettingsCreate,
    TaskCreate,
    TaskPriority,
    TaskStatus,
)
from weekplanner_api.scheduling import week_start_of
from weekplanner_api.services import habit_service, settings_service, task_service

logger = logging.getLogger(__name__)


def _sample_tasks(now: datetime) -> list[TaskCreate]:
    return [
        TaskCreate(
            title="Write project proposal",
            description="Draft the Q1 project proposal for the product redesign",
            priority=TaskPriority.HIGH,
            duration=90,
            deadline=now + timedelta(days=3),
            color="#3B82F6",
        ),
        TaskCreate(
            title="Review pull requests",
            description="Review open PRs and provide feedback",
            priority=TaskPriority.MEDIUM,
            duration=45,
            deadline=now + timedelta(days=1),
            color="#6366F1",
        ),
        TaskCreate(
            title="Update documentation",
            description="Update API docs with the new endpoints",
            priority=TaskPriority.LOW,
            duration=60,
            color="#06B6D4",
        ),
        TaskCreate(
            title="Fix login bug",
            description="Users reporting intermittent login failures",
            priority=TaskPriority.CRITICAL,
            duration=30,
            deadline=now,
            status=TaskStatus.IN_PROGRESS,
            color="#EF4444",
        ),
        TaskCreate(
            title="Design new dashboard",
            description="Create mockups for the analytics dashboard",
            priority=TaskPriority.MEDIUM,
            duration=120,
            deadline=now + timedelta(days=5),
            color="#EC4899",
        ),
    ]


SAMPLE_HABITS = [
    HabitCreate(
        title="Lunch Break",
        duration=60,
        preferred_time=PreferredTime.AFTERNOON,
        days_of_week=[1, 2, 3, 4, 5],
        color="#10B981",
        start_time="12:00",
    ),
    HabitCreate(
        title="Morning Exercise",
        duration=45,
        preferred_time=PreferredTime.MORNING,
        days_of_week=[1, 3, 5],
        color="#F59E0B",
        start_time="07:00",
    ),
    HabitCreate(
        title="Deep Focus Time",
        duration=120,
        preferred_time=PreferredTime.MORNING,
        days_of_week=[1, 2, 3, 4, 5],
        color="#8B5CF6",
        start_time="09:00",
    ),
    HabitCreate(
        title="Email & Slack Catch-up",
        duration=30,
        preferred_time=PreferredTime.AFTERNOON,
        days_of_week=[1, 2, 3, 4, 5],
        color="#06B6D4",
        start_time="14:00",
    ),
]


def seed_database(session: Session, now: datetime | None = None) -> bool:
    """Fill an empty database with sample tasks, habits and this week's blocks.

    Returns False without touching anything when tasks already exist.
    """
    if task_service.list_tasks(session):
        logger.info("Database already has tasks, skipping seed")
        return False

    now = now or datetime.now()
    for task_data in _sample_tasks(now):
        task_service.create_task(session, task_data)
    for habit_data in SAMPLE_HABITS:
        habit_service.create_habit(session, habit_data)

    habit_service.materialize_blocks(session, week_start_of(now.date()))
    settings_service.upsert_settings(session, ScheduleSettingsCreate())

    logger.info("✅ Database seeded with demo data")
    return True
