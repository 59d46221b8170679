import os
from datetime import datetime
from uuid import uuid4

import pytest

# Set test environment variables before importing any application code
os.environ.update(
    {
        "DATABASE_URL": "sqlite:///:memory:",
        "ENVIRONMENT": "test",
        "SEED_DEMO_DATA": "false",
        "CORS_ORIGINS": "http://localhost:3000",
    }
)

# Import after setting environment variables
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from weekplanner_api import models  # noqa: E402, F401
from weekplanner_api.models import ScheduleSettingsCreate, TaskPriority, TaskStatus  # noqa: E402

# Monday 2025-01-06; weekday 1 in Sunday-first numbering
MONDAY = datetime(2025, 1, 6)


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory database for each test"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    """Create database session"""
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    """Test client whose requests share the in-memory database"""
    from weekplanner_api.database import get_session
    from weekplanner_api.main import app

    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    # No context manager: the lifespan would create tables in the configured database
    yield TestClient(app)
    app.dependency_overrides.clear()


class FakeTask:
    """Plain task record for exercising the scheduler without a database"""

    def __init__(
        self,
        title,
        duration=30,
        priority=TaskPriority.MEDIUM,
        deadline=None,
        status=TaskStatus.TODO,
        scheduled_start=None,
        color="#3B82F6",
    ):
        self.id = uuid4()
        self.title = title
        self.duration = duration
        self.priority = priority
        self.deadline = deadline
        self.status = status
        self.scheduled_start = scheduled_start
        self.scheduled_end = None
        self.color = color


class FakeBlock:
    def __init__(self, start_time, end_time, title="Busy", reference_id=None):
        self.id = uuid4()
        self.title = title
        self.start_time = start_time
        self.end_time = end_time
        self.reference_id = reference_id


class FakeStore:
    """In-memory scheduler store that records every write"""

    def __init__(self, tasks=(), blocks=(), settings=None):
        self.tasks = list(tasks)
        self.blocks = list(blocks)
        self.settings = settings
        self.task_updates = []
        self.created_blocks = []
        self.fail_on_block_number = None

    def list_tasks(self):
        return list(self.tasks)

    def update_task(self, task_id, scheduled_start, scheduled_end):
        task = next(t for t in self.tasks if t.id == task_id)
        task.scheduled_start = scheduled_start
        task.scheduled_end = scheduled_end
        self.task_updates.append((task_id, scheduled_start, scheduled_end))
        return task

    def list_time_blocks(self, range_start, range_end):
        return [
            block
            for block in self.blocks
            if block.start_time < range_end and block.end_time > range_start
        ]

    def create_time_block(self, block):
        if self.fail_on_block_number == len(self.created_blocks) + 1:
            from weekplanner_api.common.error_handlers import StorageError

            raise StorageError("disk full")
        stored = FakeBlock(
            block.start_time, block.end_time, block.title, block.reference_id
        )
        self.blocks.append(stored)
        self.created_blocks.append(block)
        return stored

    def get_settings(self):
        return self.settings

    def upsert_settings(self, data: ScheduleSettingsCreate):
        self.settings = data
        return data


def work_settings(**overrides):
    values = {
        "work_start": "09:00",
        "work_end": "17:00",
        "work_days": [1, 2, 3, 4, 5],
        "min_block_minutes": 15,
    }
    values.update(overrides)
    return ScheduleSettingsCreate(**values)


def fixed_clock(moment):
    return lambda: moment
