import re
from datetime import datetime, time, UTC
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NaiveDatetime,
    field_validator,
    model_validator,
)
from sqlalchemy import JSON
from sqlalchemy import Enum as SQLEnum
from sqlmodel import Column, SQLModel
from sqlmodel import Field as SQLField


class TaskPriority(str, Enum):
    """Task priority enum"""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(str, Enum):
    """Task status enum"""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class BlockType(str, Enum):
    """What a calendar block was created for"""

    TASK = "task"
    HABIT = "habit"


class PreferredTime(str, Enum):
    """Part of the day a habit prefers when it has no fixed start time"""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


TIME_OF_DAY_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

DEFAULT_WORK_START = "09:00"
DEFAULT_WORK_END = "17:00"
DEFAULT_WORK_DAYS = [1, 2, 3, 4, 5]
DEFAULT_MIN_BLOCK_MINUTES = 15


def parse_time_of_day(value: str) -> time:
    """Parse an "HH:MM" string into a time"""
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def check_color(value: str) -> str:
    if not re.match(COLOR_PATTERN, value):
        raise ValueError(f"Color must be a hex value like #3B82F6, got {value!r}")
    return value


def check_time_of_day(value: str) -> str:
    if not re.match(TIME_OF_DAY_PATTERN, value):
        raise ValueError(f"Time must be formatted HH:MM, got {value!r}")
    return value


def check_work_window(work_start: str, work_end: str, work_days: list[int]) -> None:
    """Raise ValueError when a work window could never hold a placement"""
    if parse_time_of_day(work_start) >= parse_time_of_day(work_end):
        raise ValueError("work_start must be earlier than work_end")
    if not work_days:
        raise ValueError("work_days must contain at least one weekday")
    invalid = [day for day in work_days if day < 0 or day > 6]
    if invalid:
        raise ValueError(f"work_days must be between 0 (Sunday) and 6: {invalid}")


# Database Models (SQLModel)
class TaskBase(SQLModel):
    """Base task model"""

    title: str = SQLField(min_length=1, max_length=200)
    description: str | None = SQLField(default=None, max_length=1000)
    priority: TaskPriority = SQLField(
        default=TaskPriority.MEDIUM,
        sa_column=Column(
            SQLEnum(TaskPriority, values_callable=lambda x: [e.value for e in x])
        ),
    )
    duration: int = SQLField(
        default=30, ge=5, le=480, description="Duration in minutes"
    )
    deadline: NaiveDatetime | None = SQLField(default=None)
    scheduled_start: NaiveDatetime | None = SQLField(default=None)
    scheduled_end: NaiveDatetime | None = SQLField(default=None)
    status: TaskStatus = SQLField(
        default=TaskStatus.TODO,
        sa_column=Column(
            SQLEnum(TaskStatus, values_callable=lambda x: [e.value for e in x])
        ),
    )
    color: str = SQLField(default="#3B82F6", max_length=7)


class Task(TaskBase, table=True):  # type: ignore[call-arg]
    """Task database model"""

    __tablename__ = "tasks"

    id: UUID | None = SQLField(default=None, primary_key=True)
    created_at: datetime | None = SQLField(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = SQLField(default_factory=lambda: datetime.now(UTC))


class HabitBase(SQLModel):
    """Base habit model"""

    title: str = SQLField(min_length=1, max_length=200)
    duration: int = SQLField(default=30, ge=5, le=480)
    preferred_time: PreferredTime = SQLField(
        default=PreferredTime.MORNING,
        sa_column=Column(
            SQLEnum(PreferredTime, values_callable=lambda x: [e.value for e in x])
        ),
    )
    days_of_week: list[int] = SQLField(
        default_factory=lambda: list(DEFAULT_WORK_DAYS),
        sa_column=Column(JSON),
        description="Weekdays the habit repeats on (0=Sunday..6=Saturday)",
    )
    color: str = SQLField(default="#8B5CF6", max_length=7)
    active: bool = SQLField(default=True)
    start_time: str | None = SQLField(default=None, max_length=5)


class Habit(HabitBase, table=True):  # type: ignore[call-arg]
    """Habit database model"""

    __tablename__ = "habits"

    id: UUID | None = SQLField(default=None, primary_key=True)
    created_at: datetime | None = SQLField(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = SQLField(default_factory=lambda: datetime.now(UTC))


class TimeBlockBase(SQLModel):
    """Base time block model"""

    title: str = SQLField(min_length=1, max_length=200)
    start_time: NaiveDatetime = SQLField(index=True)
    end_time: NaiveDatetime = SQLField(index=True)
    block_type: BlockType = SQLField(
        default=BlockType.TASK,
        sa_column=Column(
            SQLEnum(BlockType, values_callable=lambda x: [e.value for e in x])
        ),
    )
    reference_id: UUID | None = SQLField(default=None, index=True)
    color: str = SQLField(default="#3B82F6", max_length=7)


class TimeBlock(TimeBlockBase, table=True):  # type: ignore[call-arg]
    """Calendar block database model"""

    __tablename__ = "time_blocks"

    id: UUID | None = SQLField(default=None, primary_key=True)
    created_at: datetime | None = SQLField(default_factory=lambda: datetime.now(UTC))


class ScheduleSettingsBase(SQLModel):
    """Base work-hour settings model"""

    work_start: str = SQLField(default=DEFAULT_WORK_START, max_length=5)
    work_end: str = SQLField(default=DEFAULT_WORK_END, max_length=5)
    work_days: list[int] = SQLField(
        default_factory=lambda: list(DEFAULT_WORK_DAYS),
        sa_column=Column(JSON),
        description="Working weekdays (0=Sunday..6=Saturday)",
    )
    min_block_minutes: int = SQLField(
        default=DEFAULT_MIN_BLOCK_MINUTES,
        ge=5,
        le=480,
        description="Shortest task duration the auto-scheduler will place",
    )


class ScheduleSettings(ScheduleSettingsBase, table=True):  # type: ignore[call-arg]
    """Work-hour settings database model (a single row)"""

    __tablename__ = "settings"

    id: UUID | None = SQLField(default=None, primary_key=True)
    updated_at: datetime | None = SQLField(default_factory=lambda: datetime.now(UTC))


# API Request/Response Models (Pydantic)
class TaskCreate(TaskBase):
    """Task creation request"""

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return check_color(v)

    @model_validator(mode="after")
    def validate_schedule_pair(self) -> "TaskCreate":
        if (self.scheduled_start is None) != (self.scheduled_end is None):
            raise ValueError("scheduled_start and scheduled_end must be set together")
        if self.scheduled_start and self.scheduled_end <= self.scheduled_start:
            raise ValueError("scheduled_end must be after scheduled_start")
        return self


class TaskUpdate(BaseModel):
    """Task update request"""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    priority: TaskPriority | None = None
    duration: int | None = Field(None, ge=5, le=480)
    deadline: NaiveDatetime | None = None
    scheduled_start: NaiveDatetime | None = None
    scheduled_end: NaiveDatetime | None = None
    status: TaskStatus | None = None
    color: str | None = Field(None, pattern=COLOR_PATTERN)


class TaskResponse(TaskBase):
    """Task response model"""

    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HabitCreate(HabitBase):
    """Habit creation request"""

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return check_color(v)

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: str | None) -> str | None:
        return v if v is None else check_time_of_day(v)

    @field_validator("days_of_week")
    @classmethod
    def validate_days(cls, v: list[int]) -> list[int]:
        if any(day < 0 or day > 6 for day in v):
            raise ValueError("days_of_week must be between 0 (Sunday) and 6")
        return sorted(set(v))


class HabitUpdate(BaseModel):
    """Habit update request"""

    title: str | None = Field(None, min_length=1, max_length=200)
    duration: int | None = Field(None, ge=5, le=480)
    preferred_time: PreferredTime | None = None
    days_of_week: list[int] | None = None
    color: str | None = Field(None, pattern=COLOR_PATTERN)
    active: bool | None = None
    start_time: str | None = Field(None, pattern=TIME_OF_DAY_PATTERN)

    @field_validator("days_of_week")
    @classmethod
    def validate_days(cls, v: list[int] | None) -> list[int] | None:
        if v is None:
            return v
        if any(day < 0 or day > 6 for day in v):
            raise ValueError("days_of_week must be between 0 (Sunday) and 6")
        return sorted(set(v))


class HabitResponse(HabitBase):
    """Habit response model"""

    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TimeBlockCreate(TimeBlockBase):
    """Time block creation request"""

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return check_color(v)

    @model_validator(mode="after")
    def validate_interval(self) -> "TimeBlockCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class TimeBlockResponse(TimeBlockBase):
    """Time block response model"""

    id: UUID

    model_config = ConfigDict(from_attributes=True)


class ScheduleSettingsCreate(ScheduleSettingsBase):
    """Full settings payload"""

    @field_validator("work_start", "work_end")
    @classmethod
    def validate_time_of_day(cls, v: str) -> str:
        return check_time_of_day(v)

    @model_validator(mode="after")
    def validate_window(self) -> "ScheduleSettingsCreate":
        check_work_window(self.work_start, self.work_end, self.work_days)
        return self


class ScheduleSettingsUpdate(BaseModel):
    """Partial settings update; merged values are re-checked by the service"""

    work_start: str | None = Field(None, pattern=TIME_OF_DAY_PATTERN)
    work_end: str | None = Field(None, pattern=TIME_OF_DAY_PATTERN)
    work_days: list[int] | None = None
    min_block_minutes: int | None = Field(None, ge=5, le=480)

    @field_validator("work_days")
    @classmethod
    def validate_work_days(cls, v: list[int] | None) -> list[int] | None:
        if v is None:
            return v
        if any(day < 0 or day > 6 for day in v):
            raise ValueError("work_days must be between 0 (Sunday) and 6")
        return sorted(set(v))


class ScheduleSettingsResponse(ScheduleSettingsBase):
    """Settings response model"""

    id: UUID

    model_config = ConfigDict(from_attributes=True)


class PlacementResponse(BaseModel):
    """A task the auto-scheduler placed"""

    task_id: UUID
    title: str
    start: datetime
    end: datetime


class UnplacedResponse(BaseModel):
    """A task the auto-scheduler left unscheduled"""

    task_id: UUID
    title: str
    reason: str


class AutoScheduleResponse(BaseModel):
    """Outcome of one auto-schedule run"""

    success: bool = True
    scheduled: int = Field(0, description="Number of tasks placed in this run")
    unscheduled: int = Field(0, description="Number of candidates left unplaced")
    placements: list[PlacementResponse] = Field(default_factory=list)
    skipped: list[UnplacedResponse] = Field(default_factory=list)


# Error Response Models
class ErrorDetail(BaseModel):
    """Error detail model following API standardization"""

    code: str = Field(..., description="Error code for programmatic handling")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(
        default=None, description="Additional error context"
    )


class ErrorResponse(BaseModel):
    """Standardized error response model"""

    error: ErrorDetail

    @classmethod
    def create(
        cls, code: str, message: str, details: dict[str, Any] | None = None
    ) -> "ErrorResponse":
        """Create a standardized error response"""
        return cls(error=ErrorDetail(code=code, message=message, details=details))
