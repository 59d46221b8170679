"""
Auto-scheduling of tasks onto the weekly calendar.
"""

from .engine import (
    AutoScheduler,
    Placed,
    ScheduleRunResult,
    SchedulerStore,
    Unplaced,
    auto_schedule,
)
from .selector import priority_rank, select_tasks
from .slots import TimeSlot, calendar_weekday, find_slot, week_start_of

__all__ = [
    "AutoScheduler",
    "Placed",
    "ScheduleRunResult",
    "SchedulerStore",
    "TimeSlot",
    "Unplaced",
    "auto_schedule",
    "calendar_weekday",
    "find_slot",
    "priority_rank",
    "select_tasks",
    "week_start_of",
]
