# API routers package
from . import (
    habits,
    scheduler,
    settings,
    tasks,
    time_blocks,
)

__all__ = [
    "habits",
    "scheduler",
    "settings",
    "tasks",
    "time_blocks",
]
