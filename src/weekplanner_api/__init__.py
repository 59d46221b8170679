"""Week planner backend: tasks, habits and an auto-scheduled weekly calendar."""

__version__ = "0.1.0"
