"""
Choosing and ordering the tasks an auto-schedule run tries to place.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any, TypeVar

PRIORITY_RANK = {"critical": 0, "high": 1, "medium": 2, "low": 3}
DEFAULT_PRIORITY_RANK = PRIORITY_RANK["medium"]

DONE_STATUS = "done"

T = TypeVar("T")


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def priority_rank(priority: Any) -> int:
    """Rank of a priority (enum or plain string); unknown values rank as medium"""
    return PRIORITY_RANK.get(_enum_value(priority), DEFAULT_PRIORITY_RANK)


def needs_placement(task: Any) -> bool:
    """True for tasks that are neither done nor already on the calendar"""
    return _enum_value(task.status) != DONE_STATUS and task.scheduled_start is None


def _placement_order(task: Any) -> tuple[int, bool, datetime]:
    deadline = task.deadline
    return (priority_rank(task.priority), deadline is None, deadline or datetime.min)


def select_tasks(tasks: Iterable[T]) -> list[T]:
    """Filter to unplaced, unfinished tasks and order them for placement.

    Order is priority rank first, then earliest deadline, with deadline-less
    tasks after those that have one. ``sorted`` is stable, so ties keep the
    order the tasks came in.
    """
    return sorted((task for task in tasks if needs_placement(task)), key=_placement_order)
