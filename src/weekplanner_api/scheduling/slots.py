"""
Time-interval primitives and the earliest-fit slot search.

All datetimes handled here are naive local wall-clock times: a work window of
09:00-17:00 means 09:00-17:00 on the calendar the user is looking at.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

SLOT_STEP_MINUTES = 15


@dataclass(frozen=True, order=True)
class TimeSlot:
    """Half-open interval [start, end) used for busy blocks and candidates."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end <= self.start:
            raise ValueError(
                f"TimeSlot end {self.end.isoformat()} must be after start "
                f"{self.start.isoformat()}"
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: "TimeSlot") -> bool:
        """Open-interval overlap; slots that only touch do not conflict."""
        return self.start < other.end and self.end > other.start


def calendar_weekday(moment: date) -> int:
    """Weekday numbered 0=Sunday..6=Saturday."""
    return (moment.weekday() + 1) % 7


def week_start_of(day: date) -> date:
    """The Sunday that starts the week containing ``day``."""
    return day - timedelta(days=calendar_weekday(day))


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def start_of_next_day(moment: datetime) -> datetime:
    return start_of_day(moment) + timedelta(days=1)


def round_up_to_step(moment: datetime, step_minutes: int = SLOT_STEP_MINUTES) -> datetime:
    """Round up to the next multiple of step_minutes past the hour.

    Seconds and microseconds count, so the result is never earlier than
    ``moment``.
    """
    floored = moment.replace(
        minute=moment.minute - moment.minute % step_minutes, second=0, microsecond=0
    )
    if floored == moment:
        return moment
    return floored + timedelta(minutes=step_minutes)


def has_conflict(candidate: TimeSlot, busy_slots: Iterable[TimeSlot]) -> bool:
    return any(candidate.overlaps(busy) for busy in busy_slots)


def find_slot(
    range_start: datetime,
    range_end: datetime,
    duration_minutes: int,
    busy_slots: Iterable[TimeSlot],
    work_days: Iterable[int],
    work_start: time,
    work_end: time,
    now: datetime | None = None,
    step_minutes: int = SLOT_STEP_MINUTES,
) -> TimeSlot | None:
    """Find the earliest free slot of ``duration_minutes`` inside the work window.

    Days are scanned from ``max(range_start, now)`` up to ``range_end``. On each
    working day candidates start on the ``step_minutes`` grid between
    ``work_start`` and ``work_end`` and the first one that overlaps no busy slot
    wins. Returns None when nothing fits before ``range_end``; a degenerate
    window (empty ``work_days`` or ``work_start >= work_end``) simply never
    fits.

    Args:
        range_start: Earliest moment a placement may start.
        range_end: Scanning stops once the cursor reaches this moment.
        duration_minutes: Length of the placement.
        busy_slots: Intervals the placement must not overlap.
        work_days: Allowed weekdays, 0=Sunday..6=Saturday.
        work_start: Daily window start.
        work_end: Daily window end; a placement may end exactly here.
        now: Current time; placements never start before it.
        step_minutes: Grid that candidate starts are aligned to.
    """
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")

    if now is None:
        now = datetime.now()
    busy = list(busy_slots)
    allowed_days = set(work_days)
    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=step_minutes)

    cursor = max(range_start, now)
    while cursor < range_end:
        if calendar_weekday(cursor) not in allowed_days:
            cursor = start_of_next_day(cursor)
            continue

        day_start = datetime.combine(cursor.date(), work_start)
        day_end = datetime.combine(cursor.date(), work_end)

        origin = max(cursor, day_start)
        slot_start = round_up_to_step(origin, step_minutes)

        while slot_start + duration <= day_end:
            candidate = TimeSlot(slot_start, slot_start + duration)
            if not has_conflict(candidate, busy):
                return candidate
            slot_start += step

        cursor = start_of_next_day(cursor)

    return None
