"""
Auto-schedule orchestration.

One run loads the work-hour settings, the tasks and the calendar blocks in the
horizon, then places tasks one at a time in selector order. Every placement is
committed through the store straight away and appended to the run's busy list,
so later tasks in the same run treat it as occupied. Nothing is rolled back: if
the store fails halfway, the placements made so far stay.
"""

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Protocol
from uuid import UUID

from weekplanner_api.common.error_handlers import SchedulerBusyError
from weekplanner_api.models import (
    DEFAULT_MIN_BLOCK_MINUTES,
    DEFAULT_WORK_DAYS,
    DEFAULT_WORK_END,
    DEFAULT_WORK_START,
    BlockType,
    ScheduleSettingsCreate,
    TimeBlockCreate,
    parse_time_of_day,
)
from weekplanner_api.scheduling.selector import select_tasks
from weekplanner_api.scheduling.slots import (
    SLOT_STEP_MINUTES,
    TimeSlot,
    find_slot,
    start_of_day,
)

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_DAYS = 14

REASON_NO_FREE_SLOT = "no_free_slot"
REASON_BELOW_MIN_BLOCK = "below_min_block"


class SchedulableTask(Protocol):
    id: UUID | None
    title: str
    priority: Any
    duration: int
    deadline: datetime | None
    scheduled_start: datetime | None
    status: Any
    color: str


class BusyBlock(Protocol):
    start_time: datetime
    end_time: datetime


class WorkSettings(Protocol):
    work_start: str
    work_end: str
    work_days: list[int]
    min_block_minutes: int


class SchedulerStore(Protocol):
    """Persistence operations an auto-schedule run needs"""

    def list_tasks(self) -> Sequence[SchedulableTask]: ...

    def update_task(
        self, task_id: UUID, scheduled_start: datetime, scheduled_end: datetime
    ) -> Any: ...

    def list_time_blocks(
        self, range_start: datetime, range_end: datetime
    ) -> Sequence[BusyBlock]:
        """Blocks overlapping [range_start, range_end), not only those inside it"""
        ...

    def create_time_block(self, block: TimeBlockCreate) -> Any: ...

    def get_settings(self) -> WorkSettings | None: ...

    def upsert_settings(self, data: ScheduleSettingsCreate) -> WorkSettings: ...


@dataclass(frozen=True)
class Placed:
    task_id: UUID
    title: str
    slot: TimeSlot


@dataclass(frozen=True)
class Unplaced:
    task_id: UUID
    title: str
    reason: str = REASON_NO_FREE_SLOT


@dataclass
class ScheduleRunResult:
    """Per-task outcomes of one run, in the order the tasks were tried"""

    outcomes: list[Placed | Unplaced] = field(default_factory=list)

    @property
    def placed(self) -> list[Placed]:
        return [o for o in self.outcomes if isinstance(o, Placed)]

    @property
    def unplaced(self) -> list[Unplaced]:
        return [o for o in self.outcomes if isinstance(o, Unplaced)]


def default_settings() -> ScheduleSettingsCreate:
    return ScheduleSettingsCreate(
        work_start=DEFAULT_WORK_START,
        work_end=DEFAULT_WORK_END,
        work_days=list(DEFAULT_WORK_DAYS),
        min_block_minutes=DEFAULT_MIN_BLOCK_MINUTES,
    )


def busy_slots_from_blocks(blocks: Sequence[BusyBlock]) -> list[TimeSlot]:
    """Convert stored blocks to busy intervals, dropping empty ones"""
    busy: list[TimeSlot] = []
    for block in blocks:
        if block.end_time <= block.start_time:
            logger.warning(
                f"Ignoring empty calendar block {getattr(block, 'id', None)} "
                f"at {block.start_time.isoformat()}"
            )
            continue
        busy.append(TimeSlot(block.start_time, block.end_time))
    return busy


class AutoScheduler:
    """Greedy first-fit placement of unscheduled tasks onto the calendar."""

    def __init__(
        self,
        store: SchedulerStore,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
        step_minutes: int = SLOT_STEP_MINUTES,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.horizon_days = horizon_days
        self.step_minutes = step_minutes
        self.clock = clock

    def load_settings(self) -> WorkSettings:
        settings = self.store.get_settings()
        if settings is None:
            logger.info("No work-hour settings stored, creating defaults")
            settings = self.store.upsert_settings(default_settings())
        return settings

    def run(self) -> ScheduleRunResult:
        result = ScheduleRunResult()

        settings = self.load_settings()
        candidates = select_tasks(self.store.list_tasks())
        if not candidates:
            logger.info("Auto-schedule: nothing to place")
            return result

        now = self.clock()
        range_start = start_of_day(now)
        range_end = range_start + timedelta(days=self.horizon_days)

        busy = busy_slots_from_blocks(
            self.store.list_time_blocks(range_start, range_end)
        )
        work_start = parse_time_of_day(settings.work_start)
        work_end = parse_time_of_day(settings.work_end)

        logger.info(
            f"Auto-schedule: {len(candidates)} candidate task(s), "
            f"{len(busy)} busy block(s) between {range_start.date()} and {range_end.date()}"
        )

        for task in candidates:
            if task.duration < settings.min_block_minutes:
                logger.debug(
                    f"Task {task.id} ({task.duration} min) is shorter than the "
                    f"{settings.min_block_minutes} min minimum block, skipping"
                )
                result.outcomes.append(
                    Unplaced(task.id, task.title, REASON_BELOW_MIN_BLOCK)
                )
                continue

            slot = find_slot(
                range_start,
                range_end,
                task.duration,
                busy,
                settings.work_days,
                work_start,
                work_end,
                now=now,
                step_minutes=self.step_minutes,
            )
            if slot is None:
                logger.debug(f"No free slot for task {task.id} within the horizon")
                result.outcomes.append(Unplaced(task.id, task.title))
                continue

            try:
                self.store.update_task(task.id, slot.start, slot.end)
                self.store.create_time_block(
                    TimeBlockCreate(
                        title=task.title,
                        start_time=slot.start,
                        end_time=slot.end,
                        block_type=BlockType.TASK,
                        reference_id=task.id,
                        color=task.color,
                    )
                )
            except Exception:
                logger.error(
                    f"Auto-schedule aborted at task {task.id}; "
                    f"{len(result.placed)} placement(s) already committed"
                )
                raise

            busy.append(slot)
            result.outcomes.append(Placed(task.id, task.title, slot))
            logger.info(
                f"Placed task {task.id} at {slot.start.isoformat()}-{slot.end.time()}"
            )

        logger.info(
            f"Auto-schedule finished: {len(result.placed)} placed, "
            f"{len(result.unplaced)} left unscheduled"
        )
        return result


# Only one run may read and write the calendar at a time
_run_lock = threading.Lock()


def auto_schedule(
    store: SchedulerStore,
    lock_timeout: float = 30.0,
    **scheduler_options,
) -> ScheduleRunResult:
    """Run the auto-scheduler once, waiting for any run already in flight.

    Raises:
        SchedulerBusyError: If the in-flight run does not finish within
            ``lock_timeout`` seconds.
    """
    if not _run_lock.acquire(timeout=lock_timeout):
        raise SchedulerBusyError(lock_timeout)
    try:
        return AutoScheduler(store, **scheduler_options).run()
    finally:
        _run_lock.release()
