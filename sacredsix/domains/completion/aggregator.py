"""Daily completion records and the statistics derived from them."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from models import DailyCompletionRecord, Task
from models.enums import TaskStatus
from sacredsix.shared.entity_store import EntityStore

logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a person would: 0.5 goes up, unlike ``round``'s banker's rounding."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage, 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return int(round_half_up(part / whole * 100))


@dataclass(frozen=True)
class DaySnapshot:
    date: date
    tasks_completed: int
    tasks_selected: int
    completion_percentage: int


@dataclass(frozen=True)
class CompletionStats:
    user_id: UUID | None
    total_days: int
    fully_completed_days: int
    completion_rate: int
    average_tasks_completed: float
    current_streak: int
    longest_streak: int
    series: list[DaySnapshot] = field(default_factory=list)


def count_day(tasks: Iterable[Task]) -> tuple[int, int]:
    """Return ``(selected, completed)`` over a task snapshot."""
    selected = completed = 0
    for task in tasks:
        if not task.is_selected_for_today:
            continue
        selected += 1
        if task.status == TaskStatus.done:
            completed += 1
    return selected, completed


class CompletionAggregator:
    """Upserts one completion record per user per date and computes stats."""

    def __init__(self, store: EntityStore):
        self.store = store

    async def record_day(
        self, user_id: UUID, tasks: Iterable[Task], day: date
    ) -> DailyCompletionRecord:
        """Record the selected/completed counts for ``day``.

        Re-recording the same date overwrites the previous counts. When a
        concurrent writer inserts the same (user, date) first, the unique
        constraint rejects our insert and the upsert is retried as an update.
        """
        selected, completed = count_day(tasks)

        for attempt in range(2):
            try:
                async with self.store.transaction():
                    record = await self.store.first(
                        DailyCompletionRecord, user_id=user_id, date=day
                    )
                    if record is None:
                        record = DailyCompletionRecord(user_id=user_id, date=day)
                    record.tasks_selected = selected
                    record.tasks_completed = completed
                    record.fully_completed = selected > 0 and completed == selected
                    await self.store.put(record)
            except IntegrityError:
                if attempt or self.store.in_transaction:
                    raise
                logger.info(f"Concurrent completion record for {user_id} on {day}, retrying")
                continue
            break

        logger.info(f"Recorded daily completion for user {user_id} on {day.isoformat()}: {completed}/{selected}")
        return record

    async def record_today(self, user_id: UUID, day: date) -> DailyCompletionRecord:
        """Record ``day`` from the user's current today-selection."""
        tasks = await self.store.list(Task, user_id=user_id, is_selected_for_today=True)
        return await self.record_day(user_id, tasks, day)

    async def record_all_users(self, day: date) -> list[DailyCompletionRecord]:
        """Record ``day`` for every user that has tasks selected."""
        tasks = await self.store.list(Task, is_selected_for_today=True)
        by_user: dict[UUID, list[Task]] = defaultdict(list)
        for task in tasks:
            by_user[task.user_id].append(task)

        records = []
        for user_id, user_tasks in by_user.items():
            records.append(await self.record_day(user_id, user_tasks, day))
        logger.info(f"Recorded daily completion for {len(records)} users on {day.isoformat()}")
        return records

    async def get_stats(self, user_id: UUID, since: date | None = None) -> CompletionStats:
        criteria = [DailyCompletionRecord.date >= since] if since else []
        records = await self.store.list(
            DailyCompletionRecord,
            *criteria,
            user_id=user_id,
            order_by=DailyCompletionRecord.date,
        )
        return self.compute_stats(user_id, records)

    @staticmethod
    def compute_stats(
        user_id: UUID | None, records: Sequence[DailyCompletionRecord]
    ) -> CompletionStats:
        ordered = sorted(records, key=lambda record: record.date)
        total_days = len(ordered)
        fully_completed_days = sum(1 for record in ordered if record.fully_completed)
        total_completed = sum(record.tasks_completed for record in ordered)

        average = round_half_up(total_completed / total_days, 1) if total_days else 0.0
        current_streak, longest_streak = _streaks(ordered)

        return CompletionStats(
            user_id=user_id,
            total_days=total_days,
            fully_completed_days=fully_completed_days,
            completion_rate=percentage(fully_completed_days, total_days),
            average_tasks_completed=average,
            current_streak=current_streak,
            longest_streak=longest_streak,
            series=[
                DaySnapshot(
                    date=record.date,
                    tasks_completed=record.tasks_completed,
                    tasks_selected=record.tasks_selected,
                    completion_percentage=percentage(record.tasks_completed, record.tasks_selected),
                )
                for record in ordered
            ],
        )


def _streaks(ordered: Sequence[DailyCompletionRecord]) -> tuple[int, int]:
    """Current and longest runs of consecutive fully completed dates.

    The current streak is the run ending at the latest record; a missing date
    or a day that was not fully completed breaks a run.
    """
    longest = run = 0
    previous: date | None = None
    for record in ordered:
        if not record.fully_completed:
            run = 0
        elif previous is not None and run and record.date - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = record.date
    return run, longest
