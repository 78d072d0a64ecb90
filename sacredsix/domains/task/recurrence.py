"""Recurring task reset rules.

A recurring task that has been completed goes back to ``todo`` on each of its
recurring weekdays. Tasks with no explicit weekdays recur Monday to Friday.
Resets are keyed by calendar date so running the sweep twice for the same
date changes nothing the second time.
"""

import logging
from collections.abc import Iterable
from datetime import date

from models import Task
from models.enums import WORKDAYS, TaskStatus, Weekday
from sacredsix.shared.entity_store import EntityStore

logger = logging.getLogger(__name__)


def recurring_weekdays(task: Task) -> frozenset[Weekday]:
    """Weekdays on which ``task`` is due again; empty configuration means workdays."""
    days = frozenset(Weekday(day) for day in (task.recurring_days or []))
    return days or WORKDAYS


class RecurrenceScheduler:
    """Decides and applies daily resets of completed recurring tasks.

    ``should_reset`` and ``apply_daily_reset`` only look at the task and the
    date they are given; ``run_daily_sweep`` is the store-backed job that the
    nightly Celery task calls.
    """

    def __init__(self, store: EntityStore | None = None):
        self.store = store

    @staticmethod
    def should_reset(task: Task, as_of: date) -> bool:
        if not task.is_recurring or task.status != TaskStatus.done:
            return False
        if Weekday.of(as_of) not in recurring_weekdays(task):
            return False
        # Completed (or already reset) on this very date
        return task.last_completed_date != as_of

    def apply_daily_reset(self, task: Task, as_of: date) -> Task:
        """Move a due task back to ``todo``.

        ``is_selected_for_today`` is left for the user to change and
        ``last_completed_date`` keeps pointing at the previous completion.
        """
        if not self.should_reset(task, as_of):
            return task
        task.status = TaskStatus.todo
        task.completed_at = None
        return task

    def reset_all(self, tasks: Iterable[Task], as_of: date) -> list[Task]:
        """Apply the reset to each task and return the ones that changed."""
        reset = []
        for task in tasks:
            if self.should_reset(task, as_of):
                reset.append(self.apply_daily_reset(task, as_of))
        return reset

    async def run_daily_sweep(self, as_of: date) -> int:
        """Reset every due recurring task in one transaction; returns the count."""
        if self.store is None:
            raise RuntimeError("run_daily_sweep needs an EntityStore")

        async with self.store.transaction():
            candidates = await self.store.list(
                Task,
                Task.is_recurring.is_(True),
                Task.status == TaskStatus.done,
            )
            reset = self.reset_all(candidates, as_of)
            for task in reset:
                await self.store.put(task)

        for task in reset:
            logger.debug(f"Reset recurring task {task.id} ({task.name})")
        logger.info(f"Recurring sweep for {as_of.isoformat()}: {len(reset)} of {len(candidates)} completed tasks reset")
        return len(reset)
