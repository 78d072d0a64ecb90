"""Nightly Celery jobs: recurring task reset and daily completion records."""

import asyncio
import logging
from datetime import date, timedelta
from typing import Any

# Import all models to ensure they're registered before creating session
import models  # noqa: F401
from models.base import utc_today
from sacredsix.celery_app import celery_app
from sacredsix.domains.completion.aggregator import CompletionAggregator
from sacredsix.domains.task.recurrence import RecurrenceScheduler
from sacredsix.shared.entity_store import EntityStore
from sacredsix.tasks.session import get_async_session

logger = logging.getLogger(__name__)


@celery_app.task(name="sacredsix.tasks.daily_tasks.reset_recurring_tasks_task", bind=True)
def reset_recurring_tasks_task(self, as_of: str | None = None) -> dict[str, Any]:
    """Reset completed recurring tasks that are due again today."""
    day = date.fromisoformat(as_of) if as_of else utc_today()
    logger.info(f"Starting recurring task reset for {day} (task {self.request.id})")

    try:
        reset = asyncio.run(_reset_recurring_tasks(day))
    except Exception as e:
        logger.error(f"Recurring task reset failed: {str(e)}")
        raise self.retry(exc=e, countdown=60 * 5, max_retries=3)

    logger.info(f"Recurring task reset complete: {reset} tasks reset")
    return {"date": day.isoformat(), "tasks_reset": reset}


@celery_app.task(name="sacredsix.tasks.daily_tasks.record_daily_completion_task", bind=True)
def record_daily_completion_task(self, day: str | None = None) -> dict[str, Any]:
    """Snapshot every user's selected tasks into daily completion records.

    Runs just after midnight, so by default it records the day that ended.
    """
    record_date = date.fromisoformat(day) if day else utc_today() - timedelta(days=1)
    logger.info(f"Recording daily completion for {record_date} (task {self.request.id})")

    try:
        users = asyncio.run(_record_daily_completion(record_date))
    except Exception as e:
        logger.error(f"Daily completion recording failed: {str(e)}")
        raise self.retry(exc=e, countdown=60 * 5, max_retries=3)

    return {"date": record_date.isoformat(), "users_recorded": users}


async def _reset_recurring_tasks(day: date) -> int:
    async with get_async_session() as session:
        return await RecurrenceScheduler(EntityStore(session)).run_daily_sweep(day)


async def _record_daily_completion(day: date) -> int:
    async with get_async_session() as session:
        records = await CompletionAggregator(EntityStore(session)).record_all_users(day)
        return len(records)
