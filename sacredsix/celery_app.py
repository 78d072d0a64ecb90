"""Celery application configuration."""

from celery import Celery
from celery.schedules import crontab

from sacredsix.core.config import settings

# Create Celery instance
celery_app = Celery(
    "sacredsix",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["sacredsix.tasks.notification_tasks", "sacredsix.tasks.daily_tasks"],
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=30 * 60,  # 30 minutes
    task_soft_time_limit=25 * 60,  # 25 minutes
    worker_prefetch_multiplier=4,
    worker_max_tasks_per_child=1000,
)

# Completion is recorded before the recurring reset moves done tasks back to todo
celery_app.conf.beat_schedule = {
    "reset-recurring-tasks": {
        "task": "sacredsix.tasks.daily_tasks.reset_recurring_tasks_task",
        "schedule": crontab(hour=0, minute=5),
        "options": {"expires": 3600},
    },
    "record-daily-completion": {
        "task": "sacredsix.tasks.daily_tasks.record_daily_completion_task",
        "schedule": crontab(hour=0, minute=0),
        "options": {"expires": 3600},
    },
}

celery_app.conf.task_routes = {
    "sacredsix.tasks.notification_tasks.*": {"queue": "notifications"},
    "sacredsix.tasks.daily_tasks.*": {"queue": "scheduler"},
}
