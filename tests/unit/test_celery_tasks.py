"""Unit tests for the Celery jobs, run eagerly with their storage work stubbed."""

from datetime import date
from unittest.mock import patch

from sacredsix.celery_app import celery_app
from sacredsix.tasks import daily_tasks
from sacredsix.tasks.notification_tasks import send_invitation_email_task


class TestDailyTasks:
    def test_reset_recurring_tasks(self, monkeypatch):
        seen = {}

        async def fake_reset(day):
            seen["day"] = day
            return 3

        monkeypatch.setattr(daily_tasks, "_reset_recurring_tasks", fake_reset)

        result = daily_tasks.reset_recurring_tasks_task.apply(kwargs={"as_of": "2024-06-05"}).get()

        assert result == {"date": "2024-06-05", "tasks_reset": 3}
        assert seen["day"] == date(2024, 6, 5)

    def test_record_daily_completion(self, monkeypatch):
        async def fake_record(day):
            return 2

        monkeypatch.setattr(daily_tasks, "_record_daily_completion", fake_record)

        result = daily_tasks.record_daily_completion_task.apply(kwargs={"day": "2024-06-03"}).get()

        assert result == {"date": "2024-06-03", "users_recorded": 2}

    def test_record_daily_completion_defaults_to_yesterday(self, monkeypatch):
        seen = {}

        async def fake_record(day):
            seen["day"] = day
            return 0

        monkeypatch.setattr(daily_tasks, "_record_daily_completion", fake_record)
        monkeypatch.setattr(daily_tasks, "utc_today", lambda: date(2024, 3, 1))

        result = daily_tasks.record_daily_completion_task.apply().get()

        assert seen["day"] == date(2024, 2, 29)
        assert result["date"] == "2024-02-29"

    def test_beat_records_completion_before_reset(self):
        schedule = celery_app.conf.beat_schedule
        record = schedule["record-daily-completion"]["schedule"]
        reset = schedule["reset-recurring-tasks"]["schedule"]

        assert (min(record.hour), min(record.minute)) == (0, 0)
        assert (min(reset.hour), min(reset.minute)) == (0, 5)


class TestNotificationTasks:
    def test_send_invitation_email(self):
        with patch(
            "sacredsix.tasks.notification_tasks.email_service.send_invitation_email", return_value=True
        ) as send:
            result = send_invitation_email_task.apply(
                kwargs={
                    "recipient_email": "friend@example.com",
                    "project_name": "Plan",
                    "inviter_name": "Olivia",
                }
            ).get()

        assert result is True
        send.assert_called_once_with(
            recipient_email="friend@example.com",
            project_name="Plan",
            inviter_name="Olivia",
            message="",
        )
