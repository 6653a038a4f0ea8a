"""Tests for email delivery, scheduled jobs and reminder endpoints."""

from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest
import requests

from aurora import db
from aurora.models import FocusSession, Task, User
from aurora.scheduler import JOB_SCHEDULE, NotificationScheduler
from aurora.services.email_service import RESEND_API_URL, EmailService
from aurora.services.notification_jobs import NotificationJobs

NOW = datetime(2024, 3, 15, 10, 0)


def make_task(user_id, due_in, **fields):
    task = Task(
        user_id=user_id,
        title=fields.pop("title", "Essay"),
        subject="Math",
        due_date=NOW + due_in,
        **fields,
    )
    db.session.add(task)
    db.session.commit()
    return task


def set_preferences(user_id, **columns):
    user = db.session.get(User, user_id)
    for column, value in columns.items():
        setattr(user, column, value)
    db.session.commit()


class TestEmailService:
    """Email delivery through the provider API."""
    def test_skips_without_api_key(self, app):
        """Test that sending is skipped without a provider key."""
        http = MagicMock()
        service = EmailService(api_key="", http=http)
        assert service.send("a@example.com", "task_reminder", "Ada", "Essay", None) is False
        http.post.assert_not_called()

    def test_sends_through_resend(self, app):
        """Test the request sent to the email provider."""
        http = MagicMock()
        service = EmailService(api_key="re_test", http=http)

        assert service.send("a@example.com", "task_reminder", "Ada", "Essay <1>", NOW)

        url = http.post.call_args.args[0]
        body = http.post.call_args.kwargs["json"]
        assert url == RESEND_API_URL
        assert http.post.call_args.kwargs["headers"]["Authorization"] == "Bearer re_test"
        assert body["to"] == ["a@example.com"]
        assert body["subject"] == "Reminder: Essay <1> is due soon"
        assert "Essay &lt;1&gt;" in body["html"]

    def test_delivery_failure_returns_false(self, app):
        """Test that provider errors return False instead of raising."""
        http = MagicMock()
        http.post.return_value.raise_for_status.side_effect = requests.HTTPError("422")
        service = EmailService(api_key="re_test", http=http)
        assert service.send("a@example.com", "weekly_report", "Ada", {}) is False

    def test_unknown_template(self, app):
        """Test that an unknown template name is an error."""
        with pytest.raises(ValueError):
            EmailService(api_key="re_test").send("a@example.com", "newsletter")


class TestNotificationJobs:
    """Batch notification jobs."""
    def test_task_reminders_once_per_day(self, test_user):
        """Test that a task is reminded at most once a day."""
        make_task(test_user["id"], timedelta(hours=5))
        make_task(test_user["id"], timedelta(days=3), title="Later")
        make_task(test_user["id"], timedelta(hours=2), title="Done", status="completed")
        email = MagicMock()
        email.send_task_reminder.return_value = True

        jobs = NotificationJobs(email_service=email, now=NOW)
        assert jobs.task_reminders() == {"sent": 1, "skipped": 0, "failed": 0}
        assert email.send_task_reminder.call_count == 1
        assert email.send_task_reminder.call_args.args[1].title == "Essay"

        assert jobs.task_reminders() == {"sent": 0, "skipped": 1, "failed": 0}

    def test_task_reminders_respect_opt_out(self, test_user):
        """Test that opted-out users get no reminders."""
        set_preferences(test_user["id"], notify_task_reminders=False)
        make_task(test_user["id"], timedelta(hours=5))
        email = MagicMock()

        result = NotificationJobs(email_service=email, now=NOW).task_reminders()
        assert result == {"sent": 0, "skipped": 0, "failed": 0}
        email.send_task_reminder.assert_not_called()

    def test_one_failing_user_does_not_stop_the_batch(self, test_user, other_user):
        """Test that one user's failure is counted and the batch continues."""
        set_preferences(test_user["id"], notify_daily_digest=True)
        set_preferences(other_user["id"], notify_daily_digest=True)
        email = MagicMock()
        email.send_daily_digest.side_effect = [RuntimeError("boom"), True]

        result = NotificationJobs(email_service=email, now=NOW).daily_digest()
        assert result == {"sent": 1, "skipped": 0, "failed": 1}
        assert email.send_daily_digest.call_count == 2

    def test_daily_digest_contents(self, test_user):
        """Test the stats passed to the daily digest."""
        set_preferences(test_user["id"], notify_daily_digest=True)
        db.session.add(
            FocusSession(
                user_id=test_user["id"],
                duration_seconds=1500,
                status="completed",
                started_at=NOW - timedelta(hours=1),
                ended_at=NOW - timedelta(minutes=35),
            )
        )
        db.session.commit()
        make_task(test_user["id"], timedelta(days=1))
        make_task(test_user["id"], timedelta(days=5), title="Far away")
        email = MagicMock()
        email.send_daily_digest.return_value = True

        NotificationJobs(email_service=email, now=NOW).daily_digest()

        user, upcoming, stats = email.send_daily_digest.call_args.args
        assert user.id == test_user["id"]
        assert [t.title for t in upcoming] == ["Essay"]
        assert stats == {"sessions": 1, "totalTime": 25, "completedTasks": 0}

    def test_weekly_report_score(self, test_user):
        """Test the weekly report stats."""
        for _ in range(3):
            make_task(
                test_user["id"],
                timedelta(days=-1),
                status="completed",
                completed_at=NOW - timedelta(days=1),
            )
        email = MagicMock()
        email.send_weekly_report.return_value = True

        result = NotificationJobs(email_service=email, now=NOW).weekly_report()
        assert result["sent"] == 1
        stats = email.send_weekly_report.call_args.args[1]
        assert stats["completedTasks"] == 3
        assert stats["productivityScore"] == 30

    def test_unknown_job(self, app):
        """Test that an unknown job name is rejected."""
        with pytest.raises(ValueError):
            NotificationJobs(email_service=MagicMock()).run("monthly")


class TestNotificationScheduler:
    """Scheduler wiring and the CLI."""
    def test_registers_every_job(self, app):
        """Test that the scheduler registers each job."""
        scheduler = NotificationScheduler(app)
        for job_id in JOB_SCHEDULE:
            assert scheduler.scheduler.get_job(job_id) is not None
        assert scheduler.running is False

    def test_run_job_uses_factory(self, app):
        """Test that run_job builds jobs from the factory."""
        jobs = MagicMock()
        jobs.run.return_value = {"sent": 2, "skipped": 0, "failed": 0}
        scheduler = NotificationScheduler(app, jobs_factory=lambda: jobs)

        assert scheduler.run_job("weekly_report")["sent"] == 2
        jobs.run.assert_called_once_with("weekly_report")

    def test_run_unknown_job(self, app):
        """Test that the scheduler rejects an unknown job."""
        with pytest.raises(ValueError):
            NotificationScheduler(app).run_job("hourly_spam")

    def test_cli_runs_job(self, app):
        """Test running a job from the CLI."""
        jobs = MagicMock()
        jobs.run.return_value = {"sent": 1, "skipped": 2, "failed": 0}

        with patch("aurora.cli.NotificationJobs", return_value=jobs):
            result = app.test_cli_runner().invoke(
                args=["notifications", "run", "task_reminders"]
            )

        assert result.exit_code == 0
        assert "sent=1 skipped=2 failed=0" in result.output


class TestEmailRemindersAPI:
    """Test cases for email reminder endpoints."""
    def test_preferences_roundtrip(self, auth_client):
        """Test reading and updating email preferences."""
        response = auth_client.get("/api/v1/email-reminders/preferences")
        assert response.json["data"]["preferences"]["weeklyReport"] is True

        response = auth_client.put(
            "/api/v1/email-reminders/preferences",
            json={"dailyDigest": True, "reminderTime": "07:30"},
        )
        assert response.status_code == 200
        preferences = response.json["data"]["preferences"]
        assert preferences["dailyDigest"] is True
        assert preferences["reminderTime"] == "07:30"

    def test_preferences_validation(self, auth_client):
        """Test that preference values must be booleans."""
        for payload in ({"reminderTime": "25:00"}, {"dailyDigest": "yes"}):
            response = auth_client.put(
                "/api/v1/email-reminders/preferences", json=payload
            )
            assert response.status_code == 400, payload

    def test_test_email_without_provider(self, auth_client):
        """Test the test-email endpoint with no provider configured."""
        response = auth_client.post("/api/v1/email-reminders/test")
        assert response.status_code == 200
        assert response.json["data"]["sent"] is False

    def test_send_task_reminder_runs_task(self, auth_client, test_user):
        """Test that a manual reminder runs the Celery task."""
        task_id = make_task(test_user["id"], timedelta(days=1)).id

        with patch.object(
            EmailService, "send_task_reminder", return_value=True
        ) as send:
            response = auth_client.post(
                f"/api/v1/email-reminders/send-task-reminder/{task_id}"
            )

        assert response.status_code == 202
        assert response.json["data"]["queued"] is True
        assert send.call_count == 1
        db.session.expire_all()
        assert db.session.get(Task, task_id).last_reminder_sent is not None

    def test_send_reminder_for_other_users_task(self, auth_client, other_user):
        """Test that reminders for another user's task are not found."""
        task_id = make_task(other_user["id"], timedelta(days=1)).id
        response = auth_client.post(
            f"/api/v1/email-reminders/send-task-reminder/{task_id}"
        )
        assert response.status_code == 404
