"""Scheduled email jobs: daily digest, weekly report and due-task reminders."""

from datetime import datetime, time, timedelta

import structlog
from sqlalchemy import func

from aurora import db
from aurora.models.focus_session import FocusSession
from aurora.models.task import Task, TaskStatus
from aurora.models.user import User
from aurora.services.analytics_service import round_half_up
from aurora.services.email_service import EmailService

logger = structlog.get_logger()

DIGEST_LOOKAHEAD_DAYS = 3
DIGEST_MAX_TASKS = 5
REMINDER_LOOKAHEAD_HOURS = 24
WEEKLY_TASK_TARGET = 10


class NotificationJobs:
    """Batch jobs run by the scheduler or from the CLI.

    Every job walks the opted-in users one at a time. A failure for one user
    is logged and counted, and never stops the batch.
    """

    JOBS = ("daily_digest", "weekly_report", "task_reminders")

    def __init__(self, email_service: EmailService | None = None, now=None):
        self.email = email_service or EmailService()
        self._now = now

    @property
    def now(self) -> datetime:
        return self._now or datetime.utcnow()

    def run(self, job_id: str) -> dict:
        if job_id not in self.JOBS:
            raise ValueError(f"Unknown notification job: {job_id}")
        return getattr(self, job_id)()

    def daily_digest(self) -> dict:
        now = self.now
        day_start = datetime.combine(now.date(), time.min)
        horizon = now + timedelta(days=DIGEST_LOOKAHEAD_DAYS)

        def send(user):
            sessions, seconds = self._focus_totals(user.id, day_start, now)
            completed = self._completed_count(user.id, day_start, now)
            upcoming = (
                Task.query.filter(
                    Task.user_id == user.id,
                    Task.status != TaskStatus.COMPLETED.value,
                    Task.due_date.isnot(None),
                    Task.due_date >= now,
                    Task.due_date <= horizon,
                )
                .order_by(Task.due_date.asc())
                .limit(DIGEST_MAX_TASKS)
                .all()
            )
            return self.email.send_daily_digest(
                user,
                upcoming,
                {
                    "sessions": sessions,
                    "totalTime": round_half_up(seconds / 60),
                    "completedTasks": completed,
                },
            )

        return self._for_each_user(
            "daily_digest", User.notify_daily_digest.is_(True), send
        )

    def weekly_report(self) -> dict:
        now = self.now
        since = now - timedelta(days=7)

        def send(user):
            sessions, seconds = self._focus_totals(user.id, since, now)
            completed = self._completed_count(user.id, since, now)
            minutes = round_half_up(seconds / 60)
            return self.email.send_weekly_report(
                user,
                {
                    "totalSessions": sessions,
                    "totalTime": minutes,
                    "completedTasks": completed,
                    "avgDailyFocus": round_half_up(minutes / 7),
                    "productivityScore": min(
                        100, round_half_up(completed / WEEKLY_TASK_TARGET * 100)
                    ),
                },
            )

        return self._for_each_user(
            "weekly_report", User.notify_weekly_report.is_(True), send
        )

    def task_reminders(self) -> dict:
        now = self.now
        day_start = datetime.combine(now.date(), time.min)
        horizon = now + timedelta(hours=REMINDER_LOOKAHEAD_HOURS)

        def send(user):
            tasks = Task.query.filter(
                Task.user_id == user.id,
                Task.status != TaskStatus.COMPLETED.value,
                Task.due_date.isnot(None),
                Task.due_date >= now,
                Task.due_date <= horizon,
                db.or_(
                    Task.last_reminder_sent.is_(None),
                    Task.last_reminder_sent < day_start,
                ),
            ).all()
            if not tasks:
                return None

            delivered = False
            for task in tasks:
                if self.email.send_task_reminder(user, task):
                    task.last_reminder_sent = now
                    delivered = True
            db.session.commit()
            return delivered

        return self._for_each_user(
            "task_reminders", User.notify_task_reminders.is_(True), send
        )

    def _for_each_user(self, job_id: str, criterion, send) -> dict:
        """Run ``send(user)`` for every opted-in user.

        ``send`` returns True when mail went out, False when delivery failed
        and None when there was nothing to send.
        """
        results = {"sent": 0, "skipped": 0, "failed": 0}
        users = User.query.filter(criterion, User.email.isnot(None)).all()
        logger.info(f"{job_id}_started", user_count=len(users))

        for user in users:
            try:
                outcome = send(user)
            except Exception as e:
                db.session.rollback()
                logger.error(f"{job_id}_user_error", user_id=user.id, error=str(e))
                results["failed"] += 1
                continue

            if outcome is None:
                results["skipped"] += 1
            elif outcome:
                results["sent"] += 1
            else:
                results["failed"] += 1

        logger.info(f"{job_id}_completed", **results)
        return results

    @staticmethod
    def _focus_totals(user_id: int, start: datetime, end: datetime) -> tuple[int, int]:
        count, seconds = (
            db.session.query(
                func.count(FocusSession.id),
                func.coalesce(func.sum(FocusSession.duration_seconds), 0),
            )
            .filter(
                FocusSession.user_id == user_id,
                FocusSession.started_at >= start,
                FocusSession.started_at <= end,
            )
            .one()
        )
        return count, int(seconds)

    @staticmethod
    def _completed_count(user_id: int, start: datetime, end: datetime) -> int:
        return Task.query.filter(
            Task.user_id == user_id,
            Task.status == TaskStatus.COMPLETED.value,
            Task.completed_at >= start,
            Task.completed_at <= end,
        ).count()
