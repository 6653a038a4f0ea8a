"""In-process cron scheduler for the notification jobs."""

import structlog
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

logger = structlog.get_logger()

# job id -> cron trigger kwargs, all in UTC
JOB_SCHEDULE = {
    "daily_digest": {"hour": 9, "minute": 0},
    "weekly_report": {"day_of_week": "sun", "hour": 18, "minute": 0},
    "task_reminders": {"minute": 0},
}


class NotificationScheduler:
    """Runs ``NotificationJobs`` on their cron schedule inside the app context."""

    def __init__(self, app, jobs_factory=None):
        self.app = app
        self.jobs_factory = jobs_factory
        self.scheduler = BackgroundScheduler(timezone="UTC")
        for job_id, trigger in JOB_SCHEDULE.items():
            self.scheduler.add_job(
                self.run_job,
                CronTrigger(timezone="UTC", **trigger),
                args=[job_id],
                id=job_id,
                replace_existing=True,
                coalesce=True,
                max_instances=1,
            )

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self):
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("notification_scheduler_started", jobs=list(JOB_SCHEDULE))
        return self

    def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("notification_scheduler_stopped")

    def run_job(self, job_id: str) -> dict:
        """Run one job synchronously and return its ``{sent, skipped, failed}``."""
        if job_id not in JOB_SCHEDULE:
            raise ValueError(f"Unknown notification job: {job_id}")

        with self.app.app_context():
            if self.jobs_factory:
                jobs = self.jobs_factory()
            else:
                from aurora.services.notification_jobs import NotificationJobs

                jobs = NotificationJobs()
            try:
                return jobs.run(job_id)
            except Exception:
                logger.exception("notification_job_failed", job_id=job_id)
                raise
