"""Celery tasks package."""

from aurora.tasks.notification_tasks import send_task_reminder_async

__all__ = ["send_task_reminder_async"]
