"""Notification-related async tasks."""

from datetime import datetime

import structlog

from aurora.celery_app import celery

logger = structlog.get_logger()


@celery.task(bind=True, max_retries=3, default_retry_delay=30)
def send_task_reminder_async(self, user_id: int, task_id: int):
    """Email the owner of a task a reminder about it."""
    from aurora import db
    from aurora.models import Task, User
    from aurora.services.email_service import EmailService

    logger.info("send_task_reminder_started", user_id=user_id, task_id=task_id)

    user = db.session.get(User, user_id)
    task = db.session.get(Task, task_id)

    if not user or not task or task.user_id != user_id:
        logger.warning(
            "send_task_reminder_missing_data",
            user_id=user_id,
            task_id=task_id,
            user_exists=bool(user),
            task_exists=bool(task),
        )
        return {"success": False, "error": "User or task not found"}

    if not user.email:
        logger.warning("send_task_reminder_no_email", user_id=user_id)
        return {"success": False, "error": "User has no email address"}

    try:
        sent = EmailService().send_task_reminder(user, task)
    except Exception as e:
        logger.error(
            "send_task_reminder_error", user_id=user_id, task_id=task_id, error=str(e)
        )
        raise self.retry(exc=e)

    if not sent:
        logger.warning("send_task_reminder_failed", user_id=user_id, task_id=task_id)
        return {"success": False, "error": "Failed to send email"}

    task.last_reminder_sent = datetime.utcnow()
    db.session.commit()
    logger.info("send_task_reminder_completed", user_id=user_id, task_id=task_id)
    return {"success": True}
