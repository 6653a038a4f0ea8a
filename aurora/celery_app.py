"""Celery application configuration."""

import os

from celery import Celery

# Create Celery app
celery = Celery(
    "aurora",
    broker=os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/1"),
    backend=os.environ.get("CELERY_RESULT_BACKEND", "redis://localhost:6379/1"),
    include=["aurora.tasks.notification_tasks"],
)

# Celery configuration
celery.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=120,
    task_soft_time_limit=90,
    task_acks_late=True,  # Acknowledge after task completion
    task_reject_on_worker_lost=True,
    result_expires=3600,
    broker_connection_retry_on_startup=True,
)


def init_celery(app):
    """Bind Celery to the Flask app so tasks run inside its context."""
    celery.conf.update(
        broker_url=app.config["CELERY_BROKER_URL"],
        result_backend=app.config["CELERY_RESULT_BACKEND"],
        task_always_eager=app.config.get("CELERY_TASK_ALWAYS_EAGER", False),
        task_eager_propagates=app.config.get("CELERY_TASK_ALWAYS_EAGER", False),
    )
    # Looked up at call time so the most recently created app wins.
    celery.flask_app = app

    class ContextTask(celery.Task):
        """Task that runs within Flask app context."""

        def __call__(self, *args, **kwargs):
            with celery.flask_app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = ContextTask
    return celery
