"""Task lifecycle: creation, updates and the XP edge into "completed"."""

from datetime import datetime

import structlog
from sqlalchemy import update

from aurora import db
from aurora.errors import NotFoundError, ValidationError
from aurora.models.task import Task, TaskPriority, TaskStatus, TaskType
from aurora.services.xp_calculator import XPCalculator
from aurora.services.xp_ledger import XPLedger
from aurora.utils.validation import (
    optional_choice,
    optional_text,
    parse_datetime,
    require_text,
)

logger = structlog.get_logger()

TITLE_MAX_LENGTH = 500


class TaskService:
    """Task CRUD with XP side effects.

    XP for completion is granted only on the first transition into
    ``completed``. Reopening and completing again grants nothing, and
    deleting a task never takes XP back.
    """

    def __init__(self, ledger: XPLedger | None = None):
        self.ledger = ledger or XPLedger()

    def get_owned_task(self, user_id: int, task_id: int) -> Task:
        task = Task.query.filter_by(id=task_id, user_id=user_id).first()
        if not task:
            raise NotFoundError("Task not found")
        return task

    def list_tasks(self, user_id: int, status: str | None = None) -> list[Task]:
        query = Task.query.filter_by(user_id=user_id)
        if status:
            if status not in [s.value for s in TaskStatus]:
                raise ValidationError(details={"status": "Unknown status"})
            query = query.filter_by(status=status)
        return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    def create_task(self, user_id: int, data: dict) -> tuple[Task, int]:
        """Persist a task and grant creation XP. Returns (task, xp_earned)."""
        title = require_text(data, "title", max_length=TITLE_MAX_LENGTH)
        subject = require_text(data, "subject", max_length=255)
        priority = optional_choice(
            data,
            "priority",
            [p.value for p in TaskPriority],
            default=TaskPriority.MEDIUM.value,
        )
        task_type = optional_choice(data, "taskType", [t.value for t in TaskType])
        due_date = parse_datetime(data.get("dueDate"), "dueDate")
        description = optional_text(data, "description")

        task = Task(
            user_id=user_id,
            title=title,
            subject=subject,
            task_type=task_type,
            description=description,
            priority=priority,
            due_date=due_date,
        )
        db.session.add(task)
        db.session.commit()

        xp_earned = self.ledger.grant_xp_best_effort(
            user_id, XPCalculator.task_created(priority), reason="task_created"
        )
        logger.info("task_created", user_id=user_id, task_id=task.id, xp=xp_earned)
        return task, xp_earned

    def update_task(self, user_id: int, task_id: int, data: dict) -> tuple[Task, int]:
        """Apply a partial update. Returns (task, xp_earned_by_this_update)."""
        task = self.get_owned_task(user_id, task_id)

        if "title" in data:
            task.title = require_text(data, "title", max_length=TITLE_MAX_LENGTH)
        if "subject" in data:
            task.subject = require_text(data, "subject", max_length=255)
        if "description" in data:
            task.description = optional_text(data, "description")
        if "dueDate" in data:
            task.due_date = parse_datetime(data["dueDate"], "dueDate")
        if "priority" in data:
            task.priority = optional_choice(
                data, "priority", [p.value for p in TaskPriority], task.priority
            )
        if "taskType" in data:
            task.task_type = optional_choice(
                data, "taskType", [t.value for t in TaskType]
            )

        entering_completed = False
        if "status" in data:
            new_status = optional_choice(
                data, "status", [s.value for s in TaskStatus], task.status
            )
            if new_status != task.status:
                entering_completed = new_status == TaskStatus.COMPLETED.value
                task.status = new_status
                task.completed_at = datetime.utcnow() if entering_completed else None

        db.session.commit()

        xp_earned = 0
        if entering_completed and self._claim_completion_reward(task.id):
            xp_earned = self.ledger.grant_xp_best_effort(
                user_id,
                XPCalculator.task_completed(task.priority),
                reason="task_completed",
            )
            logger.info(
                "task_completed", user_id=user_id, task_id=task.id, xp=xp_earned
            )

        return task, xp_earned

    def delete_task(self, user_id: int, task_id: int) -> None:
        task = self.get_owned_task(user_id, task_id)
        db.session.delete(task)
        db.session.commit()
        logger.info("task_deleted", user_id=user_id, task_id=task_id)

    def _claim_completion_reward(self, task_id: int) -> bool:
        """Flip the task's one-shot completion marker.

        Conditional UPDATE so only one caller ever sees it flip.
        """
        result = db.session.execute(
            update(Task)
            .where(Task.id == task_id, Task.completion_rewarded.is_(False))
            .values(completion_rewarded=True)
            .execution_options(synchronize_session=False)
        )
        db.session.commit()
        return result.rowcount == 1
