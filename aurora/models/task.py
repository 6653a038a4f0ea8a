"""Task model."""

from datetime import datetime
from enum import Enum

from aurora import db


class TaskStatus(str, Enum):
    """Task status enum."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority enum."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskType(str, Enum):
    """Kind of coursework a task represents."""

    LAB = "lab"
    ASSIGNMENT = "assignment"
    PROJECT = "project"


class Task(db.Model):
    """Task model."""

    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = db.Column(db.String(500), nullable=False)
    subject = db.Column(db.String(255), nullable=True, index=True)
    task_type = db.Column(db.String(20), nullable=True)
    description = db.Column(db.Text, nullable=True)
    priority = db.Column(
        db.String(20), default=TaskPriority.MEDIUM.value, nullable=False
    )
    status = db.Column(db.String(20), default=TaskStatus.PENDING.value, nullable=False)
    due_date = db.Column(db.DateTime, nullable=True, index=True)

    # Set once, the first time the task enters "completed" and XP is granted
    completion_rewarded = db.Column(db.Boolean, default=False, nullable=False)
    last_reminder_sent = db.Column(db.DateTime, nullable=True)

    # Timestamps
    created_at = db.Column(
        db.DateTime, default=datetime.utcnow, nullable=False, index=True
    )
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
    completed_at = db.Column(db.DateTime, nullable=True)

    focus_sessions = db.relationship("FocusSession", backref="task", lazy="dynamic")

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED.value

    def to_dict(self) -> dict:
        """Convert task to dictionary."""
        return {
            "id": self.id,
            "user": self.user_id,
            "title": self.title,
            "subject": self.subject,
            "taskType": self.task_type,
            "description": self.description,
            "priority": self.priority,
            "status": self.status,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "completedAt": (
                self.completed_at.isoformat() if self.completed_at else None
            ),
        }

    def __repr__(self) -> str:
        return f"<Task {self.id}: {self.title[:30]}>"
