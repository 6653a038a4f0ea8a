"""Focus session model."""

from datetime import datetime
from enum import Enum

from aurora import db


class FocusSessionStatus(str, Enum):
    """How a focus session ended."""

    COMPLETED = "completed"
    INTERRUPTED = "interrupted"


class FocusSessionType(str, Enum):
    """Pomodoro segment kind."""

    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"


class FocusSession(db.Model):
    """A finished timer session. Immutable once recorded."""

    __tablename__ = "focus_sessions"
    __table_args__ = (
        db.Index("ix_focus_sessions_user_started", "user_id", "started_at"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    task_id = db.Column(
        db.Integer, db.ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True
    )

    session_type = db.Column(
        db.String(20), default=FocusSessionType.FOCUS.value, nullable=False
    )
    duration_seconds = db.Column(db.Integer, nullable=False)
    status = db.Column(
        db.String(20), default=FocusSessionStatus.COMPLETED.value, nullable=False
    )
    xp_earned = db.Column(db.Integer, default=0, nullable=False)
    notes = db.Column(db.Text, nullable=True)

    # Timestamps
    started_at = db.Column(db.DateTime, nullable=False)
    ended_at = db.Column(db.DateTime, nullable=False)
    completed_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def duration_minutes(self) -> int:
        """Whole minutes of the session."""
        return (self.duration_seconds or 0) // 60

    def to_dict(self) -> dict:
        """Convert focus session to dictionary."""
        result = {
            "id": self.id,
            "user": self.user_id,
            "task": self.task_id,
            "type": self.session_type,
            "duration": self.duration_seconds,
            "status": self.status,
            "xpEarned": self.xp_earned,
            "notes": self.notes,
            "startedAt": self.started_at.isoformat() if self.started_at else None,
            "endedAt": self.ended_at.isoformat() if self.ended_at else None,
            "completedAt": (
                self.completed_at.isoformat() if self.completed_at else None
            ),
        }

        if self.task:
            result["taskTitle"] = self.task.title
            result["subject"] = self.task.subject

        return result

    def __repr__(self) -> str:
        return f"<FocusSession {self.id}: {self.status}>"
