"""User model."""

from datetime import datetime
from enum import Enum

from werkzeug.security import check_password_hash, generate_password_hash

from aurora import db
from aurora.services.level_calculator import level_progress


class Theme(str, Enum):
    """UI theme preference."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


DEFAULT_REMINDER_TIME = "09:00"


class User(db.Model):
    """User model for storing account, XP and preference data."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=True, index=True)
    password_hash = db.Column(db.String(255), nullable=True)
    theme = db.Column(db.String(20), default=Theme.SYSTEM.value, nullable=False)

    # Gamification. Level is derived from xp on read, never stored.
    xp = db.Column(db.BigInteger, default=0, nullable=False, index=True)

    # Subjects the user files tasks under
    subjects = db.Column(db.JSON, default=list, nullable=False)

    # Email notification preferences
    notify_task_reminders = db.Column(db.Boolean, default=True, nullable=False)
    notify_daily_digest = db.Column(db.Boolean, default=False, nullable=False)
    notify_weekly_report = db.Column(db.Boolean, default=True, nullable=False)
    reminder_time = db.Column(
        db.String(5), default=DEFAULT_REMINDER_TIME, nullable=False
    )

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    tasks = db.relationship(
        "Task", backref="owner", lazy="dynamic", cascade="all, delete-orphan"
    )
    focus_sessions = db.relationship(
        "FocusSession", backref="owner", lazy="dynamic", cascade="all, delete-orphan"
    )
    claimed_rewards = db.relationship(
        "ClaimedReward", backref="owner", lazy="dynamic", cascade="all, delete-orphan"
    )

    def set_password(self, password: str) -> None:
        """Set password hash."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Check password against hash."""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def level(self) -> int:
        """Level derived from cumulative XP."""
        return level_progress(self.xp or 0)["level"]

    @property
    def email_notifications(self) -> dict:
        return {
            "taskReminders": self.notify_task_reminders,
            "dailyDigest": self.notify_daily_digest,
            "weeklyReport": self.notify_weekly_report,
            "reminderTime": self.reminder_time,
        }

    def to_dict(self) -> dict:
        """Convert user to dictionary."""
        progress = level_progress(self.xp or 0)
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "xp": self.xp or 0,
            "level": progress["level"],
            "xpIntoLevel": progress["xp_into_level"],
            "xpForNextLevel": progress["xp_for_next_level"],
            "subjects": list(self.subjects or []),
            "theme": self.theme,
            "emailNotifications": self.email_notifications,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email}>"
