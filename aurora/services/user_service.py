"""Accounts, profile settings, subjects and notification preferences."""

import re

import structlog
from sqlalchemy.exc import IntegrityError

from aurora import db
from aurora.errors import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from aurora.models.task import Task
from aurora.models.user import Theme, User
from aurora.utils.validation import optional_choice, require_text

logger = structlog.get_logger()

PASSWORD_MIN_LENGTH = 6
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
REMINDER_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

PREFERENCE_FIELDS = {
    "taskReminders": "notify_task_reminders",
    "dailyDigest": "notify_daily_digest",
    "weeklyReport": "notify_weekly_report",
}


def _normalize_email(data: dict) -> str:
    email = require_text(data, "email", max_length=255).lower()
    if not EMAIL_RE.match(email):
        raise ValidationError(details={"email": "Invalid email format"})
    return email


def _validate_password(data: dict) -> str:
    password = data.get("password")
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            details={
                "password": f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
            }
        )
    return password


class UserService:
    """Everything about a user that is not XP or tasks."""

    def get_user(self, user_id: int) -> User:
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def register(self, data: dict) -> User:
        name = require_text(data, "name", max_length=255)
        email = _normalize_email(data)
        password = _validate_password(data)

        if User.query.filter_by(email=email).first():
            raise ConflictError("Email already registered")

        user = User(name=name, email=email, subjects=[])
        user.set_password(password)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError("Email already registered") from None

        logger.info("user_registered", user_id=user.id)
        return user

    def authenticate(self, data: dict) -> User:
        email = data.get("email")
        password = data.get("password")
        if not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError(
                details={"credentials": "Email and password are required"}
            )

        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user or not user.check_password(password):
            logger.info("login_failed", email=email)
            raise UnauthorizedError("Invalid email or password")
        return user

    def update_profile(self, user_id: int, data: dict) -> User:
        user = self.get_user(user_id)

        if "name" in data:
            user.name = require_text(data, "name", max_length=255)
        if "theme" in data:
            user.theme = optional_choice(
                data, "theme", [t.value for t in Theme], user.theme
            )
        if data.get("password") is not None:
            user.set_password(_validate_password(data))

        db.session.commit()
        return user

    def list_subjects(self, user_id: int) -> list[str]:
        return list(self.get_user(user_id).subjects or [])

    def add_subject(self, user_id: int, data: dict) -> list[str]:
        subject = require_text(data, "subject", max_length=255)
        user = self.get_user(user_id)
        subjects = list(user.subjects or [])
        if subject in subjects:
            raise ValidationError(details={"subject": "Subject already exists"})

        # Reassign so the JSON column is marked dirty.
        user.subjects = subjects + [subject]
        db.session.commit()
        return list(user.subjects)

    def remove_subject(self, user_id: int, subject: str) -> list[str]:
        user = self.get_user(user_id)
        subjects = list(user.subjects or [])
        if subject not in subjects:
            raise NotFoundError("Subject not found")

        in_use = Task.query.filter_by(user_id=user_id, subject=subject).count()
        if in_use:
            raise ValidationError(
                "Cannot delete a subject that is used by tasks",
                details={"subject": subject, "taskCount": in_use},
            )

        user.subjects = [s for s in subjects if s != subject]
        db.session.commit()
        return list(user.subjects)

    def update_notification_preferences(self, user_id: int, data: dict) -> dict:
        user = self.get_user(user_id)

        for field, column in PREFERENCE_FIELDS.items():
            if field in data:
                value = data[field]
                if not isinstance(value, bool):
                    raise ValidationError(details={field: f"{field} must be a boolean"})
                setattr(user, column, value)

        if "reminderTime" in data:
            reminder_time = data["reminderTime"]
            if not isinstance(reminder_time, str) or not REMINDER_TIME_RE.match(
                reminder_time
            ):
                raise ValidationError(
                    details={"reminderTime": "reminderTime must be HH:MM"}
                )
            user.reminder_time = reminder_time

        db.session.commit()
        return user.email_notifications
