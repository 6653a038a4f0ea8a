"""Email reminder API endpoints."""

from flask_jwt_extended import jwt_required

from aurora.api import api_bp
from aurora.errors import ValidationError
from aurora.services.email_service import EmailService
from aurora.services.task_service import TaskService
from aurora.services.user_service import UserService
from aurora.utils import (
    current_user_id,
    get_current_user,
    require_json,
    success_response,
)


@api_bp.route("/email-reminders/preferences", methods=["GET"])
@jwt_required()
def get_email_preferences():
    return success_response({"preferences": get_current_user().email_notifications})


@api_bp.route("/email-reminders/preferences", methods=["PUT"])
@jwt_required()
def update_email_preferences():
    """
    Update email notification preferences.

    Request body (all optional):
    {
        "taskReminders": true,
        "dailyDigest": false,
        "weeklyReport": true,
        "reminderTime": "09:00"
    }
    """
    preferences = UserService().update_notification_preferences(
        current_user_id(), require_json()
    )
    return success_response({"preferences": preferences})


@api_bp.route("/email-reminders/test", methods=["POST"])
@jwt_required()
def send_test_email():
    """Send a sample task reminder to the caller's address."""
    user = get_current_user()
    if not user.email:
        raise ValidationError(details={"email": "No email address on file"})

    sent = EmailService().send(
        user.email, "task_reminder", user.name, "Test Task", None
    )
    return success_response({"sent": sent})


@api_bp.route("/email-reminders/send-task-reminder/<int:task_id>", methods=["POST"])
@jwt_required()
def send_task_reminder(task_id: int):
    """Queue a reminder email for one of the caller's tasks."""
    from aurora.tasks import send_task_reminder_async

    user_id = current_user_id()
    TaskService().get_owned_task(user_id, task_id)
    result = send_task_reminder_async.delay(user_id, task_id)
    return success_response({"queued": True, "jobId": result.id}, status_code=202)
