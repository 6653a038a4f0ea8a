"""HTML email templates.

Each builder returns ``(subject, html)``. User-supplied text is escaped.
"""

from datetime import datetime
from html import escape

_WRAPPER = (
    '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
    "{body}"
    '<p>Login to your account: <a href="{app_url}" style="color: #4318ff;">Aurora Minds</a></p>'
    "<p>Best regards,<br>The Aurora Minds Team</p>"
    "</div>"
)
_BOX = (
    '<div style="background-color: #f8f9fa; padding: 20px; '
    'border-radius: 8px; margin: 20px 0;">{content}</div>'
)


def _format_due(due: datetime | str | None) -> str:
    if due is None:
        return "no due date"
    if isinstance(due, datetime):
        return due.strftime("%a %b %d %Y %H:%M")
    return str(due)


def task_reminder(user_name: str, task_title: str, due_date, app_url: str):
    subject = f"Reminder: {task_title} is due soon"
    body = (
        '<h2 style="color: #4318ff;">Aurora Minds - Task Reminder</h2>'
        f"<p>Hi {escape(user_name)},</p>"
        f"<p>This is a friendly reminder that your task <strong>\"{escape(task_title)}\"</strong> "
        f"is due on <strong>{escape(_format_due(due_date))}</strong>.</p>"
        "<p>Don't let procrastination win! Take action now and turn your goals into achievements.</p>"
        + _BOX.format(
            content=(
                '<h3 style="margin-top: 0;">Quick Actions:</h3><ul>'
                "<li>Start working on the task now</li>"
                "<li>Break it down into smaller steps</li>"
                "<li>Set a focus timer for 25 minutes</li>"
                "<li>Update the task status</li></ul>"
            )
        )
    )
    return subject, _WRAPPER.format(body=body, app_url=app_url)


def daily_digest(user_name: str, upcoming_tasks: list, focus_stats: dict, app_url: str):
    if upcoming_tasks:
        items = "".join(
            f"<li>{escape(task.title)} - Due: {escape(_format_due(task.due_date))}</li>"
            for task in upcoming_tasks
        )
        tasks_html = f"<ul>{items}</ul>"
    else:
        tasks_html = "<p>No upcoming tasks! Great job staying on top of things.</p>"

    body = (
        '<h2 style="color: #4318ff;">Aurora Minds - Daily Digest</h2>'
        f"<p>Hi {escape(user_name)},</p>"
        "<p>Here's your productivity summary for today:</p>"
        + _BOX.format(
            content=(
                '<h3 style="margin-top: 0;">Today\'s Focus Stats:</h3>'
                f"<p><strong>Focus Sessions:</strong> {focus_stats.get('sessions', 0)}</p>"
                f"<p><strong>Total Focus Time:</strong> {focus_stats.get('totalTime', 0)} minutes</p>"
                f"<p><strong>Tasks Completed:</strong> {focus_stats.get('completedTasks', 0)}</p>"
            )
        )
        + _BOX.format(
            content='<h3 style="margin-top: 0;">Upcoming Tasks:</h3>' + tasks_html
        )
        + "<p>Keep up the great work!</p>"
    )
    return "Your Daily Aurora Minds Digest", _WRAPPER.format(body=body, app_url=app_url)


def weekly_report(user_name: str, weekly_stats: dict, app_url: str):
    body = (
        '<h2 style="color: #4318ff;">Aurora Minds - Weekly Report</h2>'
        f"<p>Hi {escape(user_name)},</p>"
        "<p>Here's your productivity summary for this week:</p>"
        + _BOX.format(
            content=(
                '<h3 style="margin-top: 0;">Weekly Stats:</h3>'
                f"<p><strong>Total Focus Sessions:</strong> {weekly_stats.get('totalSessions', 0)}</p>"
                f"<p><strong>Total Focus Time:</strong> {weekly_stats.get('totalTime', 0)} minutes</p>"
                f"<p><strong>Tasks Completed:</strong> {weekly_stats.get('completedTasks', 0)}</p>"
                f"<p><strong>Average Daily Focus:</strong> {weekly_stats.get('avgDailyFocus', 0)} minutes</p>"
                f"<p><strong>Productivity Score:</strong> {weekly_stats.get('productivityScore', 0)}%</p>"
            )
        )
    )
    return "Your Weekly Aurora Minds Report", _WRAPPER.format(body=body, app_url=app_url)


TEMPLATES = {
    "task_reminder": task_reminder,
    "daily_digest": daily_digest,
    "weekly_report": weekly_report,
}
