"""Outbound email through the Resend HTTP API."""

import requests
import structlog
from flask import current_app

from aurora.services.email_templates import TEMPLATES

logger = structlog.get_logger()

RESEND_API_URL = "https://api.resend.com/emails"


class EmailService:
    """Renders a named template and delivers it.

    ``send`` never raises for delivery problems: it logs and returns False,
    so a broken mail provider cannot fail the caller's primary action.
    """

    def __init__(
        self,
        api_key: str | None = None,
        from_address: str | None = None,
        from_name: str | None = None,
        app_url: str | None = None,
        http=None,
    ):
        self.api_key = api_key if api_key is not None else current_app.config.get(
            "RESEND_API_KEY", ""
        )
        self.from_address = from_address or current_app.config.get("MAIL_FROM_ADDRESS")
        self.from_name = from_name or current_app.config.get("MAIL_FROM_NAME")
        self.app_url = app_url or current_app.config.get("APP_URL")
        self.http = http or requests

    def send(self, to_email: str, template: str, *args) -> bool:
        """Render ``template`` with ``args`` and send it to ``to_email``."""
        if template not in TEMPLATES:
            raise ValueError(f"Unknown email template: {template}")

        if not to_email:
            logger.warning("email_skipped_no_address", template=template)
            return False

        if not self.api_key:
            logger.warning("email_skipped_no_api_key", to=to_email, template=template)
            return False

        subject, html = TEMPLATES[template](*args, app_url=self.app_url)

        try:
            response = self.http.post(
                RESEND_API_URL,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": f"{self.from_name} <{self.from_address}>",
                    "to": [to_email],
                    "subject": subject,
                    "html": html,
                },
                timeout=10,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(
                "email_send_failed", to=to_email, template=template, error=str(e)
            )
            return False

        logger.info("email_sent", to=to_email, template=template)
        return True

    def send_task_reminder(self, user, task) -> bool:
        return self.send(user.email, "task_reminder", user.name, task.title, task.due_date)

    def send_daily_digest(self, user, upcoming_tasks: list, focus_stats: dict) -> bool:
        return self.send(
            user.email, "daily_digest", user.name, upcoming_tasks, focus_stats
        )

    def send_weekly_report(self, user, weekly_stats: dict) -> bool:
        return self.send(user.email, "weekly_report", user.name, weekly_stats)
