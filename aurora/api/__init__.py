"""API blueprints."""

from flask import Blueprint

api_bp = Blueprint("api", __name__)

from aurora.api import (  # noqa: E402, F401
    analytics,
    auth,
    email_reminders,
    focus,
    leaderboard,
    rewards,
    tasks,
    users,
)
