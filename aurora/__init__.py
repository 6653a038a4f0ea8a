"""Flask application factory."""

import os

from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

from aurora.config import config

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application."""
    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Logging first so extension setup is captured
    from aurora.extensions import init_sentry
    from aurora.logging_config import setup_logging

    setup_logging(app)
    init_sentry(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    from aurora.celery_app import init_celery

    init_celery(app)

    # CORS
    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)

    # Register blueprints
    from aurora.api import api_bp

    app.register_blueprint(api_bp, url_prefix="/api/v1")

    from aurora.errors import register_error_handlers, register_jwt_handlers

    register_error_handlers(app)
    register_jwt_handlers(jwt)

    from aurora.cli import notifications

    app.cli.add_command(notifications)

    # Health check endpoint
    @app.route("/health")
    def health():
        return {"status": "ok"}

    # Shell context
    @app.shell_context_processor
    def make_shell_context():
        from aurora.models import ClaimedReward, FocusSession, Task, User

        return {
            "db": db,
            "User": User,
            "Task": Task,
            "FocusSession": FocusSession,
            "ClaimedReward": ClaimedReward,
        }

    if app.config.get("SCHEDULER_ENABLED"):
        from aurora.scheduler import NotificationScheduler

        scheduler = NotificationScheduler(app)
        scheduler.start()
        app.extensions["notification_scheduler"] = scheduler

    return app
