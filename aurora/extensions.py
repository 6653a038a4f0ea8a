"""Flask extensions initialization."""

import os

import redis
from flask import current_app

# Redis client
redis_client = None


def get_redis_client():
    """Get or create Redis client. Returns None when Redis is not configured."""
    global redis_client
    if redis_client is None:
        redis_url = current_app.config.get("REDIS_URL")
        if not redis_url:
            return None
        redis_client = redis.from_url(
            redis_url, decode_responses=True, socket_connect_timeout=1
        )
    return redis_client


def init_sentry(app):
    """Initialize Sentry error tracking."""
    sentry_dsn = app.config.get("SENTRY_DSN")
    if sentry_dsn:
        import sentry_sdk
        from sentry_sdk.integrations.celery import CeleryIntegration
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.redis import RedisIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[
                FlaskIntegration(),
                SqlalchemyIntegration(),
                CeleryIntegration(),
                RedisIntegration(),
            ],
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            profiles_sample_rate=0.1,
            environment=os.environ.get("FLASK_ENV", "production"),
            send_default_pii=False,
        )
        app.logger.info("Sentry initialized successfully")
    elif not app.testing:
        app.logger.warning("SENTRY_DSN not set, error tracking disabled")
