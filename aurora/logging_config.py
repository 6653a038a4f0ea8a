"""Structured logging configuration."""

import logging
import sys
import time
import uuid

import structlog
from flask import g, request
from pythonjsonlogger import jsonlogger

# Redis keys for error tracking
ERROR_COUNT_KEY = "aurora:errors:5xx:count"
ERROR_ALERT_SENT_KEY = "aurora:errors:5xx:alert_sent"


def track_5xx_error(app, path: str, status_code: int):
    """Count 5xx responses per window in Redis and log once over threshold."""
    from aurora.extensions import get_redis_client

    redis = get_redis_client()
    if redis is None:
        return

    window = app.config.get("ERROR_ALERT_WINDOW", 300)
    threshold = app.config.get("ERROR_ALERT_THRESHOLD", 10)
    cooldown = app.config.get("ERROR_ALERT_COOLDOWN", 600)

    try:
        error_key = f"{ERROR_COUNT_KEY}:{int(time.time() // window)}"

        pipe = redis.pipeline()
        pipe.rpush(error_key, f"{status_code} {path}")
        pipe.expire(error_key, window * 2)
        pipe.llen(error_key)
        error_count = pipe.execute()[2]

        if error_count >= threshold and not redis.get(ERROR_ALERT_SENT_KEY):
            sample_errors = [
                e.decode() if isinstance(e, bytes) else e
                for e in redis.lrange(error_key, 0, 4)
            ]
            structlog.get_logger().warning(
                "error_rate_alert",
                error_count=error_count,
                window_seconds=window,
                sample_errors=sample_errors,
            )
            redis.setex(ERROR_ALERT_SENT_KEY, cooldown, "1")
    except Exception as e:
        structlog.get_logger().debug("error_tracking_unavailable", error=str(e))


def setup_logging(app):
    """Configure structlog, JSON stdlib logging and per-request context."""
    log_level = logging.DEBUG if app.debug else logging.INFO
    renderer = (
        structlog.dev.ConsoleRenderer()
        if app.debug
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=not app.testing,
    )

    if not app.debug and not app.testing:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"levelname": "level", "asctime": "timestamp"},
            )
        )
        handler.setLevel(log_level)

        app.logger.handlers = [handler]
        app.logger.setLevel(log_level)

        for logger_name in ("werkzeug", "sqlalchemy.engine", "apscheduler", "celery"):
            named = logging.getLogger(logger_name)
            named.handlers = [handler]
            named.setLevel(logging.WARNING)

    @app.before_request
    def bind_request_context():
        g.request_id = uuid.uuid4().hex[:8]
        g.request_start_time = time.time()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=g.request_id,
            method=request.method,
            path=request.path,
            remote_addr=request.remote_addr,
        )

    @app.after_request
    def log_response(response):
        if not hasattr(g, "request_start_time"):
            return response

        if request.path != "/health":
            structlog.get_logger().info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.time() - g.request_start_time) * 1000, 2),
                content_length=response.content_length,
            )

        if response.status_code >= 500:
            track_5xx_error(app, request.path, response.status_code)

        return response

    return app
