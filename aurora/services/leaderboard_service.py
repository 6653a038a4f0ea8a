"""XP leaderboard with a short-lived Redis cache."""

import json

import structlog
from flask import current_app

from aurora.models.user import User
from aurora.services.level_calculator import level_of

logger = structlog.get_logger()

LEADERBOARD_CACHE_KEY = "leaderboard:xp"


class LeaderboardService:
    def top_users(self) -> list[dict]:
        """Top users by XP, highest first. Ties go to the older account."""
        cached = self._read_cache()
        if cached is not None:
            return cached

        limit = current_app.config.get("LEADERBOARD_LIMIT", 100)
        users = (
            User.query.order_by(User.xp.desc(), User.id.asc()).limit(limit).all()
        )
        leaderboard = [
            {
                "rank": rank,
                "id": user.id,
                "name": user.name,
                "xp": user.xp or 0,
                "level": level_of(user.xp or 0),
            }
            for rank, user in enumerate(users, start=1)
        ]

        self._write_cache(leaderboard)
        return leaderboard

    def _read_cache(self) -> list | None:
        try:
            from aurora.extensions import get_redis_client

            r = get_redis_client()
            if r is None:
                return None
            cached = r.get(LEADERBOARD_CACHE_KEY)
            return json.loads(cached) if cached is not None else None
        except Exception as e:
            logger.warning("leaderboard_cache_read_error", error=str(e))
            return None

    def _write_cache(self, leaderboard: list) -> None:
        try:
            from aurora.extensions import get_redis_client

            r = get_redis_client()
            if r is None:
                return
            r.set(
                LEADERBOARD_CACHE_KEY,
                json.dumps(leaderboard),
                ex=current_app.config.get("LEADERBOARD_CACHE_SECONDS", 60),
            )
        except Exception as e:
            logger.warning("leaderboard_cache_write_error", error=str(e))
