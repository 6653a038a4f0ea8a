"""Focus analytics: period summaries, streaks and productivity insights.

The scoring and streak math lives in module-level functions that work on
plain values so it can be exercised without a database. ``FocusAnalytics``
loads a user's history and feeds it through them.

All timestamps are naive UTC; calendar days are UTC days.
"""

import math
from collections import OrderedDict
from datetime import date, datetime, time, timedelta
from typing import Iterable

import structlog

from aurora import db
from aurora.errors import ValidationError
from aurora.models.focus_session import FocusSession
from aurora.models.task import Task, TaskStatus

logger = structlog.get_logger()

PERIODS = ("today", "week", "month")
EXPECTED_DAYS = {"today": 1, "week": 7, "month": 30}
TRAILING_DAYS = {"week": 7, "month": 30}

INSIGHTS_WINDOW_DAYS = 30


def round_half_up(value: float, ndigits: int = 0) -> float | int:
    """Round halves away from zero for non-negative inputs (2.5 -> 3)."""
    factor = 10**ndigits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if ndigits == 0 else rounded


def period_window(period: str, now: datetime) -> tuple[datetime, datetime]:
    """Inclusive [start, end] window for a summary period."""
    if period == "today":
        return (
            datetime.combine(now.date(), time.min),
            datetime.combine(now.date(), time.max),
        )
    if period in TRAILING_DAYS:
        return now - timedelta(days=TRAILING_DAYS[period]), now
    raise ValidationError(
        details={"period": f"period must be one of: {', '.join(PERIODS)}"}
    )


def _finite_or_zero(value: float) -> float:
    if value is None or math.isnan(value):
        return 0.0
    return value


def productivity_score(
    consistency_score: float, total_hours: float, task_completion_rate: float
) -> int:
    """Weighted composite of consistency, volume and completion, in [0, 100]."""
    raw = (
        _finite_or_zero(consistency_score) * 0.3
        + _finite_or_zero(total_hours) * 5
        + _finite_or_zero(task_completion_rate) * 0.7
    )
    return round_half_up(min(100.0, max(0.0, raw)))


def compute_streaks(active_days: Iterable[date], today: date) -> dict:
    """Current and longest run of consecutive active days.

    Walks the distinct days newest first. The current streak follows the
    running counter only while the run that includes the newest day is still
    unbroken and that day is today or yesterday.
    """
    days = sorted(set(active_days), reverse=True)
    yesterday = today - timedelta(days=1)

    current_streak = 0
    longest_streak = 0
    temp_streak = 0
    tracking_current = bool(days) and days[0] >= yesterday
    previous = None

    for day in days:
        if previous is not None and (previous - day).days == 1:
            temp_streak += 1
        else:
            if previous is not None:
                tracking_current = False
            temp_streak = 1

        if tracking_current:
            current_streak = temp_streak
        longest_streak = max(longest_streak, temp_streak)
        previous = day

    return {"currentStreak": current_streak, "longestStreak": longest_streak}


def compute_summary(period: str, sessions: list, task_statuses: list[str]) -> dict:
    """Summary statistics for sessions and tasks already cut to the window.

    ``sessions`` are objects with ``started_at`` and ``duration_seconds``.
    """
    total_sessions = len(sessions)
    total_seconds = sum(s.duration_seconds or 0 for s in sessions)
    avg_session_length = (
        round_half_up(total_seconds / total_sessions / 60) if total_sessions else 0
    )
    total_hours = round_half_up(total_seconds / 3600, 1)

    total_tasks = len(task_statuses)
    completed_tasks = sum(
        1 for status in task_statuses if status == TaskStatus.COMPLETED.value
    )
    task_completion_rate = (
        round_half_up(completed_tasks / total_tasks * 100) if total_tasks else 0
    )

    daily: OrderedDict[date, dict] = OrderedDict()
    for session in sorted(sessions, key=lambda s: s.started_at):
        day = session.started_at.date()
        stats = daily.setdefault(day, {"sessions": 0, "seconds": 0})
        stats["sessions"] += 1
        stats["seconds"] += session.duration_seconds or 0

    daily_breakdown = [
        {
            "date": day.isoformat(),
            "sessions": stats["sessions"],
            "time": round_half_up(stats["seconds"] / 60),
        }
        for day, stats in daily.items()
    ]

    consistency_score = round_half_up(len(daily) / EXPECTED_DAYS[period] * 100)

    return {
        "summary": {
            "totalSessions": total_sessions,
            "totalTime": round_half_up(total_seconds / 60),
            "totalHours": total_hours,
            "avgSessionLength": avg_session_length,
            "productivityScore": productivity_score(
                consistency_score, total_hours, task_completion_rate
            ),
            "consistencyScore": consistency_score,
            "completedTasks": completed_tasks,
            "totalTasks": total_tasks,
            "taskCompletionRate": task_completion_rate,
        },
        "dailyBreakdown": daily_breakdown,
    }


def build_recommendations(
    total_focus_seconds: int, completion_rate: int, best_hours: list[dict]
) -> list[dict]:
    """Rule-based suggestions for the insights view."""
    recommendations = []

    if total_focus_seconds < 3600:
        recommendations.append(
            {
                "type": "focus_time",
                "title": "Increase Focus Time",
                "message": "Try to dedicate at least 30 minutes daily to focused work sessions.",
                "priority": "high",
            }
        )

    if completion_rate < 70:
        recommendations.append(
            {
                "type": "completion_rate",
                "title": "Improve Task Completion",
                "message": "Focus on completing tasks rather than starting new ones.",
                "priority": "medium",
            }
        )

    if best_hours:
        recommendations.append(
            {
                "type": "optimal_time",
                "title": "Use Your Peak Hours",
                "message": (
                    f"Your most productive hours are {best_hours[0]['hour']}:00. "
                    "Schedule important tasks during these times."
                ),
                "priority": "low",
            }
        )

    return recommendations


class FocusAnalytics:
    """Reads a user's focus and task history and reports on it."""

    def __init__(self, now: datetime | None = None):
        self._now = now

    @property
    def now(self) -> datetime:
        return self._now or datetime.utcnow()

    def summarize(self, user_id: int, period: str = "week") -> dict:
        """Summary for ``today``, ``week`` (trailing 7 days) or ``month`` (30)."""
        start, end = period_window(period, self.now)

        sessions = (
            FocusSession.query.filter(
                FocusSession.user_id == user_id,
                FocusSession.started_at >= start,
                FocusSession.started_at <= end,
            )
            .order_by(FocusSession.started_at.asc())
            .all()
        )
        task_statuses = [
            status
            for (status,) in db.session.query(Task.status).filter(
                Task.user_id == user_id,
                Task.created_at >= start,
                Task.created_at <= end,
            )
        ]

        result = compute_summary(period, sessions, task_statuses)
        logger.debug(
            "focus_summary_computed",
            user_id=user_id,
            period=period,
            start=start.isoformat(),
            end=end.isoformat(),
            **result["summary"],
        )

        return {
            "period": period,
            "summary": result["summary"],
            "dailyBreakdown": result["dailyBreakdown"],
            "focusSessions": [
                {
                    "id": s.id,
                    "startTime": s.started_at.isoformat(),
                    "duration": s.duration_seconds,
                    "subject": s.task.subject if s.task else None,
                }
                for s in sessions
            ],
        }

    def streak(self, user_id: int) -> dict:
        """Current and longest daily streaks over all-time history."""
        rows = db.session.query(
            FocusSession.started_at, FocusSession.duration_seconds
        ).filter(FocusSession.user_id == user_id)

        active_days = set()
        total_sessions = 0
        total_seconds = 0
        for started_at, duration_seconds in rows:
            active_days.add(started_at.date())
            total_sessions += 1
            total_seconds += duration_seconds or 0

        result = compute_streaks(active_days, self.now.date())
        result["totalSessions"] = total_sessions
        result["totalFocusTime"] = round_half_up(total_seconds / 60)
        return result

    def productivity_insights(self, user_id: int) -> dict:
        """Trailing 30-day insights: best hours, top subjects, recommendations."""
        since = self.now - timedelta(days=INSIGHTS_WINDOW_DAYS)

        rows = (
            db.session.query(
                FocusSession.started_at, FocusSession.duration_seconds, Task.subject
            )
            .outerjoin(Task, FocusSession.task_id == Task.id)
            .filter(
                FocusSession.user_id == user_id,
                FocusSession.started_at >= since,
            )
            .order_by(FocusSession.started_at.asc())
            .all()
        )
        task_statuses = [
            status
            for (status,) in db.session.query(Task.status).filter(
                Task.user_id == user_id, Task.created_at >= since
            )
        ]

        total_focus_seconds = sum(duration or 0 for _, duration, _ in rows)
        total_tasks = len(task_statuses)
        completed_tasks = sum(
            1 for status in task_statuses if status == TaskStatus.COMPLETED.value
        )
        completion_rate = (
            round_half_up(completed_tasks / total_tasks * 100) if total_tasks else 0
        )

        hourly: dict[int, dict] = {}
        subjects: dict[str, dict] = {}
        for started_at, duration, subject in rows:
            hour_stats = hourly.setdefault(
                started_at.hour, {"sessions": 0, "totalTime": 0}
            )
            hour_stats["sessions"] += 1
            hour_stats["totalTime"] += duration or 0

            subject_stats = subjects.setdefault(
                subject or "General", {"sessions": 0, "totalTime": 0}
            )
            subject_stats["sessions"] += 1
            subject_stats["totalTime"] += duration or 0

        best_hours = [
            {
                "hour": hour,
                "sessions": stats["sessions"],
                "totalTime": round_half_up(stats["totalTime"] / 60),
            }
            for hour, stats in sorted(
                hourly.items(), key=lambda item: (-item[1]["totalTime"], item[0])
            )[:3]
        ]
        top_subjects = [
            {
                "subject": subject,
                "sessions": stats["sessions"],
                "totalTime": round_half_up(stats["totalTime"] / 60),
            }
            for subject, stats in sorted(
                subjects.items(), key=lambda item: -item[1]["totalTime"]
            )[:5]
        ]

        return {
            "insights": {
                "totalFocusTime": round_half_up(total_focus_seconds / 60),
                "completedTasks": completed_tasks,
                "totalTasks": total_tasks,
                "completionRate": completion_rate,
                "avgDailyFocus": round_half_up(
                    total_focus_seconds / INSIGHTS_WINDOW_DAYS / 60
                ),
            },
            "bestHours": best_hours,
            "topSubjects": top_subjects,
            "recommendations": build_recommendations(
                total_focus_seconds, completion_rate, best_hours
            ),
        }
