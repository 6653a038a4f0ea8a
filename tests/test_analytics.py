"""Tests for focus analytics."""

import math
from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from aurora import db
from aurora.errors import ValidationError
from aurora.models import FocusSession, Task
from aurora.services.analytics_service import (
    FocusAnalytics,
    compute_streaks,
    compute_summary,
    period_window,
    productivity_score,
    round_half_up,
)

TODAY = date(2024, 3, 15)


def days_ago(n):
    return TODAY - timedelta(days=n)


def add_session(user_id, started_at, seconds, task_id=None, status="completed"):
    session = FocusSession(
        user_id=user_id,
        task_id=task_id,
        duration_seconds=seconds,
        status=status,
        started_at=started_at,
        ended_at=started_at + timedelta(seconds=seconds),
    )
    db.session.add(session)
    db.session.commit()
    return session


class TestStreaks:
    """Current and longest streak computation."""
    def test_no_history(self):
        """Test that no active days means no streak."""
        assert compute_streaks([], TODAY) == {"currentStreak": 0, "longestStreak": 0}

    def test_run_ending_today(self):
        """Test a run of consecutive days ending today."""
        result = compute_streaks([TODAY, days_ago(1), days_ago(2)], TODAY)
        assert result == {"currentStreak": 3, "longestStreak": 3}

    def test_run_ending_yesterday_is_current(self):
        """Test that a run ending yesterday still counts as current."""
        result = compute_streaks([days_ago(1), days_ago(2)], TODAY)
        assert result == {"currentStreak": 2, "longestStreak": 2}

    def test_stale_run_is_not_current(self):
        """Test that an older run only counts toward the longest streak."""
        result = compute_streaks([days_ago(3), days_ago(4)], TODAY)
        assert result == {"currentStreak": 0, "longestStreak": 2}

    def test_gap_breaks_current_run(self):
        """Test that a missed day resets the current streak."""
        active = [TODAY, days_ago(2), days_ago(3), days_ago(4)]
        assert compute_streaks(active, TODAY) == {
            "currentStreak": 1,
            "longestStreak": 3,
        }

    def test_duplicate_days_count_once(self):
        """Test that several sessions on one day count once."""
        result = compute_streaks([TODAY, TODAY, days_ago(1)], TODAY)
        assert result == {"currentStreak": 2, "longestStreak": 2}

    def test_current_never_exceeds_longest(self):
        """Test that the current streak is bounded by the longest."""
        active = [TODAY - timedelta(days=n) for n in (0, 1, 5, 6, 7, 8, 20)]
        result = compute_streaks(active, TODAY)
        assert result["currentStreak"] <= result["longestStreak"]
        assert result == {"currentStreak": 2, "longestStreak": 4}


class TestScoring:
    """Rounding, productivity score and period summaries."""
    def test_round_half_up(self):
        """Test that halves round up rather than to even."""
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(1.66, 1) == 1.7

    def test_productivity_score_clamped(self):
        """Test the weighted score at its bounds and in between."""
        assert productivity_score(100, 100, 100) == 100
        assert productivity_score(0, 0, 0) == 0
        assert productivity_score(50, 1.5, 40) == 51

    def test_productivity_score_nan_is_zero(self):
        """Test that NaN components count as zero."""
        assert productivity_score(math.nan, 0, math.nan) == 0

    @pytest.mark.parametrize("consistency", [0, 0.5, 29, 100, 1e6, 1e300])
    @pytest.mark.parametrize("hours", [0, 0.01, 1.7, 20, 1e9, 1e300])
    @pytest.mark.parametrize("rate", [0, 50, 99.9, 100, 1e12])
    def test_productivity_score_stays_in_range(self, consistency, hours, rate):
        """Test that the score is an int in [0, 100] for any non-negative input."""
        score = productivity_score(consistency, hours, rate)
        assert isinstance(score, int)
        assert 0 <= score <= 100

    def test_productivity_score_saturates_on_any_large_input(self):
        """Test that one oversized component is enough to hit the ceiling."""
        assert productivity_score(0, 1e300, 0) == 100
        assert productivity_score(1e300, 0, 0) == 100
        assert productivity_score(0, 0, 1e300) == 100

    def test_unknown_period(self):
        """Test that an unsupported period is rejected."""
        with pytest.raises(ValidationError):
            period_window("year", datetime(2024, 3, 15, 12))

    def test_today_window_covers_whole_day(self):
        """Test that today spans midnight to the end of the day."""
        start, end = period_window("today", datetime(2024, 3, 15, 12, 30))
        assert start == datetime(2024, 3, 15)
        assert end.date() == date(2024, 3, 15)
        assert end.hour == 23 and end.minute == 59

    def test_empty_summary(self):
        """Test a summary with no sessions and no tasks."""
        result = compute_summary("today", [], [])
        assert result["dailyBreakdown"] == []
        assert result["summary"] == {
            "totalSessions": 0,
            "totalTime": 0,
            "totalHours": 0,
            "avgSessionLength": 0,
            "productivityScore": 0,
            "consistencyScore": 0,
            "completedTasks": 0,
            "totalTasks": 0,
            "taskCompletionRate": 0,
        }

    def test_today_summary_without_sessions(self):
        """Test that completion alone drives the score when nothing was focused."""
        summary = compute_summary("today", [], ["completed", "pending"])["summary"]
        assert summary["totalSessions"] == 0
        assert summary["consistencyScore"] == 0
        assert summary["completedTasks"] == 1
        assert summary["totalTasks"] == 2
        assert summary["taskCompletionRate"] == 50
        assert summary["productivityScore"] == 35

    def test_week_summary(self):
        """Test totals, scores and daily buckets for a week."""
        sessions = [
            SimpleNamespace(started_at=datetime(2024, 3, 14, 9), duration_seconds=1500),
            SimpleNamespace(started_at=datetime(2024, 3, 12, 9), duration_seconds=3600),
            SimpleNamespace(started_at=datetime(2024, 3, 14, 20), duration_seconds=900),
        ]
        result = compute_summary("week", sessions, ["completed", "pending"])
        summary = result["summary"]
        assert summary["totalSessions"] == 3
        assert summary["totalTime"] == 100
        assert summary["totalHours"] == 1.7
        assert summary["avgSessionLength"] == 33
        assert summary["consistencyScore"] == 29
        assert summary["taskCompletionRate"] == 50
        assert summary["productivityScore"] == 52
        assert result["dailyBreakdown"] == [
            {"date": "2024-03-12", "sessions": 1, "time": 60},
            {"date": "2024-03-14", "sessions": 2, "time": 40},
        ]


class TestFocusAnalytics:
    """Analytics over stored sessions and tasks."""
    def test_streak_from_history(self, test_user, other_user):
        """Test streaks computed from stored sessions."""
        now = datetime(2024, 3, 15, 18)
        for n in (0, 1, 2):
            add_session(test_user["id"], now - timedelta(days=n), 600)
        add_session(other_user["id"], now - timedelta(days=3), 600)

        result = FocusAnalytics(now=now).streak(test_user["id"])
        assert result == {
            "currentStreak": 3,
            "longestStreak": 3,
            "totalSessions": 3,
            "totalFocusTime": 30,
        }

    def test_summary_window_excludes_old_sessions(self, test_user):
        """Test that sessions outside the period are ignored."""
        now = datetime(2024, 3, 15, 18)
        add_session(test_user["id"], now - timedelta(days=2), 1200)
        add_session(test_user["id"], now - timedelta(days=10), 1200)

        week = FocusAnalytics(now=now).summarize(test_user["id"], "week")
        assert week["period"] == "week"
        assert week["summary"]["totalSessions"] == 1
        assert len(week["focusSessions"]) == 1

        month = FocusAnalytics(now=now).summarize(test_user["id"], "month")
        assert month["summary"]["totalSessions"] == 2

    def test_productivity_insights(self, test_user):
        """Test best hour, best day and subject breakdown."""
        now = datetime.utcnow()
        base = (now - timedelta(days=2)).replace(
            hour=9, minute=0, second=0, microsecond=0
        )
        task = Task(user_id=test_user["id"], title="Problem set", subject="Math")
        db.session.add(task)
        db.session.commit()

        add_session(test_user["id"], base, 1500, task_id=task.id)
        add_session(test_user["id"], base + timedelta(minutes=30), 1500, task_id=task.id)
        add_session(test_user["id"], base.replace(hour=14), 600)

        result = FocusAnalytics(now=now).productivity_insights(test_user["id"])
        assert result["insights"]["totalFocusTime"] == 60
        assert result["insights"]["totalTasks"] == 1
        assert result["insights"]["completionRate"] == 0
        assert result["insights"]["avgDailyFocus"] == 2
        assert [h["hour"] for h in result["bestHours"]] == [9, 14]
        assert result["topSubjects"][0] == {
            "subject": "Math",
            "sessions": 2,
            "totalTime": 50,
        }
        assert result["topSubjects"][1]["subject"] == "General"

        kinds = [r["type"] for r in result["recommendations"]]
        assert kinds == ["completion_rate", "optimal_time"]
        assert "9:00" in result["recommendations"][-1]["message"]


class TestAnalyticsAPI:
    """Test cases for analytics endpoints."""
    def test_focus_summary_today_empty(self, auth_client):
        """Test the summary endpoint for a user with no history."""
        response = auth_client.get("/api/v1/analytics/focus-summary?period=today")
        assert response.status_code == 200
        data = response.json["data"]
        assert data["period"] == "today"
        assert data["summary"]["totalSessions"] == 0
        assert data["summary"]["productivityScore"] == 0
        assert data["dailyBreakdown"] == []
        assert data["focusSessions"] == []

    def test_focus_summary_bad_period(self, auth_client):
        """Test that the summary endpoint rejects unknown periods."""
        response = auth_client.get("/api/v1/analytics/focus-summary?period=decade")
        assert response.status_code == 400
        assert response.json["error"]["code"] == "VALIDATION_ERROR"

    def test_streak_endpoint(self, auth_client):
        """Test the streak endpoint."""
        now = datetime.utcnow()
        for moment in (now, now - timedelta(days=1)):
            stamp = moment.isoformat()
            auth_client.post(
                "/api/v1/focus-sessions",
                json={"duration": 0, "startedAt": stamp, "endedAt": stamp},
            )

        response = auth_client.get("/api/v1/analytics/streak")
        assert response.status_code == 200
        assert response.json["data"]["currentStreak"] == 2
        assert response.json["data"]["totalSessions"] == 2

    def test_productivity_insights_empty(self, auth_client):
        """Test insights for a user with no sessions."""
        response = auth_client.get("/api/v1/analytics/productivity-insights")
        assert response.status_code == 200
        data = response.json["data"]
        assert data["bestHours"] == []
        assert data["topSubjects"] == []
        assert [r["type"] for r in data["recommendations"]] == [
            "focus_time",
            "completion_rate",
        ]
