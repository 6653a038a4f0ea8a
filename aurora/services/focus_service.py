"""Focus session recording and statistics."""

import math
from datetime import datetime, timedelta

import structlog
from sqlalchemy import case, func

from aurora import db
from aurora.errors import NotFoundError, ValidationError
from aurora.models.focus_session import (
    FocusSession,
    FocusSessionStatus,
    FocusSessionType,
)
from aurora.models.task import Task
from aurora.services.xp_calculator import XPCalculator
from aurora.services.xp_ledger import XPLedger
from aurora.utils.validation import optional_choice, optional_text, parse_datetime

logger = structlog.get_logger()

# One focus session never spans more than a day
MAX_DURATION_SECONDS = 24 * 60 * 60


class FocusSessionService:
    """Records finished sessions and grants their XP."""

    def __init__(self, ledger: XPLedger | None = None):
        self.ledger = ledger or XPLedger()

    def create_session(self, user_id: int, data: dict) -> FocusSession:
        duration = data.get("duration")
        if isinstance(duration, bool) or not isinstance(duration, (int, float)):
            raise ValidationError(details={"duration": "Duration is required"})
        if isinstance(duration, float) and not math.isfinite(duration):
            raise ValidationError(details={"duration": "Duration must be finite"})
        if duration < 0:
            raise ValidationError(
                details={"duration": "Duration must be a non-negative number"}
            )
        if duration > MAX_DURATION_SECONDS:
            raise ValidationError(
                details={
                    "duration": f"Duration must be at most {MAX_DURATION_SECONDS} seconds"
                }
            )
        duration = int(duration)

        status = optional_choice(
            data,
            "status",
            [s.value for s in FocusSessionStatus],
            default=FocusSessionStatus.COMPLETED.value,
        )
        session_type = optional_choice(
            data,
            "type",
            [t.value for t in FocusSessionType],
            default=FocusSessionType.FOCUS.value,
        )

        task_id = data.get("taskId")
        if task_id is not None:
            task = Task.query.filter_by(id=task_id, user_id=user_id).first()
            if not task:
                raise NotFoundError("Task not found")

        ended_at = parse_datetime(data.get("endedAt"), "endedAt") or datetime.utcnow()
        started_at = parse_datetime(data.get("startedAt"), "startedAt") or (
            ended_at - timedelta(seconds=duration)
        )
        if started_at > ended_at:
            raise ValidationError(details={"startedAt": "startedAt is after endedAt"})

        notes = optional_text(data, "notes")

        xp = XPCalculator.focus_session_completed(duration, status)
        session = FocusSession(
            user_id=user_id,
            task_id=task_id,
            session_type=session_type,
            duration_seconds=duration,
            status=status,
            xp_earned=xp,
            notes=notes,
            started_at=started_at,
            ended_at=ended_at,
        )
        db.session.add(session)
        db.session.commit()

        granted = self.ledger.grant_xp_best_effort(user_id, xp, reason="focus_session")
        if granted != xp:
            # The row records what was actually credited
            session.xp_earned = granted
            db.session.commit()

        logger.info(
            "focus_session_recorded",
            user_id=user_id,
            session_id=session.id,
            status=status,
            duration=duration,
            xp=session.xp_earned,
        )
        return session

    def list_sessions(self, user_id: int, task_id: int | None = None) -> list:
        query = FocusSession.query.filter_by(user_id=user_id)
        if task_id is not None:
            query = query.filter_by(task_id=task_id)
        return query.order_by(
            FocusSession.completed_at.desc(), FocusSession.id.desc()
        ).all()

    def stats(self, user_id: int) -> dict:
        completed = FocusSessionStatus.COMPLETED.value
        interrupted = FocusSessionStatus.INTERRUPTED.value

        row = (
            db.session.query(
                func.count(FocusSession.id),
                func.coalesce(func.sum(FocusSession.duration_seconds), 0),
                func.coalesce(func.sum(FocusSession.xp_earned), 0),
                func.coalesce(
                    func.sum(case((FocusSession.status == completed, 1), else_=0)), 0
                ),
                func.coalesce(
                    func.sum(case((FocusSession.status == interrupted, 1), else_=0)),
                    0,
                ),
            )
            .filter(FocusSession.user_id == user_id)
            .one()
        )

        return {
            "totalSessions": row[0],
            "totalDuration": int(row[1]),
            "totalXp": int(row[2]),
            "completedSessions": int(row[3]),
            "interruptedSessions": int(row[4]),
        }
