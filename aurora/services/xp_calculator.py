"""XP calculation service."""

from aurora.models.focus_session import FocusSessionStatus
from aurora.models.task import TaskPriority


class XPCalculator:
    """Service for calculating XP rewards."""

    # Awarded when a task is created, by priority
    XP_TASK_CREATED = {
        TaskPriority.HIGH.value: 20,
        TaskPriority.MEDIUM.value: 15,
        TaskPriority.LOW.value: 10,
    }
    XP_TASK_CREATED_DEFAULT = 5

    # Awarded on the first transition into "completed", by priority
    XP_TASK_COMPLETED = {
        TaskPriority.HIGH.value: 50,
        TaskPriority.MEDIUM.value: 25,
        TaskPriority.LOW.value: 15,
    }
    XP_TASK_COMPLETED_DEFAULT = 0

    @classmethod
    def task_created(cls, priority: str | None) -> int:
        """XP for creating a task."""
        return cls.XP_TASK_CREATED.get(priority, cls.XP_TASK_CREATED_DEFAULT)

    @classmethod
    def task_completed(cls, priority: str | None) -> int:
        """XP for completing a task."""
        return cls.XP_TASK_COMPLETED.get(priority, cls.XP_TASK_COMPLETED_DEFAULT)

    @classmethod
    def focus_session_completed(cls, duration_seconds: int, status: str) -> int:
        """
        XP for a focus session: one per whole minute.
        Interrupted sessions earn nothing.
        """
        if status != FocusSessionStatus.COMPLETED.value:
            return 0
        return max(0, int(duration_seconds)) // 60
