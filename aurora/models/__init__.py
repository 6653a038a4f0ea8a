"""Database models."""

from aurora.models.claimed_reward import ClaimedReward
from aurora.models.focus_session import FocusSession
from aurora.models.reward import REWARD_CATALOG, Reward, get_reward
from aurora.models.task import Task
from aurora.models.user import User

__all__ = [
    "User",
    "Task",
    "FocusSession",
    "ClaimedReward",
    "Reward",
    "REWARD_CATALOG",
    "get_reward",
]
