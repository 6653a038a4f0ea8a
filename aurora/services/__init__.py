"""Business logic services."""

from aurora.services.level_calculator import level_of, level_progress
from aurora.services.xp_calculator import XPCalculator

__all__ = [
    "XPCalculator",
    "level_of",
    "level_progress",
]
