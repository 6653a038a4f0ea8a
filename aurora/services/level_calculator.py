"""Level computation from cumulative XP.

Advancing from level L to L + 1 costs ``100 * L`` XP, so the cumulative
thresholds are 0, 100, 300, 600, 1000, ... Python ints are arbitrary
precision, so large totals are safe.
"""

from math import isqrt

XP_COST_BASE = 100


def xp_cost_for_level(level: int) -> int:
    """XP needed to advance from ``level`` to ``level + 1``."""
    return XP_COST_BASE * level


def xp_required_for_level(level: int) -> int:
    """Cumulative XP at which ``level`` is reached."""
    if level <= 1:
        return 0
    return XP_COST_BASE * (level - 1) * level // 2


def level_of(xp: int) -> int:
    """Map cumulative XP to a level (1-based)."""
    return level_progress(xp)["level"]


def level_progress(xp: int) -> dict:
    """Level plus progress toward the next one.

    Returns ``level``, ``xp_into_level`` (XP accumulated past the current
    threshold) and ``xp_for_next_level`` (cost of the current level).
    """
    xp = int(xp)
    if xp < 0:
        raise ValueError("xp must be non-negative")

    # Largest n with n * (n + 1) <= 2 * xp / base; the level is n + 1
    budget = 2 * xp // XP_COST_BASE
    level = (isqrt(4 * budget + 1) - 1) // 2 + 1

    return {
        "level": level,
        "xp_into_level": xp - xp_required_for_level(level),
        "xp_for_next_level": xp_cost_for_level(level),
    }
