"""Score, level and gravity-speed rules."""

from __future__ import annotations


# Points for clearing 0..4 lines with a single lock.
LINE_CLEAR_POINTS = (0, 100, 300, 500, 800)
# Extra points per step of the combo streak, added before the level multiplier.
COMBO_BONUS = 50
LINES_PER_LEVEL = 10

SOFT_DROP_POINTS = 1
HARD_DROP_POINTS = 2

INITIAL_SPEED_MS = 1000
MIN_SPEED_MS = 100
SPEED_STEP_MS = 100


def line_clear_score(cleared: int, combo: int, level: int) -> int:
    """Return the points for clearing ``cleared`` lines.

    ``combo`` is the streak *including* this lock and ``level`` is the level
    the lock happened on, before any level-up it triggers.

    Raises:
        ValueError: If ``cleared`` is not between 0 and 4.
    """

    if not 0 <= cleared < len(LINE_CLEAR_POINTS):
        raise ValueError(f"Cannot clear {cleared} lines at once")
    if cleared == 0:
        return 0
    return (LINE_CLEAR_POINTS[cleared] + combo * COMBO_BONUS) * level


def hard_drop_score(rows: int) -> int:
    return HARD_DROP_POINTS * rows


def level_for_lines(lines: int) -> int:
    """Return the level reached after ``lines`` cumulative cleared lines."""

    return lines // LINES_PER_LEVEL + 1


def gravity_interval_ms(level: int) -> int:
    """Return the gravity tick period in milliseconds for ``level``.

    Each level shaves :data:`SPEED_STEP_MS` off the initial interval, never
    going below :data:`MIN_SPEED_MS`.
    """

    return max(MIN_SPEED_MS, INITIAL_SPEED_MS - (level - 1) * SPEED_STEP_MS)
