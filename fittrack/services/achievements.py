"""
Achievement Evaluator
=====================
Decides which milestone message, if any, to show right after a workout
is completed.

Conditions are checked in a fixed order and the first match wins, so a
completion that is both the 10th workout and day 7 of a streak reports
the workout count.
"""

from __future__ import annotations

from typing import Optional

FIRST_WORKOUT = "First Workout Completed!"
FIVE_WORKOUTS = "5 Workouts Completed!"
TEN_WORKOUTS = "10 Workouts Completed!"
SEVEN_DAY_STREAK = "7-Day Streak!"

_COUNT_MILESTONES: tuple[tuple[int, str], ...] = (
    (1, FIRST_WORKOUT),
    (5, FIVE_WORKOUTS),
    (10, TEN_WORKOUTS),
)
_STREAK_MILESTONE = 7


def evaluate_achievement(completed_count: int, current_streak: int) -> Optional[str]:
    """Return the milestone message for the post-completion state, or None."""
    for count, message in _COUNT_MILESTONES:
        if completed_count == count:
            return message
    if current_streak == _STREAK_MILESTONE:
        return SEVEN_DAY_STREAK
    return None
