"""
Tests for the streak calculator and achievement evaluator
=========================================================
Covers:
- Incremental step: first record, consecutive day, same day, gap, out of order
- Full recompute: sorted replay, undated records skipped
- Calendar days honour the configured timezone
- Achievement priority and messages

Run: pytest tests/test_streak.py -v
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from fittrack.models.workout import WorkoutRecord
from fittrack.services.achievements import (
    FIRST_WORKOUT,
    FIVE_WORKOUTS,
    SEVEN_DAY_STREAK,
    TEN_WORKOUTS,
    evaluate_achievement,
)
from fittrack.services.streak import StreakCalculator, calendar_day

_UTC = ZoneInfo("UTC")
_D = date(2026, 3, 2)


def _record(moment: datetime | None) -> WorkoutRecord:
    return WorkoutRecord(id=uuid.uuid4(), name="Running", date=moment, duration=60, is_completed=True)


def _at(day: date, hour: int = 12) -> datetime:
    return datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Incremental
# ---------------------------------------------------------------------------

class TestAdvance:

    def test_first_record_starts_streak_at_one(self):
        calc = StreakCalculator()
        calc.advance(None, _D)
        assert calc.current == 1
        assert calc.longest == 1

    def test_three_consecutive_days(self):
        calc = StreakCalculator()
        calc.advance(None, _D)
        calc.advance(_D, _D + timedelta(days=1))
        calc.advance(_D + timedelta(days=1), _D + timedelta(days=2))
        assert calc.current == 3
        assert calc.longest >= 3

    def test_same_day_does_not_increment(self):
        calc = StreakCalculator()
        d1 = _D + timedelta(days=1)
        calc.advance(None, _D)
        calc.advance(_D, d1)
        calc.advance(d1, d1)
        assert calc.current == 2

    def test_gap_resets_to_one(self):
        calc = StreakCalculator(current=4, longest=6)
        calc.advance(_D, _D + timedelta(days=5))
        assert calc.current == 1
        assert calc.longest == 6

    def test_out_of_order_resets_to_one(self):
        calc = StreakCalculator(current=3, longest=3)
        calc.advance(_D, _D - timedelta(days=1))
        assert calc.current == 1

    def test_longest_tracks_maximum(self):
        calc = StreakCalculator()
        calc.advance(None, _D)
        calc.advance(_D, _D + timedelta(days=1))
        calc.advance(_D + timedelta(days=1), _D + timedelta(days=10))
        assert calc.current == 1
        assert calc.longest == 2


# ---------------------------------------------------------------------------
# Full recompute
# ---------------------------------------------------------------------------

class TestRecompute:

    def test_replays_in_date_order(self):
        records = [
            _record(_at(_D + timedelta(days=2))),
            _record(_at(_D)),
            _record(_at(_D + timedelta(days=1))),
        ]
        calc = StreakCalculator()
        calc.recompute(records, _UTC)
        assert calc.current == 3
        assert calc.longest == 3

    def test_resets_before_replay(self):
        calc = StreakCalculator(current=9, longest=12)
        calc.recompute([_record(_at(_D))], _UTC)
        assert calc.current == 1
        assert calc.longest == 1

    def test_empty_history_is_zero(self):
        calc = StreakCalculator(current=2, longest=2)
        calc.recompute([], _UTC)
        assert (calc.current, calc.longest) == (0, 0)

    def test_undated_records_are_skipped(self):
        records = [
            _record(None),
            _record(_at(_D)),
            _record(None),
            _record(_at(_D + timedelta(days=1))),
        ]
        calc = StreakCalculator()
        calc.recompute(records, _UTC)
        assert calc.current == 2

    def test_only_undated_records_give_zero(self):
        calc = StreakCalculator()
        calc.recompute([_record(None), _record(None)], _UTC)
        assert (calc.current, calc.longest) == (0, 0)

    def test_matches_incremental_result(self):
        days = [_D, _D + timedelta(days=1), _D + timedelta(days=1), _D + timedelta(days=4), _D + timedelta(days=5)]
        incremental = StreakCalculator()
        previous = None
        for day in days:
            incremental.advance(previous, day)
            previous = day

        full = StreakCalculator()
        full.recompute([_record(_at(d)) for d in days], _UTC)
        assert full.snapshot() == incremental.snapshot()

    def test_naive_and_aware_dates_can_be_mixed(self):
        naive = datetime(2026, 3, 2, 9, 0)
        aware = _at(_D + timedelta(days=1))
        calc = StreakCalculator()
        calc.recompute([_record(aware), _record(naive)], _UTC)
        assert calc.current == 2


class TestCalendarDay:

    def test_uses_local_timezone(self):
        # 02:00 UTC is still the previous evening in New York
        moment = datetime(2026, 3, 3, 2, 0, tzinfo=timezone.utc)
        assert calendar_day(moment, ZoneInfo("America/New_York")) == date(2026, 3, 2)
        assert calendar_day(moment, _UTC) == date(2026, 3, 3)


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------

class TestAchievements:

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(1, FIRST_WORKOUT), (5, FIVE_WORKOUTS), (10, TEN_WORKOUTS)],
    )
    def test_count_milestones(self, count: int, expected: str):
        assert evaluate_achievement(count, current_streak=1) == expected

    def test_seven_day_streak(self):
        assert evaluate_achievement(7, current_streak=7) == SEVEN_DAY_STREAK

    def test_count_takes_priority_over_streak(self):
        assert evaluate_achievement(10, current_streak=7) == TEN_WORKOUTS

    @pytest.mark.parametrize("count", [0, 2, 3, 4, 6, 9, 11, 50])
    def test_no_message_otherwise(self, count: int):
        assert evaluate_achievement(count, current_streak=3) is None
