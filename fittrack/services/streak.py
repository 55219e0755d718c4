"""
Streak Calculator
=================
Tracks the current run of consecutive calendar days with at least one
completed workout, and the longest run ever seen.

Incremental step, applied once per completion in append order:
    - no earlier dated workout           → current = 1
    - earlier workout exactly a day back → current += 1
    - earlier workout on the same day    → unchanged
    - anything else (gap, out of order)  → current = 1
    longest = max(longest, current)

A full recompute sorts the history by completion date and replays the
incremental step from zero. Records without a completion date are left
out of both paths, so deleting a record and recomputing gives the same
answer as never having added it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Iterable, Optional

from fittrack.models.workout import StreakSnapshot, WorkoutRecord


def as_aware(moment: datetime) -> datetime:
    """Naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def calendar_day(moment: datetime, tz: tzinfo) -> date:
    return as_aware(moment).astimezone(tz).date()


@dataclass
class StreakCalculator:
    current: int = 0
    longest: int = 0

    def advance(self, previous_day: Optional[date], new_day: date) -> None:
        if previous_day is None:
            self.current = 1
        elif previous_day == new_day - timedelta(days=1):
            self.current += 1
        elif previous_day == new_day:
            pass
        else:
            self.current = 1
        self.longest = max(self.longest, self.current)

    def recompute(self, records: Iterable[WorkoutRecord], tz: tzinfo) -> None:
        self.current = 0
        self.longest = 0
        dated = sorted(as_aware(r.date) for r in records if r.date is not None)
        previous: Optional[date] = None
        for moment in dated:
            day = calendar_day(moment, tz)
            self.advance(previous, day)
            previous = day

    def reset(self) -> None:
        self.current = 0
        self.longest = 0

    def snapshot(self) -> StreakSnapshot:
        return StreakSnapshot(current=self.current, longest=self.longest)

    @classmethod
    def from_snapshot(cls, snapshot: StreakSnapshot) -> "StreakCalculator":
        return cls(current=snapshot.current, longest=snapshot.longest)
