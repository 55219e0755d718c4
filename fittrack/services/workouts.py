"""
Workout Store
=============
Single owner of one user's workout state: templates and the current
selection, the in-progress timer, the completed history, the streak and
the most recent achievement message.

Responsibilities:
- complete_workout(): snapshot the timer into a WorkoutRecord, append it,
  advance the streak incrementally and evaluate achievements
- delete_workout() / delete_at(): remove records and recompute the streak
  from the remaining history
- clear_history() / reset_streak_data()
- persist history and streak snapshot after every mutation

Persistence is best-effort. A failed save is logged and the in-memory
state stays authoritative; a failed load starts from an empty history.

Consumers register with subscribe() and are called with an event name
("templates", "timer", "history") after each change.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterable, Optional
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from fittrack.config import get_settings
from fittrack.db.preferences import (
    HISTORY_KEY,
    STREAK_KEY,
    PreferenceStore,
    SupabasePreferenceStore,
)
from fittrack.models.workout import (
    DEFAULT_TEMPLATE_NAMES,
    WORKOUT_HISTORY_ADAPTER,
    ProgressStats,
    StreakSnapshot,
    TimerStatus,
    WorkoutRecord,
    WorkoutTemplate,
)
from fittrack.services.achievements import evaluate_achievement
from fittrack.services.streak import StreakCalculator, as_aware, calendar_day
from fittrack.services.timer import Clock, TimerSession

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class WorkoutNotFoundError(Exception):
    """No history record or template matches the given identifier."""


class InvalidTemplateError(Exception):
    """Template name is empty or duplicates an existing template."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class WorkoutStore:
    """Observable workout state for one user."""

    def __init__(
        self,
        preferences: PreferenceStore,
        tz: Optional[ZoneInfo] = None,
        now: Callable[[], datetime] = _utcnow,
        timer_clock: Optional[Clock] = None,
        tick_interval: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self._prefs = preferences
        self._tz = tz or ZoneInfo(settings.timezone)
        self._now = now
        self._timer = TimerSession(
            clock=timer_clock or time.monotonic,
            tick_interval=tick_interval or settings.timer_tick_seconds,
        )
        self._listeners: list[Listener] = []

        self._templates = [WorkoutTemplate(name=name) for name in DEFAULT_TEMPLATE_NAMES]
        self._selected = self._templates[0]
        self._history: list[WorkoutRecord] = []
        self._streak = StreakCalculator()
        self.recent_achievement: Optional[str] = None

        self._load_history()
        stored = self._load_streak()
        self._recalc_streak()
        if stored is not None and stored != self._streak.snapshot():
            logger.info("Stored streak %s superseded by recomputed %s", stored, self._streak.snapshot())

    # ---- Observation -----------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event)

    # ---- Read access -----------------------------------------------------

    @property
    def templates(self) -> list[WorkoutTemplate]:
        return list(self._templates)

    @property
    def selected_template(self) -> WorkoutTemplate:
        return self._selected

    @property
    def history(self) -> list[WorkoutRecord]:
        return list(self._history)

    @property
    def streak(self) -> StreakSnapshot:
        return self._streak.snapshot()

    @property
    def timer(self) -> TimerSession:
        return self._timer

    @property
    def completed_count(self) -> int:
        return sum(1 for r in self._history if r.is_completed)

    @property
    def has_custom_template(self) -> bool:
        return any(t.is_custom for t in self._templates)

    # ---- Templates -------------------------------------------------------

    def add_template(self, name: str) -> WorkoutTemplate:
        """Add a custom workout and select it."""
        name = name.strip()
        if not name:
            raise InvalidTemplateError("Workout name must not be empty")
        if any(t.name.lower() == name.lower() for t in self._templates):
            raise InvalidTemplateError(f"Workout '{name}' already exists")

        template = WorkoutTemplate(name=name, is_custom=True)
        self._templates.append(template)
        self._selected = template
        self._notify("templates")
        return template

    def select_template(self, template_id: uuid.UUID) -> WorkoutTemplate:
        for template in self._templates:
            if template.id == template_id:
                self._selected = template
                self._notify("templates")
                return template
        raise WorkoutNotFoundError(f"No workout template {template_id}")

    # ---- Timer -----------------------------------------------------------

    def start_workout(self) -> None:
        self._timer.start()
        logger.info("Started %s", self._selected.name)
        self._notify("timer")

    def pause_workout(self) -> None:
        self._timer.pause()
        self._notify("timer")

    def resume_workout(self) -> None:
        self._timer.resume()
        self._notify("timer")

    def stop_workout(self) -> None:
        self._timer.stop()
        self._notify("timer")

    def reset_timer(self) -> None:
        self._timer.reset()
        self._notify("timer")

    def timer_status(self) -> TimerStatus:
        self._timer.tick()
        return TimerStatus(
            state=self._timer.state.name,
            elapsed_seconds=self._timer.elapsed,
            workout_name=self._selected.name,
        )

    # ---- History ---------------------------------------------------------

    def complete_workout(self, note: Optional[str] = None) -> WorkoutRecord:
        """Stop the timer and record the session as a completed workout."""
        self._timer.stop()
        record = WorkoutRecord(
            name=self._selected.name,
            date=self._now(),
            duration=self._timer.elapsed,
            is_completed=True,
            note=note,
        )

        # After a streak reset the next completion starts a new chain
        previous_day = self._last_completion_day() if self._streak.current else None
        self._history.append(record)
        self._streak.advance(previous_day, calendar_day(record.date, self._tz))
        self.recent_achievement = evaluate_achievement(
            self.completed_count, self._streak.current
        )

        self._save_history()
        self._save_streak()
        logger.info(
            "Completed %s in %.0fs (streak %d)",
            record.name,
            record.duration,
            self._streak.current,
        )
        self._notify("history")
        return record

    def delete_workout(self, record_id: uuid.UUID) -> WorkoutRecord:
        for index, record in enumerate(self._history):
            if record.id == record_id:
                del self._history[index]
                self._after_removal()
                return record
        raise WorkoutNotFoundError(f"No workout record {record_id}")

    def delete_at(self, offsets: Iterable[int]) -> list[WorkoutRecord]:
        """Remove records by position in history order."""
        indexes = sorted(set(offsets), reverse=True)
        for index in indexes:
            if index < 0 or index >= len(self._history):
                raise WorkoutNotFoundError(f"No workout record at position {index}")
        removed = [self._history.pop(index) for index in indexes]
        self._after_removal()
        return list(reversed(removed))

    def clear_history(self) -> None:
        self._history.clear()
        self._streak.reset()
        self._save_history()
        self._save_streak()
        self._notify("history")

    def reset_streak_data(self) -> None:
        self._streak.reset()
        self.recent_achievement = None
        try:
            self._prefs.remove(STREAK_KEY)
        except Exception as exc:
            logger.error("Failed to remove streak data: %s", exc)
        self._notify("history")

    def progress_stats(self, now: Optional[datetime] = None) -> ProgressStats:
        """Workout totals for the trailing 7 and 30 days."""
        now = as_aware(now or self._now())
        one_week_ago = now - timedelta(days=7)
        one_month_ago = now - timedelta(days=30)

        weekly = [r for r in self._history if as_aware(r.date or now) >= one_week_ago]
        monthly = [r for r in self._history if as_aware(r.date or now) >= one_month_ago]

        return ProgressStats(
            weekly_workouts=len(weekly),
            monthly_workouts=len(monthly),
            weekly_duration_seconds=sum(r.duration for r in weekly),
            monthly_duration_seconds=sum(r.duration for r in monthly),
            total_workouts=len(self._history),
            current_streak=self._streak.current,
            longest_streak=self._streak.longest,
        )

    # ---- Internals -------------------------------------------------------

    def _last_completion_day(self) -> Optional[date]:
        for record in reversed(self._history):
            if record.date is not None:
                return calendar_day(record.date, self._tz)
        return None

    def _after_removal(self) -> None:
        self._recalc_streak()
        self._save_history()
        self._save_streak()
        self._notify("history")

    def _recalc_streak(self) -> None:
        self._streak.recompute(self._history, self._tz)

    # ---- Persistence -----------------------------------------------------

    def _save_history(self) -> None:
        try:
            self._prefs.set(HISTORY_KEY, WORKOUT_HISTORY_ADAPTER.dump_json(self._history))
        except Exception as exc:
            logger.error("Failed to save workout history: %s", exc)

    def _load_history(self) -> None:
        try:
            data = self._prefs.get(HISTORY_KEY)
        except Exception as exc:
            logger.error("Failed to read workout history: %s", exc)
            return
        if data is None:
            return
        try:
            self._history = WORKOUT_HISTORY_ADAPTER.validate_json(data)
        except ValidationError as exc:
            logger.error("Failed to load workout history: %s", exc)
            self._history = []

    def _save_streak(self) -> None:
        try:
            self._prefs.set(STREAK_KEY, self._streak.snapshot().model_dump_json().encode("utf-8"))
        except Exception as exc:
            logger.error("Failed to save streak data: %s", exc)

    def _load_streak(self) -> Optional[StreakSnapshot]:
        try:
            data = self._prefs.get(STREAK_KEY)
            if data is None:
                return None
            return StreakSnapshot.model_validate_json(data)
        except Exception as exc:
            logger.warning("Ignoring unreadable streak data: %s", exc)
            return None


# ---------------------------------------------------------------------------
# Per-user registry
# ---------------------------------------------------------------------------

_stores: dict[str, WorkoutStore] = {}


def get_workout_store(user_id: str) -> WorkoutStore:
    """One store per user for the lifetime of the process."""
    store = _stores.get(user_id)
    if store is None:
        store = WorkoutStore(SupabasePreferenceStore(user_id))
        _stores[user_id] = store
    return store
