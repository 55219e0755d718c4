"""
Workout Schemas
===============
Pydantic models for workout templates, completed workout records, the
streak snapshot and the timer status returned by the session API.

WorkoutRecord doubles as the persistence format: the whole history is
serialised as a JSON array of these objects under one preference key.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, TypeAdapter, field_validator


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

DEFAULT_TEMPLATE_NAMES = ("Running", "Cycling", "Weights", "Swimming")


class WorkoutTemplate(BaseModel):
    """A named workout the user can start. Not itself part of history."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str = Field(..., min_length=1, max_length=100)
    is_custom: bool = False

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class WorkoutTemplateCreate(BaseModel):
    """Payload for adding a custom workout."""

    name: str = Field(..., min_length=1, max_length=100)


class TemplateSelection(BaseModel):
    template_id: uuid.UUID


class TemplateListResponse(BaseModel):
    templates: list[WorkoutTemplate]
    selected_id: uuid.UUID


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

class WorkoutRecord(BaseModel):
    """One completed workout. Identity is fixed at creation."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    date: Optional[datetime] = None
    duration: float = Field(default=0.0, ge=0)  # seconds
    is_completed: bool = False
    note: Optional[str] = None


WORKOUT_HISTORY_ADAPTER = TypeAdapter(list[WorkoutRecord])


class StreakSnapshot(BaseModel):
    current: int = Field(default=0, ge=0)
    longest: int = Field(default=0, ge=0)


class ProgressStats(BaseModel):
    """Trailing-window workout totals for the stats screen."""

    weekly_workouts: int
    monthly_workouts: int
    weekly_duration_seconds: float
    monthly_duration_seconds: float
    total_workouts: int
    current_streak: int
    longest_streak: int


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

class CompleteWorkoutRequest(BaseModel):
    note: Optional[str] = Field(default=None, max_length=500)


class TimerStatus(BaseModel):
    state: Literal["idle", "running", "paused"]
    elapsed_seconds: float
    workout_name: str


class CompletedWorkoutResponse(BaseModel):
    record: WorkoutRecord
    achievement: Optional[str] = None
    streak: StreakSnapshot
