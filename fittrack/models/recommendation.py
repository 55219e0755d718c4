"""
Recommendation Schemas
======================
Daily workout + meal suggestion returned by the recommendations API.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class WorkoutSuggestion(BaseModel):
    name: str
    sets: int
    reps: Optional[int] = None
    duration_minutes: Optional[int] = None


class MealSuggestion(BaseModel):
    name: str
    calories: int
    description: str


class DailyRecommendation(BaseModel):
    day: str
    workout: WorkoutSuggestion
    meal: MealSuggestion
