"""
Profile Schemas
===============
User profile, badge and app preference models.

Height is stored in centimetres and weight in pounds, matching what the
mobile app collects. BMI converts both to metric.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

_KG_PER_LB = 0.453592


class FitnessLevel(str, Enum):
    beginner = "Beginner"
    intermediate = "Intermediate"
    advanced = "Advanced"


class FitnessGoal(str, Enum):
    lose_weight = "Lose Weight"
    build_muscle = "Build Muscle"
    improve_endurance = "Improve Endurance"
    general_health = "General Health"


class Badge(str, Enum):
    five_day_streak = "5-Day Streak"
    ten_workouts = "10 Workouts"
    first_custom_workout = "First Custom Workout"
    ten_thousand_steps = "10,000 Steps in a Day"


class WeightRange(BaseModel):
    min: float
    max: float


class UserProfile(BaseModel):
    name: str = Field(default="", max_length=100)
    age: int = Field(default=18, ge=0, le=130)
    height: float = Field(default=170.0, ge=0)  # cm
    weight: float = Field(default=150.0, ge=0)  # lbs
    fitness_level: FitnessLevel = FitnessLevel.beginner
    bio: str = Field(default="", max_length=500)

    daily_step_goal: int = Field(default=8000, ge=0)
    weekly_workout_goal: int = Field(default=4, ge=0)
    fitness_goal: FitnessGoal = FitnessGoal.general_health

    achievements: list[Badge] = Field(default_factory=list)

    @computed_field
    @property
    def bmi(self) -> float:
        height_m = self.height / 100
        if height_m <= 0:
            return 0.0
        return (self.weight * _KG_PER_LB) / (height_m * height_m)

    @computed_field
    @property
    def bmi_category(self) -> str:
        bmi = self.bmi
        if bmi < 18.5:
            return "Underweight"
        if bmi < 25:
            return "Normal"
        if bmi < 30:
            return "Overweight"
        return "Obese"

    @computed_field
    @property
    def ideal_weight_range(self) -> WeightRange:
        """Weight in lbs that keeps BMI within 18.5–24.9 at this height."""
        height_sq = (self.height / 100) ** 2
        return WeightRange(
            min=18.5 * height_sq / _KG_PER_LB,
            max=24.9 * height_sq / _KG_PER_LB,
        )


class UserProfileUpdate(BaseModel):
    """Partial profile update. Badges are awarded server-side only."""

    name: Optional[str] = Field(default=None, max_length=100)
    age: Optional[int] = Field(default=None, ge=0, le=130)
    height: Optional[float] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    fitness_level: Optional[FitnessLevel] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    daily_step_goal: Optional[int] = Field(default=None, ge=0)
    weekly_workout_goal: Optional[int] = Field(default=None, ge=0)
    fitness_goal: Optional[FitnessGoal] = None


class AppPreferences(BaseModel):
    daily_goal: int = Field(default=10000, ge=1000, le=50000)
    haptics_enabled: bool = True
    dark_mode: bool = False
