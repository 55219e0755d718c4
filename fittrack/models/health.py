"""
Health Data Models
==================
Pydantic shapes for the health-data provider's daily activity feed and
the aggregated step/calorie summary returned to the mobile app.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Period(str, Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class DailyActivityItem(BaseModel):
    """One day of provider daily_activity data."""

    day: date
    steps: Optional[int] = None
    active_calories: Optional[int] = None


class MetricResponse(BaseModel):
    period: Period
    value: int


class HealthSummary(BaseModel):
    """Last known step and calorie counts per window.

    Calorie fields already include the step-based estimate when the
    provider had no active energy for that window.
    """

    daily_steps: int = 0
    weekly_steps: int = 0
    monthly_steps: int = 0
    daily_calories: int = 0
    weekly_calories: int = 0
    monthly_calories: int = 0
