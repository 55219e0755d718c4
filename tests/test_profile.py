"""
Tests for profile, preferences and recommendations
==================================================
Covers:
- BMI, BMI category, ideal weight range
- ProfileStore: defaults, corrupt data, update persistence, badge awarding
- App preferences load/save through typed flags
- Weekly recommendation table

Run: pytest tests/test_profile.py -v
"""

from __future__ import annotations

import json
from datetime import date
from unittest.mock import MagicMock

import pytest

from fittrack.db.preferences import (
    DAILY_GOAL_KEY,
    DARK_MODE_KEY,
    PROFILE_KEY,
    InMemoryPreferenceStore,
)
from fittrack.models.profile import (
    AppPreferences,
    Badge,
    FitnessGoal,
    UserProfile,
    UserProfileUpdate,
)
from fittrack.services.profile import (
    ProfileStore,
    load_app_preferences,
    save_app_preferences,
)
from fittrack.services.recommendation import recommendation_for


class TestBMI:

    def test_default_profile_bmi(self):
        profile = UserProfile()  # 170 cm, 150 lbs
        assert profile.bmi == pytest.approx(23.54, abs=0.01)
        assert profile.bmi_category == "Normal"

    @pytest.mark.parametrize(
        ("weight", "category"),
        [(100, "Underweight"), (150, "Normal"), (180, "Overweight"), (240, "Obese")],
    )
    def test_categories(self, weight: float, category: str):
        assert UserProfile(height=170, weight=weight).bmi_category == category

    def test_zero_height_gives_zero_bmi(self):
        assert UserProfile(height=0).bmi == 0

    def test_ideal_weight_range(self):
        weight_range = UserProfile(height=170).ideal_weight_range
        assert weight_range.min == pytest.approx(117.8, abs=0.1)
        assert weight_range.max == pytest.approx(158.6, abs=0.1)


class TestProfileStore:

    def test_defaults_when_missing(self):
        store = ProfileStore(InMemoryPreferenceStore())
        assert store.profile == UserProfile()

    def test_corrupt_profile_falls_back_to_defaults(self):
        store = ProfileStore(InMemoryPreferenceStore({PROFILE_KEY: b"\x00garbage"}))
        assert store.profile.name == ""

    def test_update_persists(self):
        prefs = InMemoryPreferenceStore()
        store = ProfileStore(prefs)
        store.update(UserProfileUpdate(name="Sam", weight=160, fitness_goal=FitnessGoal.build_muscle))

        saved = json.loads(prefs.get(PROFILE_KEY))
        assert saved["name"] == "Sam"
        assert saved["fitness_goal"] == "Build Muscle"
        assert "bmi" not in saved

        reloaded = ProfileStore(prefs)
        assert reloaded.profile.weight == 160
        assert reloaded.profile.age == 18

    def test_award_badges(self):
        store = ProfileStore(InMemoryPreferenceStore())
        new = store.award_badges(
            longest_streak=5, workout_count=10, has_custom_workout=True, daily_steps=10_000
        )
        assert set(new) == set(Badge)
        assert len(store.profile.achievements) == 4

    def test_badges_not_duplicated(self):
        store = ProfileStore(InMemoryPreferenceStore())
        store.award_badges(longest_streak=6, workout_count=0, has_custom_workout=False, daily_steps=0)
        new = store.award_badges(longest_streak=6, workout_count=0, has_custom_workout=False, daily_steps=0)
        assert new == []
        assert store.profile.achievements == [Badge.five_day_streak]

    def test_badges_below_thresholds(self):
        store = ProfileStore(InMemoryPreferenceStore())
        new = store.award_badges(longest_streak=4, workout_count=9, has_custom_workout=False, daily_steps=9999)
        assert new == []


class TestAppPreferences:

    def test_defaults(self):
        prefs = load_app_preferences(InMemoryPreferenceStore())
        assert prefs == AppPreferences(daily_goal=10000, haptics_enabled=True, dark_mode=False)

    def test_round_trip(self):
        store = InMemoryPreferenceStore()
        save_app_preferences(store, AppPreferences(daily_goal=6000, haptics_enabled=False, dark_mode=True))

        assert store.get(DAILY_GOAL_KEY) == b"6000"
        assert store.get(DARK_MODE_KEY) == b"true"
        assert load_app_preferences(store) == AppPreferences(
            daily_goal=6000, haptics_enabled=False, dark_mode=True
        )

    def test_unreachable_store_loads_defaults(self):
        store = MagicMock()
        store.get.side_effect = ConnectionError("supabase unreachable")
        assert load_app_preferences(store) == AppPreferences()


class TestRecommendation:

    def test_monday_is_running(self):
        rec = recommendation_for(date(2026, 3, 2))
        assert rec.day == "Monday"
        assert rec.workout.name == "Running"
        assert rec.workout.duration_minutes == 30

    def test_sunday_is_rest(self):
        rec = recommendation_for(date(2026, 3, 8))
        assert rec.day == "Sunday"
        assert rec.meal.name == "Grilled Salmon Salad"

    def test_every_weekday_covered(self):
        days = {recommendation_for(date(2026, 3, d)).day for d in range(2, 9)}
        assert len(days) == 7
