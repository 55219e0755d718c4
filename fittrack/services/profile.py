"""
Profile Service
===============
Loads and saves the user profile and app preferences through the
preference store, and awards profile badges.

A missing or unreadable profile falls back to defaults rather than
failing the request.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from fittrack.config import get_settings
from fittrack.db.preferences import (
    DAILY_GOAL_KEY,
    DARK_MODE_KEY,
    HAPTICS_KEY,
    PROFILE_KEY,
    PreferenceStore,
    SupabasePreferenceStore,
    get_bool,
    get_int,
    set_bool,
    set_int,
)
from fittrack.models.profile import AppPreferences, Badge, UserProfile, UserProfileUpdate

logger = logging.getLogger(__name__)

BADGE_STREAK_DAYS = 5
BADGE_WORKOUT_COUNT = 10
BADGE_DAILY_STEPS = 10_000

_DERIVED_FIELDS = ("bmi", "bmi_category", "ideal_weight_range")


class ProfileStore:
    """Owns one user's profile."""

    def __init__(self, preferences: PreferenceStore) -> None:
        self._prefs = preferences
        self.profile = self.load()

    def load(self) -> UserProfile:
        try:
            data = self._prefs.get(PROFILE_KEY)
        except Exception as exc:
            logger.error("Failed to read profile: %s", exc)
            return UserProfile()
        if data is None:
            return UserProfile()
        try:
            return UserProfile.model_validate_json(data)
        except ValidationError as exc:
            logger.error("Failed to load profile: %s", exc)
            return UserProfile()

    def save(self) -> None:
        payload = self.profile.model_dump(mode="json")
        for derived in _DERIVED_FIELDS:
            payload.pop(derived, None)
        try:
            self._prefs.set(PROFILE_KEY, json.dumps(payload).encode("utf-8"))
        except Exception as exc:
            logger.error("Failed to save profile: %s", exc)

    def update(self, patch: UserProfileUpdate) -> UserProfile:
        changes = patch.model_dump(exclude_unset=True, exclude_none=True)
        self.profile = self.profile.model_copy(update=changes)
        self.save()
        return self.profile

    def award_badges(
        self,
        longest_streak: int,
        workout_count: int,
        has_custom_workout: bool,
        daily_steps: int,
    ) -> list[Badge]:
        """Add any newly earned badges. Returns only the new ones."""
        earned: list[Badge] = []
        if longest_streak >= BADGE_STREAK_DAYS:
            earned.append(Badge.five_day_streak)
        if workout_count >= BADGE_WORKOUT_COUNT:
            earned.append(Badge.ten_workouts)
        if has_custom_workout:
            earned.append(Badge.first_custom_workout)
        if daily_steps >= BADGE_DAILY_STEPS:
            earned.append(Badge.ten_thousand_steps)

        new = [b for b in earned if b not in self.profile.achievements]
        if new:
            self.profile = self.profile.model_copy(
                update={"achievements": [*self.profile.achievements, *new]}
            )
            self.save()
            logger.info("Awarded badges: %s", ", ".join(b.value for b in new))
        return new


# ---------------------------------------------------------------------------
# App preferences
# ---------------------------------------------------------------------------

def load_app_preferences(store: PreferenceStore) -> AppPreferences:
    settings = get_settings()
    return AppPreferences(
        daily_goal=get_int(store, DAILY_GOAL_KEY, settings.default_daily_step_goal),
        haptics_enabled=get_bool(store, HAPTICS_KEY, True),
        dark_mode=get_bool(store, DARK_MODE_KEY, False),
    )


def save_app_preferences(store: PreferenceStore, prefs: AppPreferences) -> None:
    try:
        set_int(store, DAILY_GOAL_KEY, prefs.daily_goal)
        set_bool(store, HAPTICS_KEY, prefs.haptics_enabled)
        set_bool(store, DARK_MODE_KEY, prefs.dark_mode)
    except Exception as exc:
        logger.error("Failed to save app preferences: %s", exc)


# ---------------------------------------------------------------------------
# Per-user registry
# ---------------------------------------------------------------------------

_stores: dict[str, ProfileStore] = {}


def get_profile_store(user_id: str) -> ProfileStore:
    store = _stores.get(user_id)
    if store is None:
        store = ProfileStore(SupabasePreferenceStore(user_id))
        _stores[user_id] = store
    return store


def get_preference_store(user_id: str) -> PreferenceStore:
    return SupabasePreferenceStore(user_id)
