"""
Profile Router
==============
GET /api/v1/profile             : profile with BMI, category, ideal weight
PUT /api/v1/profile             : partial update
GET /api/v1/profile/badges      : award newly earned badges, return all
GET /api/v1/profile/preferences : daily goal, haptics, dark mode
PUT /api/v1/profile/preferences : replace preferences

Badges are evaluated from the workout history, the longest streak and
the last known daily step count. They are never accepted from the client.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header
from pydantic import BaseModel

from fittrack.auth import get_authenticated_user_id
from fittrack.models.health import Period
from fittrack.models.profile import AppPreferences, Badge, UserProfile, UserProfileUpdate
from fittrack.services.health import get_health_store
from fittrack.services.profile import (
    get_preference_store,
    get_profile_store,
    load_app_preferences,
    save_app_preferences,
)
from fittrack.services.workouts import get_workout_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/profile", tags=["profile"])

_AUTH = Header(..., description="Bearer token from Supabase Auth")


class BadgesResponse(BaseModel):
    badges: list[Badge]
    newly_awarded: list[Badge]


@router.get("", response_model=UserProfile, summary="Get profile")
async def get_profile(authorization: str = _AUTH) -> UserProfile:
    return get_profile_store(get_authenticated_user_id(authorization)).profile


@router.put("", response_model=UserProfile, summary="Update profile")
async def update_profile(body: UserProfileUpdate, authorization: str = _AUTH) -> UserProfile:
    store = get_profile_store(get_authenticated_user_id(authorization))
    return store.update(body)


@router.get("/badges", response_model=BadgesResponse, summary="Evaluate badges")
async def badges(authorization: str = _AUTH) -> BadgesResponse:
    user_id = get_authenticated_user_id(authorization)
    profile_store = get_profile_store(user_id)
    workouts = get_workout_store(user_id)
    health = get_health_store(user_id)

    new = profile_store.award_badges(
        longest_streak=workouts.streak.longest,
        workout_count=workouts.completed_count,
        has_custom_workout=workouts.has_custom_template,
        daily_steps=health.steps(Period.daily),
    )
    return BadgesResponse(badges=profile_store.profile.achievements, newly_awarded=new)


@router.get("/preferences", response_model=AppPreferences, summary="Get app preferences")
async def get_preferences(authorization: str = _AUTH) -> AppPreferences:
    store = get_preference_store(get_authenticated_user_id(authorization))
    return load_app_preferences(store)


@router.put("/preferences", response_model=AppPreferences, summary="Update app preferences")
async def put_preferences(body: AppPreferences, authorization: str = _AUTH) -> AppPreferences:
    store = get_preference_store(get_authenticated_user_id(authorization))
    save_app_preferences(store, body)
    return body
