"""
Recommendations Router
======================
GET /api/v1/recommendations/today: today's workout and meal suggestion.

"Today" is the local calendar day in the configured timezone.
"""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Header

from fittrack.auth import get_authenticated_user_id
from fittrack.config import get_settings
from fittrack.models.recommendation import DailyRecommendation
from fittrack.services.recommendation import recommendation_for

router = APIRouter(prefix="/api/v1/recommendations", tags=["recommendations"])


@router.get("/today", response_model=DailyRecommendation, summary="Today's recommendation")
async def today_recommendation(
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> DailyRecommendation:
    get_authenticated_user_id(authorization)
    tz = ZoneInfo(get_settings().timezone)
    return recommendation_for(datetime.now(timezone.utc).astimezone(tz).date())
