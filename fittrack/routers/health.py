"""
Health Metrics Router
=====================
GET /api/v1/health-metrics/summary           : steps + calories, all windows
GET /api/v1/health-metrics/steps?period=...  : one step count
GET /api/v1/health-metrics/calories?period=...: one calorie count

Each request refreshes from the provider (the mobile screens call these
when they appear) and makes sure background polling is running. If the
provider is unreachable or the user has not connected it, the last known
values are returned.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, Query

from fittrack.auth import get_authenticated_user_id
from fittrack.models.health import HealthSummary, MetricResponse, Period
from fittrack.services.health import HealthMetricsStore, get_health_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/health-metrics", tags=["health-metrics"])

_AUTH = Header(..., description="Bearer token from Supabase Auth")


async def _refreshed_store(authorization: str) -> HealthMetricsStore:
    store = get_health_store(get_authenticated_user_id(authorization))
    await store.refresh()
    store.start_polling()
    return store


@router.get("/summary", response_model=HealthSummary, summary="Step and calorie summary")
async def health_summary(authorization: str = _AUTH) -> HealthSummary:
    store = await _refreshed_store(authorization)
    return store.summary()


@router.get("/steps", response_model=MetricResponse, summary="Step count")
async def step_count(
    period: Period = Query(default=Period.daily),
    authorization: str = _AUTH,
) -> MetricResponse:
    store = await _refreshed_store(authorization)
    return MetricResponse(period=period, value=store.steps(period))


@router.get(
    "/calories",
    response_model=MetricResponse,
    summary="Active calories",
    description="Falls back to a step-based estimate when no active energy is recorded.",
)
async def calorie_count(
    period: Period = Query(default=Period.daily),
    authorization: str = _AUTH,
) -> MetricResponse:
    store = await _refreshed_store(authorization)
    return MetricResponse(period=period, value=store.calories(period))
