"""
Workout Session Router
======================
Drives the timer for the currently selected workout.

POST /api/v1/sessions/start    : start timing from zero
POST /api/v1/sessions/pause    : pause (no-op if already paused)
POST /api/v1/sessions/resume   : resume (no-op if not paused)
POST /api/v1/sessions/stop     : stop ticking, keep elapsed
POST /api/v1/sessions/reset    : stop and zero elapsed
POST /api/v1/sessions/complete : record the session in history
GET  /api/v1/sessions          : current timer status

Completing returns the new record, the streak after the completion and
the milestone message to flash, if any.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Header, status

from fittrack.auth import get_authenticated_user_id
from fittrack.models.workout import (
    CompletedWorkoutResponse,
    CompleteWorkoutRequest,
    TimerStatus,
)
from fittrack.services.workouts import get_workout_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])

_AUTH = Header(..., description="Bearer token from Supabase Auth")


@router.get("", response_model=TimerStatus, summary="Timer status")
async def timer_status(authorization: str = _AUTH) -> TimerStatus:
    store = get_workout_store(get_authenticated_user_id(authorization))
    return store.timer_status()


@router.post("/start", response_model=TimerStatus, summary="Start the selected workout")
async def start_session(authorization: str = _AUTH) -> TimerStatus:
    store = get_workout_store(get_authenticated_user_id(authorization))
    store.start_workout()
    return store.timer_status()


@router.post("/pause", response_model=TimerStatus, summary="Pause the timer")
async def pause_session(authorization: str = _AUTH) -> TimerStatus:
    store = get_workout_store(get_authenticated_user_id(authorization))
    store.pause_workout()
    return store.timer_status()


@router.post("/resume", response_model=TimerStatus, summary="Resume the timer")
async def resume_session(authorization: str = _AUTH) -> TimerStatus:
    store = get_workout_store(get_authenticated_user_id(authorization))
    store.resume_workout()
    return store.timer_status()


@router.post("/stop", response_model=TimerStatus, summary="Stop the timer")
async def stop_session(authorization: str = _AUTH) -> TimerStatus:
    store = get_workout_store(get_authenticated_user_id(authorization))
    store.stop_workout()
    return store.timer_status()


@router.post("/reset", response_model=TimerStatus, summary="Reset the timer")
async def reset_session(authorization: str = _AUTH) -> TimerStatus:
    store = get_workout_store(get_authenticated_user_id(authorization))
    store.reset_timer()
    return store.timer_status()


@router.post(
    "/complete",
    response_model=CompletedWorkoutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Complete the workout",
    description=(
        "Stop the timer and append a completed record for the selected workout. "
        "The response carries the updated streak and at most one milestone message."
    ),
)
async def complete_session(
    body: Optional[CompleteWorkoutRequest] = None,
    authorization: str = _AUTH,
) -> CompletedWorkoutResponse:
    store = get_workout_store(get_authenticated_user_id(authorization))
    record = store.complete_workout(note=body.note if body else None)
    return CompletedWorkoutResponse(
        record=record,
        achievement=store.recent_achievement,
        streak=store.streak,
    )
