"""
Workouts Router
===============
Templates, completed history and progress stats.

GET    /api/v1/workouts/templates         : list templates + current selection
POST   /api/v1/workouts/templates         : add a custom workout (selects it)
PUT    /api/v1/workouts/templates/selected: select a template
GET    /api/v1/workouts/history           : completed workouts, oldest first
DELETE /api/v1/workouts/history/{id}      : delete one record, recompute streak
DELETE /api/v1/workouts/history           : clear history and streak
GET    /api/v1/workouts/stats             : trailing 7/30 day totals + streak
DELETE /api/v1/workouts/streak            : reset streak counters
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Header, HTTPException, Response, status

from fittrack.auth import get_authenticated_user_id
from fittrack.models.workout import (
    ProgressStats,
    TemplateListResponse,
    TemplateSelection,
    WorkoutRecord,
    WorkoutTemplate,
    WorkoutTemplateCreate,
)
from fittrack.services.workouts import (
    InvalidTemplateError,
    WorkoutNotFoundError,
    get_workout_store,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/workouts", tags=["workouts"])

_AUTH = Header(..., description="Bearer token from Supabase Auth")


def _not_found(exc: WorkoutNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"message": str(exc), "code": "workout_not_found"},
    )


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

@router.get("/templates", response_model=TemplateListResponse, summary="List workout templates")
async def list_templates(authorization: str = _AUTH) -> TemplateListResponse:
    store = get_workout_store(get_authenticated_user_id(authorization))
    return TemplateListResponse(
        templates=store.templates,
        selected_id=store.selected_template.id,
    )


@router.post(
    "/templates",
    response_model=WorkoutTemplate,
    status_code=status.HTTP_201_CREATED,
    summary="Add a custom workout",
    responses={
        201: {"description": "Template created and selected"},
        409: {"description": "Template with the same name already exists"},
    },
)
async def add_template(
    body: WorkoutTemplateCreate,
    authorization: str = _AUTH,
) -> WorkoutTemplate:
    store = get_workout_store(get_authenticated_user_id(authorization))
    try:
        return store.add_template(body.name)
    except InvalidTemplateError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(exc), "code": "invalid_template"},
        ) from exc


@router.put("/templates/selected", response_model=WorkoutTemplate, summary="Select a template")
async def select_template(
    body: TemplateSelection,
    authorization: str = _AUTH,
) -> WorkoutTemplate:
    store = get_workout_store(get_authenticated_user_id(authorization))
    try:
        return store.select_template(body.template_id)
    except WorkoutNotFoundError as exc:
        raise _not_found(exc) from exc


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

@router.get("/history", response_model=list[WorkoutRecord], summary="List completed workouts")
async def list_history(authorization: str = _AUTH) -> list[WorkoutRecord]:
    store = get_workout_store(get_authenticated_user_id(authorization))
    return store.history


@router.delete(
    "/history/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a workout",
    responses={404: {"description": "No workout with this id"}},
)
async def delete_workout(record_id: uuid.UUID, authorization: str = _AUTH) -> Response:
    store = get_workout_store(get_authenticated_user_id(authorization))
    try:
        store.delete_workout(record_id)
    except WorkoutNotFoundError as exc:
        raise _not_found(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT, summary="Clear history")
async def clear_history(authorization: str = _AUTH) -> Response:
    store = get_workout_store(get_authenticated_user_id(authorization))
    store.clear_history()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/stats", response_model=ProgressStats, summary="Progress stats")
async def progress_stats(authorization: str = _AUTH) -> ProgressStats:
    store = get_workout_store(get_authenticated_user_id(authorization))
    return store.progress_stats()


@router.delete("/streak", status_code=status.HTTP_204_NO_CONTENT, summary="Reset streak data")
async def reset_streak(authorization: str = _AUTH) -> Response:
    store = get_workout_store(get_authenticated_user_id(authorization))
    store.reset_streak_data()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
