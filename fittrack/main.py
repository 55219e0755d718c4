"""
FitTrack API
============
FastAPI application entry point. Mount routers here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fittrack.config import get_settings
from fittrack.routers import health, profile, recommendations, sessions, workouts
from fittrack.services.health import stop_all_polling

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    stop_all_polling()


app = FastAPI(
    title="FitTrack API",
    description="Workout tracking, streaks and health metrics API backend",
    version="0.1.0",
    docs_url="/api/docs" if settings.environment != "production" else None,
    redoc_url="/api/redoc" if settings.environment != "production" else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(workouts.router)
app.include_router(sessions.router)
app.include_router(health.router)
app.include_router(profile.router)
app.include_router(recommendations.router)


@app.get("/api/v1/health")
async def health_check() -> dict:
    return {"status": "ok", "service": "fittrack-api"}
