"""
FitTrack Configuration
======================
All environment variables in one place. Pydantic Settings validates
types at startup so a bad poll interval or timezone fails on boot.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Loaded from environment variables or a .env file."""

    # --- Supabase ---
    supabase_url: str = "http://localhost:54321"
    supabase_service_key: str = ""  # service_role key for backend operations

    # --- Health data provider (Oura REST API v2 compatible) ---
    health_api_base_url: str = "https://api.ouraring.com"
    health_poll_interval_seconds: float = 30.0
    # Polling stops once this many polls pass without a request from the user
    health_max_idle_polls: int = 10
    # Used when the provider reports no active energy for a window
    calories_per_step: float = 0.04

    # --- Workout tracking ---
    timer_tick_seconds: float = 1.0
    # Calendar-day boundaries for streaks and health windows
    timezone: str = "UTC"
    default_daily_step_goal: int = 10000

    # --- App settings ---
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:8081", "http://localhost:19006"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
