"""
Supabase Client
===============
Provides a configured Supabase client shared by the auth helper and the
preference store.

Uses the service_role key because the backend reads and writes
user_preferences and health_tokens rows on behalf of authenticated users.
"""

from functools import lru_cache

from supabase import Client, create_client

from fittrack.config import get_settings


@lru_cache
def get_supabase_client() -> Client:
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_service_key)
