"""
Preference Store
================
Key-value persistence for per-user app state. The workout history, the
streak snapshot, the profile and a handful of typed flags are each stored
as one opaque value under a fixed key.

Two implementations:
- SupabasePreferenceStore: one row per (user_id, key) in user_preferences,
  written with upsert so every save overwrites the previous value.
- InMemoryPreferenceStore: dict-backed, for tests and local runs.

Writes are write-through and best-effort. Callers log failures and keep
their in-memory state; nothing here retries.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Protocol

from fittrack.db.supabase import get_supabase_client

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------

HISTORY_KEY = "savedWorkoutHistory"
STREAK_KEY = "savedStreakData"
PROFILE_KEY = "userProfile"
DAILY_GOAL_KEY = "dailyGoal"
HAPTICS_KEY = "hapticsEnabled"
DARK_MODE_KEY = "isDarkModePreference"

_TABLE = "user_preferences"


class PreferenceStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes) -> None: ...

    def remove(self, key: str) -> None: ...


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------

class InMemoryPreferenceStore:
    """Dict-backed store. Values are copied in and out as bytes."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SupabasePreferenceStore:
    """Stores values for one user in the user_preferences table.

    Values are UTF-8 text on the wire; every payload written by this app
    is JSON, so no extra encoding layer is needed.
    """

    def __init__(self, user_id: str) -> None:
        self._user_id = user_id
        self._db = get_supabase_client()

    def get(self, key: str) -> Optional[bytes]:
        result = (
            self._db.table(_TABLE)
            .select("value")
            .eq("user_id", self._user_id)
            .eq("key", key)
            .maybe_single()
            .execute()
        )
        if not result or not result.data:
            return None
        value = result.data.get("value")
        if value is None:
            return None
        return value.encode("utf-8")

    def set(self, key: str, value: bytes) -> None:
        self._db.table(_TABLE).upsert(
            {
                "user_id": self._user_id,
                "key": key,
                "value": value.decode("utf-8"),
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
            on_conflict="user_id,key",
        ).execute()

    def remove(self, key: str) -> None:
        (
            self._db.table(_TABLE)
            .delete()
            .eq("user_id", self._user_id)
            .eq("key", key)
            .execute()
        )


# ---------------------------------------------------------------------------
# Typed flag helpers
# ---------------------------------------------------------------------------

def _read(store: PreferenceStore, key: str) -> Optional[bytes]:
    """Read a flag. A store failure reads as unset so callers use their default."""
    try:
        return store.get(key)
    except Exception as exc:
        logger.error("Failed to read preference %s: %s", key, exc)
        return None


def get_int(store: PreferenceStore, key: str, default: int) -> int:
    raw = _read(store, key)
    if raw is None:
        return default
    try:
        return int(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        logger.warning("Ignoring malformed integer preference %s", key)
        return default


def set_int(store: PreferenceStore, key: str, value: int) -> None:
    store.set(key, str(int(value)).encode("utf-8"))


def get_bool(store: PreferenceStore, key: str, default: bool) -> bool:
    raw = _read(store, key)
    if raw is None:
        return default
    text = raw.decode("utf-8", errors="replace").strip().lower()
    if text in {"true", "1"}:
        return True
    if text in {"false", "0"}:
        return False
    logger.warning("Ignoring malformed boolean preference %s", key)
    return default


def set_bool(store: PreferenceStore, key: str, value: bool) -> None:
    store.set(key, b"true" if value else b"false")
