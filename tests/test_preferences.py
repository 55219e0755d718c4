"""
Tests for the preference stores
===============================
Covers:
- InMemoryPreferenceStore get/set/remove
- SupabasePreferenceStore: select chain, upsert payload + conflict key, delete
- Typed flag helpers: defaults, round trip, malformed values, read failures

Run: pytest tests/test_preferences.py -v
"""

from __future__ import annotations

import uuid
from unittest.mock import MagicMock, patch

from fittrack.db.preferences import (
    DAILY_GOAL_KEY,
    HAPTICS_KEY,
    HISTORY_KEY,
    InMemoryPreferenceStore,
    SupabasePreferenceStore,
    get_bool,
    get_int,
    set_bool,
    set_int,
)

_USER_ID = str(uuid.uuid4())


def _mock_db(row: dict | None) -> MagicMock:
    mock_db = MagicMock()
    chain = mock_db.table.return_value.select.return_value.eq.return_value.eq.return_value
    chain.maybe_single.return_value.execute.return_value.data = row
    return mock_db


def _supabase_store(mock_db: MagicMock) -> SupabasePreferenceStore:
    with patch("fittrack.db.preferences.get_supabase_client", return_value=mock_db):
        return SupabasePreferenceStore(_USER_ID)


class TestInMemory:

    def test_missing_key_is_none(self):
        assert InMemoryPreferenceStore().get("nope") is None

    def test_set_then_get(self):
        store = InMemoryPreferenceStore()
        store.set(HISTORY_KEY, b"[]")
        assert store.get(HISTORY_KEY) == b"[]"

    def test_remove(self):
        store = InMemoryPreferenceStore({HISTORY_KEY: b"[]"})
        store.remove(HISTORY_KEY)
        store.remove(HISTORY_KEY)
        assert store.get(HISTORY_KEY) is None


class TestSupabaseStore:

    def test_get_returns_bytes(self):
        mock_db = _mock_db({"value": '[{"name": "Running"}]'})
        store = _supabase_store(mock_db)
        assert store.get(HISTORY_KEY) == b'[{"name": "Running"}]'
        mock_db.table.assert_called_with("user_preferences")

    def test_get_missing_row_is_none(self):
        store = _supabase_store(_mock_db(None))
        assert store.get(HISTORY_KEY) is None

    def test_set_upserts_on_user_and_key(self):
        mock_db = _mock_db(None)
        store = _supabase_store(mock_db)
        store.set(DAILY_GOAL_KEY, b"12000")

        upsert = mock_db.table.return_value.upsert
        upsert.assert_called_once()
        payload = upsert.call_args[0][0]
        assert payload["user_id"] == _USER_ID
        assert payload["key"] == DAILY_GOAL_KEY
        assert payload["value"] == "12000"
        assert upsert.call_args.kwargs["on_conflict"] == "user_id,key"

    def test_remove_deletes_row(self):
        mock_db = _mock_db(None)
        store = _supabase_store(mock_db)
        store.remove(HISTORY_KEY)
        mock_db.table.return_value.delete.assert_called_once()


class TestTypedFlags:

    def test_int_default_when_missing(self):
        assert get_int(InMemoryPreferenceStore(), DAILY_GOAL_KEY, 10000) == 10000

    def test_int_round_trip(self):
        store = InMemoryPreferenceStore()
        set_int(store, DAILY_GOAL_KEY, 7500)
        assert get_int(store, DAILY_GOAL_KEY, 10000) == 7500

    def test_malformed_int_uses_default(self):
        store = InMemoryPreferenceStore({DAILY_GOAL_KEY: b"lots"})
        assert get_int(store, DAILY_GOAL_KEY, 10000) == 10000

    def test_bool_round_trip(self):
        store = InMemoryPreferenceStore()
        set_bool(store, HAPTICS_KEY, False)
        assert get_bool(store, HAPTICS_KEY, True) is False
        set_bool(store, HAPTICS_KEY, True)
        assert get_bool(store, HAPTICS_KEY, False) is True

    def test_malformed_bool_uses_default(self):
        store = InMemoryPreferenceStore({HAPTICS_KEY: b"maybe"})
        assert get_bool(store, HAPTICS_KEY, True) is True

    def test_read_failure_uses_default(self):
        store = MagicMock()
        store.get.side_effect = ConnectionError("supabase unreachable")
        assert get_int(store, DAILY_GOAL_KEY, 10000) == 10000
        assert get_bool(store, HAPTICS_KEY, True) is True
