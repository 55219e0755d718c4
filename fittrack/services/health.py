"""
Health Metrics Service
======================
Step and active-energy counts from the health-data provider (Oura REST
API v2 daily_activity collection).

Responsibilities:
- HealthDataClient: sum steps / active calories over today, the trailing
  7 days or the trailing 30 days, each window starting at local midnight
- get_health_access_token(): look up the user's provider token
- HealthMetricsStore: keep the last known value for each metric, refresh
  all of them in parallel, poll on a fixed interval while the user keeps
  requesting metrics; idle stores stop polling and leave the registry

Failure policy: a failed or unauthorised query means "no data this
cycle". The metric keeps its previous value and the next poll retries.
When a window has no active energy the calorie figure is estimated from
steps.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

import httpx

from fittrack.config import get_settings
from fittrack.db.supabase import get_supabase_client
from fittrack.models.health import DailyActivityItem, HealthSummary, Period

logger = logging.getLogger(__name__)

_ACTIVITY_PATH = "/v2/usercollection/daily_activity"

_WINDOW_DAYS: dict[Period, int] = {
    Period.daily: 0,
    Period.weekly: 7,
    Period.monthly: 30,
}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class HealthAPIError(Exception):
    """Non-2xx response from the health-data provider."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Health API error {status_code}: {body}")


class HealthTokenError(Exception):
    """No provider token stored for the user."""


# ---------------------------------------------------------------------------
# Windows
# ---------------------------------------------------------------------------


def window_start(period: Period, today: date) -> date:
    """First day included in *period* when the current local day is *today*."""
    return today - timedelta(days=_WINDOW_DAYS[period])


# ---------------------------------------------------------------------------
# HealthDataClient: thin HTTP wrapper around the provider API
# ---------------------------------------------------------------------------


class HealthDataClient:
    """Read-only aggregate queries against the provider's activity feed."""

    def __init__(
        self,
        access_token: str,
        base_url: Optional[str] = None,
        tz: Optional[ZoneInfo] = None,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        settings = get_settings()
        self._token = access_token
        self._base_url = base_url or settings.health_api_base_url
        self._tz = tz or ZoneInfo(settings.timezone)
        self._today = today or (lambda: datetime.now(timezone.utc).astimezone(self._tz).date())

    async def fetch_daily_activity(
        self, start_date: date, end_date: date
    ) -> list[DailyActivityItem]:
        """GET daily_activity for the given inclusive date range."""
        data = await self._get(
            _ACTIVITY_PATH,
            params={
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
            },
        )
        return [DailyActivityItem(**item) for item in data.get("data", [])]

    async def step_count(self, period: Period) -> int:
        items = await self._fetch_window(period)
        return max(0, sum(item.steps or 0 for item in items))

    async def active_calories(self, period: Period) -> int:
        items = await self._fetch_window(period)
        return max(0, sum(item.active_calories or 0 for item in items))

    async def _fetch_window(self, period: Period) -> list[DailyActivityItem]:
        today = self._today()
        return await self.fetch_daily_activity(window_start(period, today), today)

    async def _get(self, path: str, params: dict) -> dict:
        """Shared async GET call with Bearer auth. Raises HealthAPIError on non-2xx."""
        async with httpx.AsyncClient() as client:
            response = await client.get(
                f"{self._base_url}{path}",
                params=params,
                headers={"Authorization": f"Bearer {self._token}"},
            )
        if not response.is_success:
            raise HealthAPIError(response.status_code, response.text)
        return response.json()


def get_health_access_token(user_id: str) -> str:
    """Return the stored provider token. Raises HealthTokenError if absent."""
    db = get_supabase_client()
    result = (
        db.table("health_tokens")
        .select("access_token")
        .eq("user_id", user_id)
        .maybe_single()
        .execute()
    )
    if not result or not result.data:
        raise HealthTokenError(f"No health data token found for user {user_id}")
    return result.data["access_token"]


# ---------------------------------------------------------------------------
# HealthMetricsStore: last known values + polling
# ---------------------------------------------------------------------------


class HealthMetricsStore:
    """Last known step and calorie counts for one user."""

    def __init__(
        self,
        client_factory: Callable[[], HealthDataClient],
        poll_interval: Optional[float] = None,
        calories_per_step: Optional[float] = None,
        max_idle_polls: Optional[int] = None,
        on_idle: Optional[Callable[[], None]] = None,
    ) -> None:
        settings = get_settings()
        self._client_factory = client_factory
        self._poll_interval = poll_interval or settings.health_poll_interval_seconds
        self._max_idle_polls = max_idle_polls or settings.health_max_idle_polls
        self._idle_polls = 0
        self._on_idle = on_idle
        self._calories_per_step = (
            calories_per_step if calories_per_step is not None else settings.calories_per_step
        )
        self._steps: dict[Period, int] = {p: 0 for p in Period}
        self._calories: dict[Period, int] = {p: 0 for p in Period}
        self._listeners: list[Callable[[HealthSummary], None]] = []
        self._task: Optional[asyncio.Task] = None

    # ---- Read access -----------------------------------------------------

    def steps(self, period: Period) -> int:
        return self._steps[period]

    def raw_calories(self, period: Period) -> int:
        return self._calories[period]

    def calories(self, period: Period) -> int:
        """Active energy, or a step-based estimate when none was recorded."""
        if self._calories[period] > 0:
            return self._calories[period]
        return int(self._steps[period] * self._calories_per_step)

    def summary(self) -> HealthSummary:
        return HealthSummary(
            daily_steps=self.steps(Period.daily),
            weekly_steps=self.steps(Period.weekly),
            monthly_steps=self.steps(Period.monthly),
            daily_calories=self.calories(Period.daily),
            weekly_calories=self.calories(Period.weekly),
            monthly_calories=self.calories(Period.monthly),
        )

    def subscribe(self, listener: Callable[[HealthSummary], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- Refresh ---------------------------------------------------------

    async def refresh(self) -> HealthSummary:
        """Query every metric once. Failed queries keep their last value."""
        try:
            client = self._client_factory()
        except HealthTokenError as exc:
            logger.info("Health data not authorised: %s", exc)
            return self.summary()
        except Exception as exc:
            logger.error("Failed to create health data client: %s", exc)
            return self.summary()

        periods = list(Period)
        results = await asyncio.gather(
            *(client.step_count(p) for p in periods),
            *(client.active_calories(p) for p in periods),
            return_exceptions=True,
        )
        step_results = results[: len(periods)]
        calorie_results = results[len(periods):]

        for period, value in zip(periods, step_results):
            self._apply(self._steps, period, value, "steps")
        for period, value in zip(periods, calorie_results):
            self._apply(self._calories, period, value, "calories")

        summary = self.summary()
        for listener in list(self._listeners):
            listener(summary)
        return summary

    @staticmethod
    def _apply(target: dict[Period, int], period: Period, value, metric: str) -> None:
        if isinstance(value, asyncio.CancelledError):
            raise value
        if isinstance(value, BaseException):
            logger.warning("Error grabbing %s %s data: %s", period.value, metric, value)
            return
        target[period] = value

    # ---- Polling ---------------------------------------------------------

    @property
    def is_polling(self) -> bool:
        return self._task is not None and not self._task.done()

    def start_polling(self) -> None:
        """Refresh every poll interval until stop_polling() or the user goes idle.

        Idempotent. Every call counts as activity and restarts the idle count.
        """
        self._idle_polls = 0
        if self.is_polling:
            return
        self._task = asyncio.get_running_loop().create_task(self._poll())

    def stop_polling(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _poll(self) -> None:
        while self._idle_polls < self._max_idle_polls:
            await asyncio.sleep(self._poll_interval)
            self._idle_polls += 1
            try:
                await self.refresh()
            except Exception:
                logger.exception("Health data poll failed")

        logger.info("Health data polling stopped after %d idle polls", self._idle_polls)
        self._task = None
        if self._on_idle is not None:
            self._on_idle()


# ---------------------------------------------------------------------------
# Per-user registry
# ---------------------------------------------------------------------------

_stores: dict[str, HealthMetricsStore] = {}


def get_health_store(user_id: str) -> HealthMetricsStore:
    store = _stores.get(user_id)
    if store is None:
        store = HealthMetricsStore(
            client_factory=lambda: HealthDataClient(get_health_access_token(user_id)),
            on_idle=lambda: _evict(user_id),
        )
        _stores[user_id] = store
    return store


def _evict(user_id: str) -> None:
    store = _stores.get(user_id)
    if store is not None and not store.is_polling:
        del _stores[user_id]


def stop_all_polling() -> None:
    for store in _stores.values():
        store.stop_polling()
