"""
Workout Timer
=============
Measures active elapsed time for one tracked workout, excluding paused
intervals.

State is an explicit tagged value rather than a pair of flags:

    Idle ──start()──▶ Running ──pause()──▶ Paused
                        ▲                    │
                        └─────resume()───────┘
    Running/Paused ──stop()──▶ Idle (last elapsed kept until reset())

While Running, a ticker task recomputes

    elapsed = accumulated + (now - anchor)

once per tick interval. Paused and Idle sessions never update elapsed.
The ticker only runs when start() is called inside an asyncio event loop;
outside one, callers drive tick() themselves.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Idle:
    name = "idle"


@dataclass(frozen=True)
class Running:
    anchor: float
    accumulated: float
    name = "running"


@dataclass(frozen=True)
class Paused:
    accumulated: float
    name = "paused"


TimerState = Union[Idle, Running, Paused]


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class TimerSession:
    """Elapsed-time tracker for a single in-progress workout."""

    def __init__(
        self,
        clock: Clock = time.monotonic,
        tick_interval: float = 1.0,
    ) -> None:
        self._clock = clock
        self._tick_interval = tick_interval
        self._state: TimerState = Idle()
        self._elapsed = 0.0
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def is_running(self) -> bool:
        return isinstance(self._state, Running)

    @property
    def is_paused(self) -> bool:
        return isinstance(self._state, Paused)

    # ---- Transitions -----------------------------------------------------

    def start(self) -> None:
        """Begin a fresh run from zero. Restarts if already active."""
        self._cancel_ticker()
        self._elapsed = 0.0
        self._state = Running(anchor=self._clock(), accumulated=0.0)
        self._launch_ticker()

    def pause(self) -> None:
        if not isinstance(self._state, Running):
            return
        self.tick()
        self._state = Paused(accumulated=self._elapsed)

    def resume(self) -> None:
        if not isinstance(self._state, Paused):
            return
        self._state = Running(anchor=self._clock(), accumulated=self._state.accumulated)
        if self._task is None or self._task.done():
            self._launch_ticker()

    def stop(self) -> None:
        """End the session. The final elapsed value stays readable."""
        self.tick()
        self._cancel_ticker()
        self._state = Idle()

    def reset(self) -> None:
        self.stop()
        self._elapsed = 0.0

    def tick(self) -> None:
        state = self._state
        if not isinstance(state, Running):
            return
        elapsed = state.accumulated + (self._clock() - state.anchor)
        # monotonic clocks never go backwards, but injected ones might
        self._elapsed = max(self._elapsed, elapsed)

    # ---- Ticker ----------------------------------------------------------

    def _launch_ticker(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._task = loop.create_task(self._run_ticker())

    def _cancel_ticker(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run_ticker(self) -> None:
        while isinstance(self._state, Running):
            await asyncio.sleep(self._tick_interval)
            self.tick()
        logger.debug("Timer ticker exiting in state %s", self._state.name)
