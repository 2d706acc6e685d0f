"""Clock and TickContext for a time-scaled tick driver."""

import math
import random
from typing import Callable

from estate_tick.types import TickContext


class Clock:
    def __init__(self, base_interval: float) -> None:
        if base_interval <= 0:
            raise ValueError("base_interval must be positive")
        self._base_interval = base_interval
        self._tick_number = 0
        self._elapsed = 0.0

    @property
    def base_interval(self) -> float:
        return self._base_interval

    @property
    def tick_number(self) -> int:
        return self._tick_number

    @property
    def elapsed(self) -> float:
        """Wall-clock seconds of simulated time fired so far."""
        return self._elapsed

    def interval(self, time_scale: float) -> float:
        """Seconds between firings at *time_scale*. Infinite when paused."""
        if time_scale <= 0:
            return math.inf
        return self._base_interval / time_scale

    def advance(self, interval: float | None = None) -> int:
        self._tick_number += 1
        self._elapsed += self._base_interval if interval is None else interval
        return self._tick_number

    def context(
        self,
        stop_fn: Callable[[], None],
        rng: random.Random,
        interval: float | None = None,
    ) -> TickContext:
        return TickContext(
            tick_number=self._tick_number,
            interval=self._base_interval if interval is None else interval,
            elapsed=self._elapsed,
            request_stop=stop_fn,
            random=rng,
        )

    def reset(self, tick_number: int = 0) -> None:
        self._tick_number = tick_number
        self._elapsed = tick_number * self._base_interval
