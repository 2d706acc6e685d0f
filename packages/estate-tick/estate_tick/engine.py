"""Engine - time-scaled tick driver over an explicitly passed state value."""

import os
import random
import time
from typing import Callable, Generic

from loguru import logger

from estate_tick.clock import Clock
from estate_tick.types import Guard, Hook, S, Step

# Longest nap run_forever takes, so guard changes are seen promptly.
_POLL_INTERVAL = 0.05


class Engine(Generic[S]):
    def __init__(
        self,
        state: S,
        step: Step[S],
        *,
        base_interval: float = 1.0,
        time_scale: Callable[[S], float] | None = None,
        seed: int | None = None,
    ) -> None:
        self._clock = Clock(base_interval)
        self._state = state
        self._step = step
        self._time_scale = time_scale or (lambda _state: 1.0)
        self._guards: list[Guard[S]] = []
        self._tick_hooks: list[Hook[S]] = []
        self._start_hooks: list[Hook[S]] = []
        self._stop_hooks: list[Hook[S]] = []
        self._stop_requested: bool = False
        self._accumulator: float = 0.0

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def state(self) -> S:
        """The latest published state. Replaced wholesale, never mutated."""
        return self._state

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def random(self) -> random.Random:
        return self._rng

    @property
    def suspended(self) -> bool:
        if self._time_scale(self._state) <= 0:
            return True
        return any(guard(self._state) for guard in self._guards)

    def add_guard(self, guard: Guard[S]) -> None:
        self._guards.append(guard)

    def on_tick(self, hook: Hook[S]) -> None:
        self._tick_hooks.append(hook)

    def on_start(self, hook: Hook[S]) -> None:
        self._start_hooks.append(hook)

    def on_stop(self, hook: Hook[S]) -> None:
        self._stop_hooks.append(hook)

    def commit(self, state: S) -> None:
        """Publish a state produced between ticks (player action, load)."""
        self._state = state

    def stop(self) -> None:
        self._stop_requested = True

    def _request_stop(self) -> None:
        self._stop_requested = True

    def _current_interval(self) -> float:
        return self._clock.interval(self._time_scale(self._state))

    def _fire(self) -> bool:
        # Suspension is checked right before the body, not when scheduled.
        if self.suspended:
            return False
        interval = self._current_interval()
        self._clock.advance(interval)
        ctx = self._clock.context(self._request_stop, self._rng, interval)
        self._state = self._step(self._state, ctx)
        for hook in self._tick_hooks:
            try:
                hook(self._state, ctx)
            except Exception:
                logger.exception("estate-tick: on_tick hook failed at tick {}", ctx.tick_number)
        return True

    def _run_hooks(self, hooks: list[Hook[S]]) -> None:
        ctx = self._clock.context(self._request_stop, self._rng)
        for hook in hooks:
            hook(self._state, ctx)

    def step(self) -> bool:
        """Fire one tick unless suspended. Returns whether it fired."""
        self._stop_requested = False
        return self._fire()

    def run(self, n: int) -> int:
        """Fire up to *n* ticks back to back, stopping early on suspension."""
        self._stop_requested = False
        self._run_hooks(self._start_hooks)

        fired = 0
        for _ in range(n):
            if not self._fire():
                break
            fired += 1
            if self._stop_requested:
                break

        self._run_hooks(self._stop_hooks)
        return fired

    def update(self, elapsed: float) -> int:
        """Advance the wall clock by *elapsed* seconds and fire due ticks.

        Time that passes while suspended is dropped rather than banked, so
        resuming never replays a burst of missed days.
        """
        if elapsed < 0:
            raise ValueError("elapsed must be non-negative")
        self._stop_requested = False
        if self.suspended:
            self._accumulator = 0.0
            return 0

        self._accumulator += elapsed
        fired = 0
        while not self._stop_requested:
            interval = self._current_interval()
            if self._accumulator < interval:
                break
            if not self._fire():
                self._accumulator = 0.0
                break
            self._accumulator -= interval
            fired += 1
        return fired

    def run_forever(self) -> None:
        self._stop_requested = False
        self._run_hooks(self._start_hooks)

        last = time.monotonic()
        while not self._stop_requested:
            now = time.monotonic()
            self.update(now - last)
            last = now
            if self._stop_requested:
                break
            if self.suspended:
                sleep_time = _POLL_INTERVAL
            else:
                sleep_time = min(
                    _POLL_INTERVAL, self._current_interval() - self._accumulator
                )
            if sleep_time > 0:
                time.sleep(sleep_time)

        self._run_hooks(self._stop_hooks)
