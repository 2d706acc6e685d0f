"""Shared type aliases and protocols for the tick driver."""

from __future__ import annotations

import random as _random
from dataclasses import dataclass
from typing import Callable, TypeVar

S = TypeVar("S")


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    interval: float
    elapsed: float
    request_stop: Callable[[], None]
    random: _random.Random


class SnapshotError(Exception):
    """Raised when a persisted snapshot cannot be read or is malformed."""


# A step turns the previous published state into the next one.
Step = Callable[[S, TickContext], S]

# A guard returns True while the driver must stay suspended.
Guard = Callable[[S], bool]

Hook = Callable[[S, TickContext], None]
