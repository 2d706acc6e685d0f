"""estate-tick - A time-scaled tick driver over immutable state values."""

from estate_tick.clock import Clock
from estate_tick.engine import Engine
from estate_tick.types import Guard, Hook, SnapshotError, Step, TickContext

__all__ = [
    "Engine",
    "Clock",
    "TickContext",
    "Step",
    "Guard",
    "Hook",
    "SnapshotError",
]
