"""Persistence - JSON snapshots of ``WorldState`` and save-slot storage.

A slot is two files: ``slot<n>.json`` holds the full snapshot and
``slot<n>.meta.json`` a small summary for slot browsing, readable without
decoding the world.
"""
from __future__ import annotations

import json
import math
import os
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from estate_tick import SnapshotError
from loguru import logger

from estate_empire.config import DEFAULT_CONFIG, EstateConfig
from estate_empire.effects import decode_effect, encode_effect
from estate_empire.progression import unlocked_for
from estate_empire.types import (
    Amenity,
    District,
    EventOption,
    EventScope,
    Property,
    RandomEvent,
    RentMode,
    WorldState,
)

SNAPSHOT_VERSION = 1


def _amenity_to_dict(a: Amenity) -> dict[str, Any]:
    return {
        "id": a.id,
        "name": a.name,
        "base_cost": a.base_cost,
        "base_upkeep": a.base_upkeep,
        "base_comfort": a.base_comfort,
        "unlock_level": a.unlock_level,
        "level": a.level,
    }


def _property_to_dict(p: Property) -> dict[str, Any]:
    return {
        "id": p.id,
        "district": p.district.value,
        "name": p.name,
        "purchase_cost": p.purchase_cost,
        "amenities": [_amenity_to_dict(a) for a in p.amenities],
        "is_owned": p.is_owned,
        "condition": p.condition,
        "tier": p.tier,
        "rent_mode": p.rent_mode.value,
        "tenant_name": p.tenant_name,
        "tenant_stay_duration": p.tenant_stay_duration,
        "last_rent_paid_day": p.last_rent_paid_day,
        "active_local_event_id": p.active_local_event_id,
    }


def _event_to_dict(e: RandomEvent) -> dict[str, Any]:
    return {
        "id": e.id,
        "scope": e.scope.value,
        "title": e.title,
        "description": e.description,
        "target_property_id": e.target_property_id,
        "options": [
            {
                "label": o.label,
                "description": o.description,
                "cost": o.cost,
                "risk": o.risk,
                "effects": [encode_effect(fx) for fx in o.effects],
            }
            for o in e.options
        ],
    }


def state_to_dict(state: WorldState) -> dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "money": state.money,
        "reputation": state.reputation,
        "day": state.day,
        "level": state.level,
        "xp": state.xp,
        "xp_to_next_level": state.xp_to_next_level,
        "unlocked_districts": sorted(d.value for d in state.unlocked_districts),
        "time_scale": state.time_scale,
        "properties": [_property_to_dict(p) for p in state.properties],
        "active_event": None if state.active_event is None else _event_to_dict(state.active_event),
        "level_up_pending": state.level_up_pending,
        "pending_rewards": list(state.pending_rewards),
    }


def _event_from_dict(d: dict[str, Any]) -> RandomEvent:
    return RandomEvent(
        id=d["id"],
        scope=EventScope(d["scope"]),
        title=d["title"],
        description=d["description"],
        target_property_id=d.get("target_property_id"),
        options=tuple(
            EventOption(
                label=o["label"],
                description=o.get("description", ""),
                cost=o.get("cost"),
                risk=o.get("risk"),
                effects=tuple(decode_effect(fx) for fx in o.get("effects", ())),
            )
            for o in d["options"]
        ),
    )


def _property_from_dict(d: dict[str, Any]) -> Property:
    return Property(
        id=d["id"],
        district=District(d["district"]),
        name=d["name"],
        purchase_cost=float(d["purchase_cost"]),
        amenities=tuple(Amenity(**a) for a in d.get("amenities", ())),
        is_owned=bool(d["is_owned"]),
        condition=float(d["condition"]),
        tier=int(d["tier"]),
        rent_mode=RentMode(d["rent_mode"]),
        tenant_name=d.get("tenant_name"),
        tenant_stay_duration=int(d.get("tenant_stay_duration", 0)),
        last_rent_paid_day=int(d.get("last_rent_paid_day", 0)),
        active_local_event_id=d.get("active_local_event_id"),
    )


def _invalid(state: WorldState, config: EstateConfig) -> str | None:
    """First broken world invariant, or None when *state* is playable.

    ``xp`` may sit at or above the threshold: actions award XP between
    ticks and the next tick applies the level-up.
    """
    if not (math.isfinite(state.money) and math.isfinite(state.xp)):
        return "money and xp must be finite"
    if not 0 <= state.reputation <= 100:
        return f"reputation {state.reputation} outside 0..100"
    if state.day < 1 or state.level < 1:
        return "day and level start at 1"
    if state.xp < 0:
        return f"negative xp {state.xp}"
    if not 1 <= state.xp_to_next_level < math.inf:
        return f"xp threshold {state.xp_to_next_level} must be at least 1"
    if not 0 <= state.time_scale < math.inf:
        return f"time scale {state.time_scale} out of range"
    if not unlocked_for(1) <= state.unlocked_districts:
        return "starting district is locked"

    seen: set[str] = set()
    for p in state.properties:
        if p.id in seen:
            return f"duplicate property {p.id!r}"
        seen.add(p.id)
        if not 0 <= p.condition <= 100:
            return f"{p.id}: condition {p.condition} outside 0..100"
        if p.tier not in (1, 2):
            return f"{p.id}: tier {p.tier}"
        if p.purchase_cost < 0 or p.tenant_stay_duration < 0:
            return f"{p.id}: negative cost or stay duration"
        if not p.is_owned and (p.rent_mode is not RentMode.NONE or p.occupied):
            return f"{p.id}: unowned plot is rented out"
        ceiling = config.amenity_ceiling(p.tier)
        for a in p.amenities:
            if not 0 <= a.level <= ceiling:
                return f"{p.id}: amenity {a.id} level {a.level} outside 0..{ceiling}"

    event = state.active_event
    target = None if event is None else event.target_property_id
    for p in state.properties:
        if p.blocked and (p.id != target or p.active_local_event_id != event.id):
            return f"{p.id}: blocked without a matching event"
    if target is not None:
        prop = state.find(target)
        if prop is None or prop.active_local_event_id != event.id:
            return f"event {event.id!r} targets a missing or unblocked property"
    return None


def state_from_dict(data: dict[str, Any], config: EstateConfig = DEFAULT_CONFIG) -> WorldState:
    """Rebuild a ``WorldState``.

    Raises ``SnapshotError`` on malformed data and on values that break a
    world invariant (ranges, tiers, amenity ceilings, event blocks).
    """
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    version = data.get("version")
    if version != SNAPSHOT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version {version!r}")
    try:
        state = _decode_state(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotError(f"Malformed snapshot: {exc}") from exc
    problem = _invalid(state, config)
    if problem is not None:
        raise SnapshotError(f"Invalid snapshot: {problem}")
    return state


def _decode_state(data: dict[str, Any]) -> WorldState:
    event = data.get("active_event")
    return WorldState(
        money=float(data["money"]),
        reputation=float(data["reputation"]),
        day=int(data["day"]),
        level=int(data["level"]),
        xp=float(data["xp"]),
        xp_to_next_level=float(data["xp_to_next_level"]),
        unlocked_districts=frozenset(District(d) for d in data["unlocked_districts"]),
        time_scale=float(data.get("time_scale", 0.0)),
        properties=tuple(_property_from_dict(p) for p in data["properties"]),
        active_event=None if event is None else _event_from_dict(event),
        level_up_pending=bool(data.get("level_up_pending", False)),
        pending_rewards=tuple(data.get("pending_rewards", ())),
    )


def persistable(state: WorldState) -> WorldState:
    """The form a state is saved in: paused, no modal flags, no blocks."""
    props = tuple(
        replace(p, active_local_event_id=None) if p.blocked else p
        for p in state.properties
    )
    return replace(
        state,
        properties=props,
        active_event=None,
        level_up_pending=False,
        pending_rewards=(),
        time_scale=0.0,
    )


@dataclass(frozen=True)
class SlotMeta:
    slot: int
    day: int
    money: float
    level: int
    timestamp: float


class SaveStore:
    """Numbered save slots (1..slots) in one directory."""

    def __init__(
        self, directory: str | Path, slots: int = 3, config: EstateConfig = DEFAULT_CONFIG
    ) -> None:
        if slots < 1:
            raise ValueError("slots must be >= 1")
        self._dir = Path(directory)
        self._slots = slots
        self._config = config

    @property
    def directory(self) -> Path:
        return self._dir

    def _check(self, slot: int) -> None:
        if not 1 <= slot <= self._slots:
            raise ValueError(f"slot must be in 1..{self._slots}, got {slot}")

    def _path(self, slot: int) -> Path:
        return self._dir / f"slot{slot}.json"

    def _meta_path(self, slot: int) -> Path:
        return self._dir / f"slot{slot}.meta.json"

    def _write(self, path: Path, data: dict[str, Any]) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp, path)

    def save(self, slot: int, state: WorldState) -> SlotMeta:
        self._check(slot)
        self._dir.mkdir(parents=True, exist_ok=True)
        stored = persistable(state)
        meta = SlotMeta(
            slot=slot,
            day=stored.day,
            money=stored.money,
            level=stored.level,
            timestamp=time.time(),
        )
        self._write(self._path(slot), state_to_dict(stored))
        self._write(
            self._meta_path(slot),
            {"day": meta.day, "money": meta.money, "level": meta.level, "timestamp": meta.timestamp},
        )
        logger.info("Saved day {} to slot {}", meta.day, slot)
        return meta

    def load(self, slot: int) -> WorldState:
        """Read a slot. The result is always paused."""
        self._check(slot)
        path = self._path(slot)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise SnapshotError(f"Slot {slot} is empty") from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise SnapshotError(f"Cannot read slot {slot}: {exc}") from exc
        state = replace(state_from_dict(data, self._config), time_scale=0.0)
        logger.info("Loaded slot {} (day {})", slot, state.day)
        return state

    def meta(self, slot: int) -> SlotMeta | None:
        """Slot summary, or None when the slot is empty or unreadable."""
        self._check(slot)
        path = self._meta_path(slot)
        if not path.exists():
            return None
        try:
            d = json.loads(path.read_text(encoding="utf-8"))
            return SlotMeta(
                slot=slot,
                day=int(d["day"]),
                money=float(d["money"]),
                level=int(d["level"]),
                timestamp=float(d["timestamp"]),
            )
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Unreadable metadata for slot {}: {}", slot, exc)
            return None

    def delete(self, slot: int) -> bool:
        self._check(slot)
        removed = False
        for path in (self._path(slot), self._meta_path(slot)):
            if path.exists():
                path.unlink()
                removed = True
        return removed

    def slots(self) -> list[SlotMeta | None]:
        return [self.meta(n) for n in range(1, self._slots + 1)]
