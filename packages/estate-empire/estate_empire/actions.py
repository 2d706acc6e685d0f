"""Player actions - synchronous state transitions applied between ticks.

Every action re-validates its preconditions against the state it is given.
A rejected action returns the very same ``WorldState`` object, so callers can
detect a no-op with ``is``.
"""
from __future__ import annotations

import math
from dataclasses import replace

from loguru import logger

from estate_empire import economy
from estate_empire.config import DEFAULT_CONFIG, EstateConfig
from estate_empire.events import resolve_event
from estate_empire.types import Property, RentMode, WorldState

__all__ = [
    "acknowledge_level_up",
    "purchase",
    "repair",
    "resolve_event",
    "set_rent_mode",
    "set_time_scale",
    "upgrade_amenity",
    "upgrade_tier",
]


def _reject(state: WorldState, action: str, reason: str) -> WorldState:
    logger.debug("{} rejected: {}", action, reason)
    return state


def _owned(state: WorldState, property_id: str) -> Property | None:
    prop = state.find(property_id)
    if prop is None or not prop.is_owned:
        return None
    return prop


def purchase(
    state: WorldState, property_id: str, config: EstateConfig = DEFAULT_CONFIG
) -> WorldState:
    prop = state.find(property_id)
    if prop is None:
        return _reject(state, "purchase", f"no property {property_id!r}")
    if prop.is_owned:
        return _reject(state, "purchase", f"{property_id} already owned")
    if prop.district not in state.unlocked_districts:
        return _reject(state, "purchase", f"{prop.district.value} is locked")
    if state.money < prop.purchase_cost:
        return _reject(state, "purchase", f"cannot afford {prop.purchase_cost}")
    state = state.with_property(replace(prop, is_owned=True))
    return replace(
        state,
        money=state.money - prop.purchase_cost,
        xp=state.xp + config.xp_per_buy,
        reputation=economy.clamp_pct(state.reputation + config.buy_reputation),
    )


def set_rent_mode(
    state: WorldState,
    property_id: str,
    mode: RentMode,
    config: EstateConfig = DEFAULT_CONFIG,
) -> WorldState:
    """Switch rent mode. The current tenant, if any, is evicted."""
    prop = _owned(state, property_id)
    if prop is None:
        return _reject(state, "set_rent_mode", f"{property_id} not owned")
    if mode is RentMode.NONE or mode is prop.rent_mode:
        return _reject(state, "set_rent_mode", f"mode {mode.value} not selectable")
    if mode is RentMode.COMMERCIAL and state.level < config.commercial_min_level:
        return _reject(state, "set_rent_mode", f"commercial needs level {config.commercial_min_level}")
    return state.with_property(replace(prop.vacated(), rent_mode=mode))


def upgrade_amenity(
    state: WorldState,
    property_id: str,
    amenity_id: str,
    config: EstateConfig = DEFAULT_CONFIG,
) -> WorldState:
    prop = _owned(state, property_id)
    if prop is None:
        return _reject(state, "upgrade_amenity", f"{property_id} not owned")
    amenity = prop.amenity(amenity_id)
    if amenity is None:
        return _reject(state, "upgrade_amenity", f"no amenity {amenity_id!r}")
    if state.level < amenity.unlock_level:
        return _reject(state, "upgrade_amenity", f"{amenity.name} unlocks at level {amenity.unlock_level}")
    if amenity.level >= economy.amenity_ceiling(prop, config):
        return _reject(state, "upgrade_amenity", f"{amenity.name} at tier ceiling")
    cost = economy.upgrade_cost(amenity, config)
    if state.money < cost:
        return _reject(state, "upgrade_amenity", f"cannot afford {cost}")
    state = state.with_property(prop.with_amenity(replace(amenity, level=amenity.level + 1)))
    return replace(
        state,
        money=state.money - cost,
        xp=state.xp + math.floor(cost * config.xp_upgrade_multiplier),
        reputation=economy.clamp_pct(state.reputation + config.upgrade_reputation),
    )


def upgrade_tier(
    state: WorldState, property_id: str, config: EstateConfig = DEFAULT_CONFIG
) -> WorldState:
    prop = _owned(state, property_id)
    if prop is None:
        return _reject(state, "upgrade_tier", f"{property_id} not owned")
    if prop.tier >= 2:
        return _reject(state, "upgrade_tier", f"{property_id} already tier {prop.tier}")
    if state.money < config.tier_upgrade_cost:
        return _reject(state, "upgrade_tier", f"cannot afford {config.tier_upgrade_cost}")
    state = state.with_property(replace(prop, tier=2))
    return replace(
        state,
        money=state.money - config.tier_upgrade_cost,
        xp=state.xp + config.xp_per_tier_upgrade,
    )


def repair(
    state: WorldState, property_id: str, config: EstateConfig = DEFAULT_CONFIG
) -> WorldState:
    prop = _owned(state, property_id)
    if prop is None:
        return _reject(state, "repair", f"{property_id} not owned")
    if prop.condition >= 100:
        return _reject(state, "repair", f"{property_id} in perfect condition")
    cost = economy.repair_cost(prop, config)
    if state.money < cost:
        return _reject(state, "repair", f"cannot afford {cost}")
    state = state.with_property(replace(prop, condition=100.0))
    return replace(state, money=state.money - cost, xp=state.xp + config.xp_per_repair)


def acknowledge_level_up(state: WorldState) -> WorldState:
    """Dismiss the level-up banner so the clock can run again."""
    if not state.level_up_pending:
        return state
    return replace(state, level_up_pending=False, pending_rewards=())


def set_time_scale(state: WorldState, scale: float) -> WorldState:
    """Set simulation speed. 0 pauses; negative values are rejected."""
    if scale < 0:
        return _reject(state, "set_time_scale", f"negative scale {scale}")
    if scale == state.time_scale:
        return state
    return replace(state, time_scale=float(scale))
