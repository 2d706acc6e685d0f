"""Random event subsystem - injection rolls and player resolution.

A world is either idle or awaiting a choice. ``inject_event`` rolls for a
global event first and only scans for a local one when no global event
fired; ``resolve_event`` applies the chosen option and returns the world
to idle.
"""
from __future__ import annotations

import random
from dataclasses import replace

from loguru import logger

from estate_empire.catalog import EventCatalog
from estate_empire.config import DEFAULT_CONFIG, EstateConfig
from estate_empire.effects import apply_effects
from estate_empire.types import Property, RandomEvent, WorldState


def _eligible_for_local(prop: Property) -> bool:
    return prop.is_owned and prop.occupied and not prop.blocked


def roll_global_event(
    state: WorldState,
    rng: random.Random,
    catalog: EventCatalog,
    config: EstateConfig = DEFAULT_CONFIG,
) -> RandomEvent | None:
    if state.active_event is not None or state.day <= config.global_event_min_day:
        return None
    if rng.random() >= config.global_event_chance:
        return None
    events = catalog.global_events()
    if not events:
        return None
    return rng.choice(events)


def roll_local_event(
    state: WorldState,
    rng: random.Random,
    catalog: EventCatalog,
    config: EstateConfig = DEFAULT_CONFIG,
) -> RandomEvent | None:
    """Scan properties in collection order; the first hit wins."""
    if state.active_event is not None:
        return None
    for prop in state.properties:
        if not _eligible_for_local(prop):
            continue
        if rng.random() < config.local_event_chance:
            events = catalog.local_events(prop)
            if not events:
                return None
            return rng.choice(events)
    return None


def activate_event(state: WorldState, event: RandomEvent) -> WorldState:
    """Make *event* the pending event, blocking its target if local."""
    if state.active_event is not None:
        return state
    if event.target_property_id is not None:
        prop = state.find(event.target_property_id)
        if prop is None or prop.blocked:
            return state
        state = state.with_property(replace(prop, active_local_event_id=event.id))
    return replace(state, active_event=event)


def inject_event(
    state: WorldState,
    rng: random.Random,
    catalog: EventCatalog,
    config: EstateConfig = DEFAULT_CONFIG,
) -> WorldState:
    if state.active_event is not None:
        return state
    event = roll_global_event(state, rng, catalog, config)
    if event is None:
        event = roll_local_event(state, rng, catalog, config)
    if event is None:
        return state
    logger.info("Day {}: event {!r} ({})", state.day, event.title, event.scope.value)
    return activate_event(state, event)


def resolve_event(state: WorldState, option_index: int, rng: random.Random) -> WorldState:
    """Apply the chosen option of the pending event and clear it.

    A local event's block on its property is always released, even when
    the option leaves the underlying damage in place.
    """
    event = state.active_event
    if event is None or not 0 <= option_index < len(event.options):
        return state
    option = event.options[option_index]
    target = event.target_property_id
    state = apply_effects(state, option.effects, target, rng)
    if target is not None:
        prop = state.find(target)
        if prop is not None and prop.active_local_event_id == event.id:
            state = state.with_property(replace(prop, active_local_event_id=None))
    logger.info("Event {!r} resolved with {!r}", event.title, option.label)
    return replace(state, active_event=None)
