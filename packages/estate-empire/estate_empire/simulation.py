"""Simulation engine - advances the world by one simulated day.

``simulate_day`` is a pure transformation of the previous ``WorldState``
into the next; every delta of the day lands in one new state object.
Tick order:

1. Passive XP when reputation is high
2. Per owned property, in collection order: charge upkeep, then (unless
   event-blocked) condition decay and the occupancy state machine
3. Reputation drift from average condition
4. Level-up cascade and district unlocks
5. Event injection
"""
from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Callable

from estate_tick import Step, TickContext
from loguru import logger

from estate_empire import economy
from estate_empire.catalog import EventCatalog, default_catalog
from estate_empire.config import DEFAULT_CONFIG, EstateConfig
from estate_empire.events import inject_event
from estate_empire.occupancy import decay_condition, reputation_drift, step_occupancy
from estate_empire.progression import apply_level_ups, level_rewards
from estate_empire.types import RandomEvent, WorldState


@dataclass(frozen=True)
class DayReport:
    """The new state plus what happened while producing it."""

    state: WorldState
    ticked: bool = False
    income: float = 0.0
    upkeep: float = 0.0
    collections: tuple[tuple[str, float], ...] = ()
    arrivals: tuple[tuple[str, str], ...] = ()
    departures: tuple[tuple[str, str], ...] = ()
    levels_gained: int = 0
    event: RandomEvent | None = None


def is_suspended(state: WorldState) -> bool:
    return (
        state.time_scale <= 0
        or state.active_event is not None
        or state.level_up_pending
    )


def simulate_day(
    state: WorldState,
    rng: random.Random,
    catalog: EventCatalog | None = None,
    config: EstateConfig = DEFAULT_CONFIG,
) -> DayReport:
    if is_suspended(state):
        return DayReport(state)
    if catalog is None:
        catalog = default_catalog()

    day = state.day + 1
    # Chances are rolled against the reputation the day started with.
    reputation = state.reputation
    money = state.money
    xp = state.xp
    rep_delta = 0.0
    income = upkeep = 0.0
    collections: list[tuple[str, float]] = []
    arrivals: list[tuple[str, str]] = []
    departures: list[tuple[str, str]] = []

    if reputation >= config.passive_xp_reputation:
        xp += config.passive_xp

    properties = []
    for prop in state.properties:
        if not prop.is_owned:
            properties.append(prop)
            continue
        cost = economy.upkeep(prop)
        money -= cost
        upkeep += cost
        if prop.blocked:
            properties.append(prop)
            continue

        prop = decay_condition(prop, rng, config)
        prop, occ = step_occupancy(prop, reputation, day, rng, config)
        money += occ.income
        income += occ.income
        xp += occ.xp
        rep_delta += occ.reputation
        if occ.collected:
            collections.append((prop.id, occ.income))
        if occ.arrived is not None and not occ.booked:
            arrivals.append((prop.id, occ.arrived))
        if occ.departed is not None:
            departures.append((prop.id, occ.departed))
        properties.append(prop)

    rep_delta += reputation_drift((p for p in properties if p.is_owned), config)

    next_state = replace(
        state,
        day=day,
        money=money,
        xp=xp,
        reputation=economy.clamp_pct(reputation + rep_delta),
        properties=tuple(properties),
    )

    next_state, gained = apply_level_ups(next_state, config)
    if gained:
        rewards: list[str] = []
        for level in range(state.level + 1, next_state.level + 1):
            rewards.extend(level_rewards(level, config))
        next_state = replace(next_state, level_up_pending=True, pending_rewards=tuple(rewards))
        logger.info("Day {}: reached level {}", day, next_state.level)

    next_state = inject_event(next_state, rng, catalog, config)

    logger.debug(
        "Day {}: income={:.2f} upkeep={:.2f} money={:.2f} reputation={:.1f}",
        day, income, upkeep, next_state.money, next_state.reputation,
    )
    return DayReport(
        state=next_state,
        ticked=True,
        income=income,
        upkeep=upkeep,
        collections=tuple(collections),
        arrivals=tuple(arrivals),
        departures=tuple(departures),
        levels_gained=gained,
        event=next_state.active_event,
    )


def advance(
    state: WorldState,
    ticks: int,
    rng: random.Random,
    catalog: EventCatalog | None = None,
    config: EstateConfig = DEFAULT_CONFIG,
) -> WorldState:
    """Run up to *ticks* days, stopping as soon as the world suspends."""
    if catalog is None:
        catalog = default_catalog()
    for _ in range(ticks):
        report = simulate_day(state, rng, catalog, config)
        if not report.ticked:
            break
        state = report.state
    return state


def make_day_step(
    catalog: EventCatalog | None = None,
    config: EstateConfig = DEFAULT_CONFIG,
    on_report: Callable[[DayReport], None] | None = None,
) -> Step[WorldState]:
    """Adapt ``simulate_day`` to the estate-tick step signature."""
    if catalog is None:
        catalog = default_catalog()

    def day_step(state: WorldState, ctx: TickContext) -> WorldState:
        report = simulate_day(state, ctx.random, catalog, config)
        if on_report is not None:
            on_report(report)
        return report.state

    return day_step
