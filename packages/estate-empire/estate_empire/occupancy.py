"""Occupancy state machine - tenants arriving, paying and leaving.

Hotel mode is memoryless: every tick re-rolls whether a guest books the
night. Long-term and commercial modes are stateful: a vacant property
searches for a tenant, an occupied one pays every ``rent_period`` days and
may lose its tenant on any tick.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Iterable

from estate_empire import economy
from estate_empire.config import DEFAULT_CONFIG, EstateConfig
from estate_empire.content import TENANT_NAMES
from estate_empire.types import Property, RentMode


@dataclass(frozen=True)
class Occupancy:
    """What one property's tick contributed to the player's economy."""

    income: float = 0.0
    xp: float = 0.0
    reputation: float = 0.0
    collected: bool = False
    booked: bool = False
    arrived: str | None = None
    departed: str | None = None


_IDLE = Occupancy()


def decay_condition(
    prop: Property, rng: random.Random, config: EstateConfig = DEFAULT_CONFIG
) -> Property:
    if rng.random() < config.decay_chance:
        return replace(prop, condition=max(0.0, prop.condition - config.decay_amount))
    return prop


def step_hotel(
    prop: Property,
    reputation: float,
    rng: random.Random,
    config: EstateConfig = DEFAULT_CONFIG,
) -> tuple[Property, Occupancy]:
    c = economy.comfort(prop)
    chance = (reputation / 100) * (
        config.hotel_base_occupancy + c / config.hotel_comfort_divisor
    )
    if rng.random() < chance:
        guest = rng.choice(TENANT_NAMES)
        income = economy.hotel_nightly_rate(prop, config)
        return (
            replace(prop, tenant_name=guest, tenant_stay_duration=1),
            Occupancy(income=income, booked=True, arrived=guest),
        )
    return prop.vacated(), _IDLE


def step_lease(
    prop: Property,
    reputation: float,
    day: int,
    rng: random.Random,
    config: EstateConfig = DEFAULT_CONFIG,
) -> tuple[Property, Occupancy]:
    """Advance a long-term or commercial lease by one day.

    *day* is the day being simulated (already incremented).
    """
    if not prop.occupied:
        if rng.random() < (reputation / 100) * config.tenant_search_rate:
            tenant = rng.choice(TENANT_NAMES)
            return (
                replace(prop, tenant_name=tenant, tenant_stay_duration=0, last_rent_paid_day=day),
                Occupancy(arrived=tenant),
            )
        return prop, _IDLE

    prop = replace(prop, tenant_stay_duration=prop.tenant_stay_duration + 1)
    income = xp = rep = 0.0
    collected = False
    if day - prop.last_rent_paid_day >= config.rent_period:
        income, rep = economy.collect_weekly_rent(prop, config)
        xp = config.xp_per_rent
        collected = True
        prop = replace(prop, last_rent_paid_day=day)

    departed = None
    leave_chance = (
        config.leave_chance_poor if prop.condition < config.poor_condition else config.leave_chance
    )
    if rng.random() < leave_chance:
        departed = prop.tenant_name
        prop = prop.vacated()
        rep -= config.departure_reputation

    return prop, Occupancy(
        income=income, xp=xp, reputation=rep, collected=collected, departed=departed
    )


def step_occupancy(
    prop: Property,
    reputation: float,
    day: int,
    rng: random.Random,
    config: EstateConfig = DEFAULT_CONFIG,
) -> tuple[Property, Occupancy]:
    if prop.rent_mode is RentMode.HOTEL:
        return step_hotel(prop, reputation, rng, config)
    if prop.rent_mode in (RentMode.LONG_TERM, RentMode.COMMERCIAL):
        return step_lease(prop, reputation, day, rng, config)
    return prop, _IDLE


def reputation_drift(
    owned: Iterable[Property], config: EstateConfig = DEFAULT_CONFIG
) -> float:
    """Reputation change from the average condition of owned properties."""
    conditions = [p.condition for p in owned]
    if not conditions:
        return 0.0
    avg = sum(conditions) / len(conditions)
    if avg > config.drift_high:
        return config.drift_gain
    if avg < config.drift_low:
        return -config.drift_loss
    return 0.0
