"""Economy model - stateless pricing and cash-flow functions.

Nothing here touches randomness or mutates state. Money amounts that the
player pays (upgrades, repairs) are floored to whole units; rent income is
left fractional.
"""
from __future__ import annotations

import math

from estate_empire.config import DEFAULT_CONFIG, EstateConfig
from estate_empire.types import Amenity, Property, RentMode, WorldState


def clamp_pct(value: float) -> float:
    """Clamp to the [0, 100] range shared by reputation and condition."""
    return max(0.0, min(100.0, value))


def upkeep(prop: Property) -> float:
    return sum(a.level * a.base_upkeep for a in prop.amenities)


def comfort(prop: Property) -> float:
    return sum(a.level * a.base_comfort for a in prop.amenities)


def hotel_nightly_rate(prop: Property, config: EstateConfig = DEFAULT_CONFIG) -> float:
    """One night's rent, already scaled by condition."""
    base = config.hotel_base + comfort(prop) * config.hotel_comfort
    return base * (prop.condition / 100)


def weekly_rent(prop: Property, config: EstateConfig = DEFAULT_CONFIG) -> float:
    """Nominal weekly rent for long-term/commercial mode, scaled by condition."""
    if prop.rent_mode is RentMode.COMMERCIAL:
        base, per_comfort = config.commercial_base, config.commercial_comfort
    elif prop.rent_mode is RentMode.LONG_TERM:
        base, per_comfort = config.long_term_base, config.long_term_comfort
    else:
        return 0.0
    return (base + comfort(prop) * per_comfort) * (prop.condition / 100)


def collect_weekly_rent(
    prop: Property, config: EstateConfig = DEFAULT_CONFIG
) -> tuple[float, float]:
    """Return ``(income, reputation_delta)`` for one weekly collection.

    Below the poor-condition threshold income drops to a fraction of the
    nominal value and the collection costs reputation.
    """
    income = weekly_rent(prop, config)
    if prop.condition < config.poor_condition:
        return income * config.poor_condition_income, -config.poor_condition_reputation
    return income, 0.0


def amenity_ceiling(prop: Property, config: EstateConfig = DEFAULT_CONFIG) -> int:
    return config.amenity_ceiling(prop.tier)


def upgrade_cost(amenity: Amenity, config: EstateConfig = DEFAULT_CONFIG) -> float:
    return math.floor(amenity.base_cost * config.upgrade_cost_growth ** amenity.level)


def repair_cost(prop: Property, config: EstateConfig = DEFAULT_CONFIG) -> float:
    return math.floor((100 - prop.condition) * config.repair_cost_per_unit)


def expected_daily_income(prop: Property, config: EstateConfig = DEFAULT_CONFIG) -> float:
    """Average income per day for an owned, unblocked property.

    Weekly modes are spread over the rent period; hotels assume the
    configured average occupancy. Condition is ignored, matching the HUD.
    """
    if not prop.is_owned or prop.blocked:
        return 0.0
    c = comfort(prop)
    if prop.rent_mode is RentMode.LONG_TERM:
        return (config.long_term_base + c * config.long_term_comfort) / config.rent_period
    if prop.rent_mode is RentMode.COMMERCIAL:
        return (config.commercial_base + c * config.commercial_comfort) / config.rent_period
    if prop.rent_mode is RentMode.HOTEL:
        return (config.hotel_base + c * config.hotel_comfort) * config.hotel_expected_occupancy
    return 0.0


def daily_cash_flow(state: WorldState, config: EstateConfig = DEFAULT_CONFIG) -> int:
    """Projected net money per day for the HUD.

    Blocked properties contribute their upkeep but no income.
    """
    income = 0.0
    expense = 0.0
    for prop in state.owned():
        expense += upkeep(prop)
        income += expected_daily_income(prop, config)
    return math.floor(income - expense)
