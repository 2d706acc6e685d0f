"""Balancing configuration for the estate simulation."""
from __future__ import annotations

import dataclasses
import math
import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Raised when tuning values are unreadable, unknown, mistyped or out of range."""


# Annotation string -> accepted runtime types (TOML ints are valid floats).
_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "float": (int, float),
    "int": (int,),
}

_PROBABILITIES = frozenset({
    "poor_condition_income",
    "hotel_expected_occupancy",
    "hotel_base_occupancy",
    "tenant_search_rate",
    "leave_chance",
    "leave_chance_poor",
    "decay_chance",
    "global_event_chance",
    "local_event_chance",
})

_PERCENTAGES = frozenset({
    "starting_reputation",
    "poor_condition",
    "drift_high",
    "drift_low",
    "passive_xp_reputation",
})

_POSITIVE = frozenset({
    "hotel_comfort_divisor",
    "rent_period",
    "tier1_amenity_ceiling",
    "tier2_amenity_ceiling",
    "commercial_min_level",
    "tick_interval",
    "autosave_interval",
})


@dataclass(frozen=True)
class EstateConfig:
    """Immutable balancing constants.

    Attributes:
        starting_money: Balance of a fresh game.
        starting_reputation: Reputation of a fresh game (0-100).
        starting_xp_threshold: XP needed for the first level-up.
        level_growth: Multiplier applied to the XP threshold per level.
        xp_per_buy / xp_per_rent / xp_per_repair / xp_per_tier_upgrade:
            Flat XP rewards per action.
        xp_upgrade_multiplier: XP per unit of money spent on amenities.
        passive_xp / passive_xp_reputation: XP trickle per tick while
            reputation is at or above the threshold.
        repair_cost_per_unit: Money per missing condition point.
        tier_upgrade_cost: Flat cost of renovating tier 1 to tier 2.
        tier1_amenity_ceiling / tier2_amenity_ceiling: Max amenity level.
        upgrade_cost_growth: Exponential base of amenity upgrade costs.
        rent_period: Days between long-term/commercial collections.
        tick_interval: Wall-clock seconds per simulated day at scale 1.
        autosave_interval: Wall-clock seconds between autosaves.
    """

    # Economy
    starting_money: float = 50000.0
    starting_reputation: float = 100.0
    repair_cost_per_unit: float = 30.0
    tier_upgrade_cost: float = 15000.0
    tier1_amenity_ceiling: int = 5
    tier2_amenity_ceiling: int = 10
    upgrade_cost_growth: float = 1.5
    buy_reputation: float = 2.0
    upgrade_reputation: float = 1.0

    # Rent
    long_term_base: float = 200.0
    long_term_comfort: float = 5.0
    hotel_base: float = 50.0
    hotel_comfort: float = 2.0
    commercial_base: float = 600.0
    commercial_comfort: float = 15.0
    commercial_min_level: int = 5
    rent_period: int = 7
    poor_condition: float = 40.0
    poor_condition_income: float = 0.2
    poor_condition_reputation: float = 2.0
    hotel_expected_occupancy: float = 0.5

    # Occupancy
    hotel_base_occupancy: float = 0.4
    hotel_comfort_divisor: float = 200.0
    tenant_search_rate: float = 0.3
    leave_chance: float = 0.01
    leave_chance_poor: float = 0.2
    departure_reputation: float = 5.0
    decay_chance: float = 0.05
    decay_amount: float = 1.0
    drift_high: float = 80.0
    drift_gain: float = 0.2
    drift_low: float = 50.0
    drift_loss: float = 1.5

    # Progression
    starting_xp_threshold: float = 1000.0
    level_growth: float = 1.5
    xp_per_buy: float = 100.0
    xp_per_rent: float = 20.0
    xp_per_repair: float = 15.0
    xp_per_tier_upgrade: float = 500.0
    xp_upgrade_multiplier: float = 0.05
    passive_xp: float = 10.0
    passive_xp_reputation: float = 90.0

    # Events
    global_event_chance: float = 0.03
    global_event_min_day: int = 5
    local_event_chance: float = 0.005

    # World and pacing
    plot_cost_jitter: int = 5000
    tick_interval: float = 5.0
    autosave_interval: float = 5.0
    notice_limit: int = 5

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            allowed = _FIELD_TYPES[f.type]
            if isinstance(value, bool) or not isinstance(value, allowed):
                raise ConfigError(f"{f.name} must be {f.type}, got {value!r}")
            if not math.isfinite(value):
                raise ConfigError(f"{f.name} must be finite, got {value!r}")
            if f.name in _PROBABILITIES:
                low, high = 0.0, 1.0
            elif f.name in _PERCENTAGES:
                low, high = 0.0, 100.0
            else:
                low, high = 0.0, math.inf
            if not low <= value <= high:
                raise ConfigError(f"{f.name} must be in [{low}, {high}], got {value!r}")
            if f.name in _POSITIVE and value <= 0:
                raise ConfigError(f"{f.name} must be positive, got {value!r}")

        if self.level_growth <= 1:
            raise ConfigError("level_growth must be greater than 1")
        if self.upgrade_cost_growth < 1:
            raise ConfigError("upgrade_cost_growth must be at least 1")
        if self.starting_xp_threshold < 1:
            raise ConfigError("starting_xp_threshold must be at least 1")
        if self.tier2_amenity_ceiling < self.tier1_amenity_ceiling:
            raise ConfigError("tier2_amenity_ceiling must not be below tier1_amenity_ceiling")
        if self.drift_low > self.drift_high:
            raise ConfigError("drift_low must not exceed drift_high")

    def amenity_ceiling(self, tier: int) -> int:
        return self.tier1_amenity_ceiling if tier <= 1 else self.tier2_amenity_ceiling


DEFAULT_CONFIG = EstateConfig()


def load_config(path: str | Path) -> EstateConfig:
    """Read the ``[estate]`` table of a TOML file over the defaults.

    Missing keys keep their default. Unknown keys, mistyped values and
    out-of-range values raise ``ConfigError``.
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Cannot read tuning file {path}: {exc}") from exc

    table = data.get("estate", {})
    if not isinstance(table, dict):
        raise ConfigError(f"{path}: [estate] must be a table")

    known = {f.name for f in dataclasses.fields(EstateConfig)}
    unknown = sorted(set(table) - known)
    if unknown:
        raise ConfigError(f"{path}: unknown settings {unknown}")
    return dataclasses.replace(DEFAULT_CONFIG, **table)
