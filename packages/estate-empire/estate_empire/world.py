"""World generation for a fresh game."""
from __future__ import annotations

import random

from estate_empire.config import DEFAULT_CONFIG, EstateConfig
from estate_empire.content import AMENITIES, DISTRICTS
from estate_empire.progression import unlocked_for
from estate_empire.types import Property, WorldState


def generate_plots(rng: random.Random, config: EstateConfig = DEFAULT_CONFIG) -> tuple[Property, ...]:
    """Every district's plots, in district order.

    Purchase cost is the district base plus a jitter in ``[0, plot_cost_jitter)``.
    """
    plots = []
    for district in DISTRICTS:
        for i in range(district.plot_count):
            jitter = rng.randrange(config.plot_cost_jitter) if config.plot_cost_jitter > 0 else 0
            plots.append(
                Property(
                    id=f"{district.name.value}-{i}",
                    district=district.name,
                    name=f"Plot {i + 1}",
                    purchase_cost=district.base_property_cost + jitter,
                    amenities=AMENITIES,
                )
            )
    return tuple(plots)


def new_game(config: EstateConfig = DEFAULT_CONFIG, rng: random.Random | None = None) -> WorldState:
    if rng is None:
        rng = random.Random()
    return WorldState(
        money=config.starting_money,
        reputation=config.starting_reputation,
        day=1,
        level=1,
        xp=0.0,
        xp_to_next_level=config.starting_xp_threshold,
        unlocked_districts=unlocked_for(1),
        time_scale=1.0,
        properties=generate_plots(rng, config),
    )
