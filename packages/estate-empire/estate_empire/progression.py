"""Progression model - experience, level-ups and district unlocks."""
from __future__ import annotations

import math
from dataclasses import replace

from estate_empire.config import DEFAULT_CONFIG, EstateConfig
from estate_empire.content import AMENITIES, DISTRICTS
from estate_empire.types import District, WorldState


def gain_xp(state: WorldState, amount: float) -> WorldState:
    if amount <= 0:
        return state
    return replace(state, xp=state.xp + amount)


def unlocked_for(level: int) -> frozenset[District]:
    return frozenset(d.name for d in DISTRICTS if level >= d.unlock_level)


def apply_level_ups(
    state: WorldState, config: EstateConfig = DEFAULT_CONFIG
) -> tuple[WorldState, int]:
    """Consume XP thresholds until ``xp < xp_to_next_level``.

    Returns the new state and the number of levels gained. Leftover XP
    carries over; each threshold grows by ``config.level_growth``.
    """
    if state.xp_to_next_level <= 0:
        raise ValueError(f"xp threshold must be positive, got {state.xp_to_next_level}")
    xp = state.xp
    threshold = state.xp_to_next_level
    level = state.level
    gained = 0
    while xp >= threshold:
        xp -= threshold
        level += 1
        gained += 1
        # Strictly increasing, so the loop ends for any finite xp.
        threshold = max(threshold + 1, math.floor(threshold * config.level_growth))
    if not gained:
        return state, 0
    return (
        replace(
            state,
            xp=xp,
            level=level,
            xp_to_next_level=threshold,
            unlocked_districts=state.unlocked_districts | unlocked_for(level),
        ),
        gained,
    )


def level_rewards(level: int, config: EstateConfig = DEFAULT_CONFIG) -> list[str]:
    """Human-readable list of what reaching *level* unlocks."""
    rewards = [f"District: {d.name.value}" for d in DISTRICTS if d.unlock_level == level]
    rewards += [f"Amenity: {a.name}" for a in AMENITIES if a.unlock_level == level]
    if level == config.commercial_min_level:
        rewards.append("Rent mode: Commercial")
    return rewards
