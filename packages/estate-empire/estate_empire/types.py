"""Core data types for the estate simulation.

Every type here is a frozen dataclass. The engine never mutates a state in
place; each tick and each player action produces a new ``WorldState`` via
``dataclasses.replace`` so readers always see a complete snapshot.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from estate_empire.effects import Effect


class District(str, Enum):
    SUBURBS = "Suburbs"
    DOWNTOWN = "Downtown"
    FINANCIAL = "Financial District"


class RentMode(str, Enum):
    NONE = "none"
    LONG_TERM = "long_term"
    HOTEL = "hotel"
    COMMERCIAL = "commercial"


class EventScope(str, Enum):
    GLOBAL = "global"
    LOCAL = "local"


@dataclass(frozen=True)
class Amenity:
    """Amenity definition joined with its installed level (0 = not installed)."""

    id: str
    name: str
    base_cost: float
    base_upkeep: float
    base_comfort: float
    unlock_level: int
    level: int = 0

    @property
    def installed(self) -> bool:
        return self.level > 0


@dataclass(frozen=True)
class Property:
    id: str
    district: District
    name: str
    purchase_cost: float
    amenities: tuple[Amenity, ...] = ()
    is_owned: bool = False
    condition: float = 100.0
    tier: int = 1
    rent_mode: RentMode = RentMode.NONE
    tenant_name: str | None = None
    tenant_stay_duration: int = 0
    last_rent_paid_day: int = 0
    active_local_event_id: str | None = None

    @property
    def occupied(self) -> bool:
        return self.tenant_name is not None

    @property
    def blocked(self) -> bool:
        """True while a local event holds this property."""
        return self.active_local_event_id is not None

    def amenity(self, amenity_id: str) -> Amenity | None:
        for a in self.amenities:
            if a.id == amenity_id:
                return a
        return None

    def with_amenity(self, updated: Amenity) -> Property:
        return replace(
            self,
            amenities=tuple(updated if a.id == updated.id else a for a in self.amenities),
        )

    def vacated(self) -> Property:
        return replace(self, tenant_name=None, tenant_stay_duration=0)


@dataclass(frozen=True)
class EventOption:
    """One player choice. ``cost`` and ``risk`` are display hints only."""

    label: str
    effects: tuple[Effect, ...] = ()
    description: str = ""
    cost: float | None = None
    risk: str | None = None


@dataclass(frozen=True)
class RandomEvent:
    id: str
    scope: EventScope
    title: str
    description: str
    options: tuple[EventOption, ...]
    target_property_id: str | None = None

    def __post_init__(self) -> None:
        if (self.scope is EventScope.LOCAL) != (self.target_property_id is not None):
            raise ValueError(
                f"Event {self.id!r}: target_property_id is required for local "
                "events and forbidden for global ones"
            )


@dataclass(frozen=True)
class WorldState:
    money: float = 0.0
    reputation: float = 100.0
    day: int = 1
    level: int = 1
    xp: float = 0.0
    xp_to_next_level: float = 1000.0
    unlocked_districts: frozenset[District] = frozenset({District.SUBURBS})
    time_scale: float = 1.0
    properties: tuple[Property, ...] = ()
    active_event: RandomEvent | None = None
    # Transient UI flag: a level-up banner waiting for acknowledgement.
    level_up_pending: bool = False
    pending_rewards: tuple[str, ...] = ()

    def find(self, property_id: str) -> Property | None:
        for p in self.properties:
            if p.id == property_id:
                return p
        return None

    def owned(self) -> Iterator[Property]:
        return (p for p in self.properties if p.is_owned)

    def with_property(self, updated: Property) -> WorldState:
        return replace(
            self,
            properties=tuple(updated if p.id == updated.id else p for p in self.properties),
        )
