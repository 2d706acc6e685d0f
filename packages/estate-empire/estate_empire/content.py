"""Static game content: districts, amenities, tenant names."""
from __future__ import annotations

from dataclasses import dataclass

from estate_empire.types import Amenity, District


@dataclass(frozen=True)
class DistrictDef:
    name: District
    description: str
    unlock_level: int
    base_property_cost: float
    plot_count: int = 9


DISTRICTS: tuple[DistrictDef, ...] = (
    DistrictDef(
        District.SUBURBS,
        "Quiet area, great for starters and long-term families.",
        unlock_level=1,
        base_property_cost=15000,
    ),
    DistrictDef(
        District.DOWNTOWN,
        "Bustling city center. High demand for hotels.",
        unlock_level=5,
        base_property_cost=65000,
    ),
    DistrictDef(
        District.FINANCIAL,
        "The big leagues. Massive commercial potential.",
        unlock_level=10,
        base_property_cost=200000,
    ),
)

AMENITIES: tuple[Amenity, ...] = (
    Amenity("f1", "Bed", base_cost=500, base_upkeep=2, base_comfort=5, unlock_level=1),
    Amenity("f2", "Internet", base_cost=200, base_upkeep=5, base_comfort=8, unlock_level=1),
    Amenity("f3", "Entertainment", base_cost=1200, base_upkeep=8, base_comfort=15, unlock_level=3),
    Amenity("f4", "Coffee Station", base_cost=800, base_upkeep=4, base_comfort=10, unlock_level=3),
    Amenity("f5", "Kitchenette", base_cost=5000, base_upkeep=20, base_comfort=30, unlock_level=5),
    Amenity("f6", "Home Gym", base_cost=3500, base_upkeep=15, base_comfort=25, unlock_level=6),
    Amenity("f7", "Hot Tub", base_cost=8000, base_upkeep=50, base_comfort=50, unlock_level=8),
    Amenity("f8", "Concierge", base_cost=25000, base_upkeep=200, base_comfort=100, unlock_level=12),
)

TENANT_NAMES: tuple[str, ...] = (
    "Rahul Sharma", "Priya Patel", "Amit Verma", "Sarah Johnson",
    "David Smith", "Anjali Gupta", "Vikram Singh", "Emily Davis",
    "Michael Chen", "Sofia Rodriguez", "James Wilson", "Lisa Chang",
)


def district_def(name: District) -> DistrictDef:
    for d in DISTRICTS:
        if d.name == name:
            return d
    raise KeyError(f"Unknown district {name!r}")


def amenity_def(amenity_id: str) -> Amenity | None:
    for a in AMENITIES:
        if a.id == amenity_id:
            return a
    return None
