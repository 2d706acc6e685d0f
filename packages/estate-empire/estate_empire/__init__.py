"""estate-empire - A real-estate tycoon simulation on the estate-tick driver."""

from estate_empire.catalog import EventCatalog, EventTemplate, default_catalog
from estate_empire.chronicle import Chronicle, Notice
from estate_empire.config import DEFAULT_CONFIG, ConfigError, EstateConfig, load_config
from estate_empire.economy import daily_cash_flow
from estate_empire.session import GameSession
from estate_empire.simulation import DayReport, advance, is_suspended, simulate_day
from estate_empire.snapshot import SaveStore, SlotMeta, state_from_dict, state_to_dict
from estate_empire.types import (
    Amenity,
    District,
    EventOption,
    EventScope,
    Property,
    RandomEvent,
    RentMode,
    WorldState,
)
from estate_empire.world import new_game

__all__ = [
    "Amenity",
    "Chronicle",
    "ConfigError",
    "DEFAULT_CONFIG",
    "DayReport",
    "District",
    "EstateConfig",
    "EventCatalog",
    "EventOption",
    "EventScope",
    "EventTemplate",
    "GameSession",
    "Notice",
    "Property",
    "RandomEvent",
    "RentMode",
    "SaveStore",
    "SlotMeta",
    "WorldState",
    "advance",
    "daily_cash_flow",
    "default_catalog",
    "is_suspended",
    "load_config",
    "new_game",
    "simulate_day",
    "state_from_dict",
    "state_to_dict",
]
