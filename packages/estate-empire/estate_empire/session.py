"""GameSession - one running game: engine, save store, notices and UI flags.

Build sessions with the ``new_game`` / ``load_game`` factories. The
constructor only wires already-built parts together.
"""
from __future__ import annotations

import random
from typing import Callable

from estate_tick import Engine, SnapshotError
from loguru import logger

from estate_empire import actions, economy
from estate_empire.catalog import EventCatalog, default_catalog
from estate_empire.chronicle import Chronicle, Notice
from estate_empire.config import DEFAULT_CONFIG, EstateConfig
from estate_empire.simulation import DayReport, is_suspended, make_day_step
from estate_empire.snapshot import SaveStore, SlotMeta
from estate_empire.types import RentMode, WorldState
from estate_empire.world import new_game as generate_world


class GameSession:
    def __init__(
        self,
        state: WorldState,
        *,
        config: EstateConfig = DEFAULT_CONFIG,
        catalog: EventCatalog | None = None,
        store: SaveStore | None = None,
        slot: int | None = None,
        seed: int | None = None,
    ) -> None:
        self.config = config
        self.catalog = catalog if catalog is not None else default_catalog()
        self.store = store
        self.slot = slot
        self.chronicle = Chronicle(config.notice_limit)
        # Any blocking dialog (pause menu, property details) halts the clock.
        self.modal_open = False
        self._since_save = 0.0

        self.engine: Engine[WorldState] = Engine(
            state,
            make_day_step(self.catalog, config, on_report=self._record),
            base_interval=config.tick_interval,
            time_scale=lambda s: s.time_scale,
            seed=seed,
        )
        self.engine.add_guard(is_suspended)
        self.engine.add_guard(lambda _s: self.modal_open)
        self.engine.clock.reset(state.day - 1)

    @classmethod
    def new_game(
        cls,
        *,
        config: EstateConfig = DEFAULT_CONFIG,
        store: SaveStore | None = None,
        slot: int | None = None,
        seed: int | None = None,
        catalog: EventCatalog | None = None,
    ) -> GameSession:
        session = cls(
            generate_world(config, random.Random(seed)),
            config=config,
            catalog=catalog,
            store=store,
            slot=slot,
            seed=seed,
        )
        logger.info("New game started (slot {})", slot)
        return session

    @classmethod
    def load_game(
        cls,
        store: SaveStore,
        slot: int,
        *,
        config: EstateConfig = DEFAULT_CONFIG,
        seed: int | None = None,
        catalog: EventCatalog | None = None,
    ) -> GameSession:
        """Raises ``SnapshotError`` if the slot is empty or corrupt."""
        state = store.load(slot)
        return cls(state, config=config, catalog=catalog, store=store, slot=slot, seed=seed)

    @property
    def state(self) -> WorldState:
        return self.engine.state

    @property
    def paused(self) -> bool:
        return self.engine.suspended

    @property
    def cash_flow(self) -> int:
        return economy.daily_cash_flow(self.state, self.config)

    @property
    def notices(self) -> list[Notice]:
        return self.chronicle.query()

    # -- driving -----------------------------------------------------------

    def update(self, elapsed: float) -> int:
        """Feed wall-clock seconds. Fires due days and autosaves on interval."""
        fired = self.engine.update(elapsed)
        if self.store is not None and self.slot is not None:
            self._since_save += elapsed
            if self._since_save >= self.config.autosave_interval:
                self._since_save = 0.0
                self.store.save(self.slot, self.state)
        return fired

    def step(self) -> bool:
        return self.engine.step()

    def run(self, days: int) -> int:
        return self.engine.run(days)

    def _record(self, report: DayReport) -> None:
        if not report.ticked:
            return
        day = report.state.day
        for pid, amount in report.collections:
            self.chronicle.emit(day, "rent", f"Collected ${amount:.0f} rent", property_id=pid)
        for pid, tenant in report.departures:
            self.chronicle.emit(day, "departure", f"{tenant} moved out", property_id=pid)
        if report.levels_gained:
            self.chronicle.emit(
                day, "level_up", f"Reached level {report.state.level}",
                rewards=list(report.state.pending_rewards),
            )
        if report.event is not None:
            self.chronicle.emit(day, "event", report.event.title, event_id=report.event.id)

    # -- player actions ----------------------------------------------------

    def _apply(self, new_state: WorldState, kind: str, message: str) -> bool:
        if new_state is self.state:
            return False
        self.engine.commit(new_state)
        self.chronicle.emit(new_state.day, kind, message)
        return True

    def purchase(self, property_id: str) -> bool:
        return self._apply(
            actions.purchase(self.state, property_id, self.config),
            "purchase", f"Bought {property_id}",
        )

    def set_rent_mode(self, property_id: str, mode: RentMode) -> bool:
        return self._apply(
            actions.set_rent_mode(self.state, property_id, mode, self.config),
            "rent_mode", f"{property_id} now rented as {mode.value}",
        )

    def upgrade_amenity(self, property_id: str, amenity_id: str) -> bool:
        return self._apply(
            actions.upgrade_amenity(self.state, property_id, amenity_id, self.config),
            "upgrade", f"Upgraded {amenity_id} at {property_id}",
        )

    def upgrade_tier(self, property_id: str) -> bool:
        return self._apply(
            actions.upgrade_tier(self.state, property_id, self.config),
            "renovation", f"Renovated {property_id}",
        )

    def repair(self, property_id: str) -> bool:
        return self._apply(
            actions.repair(self.state, property_id, self.config),
            "repair", f"Repaired {property_id}",
        )

    def resolve_event(self, option_index: int) -> bool:
        event = self.state.active_event
        return self._apply(
            actions.resolve_event(self.state, option_index, self.engine.random),
            "resolution", f"Resolved {event.title}" if event is not None else "",
        )

    def acknowledge_level_up(self) -> bool:
        new_state = actions.acknowledge_level_up(self.state)
        if new_state is self.state:
            return False
        self.engine.commit(new_state)
        return True

    def set_time_scale(self, scale: float) -> bool:
        new_state = actions.set_time_scale(self.state, scale)
        if new_state is self.state:
            return False
        self.engine.commit(new_state)
        return True

    # -- persistence -------------------------------------------------------

    def _require_store(self) -> SaveStore:
        if self.store is None:
            raise ValueError("session has no save store")
        return self.store

    def save(self, slot: int | None = None) -> SlotMeta:
        store = self._require_store()
        slot = self.slot if slot is None else slot
        if slot is None:
            raise ValueError("no save slot selected")
        meta = store.save(slot, self.state)
        self.slot = slot
        self._since_save = 0.0
        self.chronicle.emit(self.state.day, "save", f"Saved to slot {slot}")
        return meta

    def load(self, slot: int) -> WorldState:
        """Replace the live world with a saved one.

        On ``SnapshotError`` the live world is left untouched and the error
        propagates.
        """
        store = self._require_store()
        try:
            state = store.load(slot)
        except SnapshotError:
            logger.warning("Load of slot {} failed; keeping current game", slot)
            raise
        self.engine.commit(state)
        self.engine.clock.reset(state.day - 1)
        self.slot = slot
        self.modal_open = False
        self._since_save = 0.0
        self.chronicle.clear()
        return state

    def on_day(self, callback: Callable[[WorldState], None]) -> None:
        """Register a listener called with every new day's state."""
        self.engine.on_tick(lambda state, _ctx: callback(state))
