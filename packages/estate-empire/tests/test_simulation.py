"""Tests for the daily simulation step."""

import random
from dataclasses import replace

import pytest

from estate_empire.actions import acknowledge_level_up, purchase, repair, set_rent_mode
from estate_empire.catalog import default_catalog
from estate_empire.content import AMENITIES
from estate_empire.events import resolve_event
from estate_empire.simulation import advance, is_suspended, make_day_step, simulate_day
from estate_empire.types import District, EventScope, RentMode
from estate_empire.world import new_game
from estate_tick import Engine
from loguru import logger


def with_bed(prop, level=1):
    return prop.with_amenity(replace(AMENITIES[0], level=level))


class TestSuspension:
    def test_paused_world_does_not_tick(self, make_state, scripted):
        state = make_state(time_scale=0.0)
        report = simulate_day(state, scripted())
        assert report.ticked is False
        assert report.state is state

    def test_pending_event_suspends(self, make_state, scripted):
        state = make_state(day=6)
        state = simulate_day(state, scripted([0.0])).state
        assert state.active_event is not None
        assert is_suspended(state)
        assert simulate_day(state, scripted()).state is state

    def test_level_up_banner_suspends(self, make_state, scripted):
        state = make_state(level_up_pending=True)
        assert is_suspended(state)
        assert simulate_day(state, scripted()).state is state

    def test_running_world_not_suspended(self, make_state):
        assert not is_suspended(make_state())


class TestDayBasics:
    def test_day_advances_and_passive_xp(self, make_state, scripted):
        state = simulate_day(make_state(day=1), scripted()).state
        assert state.day == 2
        assert state.xp == 10

    def test_no_passive_xp_below_threshold(self, make_state, scripted):
        state = simulate_day(make_state(reputation=89.0), scripted()).state
        assert state.xp == 0

    def test_unowned_plots_are_untouched(self, make_property, make_state, scripted):
        plot = with_bed(make_property(is_owned=False, rent_mode=RentMode.NONE))
        state = make_state(plot)
        after = simulate_day(state, scripted(default=0.0)).state
        assert after.properties[0] is plot
        assert after.money == 1000

    def test_upkeep_charged_every_day(self, make_property, make_state, scripted):
        prop = with_bed(make_property(rent_mode=RentMode.NONE), level=3)
        state = simulate_day(make_state(prop), scripted()).state
        assert state.money == pytest.approx(1000 - 6)

    def test_money_may_go_negative(self, make_property, make_state, scripted):
        prop = with_bed(make_property(rent_mode=RentMode.NONE))
        state = simulate_day(make_state(prop, money=0.0), scripted()).state
        assert state.money == pytest.approx(-2)

    def test_condition_decays_on_hit(self, make_property, make_state, scripted):
        prop = make_property(rent_mode=RentMode.NONE)
        state = simulate_day(make_state(prop), scripted([0.0])).state
        assert state.properties[0].condition == 99


class TestLeases:
    def test_weekly_rent_collected_on_due_day(self, make_property, make_state, scripted):
        prop = make_property(tenant_name="Ann", last_rent_paid_day=1)
        report = simulate_day(make_state(prop, day=7), scripted())
        state = report.state
        assert state.day == 8
        assert state.money == pytest.approx(1200)
        assert state.xp == 10 + 20
        assert state.properties[0].last_rent_paid_day == 8
        assert report.collections == (("Suburbs-0", pytest.approx(200)),)

    def test_rent_not_collected_early(self, make_property, make_state, scripted):
        prop = make_property(tenant_name="Ann", last_rent_paid_day=2)
        state = simulate_day(make_state(prop, day=7), scripted()).state
        assert state.money == 1000
        assert state.properties[0].tenant_stay_duration == 1

    def test_poor_condition_penalty(self, make_property, make_state, scripted):
        prop = make_property(tenant_name="Ann", last_rent_paid_day=1, condition=30.0)
        state = simulate_day(make_state(prop, day=7), scripted()).state
        assert state.money == pytest.approx(1000 + 200 * 0.3 * 0.2)
        # -2 collection penalty, -1.5 drift for poor average condition
        assert state.reputation == pytest.approx(96.5)

    def test_commercial_rent(self, make_property, make_state, scripted):
        prop = make_property(
            rent_mode=RentMode.COMMERCIAL, tenant_name="Ann", last_rent_paid_day=1
        )
        state = simulate_day(make_state(prop, day=7), scripted()).state
        assert state.money == pytest.approx(1600)

    def test_vacant_property_finds_tenant(self, make_property, make_state, scripted):
        prop = make_property()
        report = simulate_day(make_state(prop, day=3), scripted([0.999, 0.0]))
        found = report.state.properties[0]
        assert found.tenant_name is not None
        assert found.tenant_stay_duration == 0
        assert found.last_rent_paid_day == 4
        assert report.arrivals == (("Suburbs-0", found.tenant_name),)

    def test_tenant_departure_costs_reputation(self, make_property, make_state, scripted):
        prop = make_property(tenant_name="Ann", last_rent_paid_day=1)
        report = simulate_day(make_state(prop, day=2), scripted([0.999, 0.0]))
        assert report.state.properties[0].tenant_name is None
        assert report.state.properties[0].tenant_stay_duration == 0
        assert report.state.reputation == pytest.approx(95.2)
        assert report.departures == (("Suburbs-0", "Ann"),)

    def test_chances_use_start_of_day_reputation(self, make_property, make_state, scripted):
        # Departure of the first tenant must not lower the second search roll.
        leaving = make_property("a", tenant_name="Ann", last_rent_paid_day=1)
        vacant = make_property("b")
        state = make_state(leaving, vacant, day=2)
        # decay a, leave a, decay b, search b (0.29 < 1.0 * 0.3)
        state = simulate_day(state, scripted([0.999, 0.0, 0.999, 0.29])).state
        assert state.find("b").tenant_name is not None


class TestHotel:
    def test_booked_night_pays(self, make_property, make_state, scripted):
        prop = with_bed(make_property(rent_mode=RentMode.HOTEL))
        report = simulate_day(make_state(prop), scripted([0.999, 0.0]))
        assert report.state.properties[0].tenant_name is not None
        assert report.state.money == pytest.approx(1000 + 60 - 2)

    def test_unbooked_night_clears_guest(self, make_property, make_state, scripted):
        prop = make_property(rent_mode=RentMode.HOTEL, tenant_name="Ann")
        state = simulate_day(make_state(prop), scripted()).state
        assert state.properties[0].tenant_name is None
        assert state.money == 1000


class TestBlockedProperties:
    def test_blocked_property_pays_upkeep_only(self, make_property, make_state, scripted):
        prop = with_bed(make_property(tenant_name="Ann", last_rent_paid_day=0))
        prop = replace(prop, active_local_event_id="pipe_Suburbs-0")
        rng = scripted([0.0, 0.0])
        state = simulate_day(make_state(prop, day=2), rng).state
        after = state.properties[0]
        assert state.money == pytest.approx(998)
        assert after.condition == 100
        assert after.tenant_name == "Ann"
        assert after.tenant_stay_duration == 0
        # Neither decay nor occupancy consumed a draw.
        assert rng.draws == [0.0, 0.0]


class TestReputation:
    def test_drift_up_when_well_kept(self, make_property, make_state, scripted):
        prop = make_property(rent_mode=RentMode.NONE)
        state = simulate_day(make_state(prop, reputation=50.0), scripted()).state
        assert state.reputation == pytest.approx(50.2)

    def test_drift_down_when_run_down(self, make_property, make_state, scripted):
        prop = make_property(rent_mode=RentMode.NONE, condition=20.0)
        state = simulate_day(make_state(prop, reputation=50.0), scripted()).state
        assert state.reputation == pytest.approx(48.5)

    def test_reputation_clamped_at_zero(self, make_property, make_state, scripted):
        prop = make_property(tenant_name="Ann", condition=10.0, last_rent_paid_day=1)
        state = simulate_day(make_state(prop, reputation=1.0, day=7), scripted()).state
        assert state.reputation == 0


class TestLevelUps:
    def test_cascade_through_several_levels(self, make_state, scripted):
        report = simulate_day(make_state(xp=2490.0), scripted())
        state = report.state
        assert report.levels_gained == 2
        assert state.level == 3
        assert state.xp == 0
        assert state.xp_to_next_level == 2250
        assert state.level_up_pending
        assert "Amenity: Entertainment" in state.pending_rewards

    def test_district_unlocks_on_level(self, make_state, scripted):
        state = make_state(level=4, xp=3365.0, xp_to_next_level=3375.0)
        state = simulate_day(state, scripted()).state
        assert state.level == 5
        assert District.DOWNTOWN in state.unlocked_districts
        assert District.FINANCIAL not in state.unlocked_districts


class TestEventInjection:
    def test_no_global_event_before_day_six(self, make_state, scripted):
        state = simulate_day(make_state(day=4), scripted([0.0])).state
        assert state.day == 5
        assert state.active_event is None

    def test_global_event_fires(self, make_state, scripted):
        report = simulate_day(make_state(day=5), scripted([0.0]))
        assert report.event is not None
        assert report.event.scope is EventScope.GLOBAL
        assert report.event.id in {"heatwave", "market_crash", "tax_audit", "celebrity"}

    def test_local_event_blocks_target(self, make_property, make_state, scripted):
        prop = make_property(tenant_name="Ann", last_rent_paid_day=2)
        state = simulate_day(make_state(prop, day=2), scripted([0.999, 0.999, 0.0])).state
        event = state.active_event
        assert event is not None
        assert event.scope is EventScope.LOCAL
        assert event.target_property_id == "Suburbs-0"
        assert state.properties[0].active_local_event_id == event.id

    def test_at_most_one_local_event_per_day(self, make_property, make_state, scripted):
        a = make_property("a", tenant_name="Ann", last_rent_paid_day=2)
        b = make_property("b", tenant_name="Bob", last_rent_paid_day=2)
        rng = scripted([0.999] * 4 + [0.0, 0.0])
        state = simulate_day(make_state(a, b, day=2), rng).state
        assert state.find("a").blocked
        assert not state.find("b").blocked

    def test_vacant_properties_never_host_local_events(self, make_property, make_state, scripted):
        prop = make_property(rent_mode=RentMode.NONE)
        state = simulate_day(make_state(prop, day=2), scripted(default=0.0)).state
        assert state.active_event is None

    def test_resolution_releases_block(self, make_property, make_state, scripted):
        prop = make_property(tenant_name="Ann", last_rent_paid_day=2)
        state = simulate_day(make_state(prop, day=2), scripted([0.999, 0.999, 0.0])).state
        state = resolve_event(state, 0, scripted())
        assert state.active_event is None
        assert not state.properties[0].blocked
        assert not is_suspended(state)


class TestDriving:
    def test_advance_is_deterministic_for_a_seed(self):
        def play(seed):
            rng = random.Random(seed)
            return advance(new_game(rng=rng), 30, rng)

        assert play(7) == play(7)

    def test_advance_stops_when_suspended(self, make_state, scripted):
        state = advance(make_state(day=5), 10, scripted([0.0]))
        assert state.day == 6
        assert state.active_event is not None

    def test_engine_drives_days(self, make_state):
        state = make_state(day=1)
        engine = Engine(state, make_day_step(default_catalog()), time_scale=lambda s: s.time_scale, seed=1)
        engine.add_guard(is_suspended)
        assert engine.run(3) == 3
        assert engine.state.day == 4

    def test_engine_respects_pause(self, make_state):
        engine = Engine(make_state(time_scale=0.0), make_day_step(), time_scale=lambda s: s.time_scale, seed=1)
        assert engine.run(3) == 0

    def test_day_step_reports(self, make_state):
        reports = []
        engine = Engine(make_state(), make_day_step(on_report=reports.append), seed=1)
        engine.step()
        assert len(reports) == 1
        assert reports[0].ticked


def _play(state, rng):
    """One day of random player input."""
    if state.active_event is not None:
        return resolve_event(state, rng.randrange(len(state.active_event.options)), rng)
    if state.level_up_pending:
        return acknowledge_level_up(state)
    shoppable = [
        p for p in state.properties
        if not p.is_owned and p.district in state.unlocked_districts and p.purchase_cost <= state.money
    ]
    if shoppable and rng.random() < 0.3:
        state = purchase(state, rng.choice(shoppable).id)
    owned = list(state.owned())
    if owned:
        prop = rng.choice(owned)
        roll = rng.random()
        if roll < 0.1:
            state = set_rent_mode(state, prop.id, rng.choice([RentMode.LONG_TERM, RentMode.HOTEL, RentMode.COMMERCIAL]))
        elif roll < 0.15:
            state = repair(state, prop.id)
    return state


@pytest.mark.parametrize("seed", range(20))
def test_long_run_holds_world_invariants(seed):
    rng = random.Random(seed)
    state = new_game(rng=rng)
    for _ in range(1500):
        state = _play(state, rng)
        report = simulate_day(state, rng)
        if not report.ticked:
            continue
        before, state = state, report.state
        assert state.day == before.day + 1
        assert state.unlocked_districts >= before.unlocked_districts
        assert 0 <= state.reputation <= 100
        assert state.xp < state.xp_to_next_level
        assert all(0 <= p.condition <= 100 for p in state.properties)
        blocked = [p for p in state.properties if p.blocked]
        assert len(blocked) <= 1
        event = state.active_event
        for prop in blocked:
            assert event is not None
            assert prop.id == event.target_property_id
            assert prop.active_local_event_id == event.id
        if event is not None and event.scope is EventScope.LOCAL:
            assert state.find(event.target_property_id).blocked


def test_day_summary_logged_at_debug(make_state):
    records = []
    sink = logger.add(records.append, level="DEBUG", format="{level} {message}")
    try:
        simulate_day(make_state(), random.Random(3))
    finally:
        logger.remove(sink)
    summary = [r for r in records if "income=" in r]
    assert len(summary) == 1
    assert summary[0].startswith("DEBUG Day 2:")
