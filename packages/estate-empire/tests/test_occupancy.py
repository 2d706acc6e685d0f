import pytest

from estate_empire.content import TENANT_NAMES
from estate_empire.occupancy import (
    decay_condition,
    reputation_drift,
    step_hotel,
    step_lease,
    step_occupancy,
)
from estate_empire.types import RentMode


class TestHotel:
    def test_chance_scales_with_reputation(self, make_property, scripted):
        prop = make_property(rent_mode=RentMode.HOTEL)
        # chance = 0.5 * 0.4 = 0.2
        _, missed = step_hotel(prop, 50.0, scripted([0.2]))
        booked_prop, booked = step_hotel(prop, 50.0, scripted([0.19]))
        assert not missed.booked
        assert booked.booked
        assert booked.income == pytest.approx(50)
        assert booked_prop.tenant_name in TENANT_NAMES

    def test_no_xp_from_hotel_nights(self, make_property, scripted):
        _, occ = step_hotel(make_property(rent_mode=RentMode.HOTEL), 100.0, scripted([0.0]))
        assert occ.xp == 0


class TestLease:
    def test_search_miss_leaves_vacant(self, make_property, scripted):
        prop = make_property()
        after, occ = step_lease(prop, 100.0, 4, scripted([0.3]))
        assert after is prop
        assert occ.arrived is None

    def test_stay_counter_grows(self, make_property, scripted):
        prop = make_property(tenant_name="Ann", tenant_stay_duration=3, last_rent_paid_day=5)
        after, occ = step_lease(prop, 100.0, 6, scripted())
        assert after.tenant_stay_duration == 4
        assert not occ.collected

    def test_poor_condition_raises_leave_chance(self, make_property, scripted):
        prop = make_property(tenant_name="Ann", condition=39.0, last_rent_paid_day=5)
        after, occ = step_lease(prop, 100.0, 6, scripted([0.19]))
        assert after.tenant_name is None
        assert occ.departed == "Ann"
        assert occ.reputation == -5

    def test_collect_then_leave_same_day(self, make_property, scripted):
        prop = make_property(tenant_name="Ann", last_rent_paid_day=1)
        after, occ = step_lease(prop, 100.0, 8, scripted([0.0]))
        assert occ.collected
        assert occ.income == pytest.approx(200)
        assert occ.xp == 20
        assert after.tenant_name is None


def test_none_mode_is_idle(make_property, scripted):
    prop = make_property(rent_mode=RentMode.NONE)
    rng = scripted([0.0])
    after, occ = step_occupancy(prop, 100.0, 2, rng)
    assert after is prop
    assert occ.income == 0
    assert rng.draws == [0.0]


def test_decay_never_below_zero(make_property, scripted):
    prop = make_property(condition=0.5)
    assert decay_condition(prop, scripted([0.0])).condition == 0


def test_reputation_drift_bands(make_property):
    assert reputation_drift([]) == 0
    assert reputation_drift([make_property(condition=81.0)]) == pytest.approx(0.2)
    assert reputation_drift([make_property(condition=80.0)]) == 0
    assert reputation_drift([make_property(condition=50.0)]) == 0
    assert reputation_drift([make_property(condition=49.0)]) == pytest.approx(-1.5)


def test_unbooked_night_fully_vacates(make_property, scripted):
    prop = make_property(rent_mode=RentMode.HOTEL, tenant_name="Ann", tenant_stay_duration=1)
    after, occ = step_hotel(prop, 100.0, scripted())
    assert after.tenant_name is None
    assert after.tenant_stay_duration == 0
    assert not occ.booked
