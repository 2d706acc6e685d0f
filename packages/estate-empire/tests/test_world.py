import random

from estate_empire.content import DISTRICTS
from estate_empire.types import District, RentMode
from estate_empire.world import new_game


def test_fresh_game_defaults():
    state = new_game(rng=random.Random(1))
    assert state.money == 50000
    assert state.reputation == 100
    assert state.day == 1
    assert state.level == 1
    assert state.xp_to_next_level == 1000
    assert state.unlocked_districts == {District.SUBURBS}
    assert state.active_event is None


def test_nine_plots_per_district():
    state = new_game(rng=random.Random(1))
    assert len(state.properties) == 27
    for d in DISTRICTS:
        plots = [p for p in state.properties if p.district is d.name]
        assert len(plots) == 9
        for p in plots:
            assert d.base_property_cost <= p.purchase_cost < d.base_property_cost + 5000


def test_plots_start_unowned_and_bare():
    for p in new_game(rng=random.Random(2)).properties:
        assert not p.is_owned
        assert p.condition == 100
        assert p.tier == 1
        assert p.rent_mode is RentMode.NONE
        assert len(p.amenities) == 8
        assert all(a.level == 0 for a in p.amenities)


def test_ids_unique_and_named():
    state = new_game(rng=random.Random(3))
    ids = [p.id for p in state.properties]
    assert len(set(ids)) == len(ids)
    assert state.properties[0].id == "Suburbs-0"
    assert state.properties[0].name == "Plot 1"


def test_same_seed_same_world():
    assert new_game(rng=random.Random(9)) == new_game(rng=random.Random(9))
