import random

import pytest

from estate_empire.content import AMENITIES
from estate_empire.types import District, Property, RentMode, WorldState


class ScriptedRandom(random.Random):
    """``random()`` pops scripted draws, then returns *default*.

    ``choice``/``randrange`` keep using the seeded bit generator, so
    scripting probability rolls never shifts which name or event is picked.
    """

    def __init__(self, draws=(), default=0.999, seed=0):
        super().__init__(seed)
        self.draws = list(draws)
        self.default = default

    def random(self):
        if self.draws:
            return self.draws.pop(0)
        return self.default

    def getrandbits(self, k):
        return super().getrandbits(k)


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def make_property():
    def _make(pid="Suburbs-0", **overrides):
        fields = dict(
            id=pid,
            district=District.SUBURBS,
            name="Plot 1",
            purchase_cost=15000,
            amenities=AMENITIES,
            is_owned=True,
            rent_mode=RentMode.LONG_TERM,
        )
        fields.update(overrides)
        return Property(**fields)

    return _make


@pytest.fixture
def make_state():
    def _make(*properties, **overrides):
        fields = dict(money=1000.0, reputation=100.0, day=1, properties=tuple(properties))
        fields.update(overrides)
        return WorldState(**fields)

    return _make
