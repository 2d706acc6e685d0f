"""Event catalog - global and local event definitions as plain data."""
from __future__ import annotations

from dataclasses import dataclass

from estate_empire.effects import Adjust, Chance, PatchTarget, TenantExodus, WearAll
from estate_empire.types import EventOption, EventScope, Property, RandomEvent


@dataclass(frozen=True)
class EventTemplate:
    """An event definition. Local templates are instantiated per property.

    ``description`` may reference ``{name}`` and ``{id}`` of the target
    property; the instantiated event id is ``"<key>_<property id>"``.
    """

    key: str
    scope: EventScope
    title: str
    description: str
    options: tuple[EventOption, ...]

    def instantiate(self, prop: Property | None = None) -> RandomEvent:
        if self.scope is EventScope.GLOBAL:
            return RandomEvent(
                id=self.key,
                scope=self.scope,
                title=self.title,
                description=self.description,
                options=self.options,
            )
        if prop is None:
            raise ValueError(f"Local event {self.key!r} needs a target property")
        return RandomEvent(
            id=f"{self.key}_{prop.id}",
            scope=self.scope,
            title=self.title,
            description=self.description.format(name=prop.name, id=prop.id),
            options=self.options,
            target_property_id=prop.id,
        )


class EventCatalog:
    """Registry of event templates. Insertion order preserved."""

    def __init__(self) -> None:
        self._templates: dict[str, EventTemplate] = {}

    def register(self, template: EventTemplate) -> None:
        """Register a template. Overwrites one with the same key."""
        self._templates[template.key] = template

    def template(self, key: str) -> EventTemplate | None:
        return self._templates.get(key)

    def global_events(self) -> list[RandomEvent]:
        return [
            t.instantiate()
            for t in self._templates.values()
            if t.scope is EventScope.GLOBAL
        ]

    def local_events(self, prop: Property) -> list[RandomEvent]:
        return [
            t.instantiate(prop)
            for t in self._templates.values()
            if t.scope is EventScope.LOCAL
        ]

    def __len__(self) -> int:
        return len(self._templates)


GLOBAL_TEMPLATES: tuple[EventTemplate, ...] = (
    EventTemplate(
        key="heatwave",
        scope=EventScope.GLOBAL,
        title="Extreme Heatwave",
        description="Temperatures are hitting record highs! Tenants are furious about cooling costs.",
        options=(
            EventOption(
                "Subsidize Cooling (-$1500)",
                (Adjust(money=-1500, reputation=5),),
                description="Pay for your tenants extra electricity.",
                cost=1500,
            ),
            EventOption(
                "Ignore",
                (Adjust(reputation=-20), WearAll(condition=-5)),
                description="Let them sweat it out.",
                risk="High Reputation Loss (-20)",
            ),
        ),
    ),
    EventTemplate(
        key="market_crash",
        scope=EventScope.GLOBAL,
        title="Market Downturn",
        description="The economy is taking a hit. Tenant payments might be delayed.",
        options=(
            EventOption(
                "Stimulus Package (-$5000)",
                (Adjust(money=-5000, reputation=10),),
                description="Inject money into your properties to keep tenants.",
                cost=5000,
            ),
            EventOption(
                "Do Nothing",
                (Adjust(reputation=-10), TenantExodus(chance=0.3)),
                description="Wait for the storm to pass.",
                risk="Tenants may leave",
            ),
        ),
    ),
    EventTemplate(
        key="tax_audit",
        scope=EventScope.GLOBAL,
        title="City Tax Audit",
        description="The city council is auditing property records.",
        options=(
            EventOption(
                "Hire Top Accountants (-$2000)",
                (Adjust(money=-2000, reputation=2),),
                description="Ensure everything is perfect.",
                cost=2000,
            ),
            EventOption(
                "Submit Yourself",
                (
                    Chance(
                        probability=0.6,
                        success=(Adjust(money=-8000, reputation=-5),),
                        failure=(Adjust(money=500),),
                    ),
                ),
                description="Risk a fine if they find errors.",
                risk="Chance of heavy fine",
            ),
        ),
    ),
    EventTemplate(
        key="celebrity",
        scope=EventScope.GLOBAL,
        title="Celebrity Visit",
        description="A famous star is visiting the city! Tourism is booming.",
        options=(
            EventOption(
                "Run Ad Campaign (-$1000)",
                (Adjust(money=-1000 + 5000, reputation=15),),
                description="Attract tourists to hotels.",
                cost=1000,
            ),
            EventOption("Do Nothing", (), description="Ignore the hype."),
        ),
    ),
)

LOCAL_TEMPLATES: tuple[EventTemplate, ...] = (
    EventTemplate(
        key="pipe",
        scope=EventScope.LOCAL,
        title="Major Pipe Burst",
        description="A pipe burst at {name}! Water is flooding the unit.",
        options=(
            EventOption(
                "Emergency Plumber (-$800)",
                (Adjust(money=-800), PatchTarget(condition=100)),
                description="Fix it immediately.",
                cost=800,
            ),
            EventOption(
                "DIY Fix (-$50)",
                (
                    Adjust(money=-50),
                    Chance(
                        probability=0.5,
                        success=(PatchTarget(condition=80),),
                        failure=(Adjust(reputation=-10), PatchTarget(condition_delta=-40)),
                    ),
                ),
                description="Use duct tape. Might fail.",
                cost=50,
                risk="50% Fail Chance",
            ),
        ),
    ),
    EventTemplate(
        key="pests",
        scope=EventScope.LOCAL,
        title="Pest Infestation",
        description="Tenants at {name} report cockroaches!",
        options=(
            EventOption(
                "Full Fumigation (-$1200)",
                (Adjust(money=-1200, reputation=2), PatchTarget(condition=100)),
                description="Guaranteed fix, but expensive.",
                cost=1200,
            ),
            EventOption(
                "Bug Spray",
                (Adjust(reputation=-5), Chance(probability=0.7, success=(PatchTarget(evict=True),))),
                description="Cheap store-bought spray.",
                risk="Tenants likely to leave",
            ),
        ),
    ),
    EventTemplate(
        key="noise",
        scope=EventScope.LOCAL,
        title="Noise Complaint",
        description="Neighbors are reporting loud parties at {name}.",
        options=(
            EventOption(
                "Evict Tenant",
                (Adjust(reputation=2), PatchTarget(evict=True)),
                description="Zero tolerance policy.",
            ),
            EventOption(
                "Issue Warning",
                (Chance(probability=0.6, success=(Adjust(reputation=-5),)),),
                description="Give them a second chance.",
                risk="They might continue",
            ),
        ),
    ),
)


def default_catalog() -> EventCatalog:
    catalog = EventCatalog()
    for template in GLOBAL_TEMPLATES + LOCAL_TEMPLATES:
        catalog.register(template)
    return catalog
