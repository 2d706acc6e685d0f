"""Event option effects as plain data.

An option carries a tuple of effects. Each effect is a small frozen
dataclass tagged with a ``kind``; ``effect_patch`` interprets it against the
current state and returns a partial ``WorldState`` patch (a dict of field
overrides). Probabilistic effects draw from the ``rng`` passed in, one fresh
draw per ``Chance`` evaluated.
"""
from __future__ import annotations

import dataclasses
import random
from dataclasses import dataclass, replace
from typing import Any, Callable, ClassVar, Iterable, Union

from estate_empire.economy import clamp_pct
from estate_empire.types import WorldState


@dataclass(frozen=True)
class Adjust:
    """Add to money and reputation."""

    kind: ClassVar[str] = "adjust"
    money: float = 0.0
    reputation: float = 0.0


@dataclass(frozen=True)
class WearAll:
    """Change the condition of every owned property."""

    kind: ClassVar[str] = "wear_all"
    condition: float = 0.0


@dataclass(frozen=True)
class TenantExodus:
    """Each occupied property independently loses its tenant with *chance*."""

    kind: ClassVar[str] = "tenant_exodus"
    chance: float = 0.0


@dataclass(frozen=True)
class PatchTarget:
    """Modify the event's target property.

    ``condition`` sets an absolute value; ``condition_delta`` is applied
    afterwards. ``evict`` removes the tenant.
    """

    kind: ClassVar[str] = "patch_target"
    condition: float | None = None
    condition_delta: float = 0.0
    evict: bool = False


@dataclass(frozen=True)
class Chance:
    """Apply *success* with the given probability, else *failure*."""

    kind: ClassVar[str] = "chance"
    probability: float = 0.5
    success: tuple[Effect, ...] = ()
    failure: tuple[Effect, ...] = ()


Effect = Union[Adjust, WearAll, TenantExodus, PatchTarget, Chance]

Patch = dict[str, Any]


def _adjust(state: WorldState, effect: Adjust, target: str | None, rng: random.Random) -> Patch:
    patch: Patch = {}
    if effect.money:
        patch["money"] = state.money + effect.money
    if effect.reputation:
        patch["reputation"] = clamp_pct(state.reputation + effect.reputation)
    return patch


def _wear_all(state: WorldState, effect: WearAll, target: str | None, rng: random.Random) -> Patch:
    return {
        "properties": tuple(
            replace(p, condition=clamp_pct(p.condition + effect.condition)) if p.is_owned else p
            for p in state.properties
        )
    }


def _tenant_exodus(
    state: WorldState, effect: TenantExodus, target: str | None, rng: random.Random
) -> Patch:
    props = []
    for p in state.properties:
        if p.occupied and rng.random() < effect.chance:
            p = p.vacated()
        props.append(p)
    return {"properties": tuple(props)}


def _patch_target(
    state: WorldState, effect: PatchTarget, target: str | None, rng: random.Random
) -> Patch:
    prop = state.find(target) if target is not None else None
    if prop is None:
        return {}
    condition = prop.condition if effect.condition is None else effect.condition
    prop = replace(prop, condition=clamp_pct(condition + effect.condition_delta))
    if effect.evict:
        prop = prop.vacated()
    return {"properties": state.with_property(prop).properties}


def _chance(state: WorldState, effect: Chance, target: str | None, rng: random.Random) -> Patch:
    branch = effect.success if rng.random() < effect.probability else effect.failure
    after = apply_effects(state, branch, target, rng)
    return {
        "money": after.money,
        "reputation": after.reputation,
        "properties": after.properties,
    }


_RESOLVERS: dict[type, Callable[..., Patch]] = {
    Adjust: _adjust,
    WearAll: _wear_all,
    TenantExodus: _tenant_exodus,
    PatchTarget: _patch_target,
    Chance: _chance,
}

_KINDS: dict[str, type] = {cls.kind: cls for cls in _RESOLVERS}


def effect_patch(
    state: WorldState, effect: Effect, target: str | None, rng: random.Random
) -> Patch:
    """Interpret one effect against *state*, returning field overrides."""
    resolver = _RESOLVERS.get(type(effect))
    if resolver is None:
        raise TypeError(f"Unknown effect type {type(effect).__name__}")
    return resolver(state, effect, target, rng)


def apply_effects(
    state: WorldState,
    effects: Iterable[Effect],
    target: str | None,
    rng: random.Random,
) -> WorldState:
    for effect in effects:
        patch = effect_patch(state, effect, target, rng)
        if patch:
            state = replace(state, **patch)
    return state


def encode_effect(effect: Effect) -> dict[str, Any]:
    data: dict[str, Any] = {"kind": effect.kind}
    for f in dataclasses.fields(effect):
        value = getattr(effect, f.name)
        if isinstance(effect, Chance) and f.name in ("success", "failure"):
            value = [encode_effect(e) for e in value]
        data[f.name] = value
    return data


def decode_effect(data: dict[str, Any]) -> Effect:
    fields = dict(data)
    kind = fields.pop("kind", None)
    cls = _KINDS.get(kind)  # type: ignore[arg-type]
    if cls is None:
        raise ValueError(f"Unknown effect kind {kind!r}")
    if cls is Chance:
        for branch in ("success", "failure"):
            fields[branch] = tuple(decode_effect(e) for e in fields.get(branch, ()))
    return cls(**fields)
