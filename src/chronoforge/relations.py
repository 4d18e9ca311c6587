# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
relations.py — Pass 8: diplomacy, trade and the spread of faith.

Diplomacy and trade are judged once per unordered pair; religion diffusion
is judged per agent against every religion in range.
"""

from .dice     import chance
from .history  import EventDraft
from .registry import distance
from .territory import Religion

DIPLOMACY_RADIUS    = 400.0
DIPLOMACY_STABILITY = 0.5
TRADE_RADIUS        = 300.0
TRADE_STABILITY     = 0.4
TRADE_EVENT_CHANCE  = 0.3
RELIGION_RADIUS     = 150.0
CONVERSION_RATE     = 0.2
FOUNDING_RATE       = 0.05
FOUNDING_RELIGION   = 6.0


def _diplomacy(ctx, a, b, dt) -> None:
    rate = (1.0 - abs(a.technology - b.technology) / 10.0) * 0.5
    if not chance(ctx.rng, rate, dt):
        return
    for c in (a, b):
        c.diplomacy += 0.2
        c.stability += 0.1
        ctx.record(c).diplomatic_victories += 1
    ctx.emit(EventDraft(
        title=f"Accord of {a.name} and {b.name}",
        description=f"Envoys of {a.name} and {b.name} sealed a pact of friendship.",
        event_type='Political', category='Diplomacy', significance=1.5,
        location=a.position, civ_id=a.id,
    ))


def _trade(ctx, a, b, dt) -> None:
    rate = (a.stability + b.stability) * 0.5 * 2.0
    if not chance(ctx.rng, rate, dt):
        return
    value = min(a.wealth, b.wealth) * 0.1
    for c in (a, b):
        c.wealth += value * 0.1
        c.trade  += 0.1
        ctx.record(c).trade_successes += 1
    if ctx.rng.random() < TRADE_EVENT_CHANCE:
        ctx.emit(EventDraft(
            title=f"Trade Route between {a.name} and {b.name}",
            description=f"Caravans worth {value:,.0f} now pass between "
                        f"{a.name} and {b.name}.",
            event_type='Economic', category='Trade', significance=1.0,
            location=a.position, civ_id=a.id,
        ))


def _found_religion(ctx, civ, dt) -> None:
    if civ.religion <= FOUNDING_RELIGION or ctx.territories.religion_of(civ.id):
        return
    if not chance(ctx.rng, FOUNDING_RATE, dt):
        return
    name = ctx.names.name_for('religion', (civ.id, civ.position))
    ctx.territories.religions.append(
        Religion(name=name, position=civ.position,
                 influence=civ.religion / 2.0, founder_id=civ.id))
    ctx.record(civ).religious_events += 1
    ctx.emit(EventDraft(
        title=f"Founding of {name}",
        description=f"Prophets of {civ.name} proclaimed {name}.",
        event_type='Religious', category='Religion', significance=2.5,
        location=civ.position, civ_id=civ.id,
    ))


def _diffuse(ctx, civ, dt) -> None:
    for rel in ctx.territories.religions:
        if distance(civ.position, rel.position) > RELIGION_RADIUS:
            continue
        civ.religion += rel.influence * 0.1 * dt
        if (rel.founder_id != civ.id and civ.religion > 3
                and chance(ctx.rng, CONVERSION_RATE, dt)):
            ctx.record(civ).religious_events += 1
            ctx.emit(EventDraft(
                title=f"{civ.name} Embraces {rel.name}",
                description=f"Missionaries of {rel.name} won the hearts of {civ.name}.",
                event_type='Religious', category='Religion', significance=1.3,
                location=civ.position, civ_id=civ.id,
            ))


def relations_pass(ctx, dt: float) -> None:
    civs = ctx.civs
    for i, a in enumerate(civs):
        for b in civs[i + 1:]:
            if not (a.alive and b.alive):
                continue
            d = distance(a, b)
            if (d < DIPLOMACY_RADIUS and a.stability > DIPLOMACY_STABILITY
                    and b.stability > DIPLOMACY_STABILITY):
                _diplomacy(ctx, a, b, dt)
            if (d < TRADE_RADIUS and a.stability > TRADE_STABILITY
                    and b.stability > TRADE_STABILITY):
                _trade(ctx, a, b, dt)

    for civ in ctx.live():
        _found_religion(ctx, civ, dt)
        _diffuse(ctx, civ, dt)
