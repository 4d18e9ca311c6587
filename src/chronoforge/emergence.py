# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
emergence.py — Pass 5: new civilizations split off large ones.

Four independent pressures are scored for every agent of at least
EMERGENCE_POP people: revolt, civil war, religious schism and independence.
Each score is a sum of weighted factors.  A triggered split carves 15–35% of
the parent's people (and a smaller share of its wealth and resources) into a
new agent whose personality is pushed further toward the extremes.

Population is conserved exactly: child + reduced parent == parent before.
"""

import enum

from .dice        import chance, jitter
from .history     import EventDraft
from .naming      import with_prefix
from .personality import new_record
from .registry    import Civilization

EMERGENCE_POP = 8_000
SPLIT_MIN, SPLIT_MAX = 0.15, 0.35


class Emergence(enum.Enum):
    REVOLT       = 'Revolt'
    CIVIL_WAR    = 'Civil War'
    SCHISM       = 'Schism'
    INDEPENDENCE = 'Independence'


def revolt_rate(c) -> float:
    rate = 0.0
    if c.population > 15_000:
        rate += (c.population - 15_000) / 50_000 * 0.001
    if c.stability < 0.4:
        rate += (0.4 - c.stability) * 0.002
    if c.military > 7 and c.culture < 4:
        rate += 0.0005
    if c.resources < c.population / 2000:
        rate += 0.0008
    if c.aggressiveness > 7 or c.greed > 8:
        rate += 0.0003
    return rate


def civil_war_rate(c) -> float:
    rate = 0.0
    if c.stability < 0.25:
        rate += (0.25 - c.stability) * 0.004
    if c.population > 12_000 and c.culture < 3:
        rate += 0.0006
    if c.religion > 6 and c.culture < c.religion - 2:
        rate += 0.0004
    if c.wealth < 1000 and c.population > 10_000:
        rate += 0.0008
    return rate


def schism_rate(c) -> float:
    rate = 0.0
    if c.religion > 7:
        rate += (c.religion - 7) * 0.0002
    if c.religion > c.culture + 2:
        rate += 0.0003
    if c.population > 18_000 and c.religion > 5:
        rate += 0.0002
    if c.pride > 7 and c.hatred > 5:
        rate += 0.0001
    return rate


def independence_rate(c) -> float:
    rate = 0.0
    if c.culture > 6:
        rate += (c.culture - 6) * 0.0002
    if c.technology > 5 and c.culture > 4:
        rate += 0.0003
    if c.trade > 6 and c.culture > c.military:
        rate += 0.0002
    if c.ambition > 6 and c.pride > 5:
        rate += 0.0001
    return rate


_RULES = {
    # kind:                (rate fn,           name prefixes,                                             event type)
    Emergence.REVOLT:       (revolt_rate,       ['Free', 'Independent', 'Liberated', 'Rebel', 'New'],       'Political'),
    Emergence.CIVIL_WAR:    (civil_war_rate,    ['Northern', 'Southern', 'Eastern', 'Western', 'True', 'Reformed'], 'Military'),
    Emergence.SCHISM:       (schism_rate,       ['Orthodox', 'Reformed', 'Pure', 'Sacred', 'Divine'],       'Religious'),
    Emergence.INDEPENDENCE: (independence_rate, ['United', 'Democratic', "People's", 'National', 'Sovereign'], 'Political'),
}
assert set(_RULES) == set(Emergence)

_TEXT = {
    Emergence.REVOLT:       "Rebels rose against {parent} and founded {child}, taking {share:.0%} of its people.",
    Emergence.CIVIL_WAR:    "Civil war tore {parent} apart; {child} emerged with {share:.0%} of the population.",
    Emergence.SCHISM:       "A religious schism split {parent}; the faithful of {child} ({share:.0%}) walked their own path.",
    Emergence.INDEPENDENCE: "{child} declared independence from {parent}, carrying away {share:.0%} of its citizens.",
}
assert set(_TEXT) == set(Emergence)


def child_type(kind: Emergence, parent, rng) -> str:
    if kind is Emergence.REVOLT:
        return 'Military' if rng.random() < 0.4 else parent.civ_type
    if kind is Emergence.CIVIL_WAR:
        return 'Military' if rng.random() < 0.3 else 'Cultural'
    if kind is Emergence.SCHISM:
        return 'Religious'
    return 'Cultural'


def split(parent, kind: Emergence, rng, year: float, max_len: int = 40) -> tuple:
    """Carve a child out of *parent* (mutated).  Returns (child, share)."""
    s  = rng.uniform(SPLIT_MIN, SPLIT_MAX)
    p0, w0, r0 = parent.population, parent.wealth, parent.resources

    prefix = rng.choice(_RULES[kind][1])
    child = Civilization(
        name=with_prefix(prefix, parent.name, max_len),
        position=jitter(rng, parent.position, 50.0),
        civ_type=child_type(kind, parent, rng),
        population=p0 * s,
        wealth=w0 * s * 0.8,
        resources=r0 * s * 0.7,
        stability=rng.uniform(0.3, 0.6),
        military=parent.military * rng.uniform(0.8, 1.2),
        trade=parent.trade * rng.uniform(0.8, 1.1),
        religion=parent.religion * rng.uniform(0.6, 1.4),
        culture=parent.culture * rng.uniform(0.9, 1.3),
        technology=parent.technology * rng.uniform(0.7, 1.1),
        diplomacy=parent.diplomacy,
        production=parent.production,
        aggressiveness=parent.aggressiveness + rng.uniform(-2.0, 4.0),
        defensiveness=parent.defensiveness + rng.uniform(1.0, 3.0),
        greed=parent.greed,
        paranoia=parent.paranoia + rng.uniform(1.0, 3.0),
        ambition=parent.ambition + rng.uniform(2.0, 4.0),
        desperation=parent.desperation,
        hatred=parent.hatred + rng.uniform(2.0, 5.0),
        pride=parent.pride + rng.uniform(1.0, 3.0),
        vengefulness=parent.vengefulness,
        resource_stress=parent.resource_stress,
        founded_year=year,
        parent_id=parent.id,
    ).clamp()

    parent.population = p0 - child.population
    parent.wealth     = w0 * (1.0 - s * 0.6)
    parent.resources  = r0 * (1.0 - s * 0.5)
    parent.stability  = max(0.1, parent.stability - 0.3)
    parent.aggressiveness += 2.0
    parent.hatred         += 3.0
    return child, s


def emergence_pass(ctx, dt: float) -> None:
    rng = ctx.rng
    for civ in ctx.live():
        if civ.population < EMERGENCE_POP:
            continue
        for kind in Emergence:
            rate_fn, _, event_type = _RULES[kind]
            if not chance(rng, rate_fn(civ), dt):
                continue
            if ctx.room() <= 0:
                break
            child, share = split(civ, kind, rng, ctx.year, ctx.max_len)
            ctx.pending.queue_spawn(child, new_record(child, rng))
            ctx.emit(EventDraft(
                title=f"{kind.value}: Birth of {child.name}",
                description=_TEXT[kind].format(parent=civ.name, child=child.name,
                                               share=share),
                event_type=event_type, category='Revolution', significance=8.0,
                location=child.position, civ_id=civ.id, size=2.0,
            ))
            break                              # one split per agent per tick
