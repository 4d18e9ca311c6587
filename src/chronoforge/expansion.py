# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
expansion.py — Pass 9: colonies, monuments and wonders.

Large, rich, stable realms found colonies while the registry has room.
Near the cap (within COLONY_HEADROOM of it) colony founding stops and
aggressive expansion takes its place.  Monuments and wonders are built in
either case.
"""

from .conflict    import aggressive_expansion
from .dice        import chance, jitter
from .history     import EventDraft
from .naming      import with_suffix
from .personality import new_record
from .registry    import Civilization

COLONY_HEADROOM = 2

WONDERS = ['Hanging Gardens', 'Great Library', 'Colossus', 'Lighthouse',
           'Great Wall', 'Pyramids', 'Oracle', 'Mausoleum']

# ── Monument kind by dominant stat: (stat, threshold, kind, grand title) ───
MONUMENT_KINDS = (
    ('religion',   5.0, 'Temple',      'Great Temple'),
    ('military',   6.0, 'Monument',    'Victory Monument'),
    ('technology', 6.0, 'Academy',     'Academy of Sciences'),
    ('trade',      6.0, 'Marketplace', 'Grand Marketplace'),
)
MONUMENT_DEFAULT = ('Palace', 'Palace Complex')


def _found_colony(ctx, civ, dt) -> bool:
    if not (civ.population > 12_000 and civ.wealth > 8_000 and civ.stability > 0.85):
        return False
    if not chance(ctx.rng, civ.population / 30_000 * 0.005, dt):
        return False
    rng = ctx.rng
    pos = jitter(rng, civ.position, 100.0)
    colony = Civilization(
        name=with_suffix(civ.name, 'Colony', ctx.max_len),
        position=pos,
        civ_type=civ.civ_type,
        population=civ.population * 0.2,
        wealth=civ.wealth * 0.3,
        resources=civ.resources * 0.2,
        stability=civ.stability,
        military=civ.military, trade=civ.trade, religion=civ.religion,
        culture=civ.culture, technology=civ.technology,
        diplomacy=civ.diplomacy, production=civ.production,
        founded_year=ctx.year,
        parent_id=civ.id,
    )
    colony.set_traits(civ.traits())
    civ.population *= 0.8
    civ.wealth     *= 0.7
    ctx.pending.queue_spawn(colony, new_record(colony, rng))
    defense = civ.military * 0.5
    ctx.on_spawn.append((colony, lambda c: ctx.territories.found_city(
        c.name, c.id, c.position, population=c.population,
        wealth=c.wealth, defense=defense)))
    ctx.emit(EventDraft(
        title=f"Founding of {colony.name}",
        description=f"Settlers from {civ.name} set out to found {colony.name}.",
        event_type='Social', category='Expansion', significance=1.8,
        location=pos, civ_id=civ.id,
    ))
    return True


def monument_kind(civ) -> tuple:
    for stat, threshold, kind, title in MONUMENT_KINDS:
        if getattr(civ, stat) > threshold:
            return kind, title
    return MONUMENT_DEFAULT


def _build_monument(ctx, civ, dt) -> None:
    if not (civ.population > 4_000 and civ.wealth > 3_000
            and civ.stability > 0.7 and civ.technology > 2.5):
        return
    rate = (civ.population / 8_000 + civ.wealth / 10_000 + civ.technology / 10) * 0.3
    if not chance(ctx.rng, rate, dt):
        return
    kind, title = monument_kind(civ)
    name = f"{title} of {civ.name}"
    ctx.territories.build_structure(
        name, civ.id, jitter(ctx.rng, civ.position, 20.0), kind,
        defense=civ.military * 0.3, wealth=civ.wealth * 0.1,
    )
    civ.wealth    *= 0.8
    civ.culture   += 1.0
    civ.stability += 0.1
    civ.prestige  += 2.0
    ctx.record(civ).cultural_achievements += 1
    ctx.emit(EventDraft(
        title=f"Construction of the {name}",
        description=f"{civ.name} raised the {name}, a {kind.lower()} of great renown.",
        event_type='Cultural', category='Construction', significance=2.5,
        location=civ.position, civ_id=civ.id,
    ))


def _build_wonder(ctx, civ, dt) -> None:
    if not (civ.population > 15_000 and civ.wealth > 8_000
            and civ.stability > 0.8 and civ.technology > 5):
        return
    if not chance(ctx.rng, civ.population / 20_000 * 0.1, dt):
        return
    wonder = ctx.rng.choice(WONDERS)
    name = f"{wonder} of {civ.name}"
    ctx.territories.build_structure(
        name, civ.id, jitter(ctx.rng, civ.position, 30.0), 'Wonder',
        control_radius=50.0, defense=civ.military * 0.3, wealth=civ.wealth * 0.1,
    )
    civ.wealth     *= 0.5
    civ.culture    += 3.0
    civ.stability  += 0.2
    civ.prestige   += 5.0
    civ.technology += 1.0
    ctx.record(civ).cultural_achievements += 1
    ctx.emit(EventDraft(
        title=f"The {name}",
        description=f"{civ.name} completed the {wonder}, a wonder of the world.",
        event_type='Cultural', category='Construction', significance=4.0,
        location=civ.position, civ_id=civ.id, size=2.0,
    ))


def expansion_pass(ctx, dt: float) -> None:
    near_cap = ctx.room() <= COLONY_HEADROOM
    if near_cap:
        aggressive_expansion(ctx, dt)
    for civ in ctx.live():
        if not near_cap and ctx.room() > COLONY_HEADROOM:
            _found_colony(ctx, civ, dt)
        _build_monument(ctx, civ, dt)
        _build_wonder(ctx, civ, dt)
