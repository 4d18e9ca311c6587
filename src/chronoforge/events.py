# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
events.py — Passes 1–2: rare world-shaking events and heroic leaders.

World events hit every living agent at once.  Heroic leaders are rolled per
agent; bigger and more stable realms are likelier to produce one.
"""

import enum

from .dice        import chance
from .history     import EventDraft
from .personality import add_modifier


class WorldEvent(enum.Enum):
    PLAGUE              = 'Plague'
    GOLDEN_AGE          = 'Golden Age'
    DISASTER            = 'Great Disaster'
    TECH_REVOLUTION     = 'Tech Revolution'
    RELIGIOUS_AWAKENING = 'Religious Awakening'
    DARK_AGE            = 'Dark Age'


class Leader(enum.Enum):
    CONQUEROR   = 'Conqueror'
    PHILOSOPHER = 'Philosopher'
    BUILDER     = 'Builder'
    PROPHET     = 'Prophet'
    INVENTOR    = 'Inventor'


DISASTER_NAMES = ['Great Earthquake', 'Volcanic Eruption', 'Massive Flood',
                  'Meteor Strike', 'Great Fire']
DISASTER_HIT_CHANCE = 0.4
BIG_REALM           = 15_000     # leader chance doubles above this population


# ── World event effects: fn(civ, rng) ─────────────────────────────────────

def _plague(civ, rng):
    civ.population *= 1.0 - rng.uniform(0.2, 0.6)
    civ.stability   = max(0.1, civ.stability - 0.4)
    civ.wealth     *= 0.6
    civ.trade      -= 3.0


def _golden_age(civ, rng):
    civ.wealth     *= 1.5
    civ.technology += 2.0
    civ.culture    += 2.0
    civ.trade      += 1.5
    civ.stability  += 0.3


def _disaster(civ, rng):
    if rng.random() >= DISASTER_HIT_CHANCE:
        return False
    civ.population *= rng.uniform(0.3, 0.8)
    civ.wealth     *= rng.uniform(0.2, 0.6)
    civ.stability   = max(0.1, civ.stability - 0.5)
    return True


def _tech_revolution(civ, rng):
    civ.technology += rng.uniform(1.0, 3.0)
    civ.military   += 1.0
    civ.production += 1.0


def _religious_awakening(civ, rng):
    civ.religion  += rng.uniform(1.0, 3.0)
    civ.stability += 0.2
    civ.culture   += 1.0


def _dark_age(civ, rng):
    civ.technology -= rng.uniform(1.0, 3.0)
    civ.culture    -= rng.uniform(1.0, 2.0)
    civ.trade      -= 2.0
    civ.stability   = max(0.1, civ.stability - 0.2)


_WORLD_EVENTS = {
    # event:                        (effect,               significance, type,        category)
    WorldEvent.PLAGUE:              (_plague,              5.0, 'Natural',   'Disaster'),
    WorldEvent.GOLDEN_AGE:          (_golden_age,          4.0, 'Cultural',  'Golden Age'),
    WorldEvent.DISASTER:            (_disaster,            4.5, 'Natural',   'Disaster'),
    WorldEvent.TECH_REVOLUTION:     (_tech_revolution,     3.5, 'Cultural',  'Discovery'),
    WorldEvent.RELIGIOUS_AWAKENING: (_religious_awakening, 3.0, 'Religious', 'Religion'),
    WorldEvent.DARK_AGE:            (_dark_age,            4.0, 'Cultural',  'Collapse'),
}
assert set(_WORLD_EVENTS) == set(WorldEvent)

_WORLD_TEXT = {
    WorldEvent.PLAGUE:              "A devastating plague sweeps the known world.",
    WorldEvent.GOLDEN_AGE:          "A golden age of prosperity dawns across every realm.",
    WorldEvent.DISASTER:            "The {name} strikes; {hit} realm(s) lie in ruin.",
    WorldEvent.TECH_REVOLUTION:     "A revolution of invention spreads from city to city.",
    WorldEvent.RELIGIOUS_AWAKENING: "A great awakening of faith stirs every people.",
    WorldEvent.DARK_AGE:            "Learning fades and a dark age settles over the world.",
}
assert set(_WORLD_TEXT) == set(WorldEvent)


def world_events_pass(ctx, dt: float) -> None:
    """Pass 1 — at most one global shock per tick."""
    rng  = ctx.rng
    live = ctx.live()
    if not live or not chance(rng, ctx.cfg.get('world_event_rate', 0.001), dt):
        return
    kind = rng.choice(list(WorldEvent))
    effect, significance, event_type, category = _WORLD_EVENTS[kind]
    title = kind.value
    if kind is WorldEvent.DISASTER:
        title = rng.choice(DISASTER_NAMES)

    hit = 0
    for civ in live:
        struck = effect(civ, rng)
        if struck is False:
            continue
        hit += 1
        rec = ctx.record(civ)
        if category == 'Disaster':
            rec.disasters += 1
        elif category == 'Golden Age':
            rec.cultural_achievements += 1
        elif category == 'Religion':
            rec.religious_events += 1

    ctx.emit(EventDraft(
        title=f"The {title}",
        description=_WORLD_TEXT[kind].format(name=title, hit=hit),
        event_type=event_type, category=category,
        significance=significance, size=3.0,
    ))


# ══════════════════════════════════════════════════════════════════════════
# Heroic leaders
# ══════════════════════════════════════════════════════════════════════════

def _conqueror(civ):
    civ.military       += 3.0
    civ.aggressiveness += 2.0
    civ.ambition       += 2.0
    civ.population     *= 1.2


def _philosopher(civ):
    civ.culture    += 3.0
    civ.stability  += 0.3
    civ.technology += 1.5


def _builder(civ):
    civ.production += 3.0
    civ.wealth     *= 1.3
    civ.influence  += 2.0


def _prophet(civ):
    civ.religion  += 4.0
    civ.stability += 0.4
    civ.culture   += 2.0


def _inventor(civ):
    civ.technology += 4.0
    civ.military   += 1.5
    civ.production += 2.0


_LEADERS = {
    Leader.CONQUEROR:   (_conqueror,   'Military',  "{leader} rises to lead {civ} on a path of conquest."),
    Leader.PHILOSOPHER: (_philosopher, 'Cultural',  "{leader} teaches {civ} to question and to reason."),
    Leader.BUILDER:     (_builder,     'Economic',  "{leader} raises roads and granaries across {civ}."),
    Leader.PROPHET:     (_prophet,     'Religious', "{leader} speaks with a voice {civ} takes for divine."),
    Leader.INVENTOR:    (_inventor,    'Cultural',  "{leader} fills the workshops of {civ} with new devices."),
}
assert set(_LEADERS) == set(Leader)


def heroic_leaders_pass(ctx, dt: float) -> None:
    """Pass 2 — per-agent roll for a leader archetype."""
    rng  = ctx.rng
    rate = ctx.cfg.get('leader_rate', 0.0005)
    for civ in ctx.live():
        p = civ.population / 10_000 * civ.stability * rate
        if civ.population > BIG_REALM:
            p *= 2
        if not chance(rng, p, dt):
            continue
        kind = rng.choice(list(Leader))
        effect, event_type, text = _LEADERS[kind]
        effect(civ)
        leader = ctx.names.name_for('leader', (civ.id, round(ctx.year, 2)))
        ctx.emit(EventDraft(
            title=f"{leader} the {kind.value}",
            description=text.format(leader=leader, civ=civ.name),
            event_type=event_type, category='Hero', significance=4.0,
            location=civ.position, civ_id=civ.id,
        ))
        if kind is Leader.CONQUEROR:
            # the zeal is the leader's, not the people's; it fades
            rec = ctx.record(civ)
            add_modifier(rec, 'aggressiveness', 2.0)
            add_modifier(rec, 'ambition', 2.0)
        elif kind is Leader.PHILOSOPHER:
            ctx.record(civ).cultural_achievements += 1
        elif kind is Leader.PROPHET:
            ctx.record(civ).religious_events += 1
