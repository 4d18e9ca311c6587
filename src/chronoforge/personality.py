# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
personality.py — Personality Model.

evolve() is a pure function: it takes a trait mapping plus this tick's
stressors and returns a new trait mapping.  It never decides the evolution
stage; next_stage() is exposed separately for the engine's personality pass.

Every stressor nudge below is a per-year coefficient multiplied by dt.
"""

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional

from .registry import TRAITS, clamp


class Stage(enum.Enum):
    NAIVE       = 'Naive'
    DEVELOPING  = 'Developing'
    MATURE      = 'Mature'
    HARDENED    = 'Hardened'
    BROKEN      = 'Broken'
    ENLIGHTENED = 'Enlightened'


# ── Decay floors: these traits never fall below the floor through decay ───
_DECAY = {
    # trait:          (rate/yr, floor)
    'aggressiveness': (0.10, 1.0),
    'desperation':    (0.15, 0.0),
    'hatred':         (0.05, 0.0),
    'paranoia':       (0.08, 0.5),
}

# ── Stage timings (years since founding) ──────────────────────────────────
NAIVE_YEARS      = 20
DEVELOPING_YEARS = 60

MODIFIER_EPSILON = 0.01    # a temporary push smaller than this is spent


@dataclass
class Stressors:
    resource_stress:    float = 0.0
    env_multiplier:     float = 1.0
    pressure:           float = 0.0      # population / carrying capacity
    wealth_ratio:       float = 1.0      # wealth / mean wealth of the others
    stability:          float = 0.5
    years_since_attack: Optional[float] = None
    wins:               int = 0
    losses:             int = 0
    humiliated:         bool = False
    trauma_resistance:  float = 0.0      # shields attack and defeat nudges


@dataclass
class PersonalityRecord:
    base:       MappingProxyType                 # traits at founding, frozen
    current:    dict
    modifiers:  dict = field(default_factory=dict)
    stage:      Stage = Stage.NAIVE
    stress:             float = 0.1
    trauma_resistance:  float = 0.6
    flexibility:        float = 0.5
    # ── Experience counters ───────────────────────────────────────────────
    wars_won:               int = 0
    wars_lost:              int = 0
    betrayals_suffered:     int = 0
    betrayals_committed:    int = 0
    disasters:              int = 0
    diplomatic_victories:   int = 0
    cultural_achievements:  int = 0
    religious_events:       int = 0
    trade_successes:        int = 0
    previous:               Optional[dict] = None
    last_change_year:       float = 0.0


def resource_stress(resources: float, population: float) -> float:
    """1 − (resources per head)/2, clamped to [0, 1]."""
    return clamp(1.0 - (resources / max(1.0, population)) / 2.0)


def new_record(civ, rng) -> PersonalityRecord:
    """Fresh record for a newly founded agent."""
    traits = civ.traits()
    return PersonalityRecord(
        base=MappingProxyType(dict(traits)),
        current=dict(traits),
        stage=Stage.NAIVE,
        stress=0.1,
        trauma_resistance=rng.uniform(0.4, 0.9),
        flexibility=rng.uniform(0.3, 0.8),
        last_change_year=civ.founded_year,
    )


_warned: set = set()


def ensure_record(registry, civ) -> PersonalityRecord:
    """Return civ's record, synthesizing one from current stats if missing.

    Synthesis prints a single warning per agent id for the life of the
    process, never one per tick.
    """
    rec = registry.personality(civ.id)
    if rec is not None:
        return rec
    traits = civ.traits()
    rec = PersonalityRecord(
        base=MappingProxyType(dict(traits)),
        current=dict(traits),
        stage=Stage.DEVELOPING,
        stress=civ.resource_stress,
        trauma_resistance=0.6,
        flexibility=0.5,
        last_change_year=civ.founded_year,
    )
    registry.set_personality(civ.id, rec)
    if civ.id not in _warned:
        _warned.add(civ.id)
        print(f"[Personality] WARNING: {civ.name} (#{civ.id}) had no personality "
              f"record — synthesized from current stats")
    return rec


def reset_warnings() -> None:
    """Forget which agents were already warned about (new run / tests)."""
    _warned.clear()


def evolve(traits: dict, s: Stressors, dt: float) -> dict:
    """Return a new trait mapping nudged by *s* over *dt* years."""
    t = {k: float(traits.get(k, 0.0)) for k in TRAITS}

    # Harsh land
    if s.env_multiplier < 1.0:
        harsh = (1.0 - s.env_multiplier) * dt
        t['aggressiveness'] += harsh * 0.5
        t['desperation']    += harsh * 0.3
        t['greed']          += harsh * 0.4

    # Resource stress
    if s.resource_stress > 0.7:
        k = s.resource_stress * dt
        t['desperation']    += k * 0.8
        t['aggressiveness'] += k * 0.6
        t['greed']          += k * 0.7
        t['paranoia']       += k * 0.4

    # Crowding
    if s.pressure > 1.2:
        excess = (s.pressure - 1.2) * dt
        t['aggressiveness'] += excess * 0.5
        t['desperation']    += excess * 0.6
        t['ambition']       += excess * 0.3

    # Relative wealth
    if s.wealth_ratio < 0.5:
        t['greed']       += 0.4 * dt
        t['hatred']      += 0.3 * dt
        t['desperation'] += 0.2 * dt
    elif s.wealth_ratio > 2.0:
        t['pride']    += 0.3 * dt
        t['ambition'] += 0.2 * dt

    # Instability
    if s.stability < 0.3:
        t['desperation']    += 0.8 * dt
        t['paranoia']       += 0.6 * dt
        t['aggressiveness'] += 0.4 * dt

    shield = 1.0 - 0.5 * clamp(s.trauma_resistance)

    # Recent attack, fading over ten years
    if s.years_since_attack is not None and 0 <= s.years_since_attack < 10:
        fresh = (1.0 - s.years_since_attack / 10.0) * dt * shield
        t['hatred']        += fresh * 0.5
        t['paranoia']      += fresh * 0.4
        t['vengefulness']  += fresh * 0.6
        t['defensiveness'] += fresh * 0.3

    # War record
    if s.wins > s.losses:
        ratio = s.wins / (s.wins + s.losses) * dt
        t['pride']          += ratio * 0.3
        t['aggressiveness'] += ratio * 0.2
        t['ambition']       += ratio * 0.25
    elif s.losses > s.wins:
        ratio = s.losses / (s.wins + s.losses) * dt * shield
        t['defensiveness'] += ratio * 0.4
        t['paranoia']      += ratio * 0.3
        if s.humiliated:
            t['hatred']       += ratio * 0.5
            t['vengefulness'] += ratio * 0.6

    # Values already under a floor are lifted onto it
    for trait, (rate, floor) in _DECAY.items():
        t[trait] = max(floor, t[trait] - rate * dt)

    return {k: clamp(v, 0.0, 10.0) for k, v in t.items()}


def add_modifier(rec: PersonalityRecord, trait: str, amount: float) -> None:
    """Record a temporary trait push that fade_modifiers() will wear off."""
    rec.modifiers[trait] = rec.modifiers.get(trait, 0.0) + amount


def fade_modifiers(rec: PersonalityRecord, traits: dict, dt: float) -> dict:
    """Withdraw part of every temporary push from *traits*.

    A fraction flexibility × dt of each remaining modifier is removed per
    call, so flexible peoples shed a leader's zeal faster.  Spent modifiers
    are dropped from the record.
    """
    out = dict(traits)
    share = min(1.0, rec.flexibility * dt)
    for trait, offset in list(rec.modifiers.items()):
        step = offset * share
        out[trait] = clamp(out.get(trait, 0.0) - step, 0.0, 10.0)
        rest = offset - step
        if abs(rest) < MODIFIER_EPSILON:
            del rec.modifiers[trait]
        else:
            rec.modifiers[trait] = rest
    return out


def next_stage(rec: PersonalityRecord, civ, year: float) -> Stage:
    """Stage the record should be in now; may equal the current stage."""
    age    = year - civ.founded_year
    trauma = rec.wars_lost + rec.betrayals_suffered
    if rec.stage is not Stage.BROKEN and rec.stress > 0.85 and trauma >= 3:
        return Stage.BROKEN
    if (rec.stage in (Stage.BROKEN, Stage.HARDENED, Stage.MATURE)
            and civ.stability > 0.8 and rec.stress < 0.2
            and rec.cultural_achievements >= 2):
        return Stage.ENLIGHTENED
    if rec.stage is Stage.NAIVE and age >= NAIVE_YEARS:
        return Stage.DEVELOPING
    if rec.stage is Stage.DEVELOPING and age >= DEVELOPING_YEARS:
        return Stage.MATURE
    if rec.stage is Stage.MATURE and rec.wars_won + rec.wars_lost >= 6:
        return Stage.HARDENED
    return rec.stage
