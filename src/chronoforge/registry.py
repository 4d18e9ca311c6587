# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
registry.py — Agent Registry.

Owns every Civilization record and its PersonalityRecord, plus their
lifecycle.  The Interaction Engine never spawns or destroys mid-pass: it
queues the change in a PendingMutations buffer and the registry applies the
whole buffer between ticks, so index-based iteration over a snapshot stays
valid for the full pass list.
"""

import copy
import math
from dataclasses import dataclass, field
from typing import Optional

CIV_TYPES = ('Military', 'Technology', 'Religious', 'Trade', 'Cultural')

CAPABILITIES = ('military', 'trade', 'religion', 'culture', 'technology',
                'diplomacy', 'production', 'innovation', 'influence', 'prestige')
TRAITS = ('aggressiveness', 'defensiveness', 'greed', 'paranoia', 'ambition',
          'desperation', 'hatred', 'pride', 'vengefulness')


def clamp(v: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return lo if v < lo else hi if v > hi else v


@dataclass
class Civilization:
    """One civilization agent's full mutable state."""

    id:         int = 0
    name:       str = 'Unnamed'
    position:   tuple = (0.0, 0.0)
    civ_type:   str = 'Cultural'

    # ── Stocks (unbounded, non-negative) ──────────────────────────────────
    population: float = 2000.0
    wealth:     float = 1500.0
    resources:  float = 3000.0
    stability:  float = 0.8

    # ── Capabilities [0, 10] ──────────────────────────────────────────────
    military:   float = 1.0
    trade:      float = 0.5
    religion:   float = 0.5
    culture:    float = 1.0
    technology: float = 2.0
    diplomacy:  float = 1.0
    production: float = 1.0
    innovation: float = 0.0
    influence:  float = 0.0
    prestige:   float = 0.0

    # ── Personality [0, 10] ───────────────────────────────────────────────
    aggressiveness: float = 2.0
    defensiveness:  float = 3.0
    greed:          float = 2.0
    paranoia:       float = 1.0
    ambition:       float = 4.0
    desperation:    float = 0.5
    hatred:         float = 0.2
    pride:          float = 5.0
    vengefulness:   float = 2.0

    # ── History counters ──────────────────────────────────────────────────
    successful_wars:    int = 0
    lost_wars:          int = 0
    times_attacked:     int = 0
    times_betrayed:     int = 0
    last_attacked_year: float = -1.0
    resource_stress:    float = 0.1

    is_active:                         bool = True
    has_been_humiliated:               bool = False
    has_reached_population_milestone:  bool = False
    has_reached_technology_milestone:  bool = False

    founded_year:        float = 0.0
    founding_population: float = 0.0
    parent_id:           Optional[int] = None

    def clamp(self) -> 'Civilization':
        """Force every bounded field back inside its declared range."""
        for f in CAPABILITIES + TRAITS:
            setattr(self, f, clamp(getattr(self, f), 0.0, 10.0))
        self.stability       = clamp(self.stability)
        self.resource_stress = clamp(self.resource_stress)
        self.population      = max(0.0, self.population)
        self.wealth          = max(0.0, self.wealth)
        self.resources       = max(0.0, self.resources)
        return self

    def traits(self) -> dict:
        return {t: getattr(self, t) for t in TRAITS}

    def set_traits(self, values: dict) -> None:
        for t in TRAITS:
            if t in values:
                setattr(self, t, values[t])

    @property
    def strength(self) -> float:
        """Battle strength: military × technology × population / 1000."""
        return self.military * self.technology * self.population / 1000.0

    @property
    def power(self) -> float:
        """Coalition power: population × military × technology."""
        return self.population * self.military * self.technology

    @property
    def alive(self) -> bool:
        return self.is_active and self.population > 0


def distance(a, b) -> float:
    """Planar distance between two positions (or two agents)."""
    pa = a.position if hasattr(a, 'position') else a
    pb = b.position if hasattr(b, 'position') else b
    return math.hypot(pa[0] - pb[0], pa[1] - pb[1])


# ══════════════════════════════════════════════════════════════════════════
# Deferred structural mutations (command buffer)
# ══════════════════════════════════════════════════════════════════════════

@dataclass
class PendingMutations:
    spawns:   list = field(default_factory=list)   # [(Civilization, PersonalityRecord|None)]
    destroys: list = field(default_factory=list)   # [civ_id]

    def queue_spawn(self, civ: Civilization, record=None) -> None:
        self.spawns.append((civ, record))

    def queue_destroy(self, civ_id: int) -> None:
        if civ_id not in self.destroys:
            self.destroys.append(civ_id)

    def room(self, current_count: int, cap: int) -> int:
        """How many more spawns can still be honoured this tick."""
        after = current_count - len(self.destroys) + len(self.spawns)
        return max(0, cap - after)

    def __bool__(self) -> bool:
        return bool(self.spawns or self.destroys)


class AgentRegistry:
    """Arena of Civilization records keyed by stable integer ids."""

    def __init__(self, max_civilizations: int = 15):
        self.max_civilizations = max_civilizations
        self._civs:    dict[int, Civilization] = {}
        self._records: dict = {}              # civ_id → PersonalityRecord
        self._next_id  = 1

    # ── Queries ────────────────────────────────────────────────────────────
    def __len__(self) -> int:
        return len(self._civs)

    def __contains__(self, civ_id: int) -> bool:
        return civ_id in self._civs

    def get(self, civ_id: int) -> Optional[Civilization]:
        return self._civs.get(civ_id)

    def all(self) -> list:
        """Live records in id order (read-only use)."""
        return [self._civs[k] for k in sorted(self._civs)]

    def personality(self, civ_id: int):
        return self._records.get(civ_id)

    def set_personality(self, civ_id: int, record) -> None:
        self._records[civ_id] = record

    # ── Lifecycle ──────────────────────────────────────────────────────────
    def spawn(self, initial_state: Civilization, record=None) -> Optional[int]:
        """Register a new agent and return its id (None when at the cap)."""
        if len(self._civs) >= self.max_civilizations:
            return None
        civ = initial_state
        civ.id = self._next_id
        self._next_id += 1
        if civ.founding_population <= 0:
            civ.founding_population = civ.population
        civ.clamp()
        self._civs[civ.id] = civ
        if record is not None:
            self._records[civ.id] = record
        return civ.id

    def destroy(self, civ_id: int) -> bool:
        if civ_id not in self._civs:
            return False
        del self._civs[civ_id]
        self._records.pop(civ_id, None)
        return True

    def snapshot(self) -> list:
        """Copies of every record in id order, for one tick of mutation."""
        return [copy.copy(self._civs[k]) for k in sorted(self._civs)]

    def commit(self, snapshot: list) -> None:
        """Write mutated snapshot records back by id."""
        for civ in snapshot:
            if civ.id in self._civs:
                self._civs[civ.id] = civ.clamp()

    def apply(self, pending: PendingMutations) -> tuple[list, list]:
        """Apply queued destroys, then queued spawns up to the cap."""
        destroyed = [cid for cid in pending.destroys if self.destroy(cid)]
        spawned: list = []
        for civ, record in pending.spawns:
            cid = self.spawn(civ, record)
            if cid is None:
                print(f"[Registry] cap {self.max_civilizations} reached — "
                      f"spawn of {civ.name} dropped")
                continue
            spawned.append(cid)
        pending.spawns.clear()
        pending.destroys.clear()
        return spawned, destroyed

