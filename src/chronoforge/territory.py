# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
territory.py — Territory and religion store, conquest and construction.

Territories are position-anchored structures owned by one agent.  During a
war the loser's nearby holdings are either conquered (ownership moves to the
winner) or reduced to Ruins (owner cleared, original name kept).
"""

from dataclasses import dataclass
from typing import Optional

from .history  import EventDraft
from .naming   import sanitize_name, with_prefix
from .registry import distance

KINDS = ('City', 'Monument', 'Temple', 'Academy', 'Marketplace',
         'Palace', 'Wonder', 'Ruins')

CONQUEST_RADIUS   = 100.0
AFFECTED_CHANCE   = 0.6

# ── Chance an affected territory is destroyed rather than taken ───────────
DESTROY_CHANCE = {
    'Temple':   0.7,
    'Monument': 0.7,
    'Wonder':   0.3,
    'City':     0.2,
}
DESTROY_CHANCE_OTHER = 0.4

RUIN_PREFIX = {
    'City':        'Ruins',
    'Temple':      'Ruined Temple',
    'Monument':    'Fallen Monument',
    'Wonder':      'Lost Wonder',
    'Academy':     'Abandoned Academy',
    'Marketplace': 'Desolate Market',
}
RUIN_PREFIX_OTHER = 'Ancient Ruins'


@dataclass
class Territory:
    id:                int
    name:              str
    owner_id:          Optional[int]
    position:          tuple
    control_radius:    float
    kind:              str
    defense:           float = 0.0
    population:        float = 0.0
    wealth:            float = 0.0
    is_ruined:         bool = False
    original_name:     str = ''
    original_owner_id: Optional[int] = None


@dataclass
class Religion:
    name:       str
    position:   tuple
    influence:  float
    founder_id: Optional[int] = None


class TerritoryStore:
    """All territories and religions in the world."""

    def __init__(self, max_name_length: int = 40):
        self.territories: list[Territory] = []
        self.religions:   list[Religion]  = []
        self.max_name_length = max_name_length
        self._next_id = 1

    def add(self, name: str, owner_id, position, control_radius: float, kind: str,
            defense: float = 0.0, population: float = 0.0,
            wealth: float = 0.0) -> Territory:
        clean = sanitize_name(name, self.max_name_length)
        terr = Territory(
            id=self._next_id, name=clean, owner_id=owner_id,
            position=tuple(position), control_radius=control_radius, kind=kind,
            defense=defense, population=population, wealth=wealth,
            original_name=clean, original_owner_id=owner_id,
        )
        self._next_id += 1
        self.territories.append(terr)
        return terr

    def found_city(self, name: str, owner_id, position, population: float = 0.0,
                   wealth: float = 0.0, defense: float = 0.0) -> Territory:
        return self.add(name, owner_id, position, control_radius=50.0, kind='City',
                        defense=defense, population=population, wealth=wealth)

    def build_structure(self, name: str, owner_id, position, kind: str,
                        control_radius: float = 30.0, defense: float = 0.0,
                        wealth: float = 0.0) -> Territory:
        return self.add(name, owner_id, position, control_radius, kind,
                        defense=defense, wealth=wealth)

    def owned_by(self, civ_id: int) -> list:
        return [t for t in self.territories if t.owner_id == civ_id and not t.is_ruined]

    def ruins(self) -> list:
        return [t for t in self.territories if t.is_ruined]

    def release_owned(self, civ_id: int) -> int:
        """Orphan every territory of a destroyed agent.  Returns the count."""
        n = 0
        for t in self.territories:
            if t.owner_id == civ_id:
                t.owner_id = None
                n += 1
        return n

    def religion_of(self, civ_id: int) -> Optional[Religion]:
        for r in self.religions:
            if r.founder_id == civ_id:
                return r
        return None


# ══════════════════════════════════════════════════════════════════════════
# Conquest
# ══════════════════════════════════════════════════════════════════════════

def ruin(terr: Territory, max_len: int = 40) -> None:
    prefix = RUIN_PREFIX.get(terr.kind, RUIN_PREFIX_OTHER)
    terr.original_name     = terr.original_name or terr.name
    terr.original_owner_id = terr.owner_id
    terr.name       = sanitize_name(f"{prefix} of {terr.name}", max_len)
    terr.kind       = 'Ruins'
    terr.owner_id   = None
    terr.is_ruined  = True
    terr.population = 0.0
    terr.wealth     = 0.0
    terr.defense    = 0.0


def resolve_conquest(store: TerritoryStore, winner, loser, rng) -> list:
    """Conquer or ruin the loser's holdings near its capital.  Returns drafts."""
    events: list = []
    for terr in list(store.owned_by(loser.id)):
        if distance(terr.position, loser.position) > CONQUEST_RADIUS:
            continue
        if rng.random() >= AFFECTED_CHANCE:
            continue
        was_wonder = terr.kind == 'Wonder'
        old_name   = terr.name
        if rng.random() < DESTROY_CHANCE.get(terr.kind, DESTROY_CHANCE_OTHER):
            ruin(terr, store.max_name_length)
            events.append(EventDraft(
                title=f"Destruction of {old_name}",
                description=f"{winner.name} razed {old_name}, leaving the {terr.name}.",
                event_type='Military', category='Conquest',
                significance=3.5 if was_wonder else 2.0,
                location=terr.position, civ_id=winner.id,
            ))
        else:
            terr.owner_id = winner.id
            terr.defense  = winner.military * 0.3
            if terr.kind == 'City':
                terr.name = with_prefix(winner.name, old_name, store.max_name_length)
            events.append(EventDraft(
                title=f"Conquest of {old_name}",
                description=f"{winner.name} seized {old_name} from {loser.name}.",
                event_type='Military', category='Conquest',
                significance=3.0 if was_wonder else 1.5,
                location=terr.position, civ_id=winner.id,
            ))
    return events
