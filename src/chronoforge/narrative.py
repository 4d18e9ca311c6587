# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
narrative.py — Narrative Arc Manager.

Paces the story.  At most a few arcs run at once, each bound to a single
protagonist civilization and walking strictly forward through

    Setup → IncitingIncident → RisingAction → Climax → FallingAction → Resolution

Arcs gain progress with elapsed time and with significant events involving
their protagonist.  Tension follows a fixed curve per stage.  When a slot is
free the unclaimed agent with the highest story potential (above a floor)
gets a new arc.  Scoring is read-only; everything else runs sequentially.
"""

import enum
from dataclasses import dataclass, field

from .dice        import chance
from .history     import EventDraft, HistoryLog
from .personality import Stage, ensure_record
from .registry    import clamp


class ArcType(enum.Enum):
    RISE       = 'Rise'
    FALL       = 'Fall'
    REDEMPTION = 'Redemption'
    TRAGEDY    = 'Tragedy'
    COMEDY     = 'Comedy'
    ROMANCE    = 'Romance'
    ADVENTURE  = 'Adventure'
    THRILLER   = 'Thriller'
    MYSTERY    = 'Mystery'
    EPIC       = 'Epic'


class NarrativeStage(enum.IntEnum):
    SETUP             = 0
    INCITING_INCIDENT = 1
    RISING_ACTION     = 2
    CLIMAX            = 3
    FALLING_ACTION    = 4
    RESOLUTION        = 5


# ── Per-type tables (every ArcType must appear) ───────────────────────────
_ARC_TABLE = {
    # type:                (name template,              duration, stakes, closing phrase)
    ArcType.RISE:       ("The Ascension of {civ}",     50, 0.7,  "{civ} stands at the height of its power."),
    ArcType.FALL:       ("The Twilight of {civ}",      40, 0.8,  "{civ} has passed from glory into memory."),
    ArcType.REDEMPTION: ("The Redemption of {civ}",    45, 0.75, "{civ} has made peace with its past."),
    ArcType.TRAGEDY:    ("The Tragedy of {civ}",       60, 0.9,  "The sorrow of {civ} is written into every chronicle."),
    ArcType.COMEDY:     ("The Fortune of {civ}",       30, 0.5,  "{civ} stumbled, laughed, and came out ahead."),
    ArcType.ROMANCE:    ("The Alliance of {civ}",      30, 0.5,  "The bonds {civ} forged now bind the age together."),
    ArcType.ADVENTURE:  ("The Quest of {civ}",         35, 0.5,  "The far journeys of {civ} are complete."),
    ArcType.THRILLER:   ("The Trials of {civ}",        30, 0.5,  "{civ} survived every trial set before it."),
    ArcType.MYSTERY:    ("The Mystery of {civ}",       30, 0.5,  "The riddle at the heart of {civ} is finally answered."),
    ArcType.EPIC:       ("The Epic of {civ}",          80, 1.0,  "The saga of {civ} echoes across the whole world."),
}
assert set(_ARC_TABLE) == set(ArcType)

_ARC_DESCRIPTION = {
    ArcType.RISE:       "A humble people climbs toward greatness.",
    ArcType.FALL:       "A great power begins its long decline.",
    ArcType.REDEMPTION: "A broken people seeks to make amends.",
    ArcType.TRAGEDY:    "Pride and fate conspire toward ruin.",
    ArcType.COMEDY:     "Fortune smiles on the unlikely.",
    ArcType.ROMANCE:    "Two peoples drawn together by trade and trust.",
    ArcType.ADVENTURE:  "An ambitious people reaches for the unknown.",
    ArcType.THRILLER:   "Danger closes in from every side.",
    ArcType.MYSTERY:    "Something hidden stirs beneath the surface.",
    ArcType.EPIC:       "A struggle that will decide the shape of the world.",
}
assert set(_ARC_DESCRIPTION) == set(ArcType)

_HOT_TYPES  = {ArcType.TRAGEDY, ArcType.THRILLER}     # tension × 1.3
_COOL_TYPES = {ArcType.COMEDY, ArcType.ROMANCE}       # tension × 0.8

_ARC_EVENT_CHANCE = {
    NarrativeStage.INCITING_INCIDENT: 0.3,
    NarrativeStage.CLIMAX:            0.5,
}
_ARC_EVENT_DEFAULT = 0.1

_STAGE_WEIGHT = {
    Stage.NAIVE:       0.15,
    Stage.DEVELOPING:  0.25,
    Stage.BROKEN:      0.3,
    Stage.ENLIGHTENED: 0.1,
}
_STAGE_WEIGHT_DEFAULT = 0.1

SIGNIFICANT_EVENT = 2.0
EVENT_BONUS       = 0.1
RESOLVE_PROGRESS  = 0.95


@dataclass
class NarrativeArc:
    id:                int
    name:              str
    description:       str
    arc_type:          ArcType
    protagonist_id:    int
    start_year:        float
    expected_duration: float
    stakes:            float
    stage:             NarrativeStage = NarrativeStage.SETUP
    progress:          float = 0.0
    tension:           float = 0.2
    is_epic:           bool = False
    engagement:        float = 0.5
    event_count:       int = 0
    stage_history:     list = field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════
# Scoring
# ══════════════════════════════════════════════════════════════════════════

def trait_extremity(civ) -> float:
    score = 0.0
    if civ.aggressiveness > 8: score += 0.15
    if civ.paranoia > 8:       score += 0.12
    if civ.ambition > 8:       score += 0.1
    if civ.pride > 8:          score += 0.08
    if civ.hatred > 8:         score += 0.15
    if civ.vengefulness > 8:   score += 0.12
    if civ.defensiveness < 2:  score += 0.1
    if civ.paranoia < 1:       score += 0.08
    return score


def story_potential(civ, stage: Stage, stress: float) -> float:
    score = trait_extremity(civ)
    if civ.population > 10_000 and civ.stability < 0.3:
        score += 0.3                            # revolution
    if civ.military > 8 and civ.aggressiveness > 7:
        score += 0.25                           # conquest
    if civ.culture > 7 and civ.wealth > 8_000:
        score += 0.2                            # golden age
    if civ.technology > 8:
        score += 0.2
    score += _STAGE_WEIGHT.get(stage, _STAGE_WEIGHT_DEFAULT)
    if stress > 0.7:
        score += 0.2
    return clamp(score)


def choose_arc_type(civ, stage: Stage, rng) -> ArcType:
    if stage is Stage.BROKEN:
        return ArcType.REDEMPTION if rng.random() < 0.7 else ArcType.TRAGEDY
    if civ.population > 15_000 and civ.military > 7 and civ.aggressiveness > 7:
        return ArcType.EPIC
    if civ.stability < 0.3 and civ.population > 8_000:
        return ArcType.FALL
    if civ.culture > 7 and civ.wealth > 8_000 and civ.stability > 0.7:
        return ArcType.RISE
    if civ.ambition > 8 and civ.technology > 6:
        return ArcType.ADVENTURE
    if civ.trade > 6 and civ.diplomacy > 6:
        return ArcType.ROMANCE if rng.random() < 0.4 else ArcType.COMEDY
    return ArcType.RISE if rng.random() < 0.6 else ArcType.ADVENTURE


def stage_tension(stage: NarrativeStage, progress: float, arc_type: ArcType, rng) -> float:
    if stage is NarrativeStage.SETUP:
        t = 0.2 + progress * 0.3
    elif stage is NarrativeStage.INCITING_INCIDENT:
        t = 0.5 + progress * 0.2
    elif stage is NarrativeStage.RISING_ACTION:
        t = 0.3 + progress * 0.5
    elif stage is NarrativeStage.CLIMAX:
        t = 0.9 + rng.uniform(-0.1, 0.1)
    elif stage is NarrativeStage.FALLING_ACTION:
        t = 0.8 - progress * 0.4
    else:
        t = 0.1 + rng.uniform(-0.05, 0.05)
    if arc_type in _HOT_TYPES:
        t *= 1.3
    elif arc_type in _COOL_TYPES:
        t *= 0.8
    return clamp(t, 0.1, 1.0)


def next_stage(arc: NarrativeArc, significant_event: bool) -> NarrativeStage:
    """One forward step at most; never returns an earlier stage."""
    s, p = arc.stage, arc.progress
    if s is NarrativeStage.SETUP and (p > 0.15 or significant_event):
        return NarrativeStage.INCITING_INCIDENT
    if s is NarrativeStage.INCITING_INCIDENT and p > 0.25:
        return NarrativeStage.RISING_ACTION
    if s is NarrativeStage.RISING_ACTION and (p > 0.7 or arc.tension > 0.8):
        return NarrativeStage.CLIMAX
    if s is NarrativeStage.CLIMAX and p > 0.8:
        return NarrativeStage.FALLING_ACTION
    if s is NarrativeStage.FALLING_ACTION and p > 0.9:
        return NarrativeStage.RESOLUTION
    return s


_STAGE_LABEL = {
    NarrativeStage.SETUP:             'Setup',
    NarrativeStage.INCITING_INCIDENT: 'Inciting Incident',
    NarrativeStage.RISING_ACTION:     'Rising Action',
    NarrativeStage.CLIMAX:            'Climax',
    NarrativeStage.FALLING_ACTION:    'Falling Action',
    NarrativeStage.RESOLUTION:        'Resolution',
}


# ══════════════════════════════════════════════════════════════════════════
# Manager
# ══════════════════════════════════════════════════════════════════════════

class NarrativeArcManager:
    """Creates, advances and resolves story arcs."""

    def __init__(self, history: HistoryLog, max_arcs: int = 3,
                 potential_floor: float = 0.6, interval: float = 2.0):
        self.history         = history
        self.max_arcs        = max_arcs
        self.potential_floor = potential_floor
        self.interval        = interval
        self.arcs:      list[NarrativeArc] = []
        self.concluded: list[NarrativeArc] = []
        self._next_id   = 1
        self._accum     = 0.0
        self._pending:  list = []          # records seen since the last update

    @classmethod
    def from_config(cls, history: HistoryLog, cfg):
        return cls(history,
                   max_arcs=cfg.get('max_active_arcs', 3),
                   potential_floor=cfg.get('arc_potential_floor', 0.6),
                   interval=cfg.get('arc_update_interval', 2.0))

    def update(self, registry, new_events, rng, year: float, dt: float) -> list:
        """Advance every arc by *dt* years; returns the records appended."""
        self._pending.extend(new_events)
        self._accum += dt
        if self._accum < self.interval:
            return []
        dt, self._accum = self._accum, 0.0
        seen, self._pending = self._pending, []

        drafts: list = []
        for arc in list(self.arcs):
            civ = registry.get(arc.protagonist_id)
            if civ is None or not civ.alive:
                drafts.append(self._conclude(arc, None, early=True))
                continue
            drafts.extend(self._advance(arc, civ, seen, rng, year, dt))
            if arc.stage is NarrativeStage.RESOLUTION and arc.progress >= RESOLVE_PROGRESS:
                drafts.append(self._conclude(arc, civ))

        if len(self.arcs) < self.max_arcs:
            draft = self._start_arc(registry, rng, year)
            if draft:
                drafts.append(draft)
        return self.history.extend(drafts, year)

    # ── internals ─────────────────────────────────────────────────────────
    def _advance(self, arc, civ, seen, rng, year, dt) -> list:
        drafts = []
        mine = [e for e in seen
                if e.civ_id == arc.protagonist_id and e.significance >= SIGNIFICANT_EVENT]
        arc.event_count += len(mine)

        elapsed = year - arc.start_year
        time_progress = clamp(elapsed / max(1.0, arc.expected_duration))
        delta = (time_progress + EVENT_BONUS * len(mine)) * rng.uniform(0.8, 1.2)
        arc.progress = clamp(arc.progress + delta * 0.1 * dt)

        new_stage = next_stage(arc, bool(mine))
        if new_stage > arc.stage:
            arc.stage_history.append((year, new_stage))
            arc.stage = new_stage
            drafts.append(EventDraft(
                title=f"{arc.name}: {_STAGE_LABEL[new_stage]}",
                description=f"The story of {civ.name} turns toward its "
                            f"{_STAGE_LABEL[new_stage].lower()}.",
                event_type='Narrative', category='Narrative',
                significance=arc.stakes * 0.6,
                location=civ.position, civ_id=civ.id,
            ))
        arc.tension = stage_tension(arc.stage, arc.progress, arc.arc_type, rng)

        p = _ARC_EVENT_CHANCE.get(arc.stage, _ARC_EVENT_DEFAULT)
        if chance(rng, p, dt):
            drafts.append(EventDraft(
                title=f"{arc.name}: a turn of fate",
                description=f"{_ARC_DESCRIPTION[arc.arc_type]} "
                            f"({civ.name}, {_STAGE_LABEL[arc.stage].lower()})",
                event_type='Narrative', category='Narrative',
                significance=arc.stakes * arc.tension,
                location=civ.position, civ_id=civ.id,
            ))
        return drafts

    def _conclude(self, arc, civ, early: bool = False) -> EventDraft:
        self.arcs.remove(arc)
        self.concluded.append(arc)
        name = civ.name if civ else arc.name.split(' of ', 1)[-1]
        if early:
            text = f"{name} vanished before its story could be told to the end."
        else:
            text = _ARC_TABLE[arc.arc_type][3].format(civ=name)
        return EventDraft(
            title=f"Conclusion: {arc.name}",
            description=text,
            event_type='Narrative', category='Narrative',
            significance=arc.stakes,
            location=civ.position if civ else (0.0, 0.0),
            civ_id=arc.protagonist_id,
        )

    def _start_arc(self, registry, rng, year):
        claimed = {a.protagonist_id for a in self.arcs}
        best, best_score, best_stage = None, -1.0, None
        for civ in registry.all():
            if not civ.alive or civ.id in claimed:
                continue
            rec   = ensure_record(registry, civ)
            score = story_potential(civ, rec.stage, rec.stress)
            if score > best_score:
                best, best_score, best_stage = civ, score, rec.stage
        if best is None or best_score < self.potential_floor:
            return None

        civ = best
        arc_type = choose_arc_type(civ, best_stage, rng)
        template, duration, stakes, _ = _ARC_TABLE[arc_type]
        if civ.population > 10_000:
            duration *= 1.3
        if civ.culture > 7:
            duration *= 1.1
        stakes = clamp(stakes + civ.population / 20_000 * 0.2, 0.1, 1.0)
        extremes = trait_extremity(civ)
        engagement = 0.5 + extremes * 0.5 + clamp(civ.population / 20_000, 0.0, 0.2)
        if arc_type in (ArcType.EPIC, ArcType.TRAGEDY):
            engagement += 0.3

        arc = NarrativeArc(
            id=self._next_id,
            name=template.format(civ=civ.name),
            description=_ARC_DESCRIPTION[arc_type],
            arc_type=arc_type,
            protagonist_id=civ.id,
            start_year=year,
            expected_duration=duration,
            stakes=stakes,
            is_epic=(arc_type is ArcType.EPIC
                     or (civ.population > 15_000 and civ.influence > 8)),
            engagement=clamp(engagement),
        )
        arc.tension = stage_tension(arc.stage, 0.0, arc_type, rng)
        self._next_id += 1
        self.arcs.append(arc)
        return EventDraft(
            title=f"A Story Begins: {arc.name}",
            description=arc.description,
            event_type='Narrative', category='Narrative',
            significance=stakes * 0.5,
            location=civ.position, civ_id=civ.id,
        )

    def active_for(self, civ_id: int):
        return next((a for a in self.arcs if a.protagonist_id == civ_id), None)

