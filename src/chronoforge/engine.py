# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
engine.py — Interaction Engine: the per-tick driver.

Call order each tick (fixed; later passes see earlier mutations):
   1  world_events    — rare world-shaking shocks         (events.py)
   2  heroic_leaders  — leader archetypes                 (events.py)
   3  coalition_wars  — everyone vs. the strongest        (conflict.py)
   4  conflicts       — holy war, betrayal, cascades      (conflict.py)
   5  emergence       — revolt / civil war / schism       (emergence.py)
   6  growth          — population, capacity, economy     (growth.py)
   7  warfare         — pairwise wars + territory         (conflict.py)
   8  relations       — diplomacy, trade, religion        (relations.py)
   9  expansion       — colonies, monuments, wonders      (expansion.py)
  10  collapse        — cleanup and recovery              (here)
  11  personality     — trait evolution + stage           (here)

The engine owns a snapshot of the registry for the whole tick.  Spawns and
destroys go into a PendingMutations buffer that the registry applies after
the last pass.  The RNG is always passed in; nothing here touches the
module-level random functions.
"""

from dataclasses import dataclass, field
from typing import Optional

from . import config as _config
from . import conflict, emergence, events, expansion, growth, relations
from .dice        import chance
from .history     import EventDraft, HistoryLog
from .naming      import ComponentNames
from .personality import (Stage, Stressors, ensure_record, evolve, fade_modifiers,
                          next_stage, resource_stress)
from .registry    import AgentRegistry, PendingMutations
from .terrain     import RadialTerrain, environmental_multiplier
from .territory   import TerritoryStore

COLONY_ABANDON_POP    = 1500
COLONY_ABANDON_WEALTH = 1000
REFORM_RATE           = 0.01    # per year, for agents in crisis


@dataclass
class TickResult:
    ran:            bool
    year:           float
    passes_run:     list = field(default_factory=list)
    passes_skipped: list = field(default_factory=list)
    events:         list = field(default_factory=list)
    spawned:        list = field(default_factory=list)
    destroyed:      list = field(default_factory=list)


class TickContext:
    """Everything a pass may read or mutate during one tick."""

    __slots__ = ('civs', 'rng', 'year', 'cfg', 'registry', 'territories',
                 'terrain', 'names', 'pending', 'drafts', 'on_spawn', '_env')

    def __init__(self, civs, rng, year, cfg, registry, territories, terrain, names):
        self.civs        = civs
        self.rng         = rng
        self.year        = year
        self.cfg         = cfg
        self.registry    = registry
        self.territories = territories
        self.terrain     = terrain
        self.names       = names
        self.pending     = PendingMutations()
        self.drafts:  list = []
        self.on_spawn: list = []          # [(civ, callback)] run once the civ has an id
        self._env:    dict = {}

    # ── Helpers shared by the pass modules ────────────────────────────────
    def live(self) -> list:
        return [c for c in self.civs if c.alive]

    def emit(self, draft: EventDraft) -> None:
        self.drafts.append(draft)

    def env(self, civ) -> float:
        key = (civ.id, civ.position)
        if key not in self._env:
            self._env[key] = environmental_multiplier(self.terrain.sample(civ.position))
        return self._env[key]

    def record(self, civ):
        return ensure_record(self.registry, civ)

    @property
    def cap(self) -> int:
        return self.cfg.get('max_civilizations', self.registry.max_civilizations)

    @property
    def max_len(self) -> int:
        return self.cfg.get('max_name_length', 40)

    def room(self) -> int:
        return self.pending.room(len(self.registry), self.cap)

    def kill(self, civ) -> None:
        civ.population = 0.0
        civ.is_active  = False
        self.pending.queue_destroy(civ.id)


class InteractionEngine:
    """Advances every agent one tick and returns what happened."""

    def __init__(self, registry: AgentRegistry, history: HistoryLog,
                 territories: Optional[TerritoryStore] = None,
                 terrain=None, names=None, config=None, start_year: float = 0.0):
        self.registry    = registry
        self.history     = history
        self.territories = territories or TerritoryStore()
        self.terrain     = terrain or RadialTerrain()
        self.names       = names or ComponentNames()
        self.config      = config
        self.year        = start_year
        self._accum      = {name: 0.0 for name in _config.PASS_ORDER}
        self._passes = {
            'world_events':   events.world_events_pass,
            'heroic_leaders': events.heroic_leaders_pass,
            'coalition_wars': conflict.coalition_pass,
            'conflicts':      conflict.conflicts_pass,
            'emergence':      emergence.emergence_pass,
            'growth':         growth.growth_pass,
            'warfare':        conflict.warfare_pass,
            'relations':      relations.relations_pass,
            'expansion':      expansion.expansion_pass,
            'collapse':       collapse_pass,
            'personality':    personality_pass,
        }

    def tick(self, rng, dt: float) -> TickResult:
        """Run every eligible pass once.  A missing config makes this a no-op."""
        cfg = self.config
        if cfg is None:
            return TickResult(ran=False, year=self.year,
                              passes_skipped=list(_config.PASS_ORDER))

        self.year += dt
        if 'max_civilizations' in cfg:
            self.registry.max_civilizations = cfg['max_civilizations']
        ctx = TickContext(self.registry.snapshot(), rng, self.year, cfg,
                          self.registry, self.territories, self.terrain, self.names)
        result = TickResult(ran=True, year=self.year)
        intervals = cfg.get('pass_intervals', {})

        for name in _config.PASS_ORDER:
            if not cfg.get(f'enable_{name}'):
                result.passes_skipped.append(name)
                continue
            self._accum[name] += dt
            if self._accum[name] < intervals.get(name, 0.0):
                continue                                  # cooling down
            pass_dt, self._accum[name] = self._accum[name], 0.0
            self._passes[name](ctx, pass_dt)
            for civ in ctx.civs:
                civ.clamp()
            result.passes_run.append(name)

        self.registry.commit(ctx.civs)
        spawned, destroyed = self.registry.apply(ctx.pending)
        for cid in destroyed:
            self.territories.release_owned(cid)
        for civ, callback in ctx.on_spawn:
            if civ.id in spawned:
                callback(civ)
        result.spawned   = spawned
        result.destroyed = destroyed
        result.events    = self.history.extend(ctx.drafts, self.year)
        return result


# ══════════════════════════════════════════════════════════════════════════
# Pass 10 — collapse and cleanup
# ══════════════════════════════════════════════════════════════════════════

def collapse_pass(ctx: TickContext, dt: float) -> None:
    for civ in ctx.civs:
        if civ.population <= 0 or not civ.is_active:
            ctx.kill(civ)
            continue
        if ('Colony' in civ.name and civ.population < COLONY_ABANDON_POP
                and civ.wealth < COLONY_ABANDON_WEALTH):
            ctx.emit(EventDraft(
                title=f"{civ.name} Abandoned",
                description=f"The struggling colony of {civ.name} was abandoned "
                            f"by its last settlers.",
                event_type='Social', category='Collapse', significance=0.8,
                location=civ.position, civ_id=civ.id,
            ))
            ctx.kill(civ)
            continue
        if civ.stability < 0.3 and civ.population > 1000 and chance(ctx.rng, REFORM_RATE, dt):
            civ.stability += 0.3
            ctx.emit(EventDraft(
                title=f"Political Reform in {civ.name}",
                description=f"Reformers in {civ.name} restored order after years of crisis.",
                event_type='Political', category='Reform', significance=1.5,
                location=civ.position, civ_id=civ.id,
            ))


# ══════════════════════════════════════════════════════════════════════════
# Pass 11 — personality evolution
# ══════════════════════════════════════════════════════════════════════════

def personality_pass(ctx: TickContext, dt: float) -> None:
    live = ctx.live()
    total_wealth = sum(c.wealth for c in live)
    for civ in live:
        others = len(live) - 1
        mean_other = (total_wealth - civ.wealth) / others if others else civ.wealth
        env = ctx.env(civ)
        civ.resource_stress = resource_stress(civ.resources, civ.population)
        capacity = growth.carrying_capacity(civ, env)
        since = (ctx.year - civ.last_attacked_year) if civ.last_attacked_year >= 0 else None
        rec = ctx.record(civ)
        s = Stressors(
            resource_stress=civ.resource_stress,
            env_multiplier=env,
            pressure=civ.population / max(1.0, capacity),
            wealth_ratio=civ.wealth / max(1.0, mean_other),
            stability=civ.stability,
            years_since_attack=since,
            wins=civ.successful_wars,
            losses=civ.lost_wars,
            humiliated=civ.has_been_humiliated,
            trauma_resistance=rec.trauma_resistance,
        )
        new = fade_modifiers(rec, evolve(civ.traits(), s, dt), dt)
        civ.set_traits(new)
        rec.current = dict(new)
        rec.stress  = civ.resource_stress

        stage = next_stage(rec, civ, ctx.year)
        if stage is not rec.stage:
            rec.previous         = dict(rec.current)
            rec.last_change_year = ctx.year
            old, rec.stage       = rec.stage, stage
            ctx.emit(EventDraft(
                title=f"{civ.name} Becomes {stage.value}",
                description=_stage_text(civ.name, old, stage),
                event_type='Social', category='Personality', significance=1.2,
                location=civ.position, civ_id=civ.id,
            ))


_STAGE_TEXT = {
    Stage.NAIVE:       "{name} is young and untested.",
    Stage.DEVELOPING:  "{name} begins to find its character after a {old} youth.",
    Stage.MATURE:      "{name} has settled into a mature identity.",
    Stage.HARDENED:    "Endless wars have hardened {name} against change.",
    Stage.BROKEN:      "Defeat and betrayal have broken the spirit of {name}.",
    Stage.ENLIGHTENED: "{name} has risen above its old wounds into a balanced age.",
}
assert set(_STAGE_TEXT) == set(Stage)


def _stage_text(name: str, old: Stage, new: Stage) -> str:
    return _STAGE_TEXT[new].format(name=name, old=old.value.lower())

