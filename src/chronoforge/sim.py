# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
sim.py — Single entry point for the Chronoforge history simulation.

Run with:  python -m chronoforge --seed 7 --years 500

Per tick
────────
  Interaction Engine   — 11 ordered passes over a registry snapshot
  Registry             — commit snapshot, apply queued spawns / destroys
  Historical Event Log — append, forward to chronicle + metrics sinks
  Narrative Arc Manager— advance / open / close story arcs
  Display              — notable events, periodic progress, final report
"""

import argparse
import collections
import pathlib
import random
import sys
import time
from datetime import datetime

from . import config
from . import dashboard_bridge
from .engine    import InteractionEngine
from .history   import ChronicleFileSink, HistoryLog
from .metrics   import MetricsLogger
from .naming    import ComponentNames
from .narrative import NarrativeArcManager
from .registry  import AgentRegistry
from .terrain   import RadialTerrain
from .territory import TerritoryStore
from .world     import seed_world

PRINT_SIGNIFICANCE = 1.5     # events below this go to the chronicle only
MAJOR_SIGNIFICANCE = 4.0     # marked with ★ (always shown on the terminal)
EVENT_TAIL         = dashboard_bridge.EVENT_TAIL   # formatted lines kept for the live feed


# ══════════════════════════════════════════════════════════════════════════
# Logging — tees stdout to file; shows only notable lines on terminal
# ══════════════════════════════════════════════════════════════════════════

class _LogTee:
    """Every byte goes to the log file.  Only filtered lines reach the terminal."""

    # Keywords that earn a line a spot on the terminal during the run
    _SHOW = frozenset({
        # War and conquest
        '[WARFARE]', '[COALITION]', '[CONQUEST]', '[BETRAYAL]',
        # Births and deaths of realms
        '[REVOLUTION]', '[COLLAPSE]', '[EXPANSION]',
        # World shocks and heroes
        '[DISASTER]', '[GOLDEN AGE]', '[HERO]',
        # Story arcs
        '[NARRATIVE]',
        # Significance marker
        '★',
        # Registry / personality diagnostics
        'WARNING', '[Registry]', '[World]',
        # Terminal signals
        'All civilizations have fallen', '[Simulation interrupted',
    })

    passthrough: bool = False   # True → show everything (used for final report)

    def __init__(self, log_fh, real_stdout):
        self._log  = log_fh
        self._real = real_stdout
        self._buf  = ''

    def write(self, text: str) -> None:
        self._log.write(text)
        self._log.flush()
        self._buf += text
        while '\n' in self._buf:
            line, self._buf = self._buf.split('\n', 1)
            show = self.passthrough or any(kw in line for kw in self._SHOW)
            if show:
                self._real.write(line + '\n')
                self._real.flush()

    def flush(self) -> None:
        self._log.flush()

    def fileno(self) -> int:          # lets sys.stderr etc. work
        return self._real.fileno()


# ══════════════════════════════════════════════════════════════════════════
# Command line
# ══════════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog='chronoforge',
        description='Emergent civilization history simulator.')
    p.add_argument('--seed', type=int, default=None,
                   help='RNG seed (random when omitted)')
    p.add_argument('--years', type=float, default=config.YEARS,
                   help=f'simulated years (default {config.YEARS})')
    p.add_argument('--dt', type=float, default=config.YEARS_PER_TICK,
                   help=f'years per tick (default {config.YEARS_PER_TICK})')
    p.add_argument('--civs', type=int, default=config.STARTING_CIVILIZATIONS,
                   help='starting civilizations')
    p.add_argument('--max-civs', type=int, default=config.MAX_CIVILIZATIONS,
                   help='registry cap')
    p.add_argument('--condition', default='baseline',
                   help='experiment label written to run_summaries.csv')
    p.add_argument('--disable', action='append', default=[],
                   choices=config.PASS_ORDER, metavar='PASS',
                   help='turn a pass off (repeatable)')
    p.add_argument('--no-narrative', action='store_true',
                   help='disable the narrative arc manager')
    p.add_argument('--no-dashboard', action='store_true',
                   help='skip dashboard_data.json snapshots')
    p.add_argument('--no-metrics', action='store_true',
                   help='skip CSV metrics')
    p.add_argument('--metrics-dir', default='data',
                   help='directory for metrics CSVs (default data/)')
    p.add_argument('--chronicle', default='chronicle.txt',
                   help='plain-text chronicle file (empty string disables)')
    return p


def parse_args(argv=None) -> argparse.Namespace:
    """Parse and validate.  Out-of-range values raise ValueError."""
    args = build_parser().parse_args(argv)
    if args.years <= 0:
        raise ValueError(f"--years must be positive, got {args.years}")
    if args.dt <= 0:
        raise ValueError(f"--dt must be positive, got {args.dt}")
    if args.civs < 1:
        raise ValueError(f"--civs must be at least 1, got {args.civs}")
    if args.max_civs < args.civs:
        raise ValueError(f"--max-civs ({args.max_civs}) is below --civs ({args.civs})")
    return args


def overrides_from_args(args) -> dict:
    out = {'max_civilizations': args.max_civs}
    for name in args.disable:
        out[f'enable_{name}'] = False
    if args.no_narrative:
        out['enable_narrative'] = False
    return out


# ══════════════════════════════════════════════════════════════════════════
# The world in one object
# ══════════════════════════════════════════════════════════════════════════

class Simulation:
    """Wires registry, log, collaborators, engine and arc manager together."""

    def __init__(self, seed: int, civs: int = config.STARTING_CIVILIZATIONS,
                 overrides: dict | None = None):
        self.seed     = seed
        self.cfg      = config.load_config(overrides)
        self.rng      = random.Random(seed)
        max_len       = self.cfg['max_name_length']
        self.registry = AgentRegistry(self.cfg['max_civilizations'])
        self.history  = HistoryLog()
        self.terrain  = RadialTerrain(seed)
        self.names    = ComponentNames(seed, max_len)
        self.territories = TerritoryStore(max_len)
        self.engine   = InteractionEngine(self.registry, self.history,
                                          self.territories, self.terrain,
                                          self.names, self.cfg)
        self.narrative = NarrativeArcManager.from_config(self.history, self.cfg)
        seed_world(self.registry, self.terrain, self.names, self.rng, civs)

    @property
    def year(self) -> float:
        return self.engine.year

    def step(self, dt: float) -> list:
        """One tick: engine, then narrative.  Returns every new EventRecord."""
        result = self.engine.tick(self.rng, dt)
        records = list(result.events)
        if self.cfg.get('enable_narrative'):
            records += self.narrative.update(self.registry, result.events,
                                             self.rng, self.year, dt)
        return records


# ══════════════════════════════════════════════════════════════════════════
# Display helpers
# ══════════════════════════════════════════════════════════════════════════

def format_event(t: int, rec) -> str:
    star = '★ ' if rec.significance >= MAJOR_SIGNIFICANCE else ''
    return (f"Tick {t:04d}: Y{rec.year:7.1f} {star}[{rec.category.upper()}] "
            f"{rec.title} — {rec.description}")


def final_report(sim: Simulation, ticks_run: int) -> None:
    civs = sorted((c for c in sim.registry.all() if c.alive),
                  key=lambda c: c.population, reverse=True)
    print('═' * 78)
    print(f"  CHRONOFORGE — seed {sim.seed} · {ticks_run} ticks · year {sim.year:.1f}")
    print('═' * 78)
    print(f"  {'Civilization':<40} {'Type':<10} {'Pop':>8} {'Stab':>5} {'Stage':<12}")
    for c in civs:
        rec = sim.registry.personality(c.id)
        print(f"  {c.name:<40} {c.civ_type:<10} {c.population:>8,.0f} "
              f"{c.stability:>5.2f} {rec.stage.value if rec else '?':<12}")
    if not civs:
        print('  All civilizations have fallen.')

    owned = [t for t in sim.territories.territories if not t.is_ruined]
    print(f"\n  Territories: {len(owned)} held · {len(sim.territories.ruins())} in ruins · "
          f"{len(sim.territories.religions)} religions")

    by_cat = collections.Counter(r.category for r in sim.history)
    print(f"  Events: {len(sim.history)} total")
    for cat, n in by_cat.most_common():
        print(f"    {cat:<14} {n:>5}")

    arcs = sim.narrative.concluded
    if arcs or sim.narrative.arcs:
        print(f"\n  Stories told: {len(arcs)} · still unfolding: {len(sim.narrative.arcs)}")
        for a in arcs[-5:]:
            print(f"    {a.name} ({a.arc_type.value})")

    print('\n  Greatest moments:')
    top = sorted(sim.history, key=lambda r: (-r.significance, r.id))[:10]
    for r in top:
        print(f"    Y{r.year:7.1f}  {r.significance:4.1f}  {r.title}")
    print('═' * 78)


# ══════════════════════════════════════════════════════════════════════════
# Main loop
# ══════════════════════════════════════════════════════════════════════════

def run(argv=None) -> None:
    args  = parse_args(argv)
    seed  = args.seed if args.seed is not None else random.SystemRandom().randrange(1_000_000)
    ticks = int(round(args.years / args.dt))

    # ── Set up file logging ────────────────────────────────────────────────
    pathlib.Path('logs').mkdir(exist_ok=True)
    _ts       = datetime.now().strftime('%Y%m%d_%H%M%S')
    _log_path = f'logs/run_{_ts}.txt'
    _log_fh   = open(_log_path, 'w', encoding='utf-8')
    _real     = sys.stdout
    _tee      = _LogTee(_log_fh, _real)
    sys.stdout = _tee

    _real.write(f"Log → {_log_path}\n")
    _real.write(f"Running {ticks}-tick history (seed {seed}, {args.years:g} years)  "
                f"(wars / revolutions / stories show below)\n\n")

    sim = Simulation(seed, args.civs, overrides_from_args(args))

    chronicle = ChronicleFileSink(args.chronicle) if args.chronicle else None
    if chronicle:
        sim.history.add_sink(chronicle)
    metrics = None if args.no_metrics else MetricsLogger(seed, args.condition, args.metrics_dir)
    if metrics:
        sim.history.add_sink(metrics)

    event_log   = collections.deque(maxlen=EVENT_TAIL)
    _print_every = max(1, ticks // 20)
    _tick_times  = collections.deque(maxlen=max(30, _print_every))
    t = 0

    try:
        for t in range(1, ticks + 1):
            _t0 = time.time()
            for rec in sim.step(args.dt):
                line = format_event(t, rec)
                event_log.append(line)
                if rec.significance >= PRINT_SIGNIFICANCE:
                    print(line)

            if metrics:
                metrics.record_tick(t, sim.year, sim.registry, sim.territories,
                                    sim.narrative.arcs)
            _tick_times.append(time.time() - _t0)

            if not args.no_dashboard and t % dashboard_bridge.DASHBOARD_WRITE_EVERY == 0:
                dashboard_bridge.write_dashboard_snapshot(
                    t, sim.year, sim.registry, sim.territories, sim.terrain,
                    sim.narrative.arcs, _tick_times, event_log)

            # ── Progress line ──────────────────────────────────────────────
            if t % _print_every == 0:
                live = [c for c in sim.registry.all() if c.alive]
                window = list(_tick_times)[-_print_every:]
                avg_t  = sum(window) / len(window) if window else 0
                _real.write(
                    f'  ══ Year {sim.year:7.1f}: Civs:{len(live):2d}  '
                    f'Pop:{sum(c.population for c in live):>9,.0f}  '
                    f'Arcs:{len(sim.narrative.arcs)}  '
                    f'Events:{len(sim.history):5d}  '
                    f'{avg_t * 1000:.1f}ms/tick ══\n'
                )
                _real.flush()

            if not any(c.alive for c in sim.registry.all()):
                print('All civilizations have fallen.')
                break

    except KeyboardInterrupt:
        print("\n\n[Simulation interrupted by user]\n")

    finally:
        # Final report: passthrough so everything shows on terminal AND in log
        _real.write('\n')
        _tee.passthrough = True
        final_report(sim, t)
        if metrics:
            metrics.finalize(sim.registry, len(sim.narrative.concluded))
            metrics.close()
        if chronicle:
            chronicle.close()
        sys.stdout = _real
        _log_fh.close()
        print(f"\nFull log saved → {_log_path}")


# ══════════════════════════════════════════════════════════════════════════
if __name__ == '__main__':
    run()
