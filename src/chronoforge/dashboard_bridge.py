# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
dashboard_bridge.py — Periodic JSON snapshot writer for the Streamlit live dashboard.

Call write_dashboard_snapshot() from sim.py every DASHBOARD_WRITE_EVERY ticks.
Uses an atomic rename-swap so the dashboard process never reads a half-written file.

No Streamlit dependency — this runs inside the main simulation process.
"""

import collections
import json
import os
import pathlib

from .config  import WORLD_RADIUS
from .terrain import BIOMES

# ── Configuration ─────────────────────────────────────────────────────────
DASHBOARD_WRITE_EVERY: int    = 20                          # write interval (ticks)
EVENT_TAIL:            int    = 40                          # feed lines in each snapshot
DASHBOARD_DATA_PATH:   pathlib.Path = pathlib.Path("dashboard_data.json")

_POP_HISTORY_MAX = 150   # keep last 150 snapshots → 3 000 ticks of history at interval=20
_GRID_CELLS      = 48    # biome grid resolution per side
_GRID_SPAN       = WORLD_RADIUS * 2.4

# ── Rolling population history (module-level, survives across calls) ──────
_pop_history: collections.deque = collections.deque(maxlen=_POP_HISTORY_MAX)
_biome_cache: dict = {}   # id(terrain) → grid; terrain never changes within a run


# ──────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────

def reset_history() -> None:
    _pop_history.clear()
    _biome_cache.clear()


def _tick_rate(tick_times: list) -> float:
    """Ticks per second averaged over the last 30 recorded tick durations."""
    if not tick_times:
        return 0.0
    recent = list(tick_times)[-30:]
    total  = sum(recent)
    return round(len(recent) / total, 2) if total > 0 else 0.0


def grid_to_world(r: int, c: int) -> tuple[float, float]:
    """Centre of biome-grid cell (r, c) in world coordinates."""
    step = _GRID_SPAN / _GRID_CELLS
    return (-_GRID_SPAN / 2 + (c + 0.5) * step,
            -_GRID_SPAN / 2 + (r + 0.5) * step)


def _biome_grid(terrain) -> list:
    key = id(terrain)
    if key not in _biome_cache:
        _biome_cache[key] = [
            [BIOMES.index(terrain.sample(grid_to_world(r, c)).biome_tag)
             for c in range(_GRID_CELLS)]
            for r in range(_GRID_CELLS)
        ]
    return _biome_cache[key]


# ──────────────────────────────────────────────────────────────────────────
# Main API
# ──────────────────────────────────────────────────────────────────────────

def write_dashboard_snapshot(
    t:           int,
    year:        float,
    registry,
    territories,
    terrain,
    arcs:        list,
    tick_times:  list,
    event_log:   list,
    path:        pathlib.Path = None,
) -> None:
    """Serialise current simulation state and write it to *path* atomically.

    The write goes to a .tmp file first; os.replace() then performs an atomic rename
    so the dashboard reader never sees a partial JSON file.
    """
    path = pathlib.Path(path or DASHBOARD_DATA_PATH)

    # ── Civilization snapshots ────────────────────────────────────────────
    pop_snap: dict[str, float] = {}
    civ_data: list = []
    for civ in registry.all():
        if not civ.alive:
            continue
        rec = registry.personality(civ.id)
        pop_snap[civ.name] = round(civ.population, 1)
        civ_data.append({
            'id':         civ.id,
            'name':       civ.name,
            'type':       civ.civ_type,
            'position':   [round(civ.position[0], 1), round(civ.position[1], 1)],
            'population': round(civ.population, 1),
            'wealth':     round(civ.wealth, 1),
            'stability':  round(civ.stability, 3),
            'military':   round(civ.military, 2),
            'technology': round(civ.technology, 2),
            'stage':      rec.stage.value if rec else 'Unknown',
            'parent_id':  civ.parent_id,
        })
    civ_data.sort(key=lambda x: x['population'], reverse=True)

    # ── Append population snapshot to rolling history ─────────────────────
    _pop_history.append({'tick': t, 'year': round(year, 2), 'populations': pop_snap})

    terr_data = [{
        'name':     terr.name,
        'kind':     terr.kind,
        'owner_id': terr.owner_id,
        'position': [round(terr.position[0], 1), round(terr.position[1], 1)],
        'ruined':   terr.is_ruined,
    } for terr in territories.territories]

    arc_data = [{
        'name':           a.name,
        'type':           a.arc_type.value,
        'stage':          a.stage.name.replace('_', ' ').title(),
        'progress':       round(a.progress, 3),
        'tension':        round(a.tension, 3),
        'protagonist_id': a.protagonist_id,
        'epic':           a.is_epic,
    } for a in arcs]

    # ── Assemble snapshot ─────────────────────────────────────────────────
    snap = {
        'tick':        t,
        'year':        round(year, 2),
        'alive':       len(civ_data),
        'tick_rate':   _tick_rate(tick_times),
        'world_span':  _GRID_SPAN,
        'civs':        civ_data,
        'territories': terr_data,
        'religions':   [{'name': r.name, 'founder_id': r.founder_id,
                         'position': [round(r.position[0], 1), round(r.position[1], 1)]}
                        for r in territories.religions],
        'arcs':        arc_data,
        'biome_grid':  _biome_grid(terrain),
        'biomes':      list(BIOMES),
        'pop_history': list(_pop_history),
        'event_tail':  list(event_log)[-EVENT_TAIL:],
    }

    # ── Atomic write ──────────────────────────────────────────────────────
    tmp = path.with_suffix('.tmp')
    tmp.write_text(json.dumps(snap, separators=(',', ':')), encoding='utf-8')
    os.replace(tmp, path)
