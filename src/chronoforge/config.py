# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
config.py — Shared configuration constants for the Chronoforge history engine.

Module-level constants are the defaults the runner uses.  DEFAULTS is the
read-only bag handed to the engine; load_config() merges CLI / test overrides
into it.  A subsystem whose enable flag is missing from the bag skips its
pass instead of raising.
"""

from types import MappingProxyType

# ── Simulation length ───────────────────────────────────────────────────
YEARS          = 500     # simulated years per run
YEARS_PER_TICK = 0.5     # dt handed to the engine each tick

# ── Population of agents ────────────────────────────────────────────────
STARTING_CIVILIZATIONS = 6
MAX_CIVILIZATIONS      = 15    # hard registry cap
MAX_NAME_LENGTH        = 40    # sanitize_name() truncation length

# ── Narrative pacing ────────────────────────────────────────────────────
MAX_ACTIVE_ARCS        = 3
ARC_POTENTIAL_FLOOR    = 0.6   # minimum story potential for a new arc
ARC_UPDATE_INTERVAL    = 2.0   # years between arc manager updates

# ── World layout ────────────────────────────────────────────────────────
WORLD_RADIUS = 250.0    # agents are seeded inside this radius of the origin

# ── Pass order (fixed; later passes observe earlier mutations) ───────────
PASS_ORDER = (
    'world_events',
    'heroic_leaders',
    'coalition_wars',
    'conflicts',        # religious wars, betrayal, cascades
    'emergence',
    'growth',
    'warfare',
    'relations',        # diplomacy, trade, religion diffusion
    'expansion',        # cities, aggressive expansion, monuments, wonders
    'collapse',
    'personality',
)

# ── Experimentally tuneable parameters ──────────────────────────────────
# Every pass has an enable_<name> flag and an interval (years).  Interval 0
# means "every tick".
DEFAULTS = MappingProxyType({
    **{f'enable_{name}': True for name in PASS_ORDER},
    'pass_intervals':        MappingProxyType({name: 0.0 for name in PASS_ORDER}),
    'max_civilizations':     MAX_CIVILIZATIONS,
    'max_name_length':       MAX_NAME_LENGTH,
    'world_event_rate':      0.001,   # per year
    'leader_rate':           0.0005,  # per year, scaled by pop/10000 × stability
    'coalition_power_floor': 50_000,
    'conflict_radius':       150.0,
    'catastrophe_population': 25_000,
    'resource_cap':          15_000,
    'enable_narrative':      True,
    'max_active_arcs':       MAX_ACTIVE_ARCS,
    'arc_potential_floor':   ARC_POTENTIAL_FLOOR,
    'arc_update_interval':   ARC_UPDATE_INTERVAL,
})


def load_config(overrides: dict | None = None) -> MappingProxyType:
    """Return DEFAULTS merged with *overrides* as a read-only mapping.

    Keys set to None in *overrides* are removed, which is how tests simulate
    a subsystem whose configuration is absent.  pass_intervals may be given
    partially; unknown pass names raise ValueError.
    """
    merged = dict(DEFAULTS)
    for key, value in (overrides or {}).items():
        if key == 'pass_intervals':
            unknown = set(value) - set(PASS_ORDER)
            if unknown:
                raise ValueError(f"unknown pass name(s): {sorted(unknown)}")
            merged[key] = MappingProxyType({**DEFAULTS['pass_intervals'], **value})
        elif value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    return MappingProxyType(merged)
