# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
world.py — Seeding the starting civilizations.

Each founder gets the spawn defaults from registry.Civilization, a randomly
drawn temperament (harsh biomes breed slightly more aggressive peoples), a
type drawn by weight from temperament and home biome, and a name from the
name generator.  Founders keep MIN_SPACING apart; sea-level coast is allowed,
but positions are always inside WORLD_RADIUS of the origin.
"""

import math

from .config      import STARTING_CIVILIZATIONS, WORLD_RADIUS
from .naming      import with_suffix
from .personality import new_record
from .registry    import CIV_TYPES, Civilization

MIN_SPACING    = 60.0
PLACE_ATTEMPTS = 200

# ── Biome bonus to each type weight (Military, Technology, Religious, Trade, Cultural)
_BIOME_BONUS = {
    'Mountains':  (0.5, 0.3, 0.0, 0.0, 0.0),
    'Desert':     (0.4, 0.0, 0.0, 0.6, 0.0),
    'Forest':     (0.0, 0.0, 0.3, 0.0, 0.4),
    'Coast':      (0.0, 0.2, 0.0, 0.7, 0.0),
    'Plains':     (0.3, 0.0, 0.0, 0.3, 0.0),
    'Tundra':     (0.6, 0.0, 0.2, 0.0, 0.0),
    'Swamp':      (0.0, 0.0, 0.5, 0.0, 0.3),
    'Rainforest': (0.0, 0.0, 0.4, 0.0, 0.5),
}
_HARSH = {'Desert', 'Mountains'}


def draw_traits(rng, biome: str) -> dict:
    stress = 0.3 if biome in _HARSH else 0.1
    return {
        'aggressiveness': rng.uniform(1.0, 4.0) + stress,
        'defensiveness':  rng.uniform(2.0, 5.0),
        'greed':          rng.uniform(1.0, 3.0),
        'paranoia':       rng.uniform(0.5, 2.0),
        'ambition':       rng.uniform(2.0, 6.0),
        'desperation':    0.5,
        'hatred':         0.2,
        'pride':          rng.uniform(3.0, 7.0),
        'vengefulness':   rng.uniform(1.0, 4.0),
    }


def type_weights(biome: str, traits: dict) -> list:
    aggr, amb = traits['aggressiveness'], traits['ambition']
    greed, pride = traits['greed'], traits['pride']
    weights = [
        1.0 + aggr * 0.3 + amb * 0.2,                    # Military
        1.0 + (10 - aggr) * 0.1 + amb * 0.15,            # Technology
        1.0 + pride * 0.2 + (10 - greed) * 0.15,         # Religious
        1.0 + greed * 0.3 + amb * 0.1,                   # Trade
        1.0 + pride * 0.15 + (10 - aggr) * 0.2,          # Cultural
    ]
    bonus = _BIOME_BONUS.get(biome, (0.0,) * len(CIV_TYPES))
    return [w + b for w, b in zip(weights, bonus)]


def draw_type(rng, biome: str, traits: dict) -> str:
    return rng.choices(CIV_TYPES, weights=type_weights(biome, traits))[0]


def _place(rng, taken: list) -> tuple:
    """Uniform point in the world disc, kept MIN_SPACING from earlier founders."""
    pos = (0.0, 0.0)
    for _ in range(PLACE_ATTEMPTS):
        r = WORLD_RADIUS * math.sqrt(rng.random())
        a = rng.uniform(0.0, 2 * math.pi)
        pos = (r * math.cos(a), r * math.sin(a))
        if all(math.hypot(pos[0] - x, pos[1] - y) >= MIN_SPACING for x, y in taken):
            return pos
    return pos            # crowded world: accept the last draw


def seed_world(registry, terrain, names, rng, count: int = STARTING_CIVILIZATIONS,
               year: float = 0.0) -> list:
    """Spawn *count* founders (fewer if the registry cap is lower).  Returns ids."""
    taken: list = []
    ids:   list = []
    for _ in range(count):
        pos    = _place(rng, taken)
        biome  = terrain.sample(pos).biome_tag
        traits = draw_traits(rng, biome)
        civ_type = draw_type(rng, biome, traits)
        base   = names.name_for('civilization', pos, traits)
        civ = Civilization(
            name=with_suffix(base, names.polity_title(civ_type, pos), names.max_len),
            position=pos,
            civ_type=civ_type,
            founded_year=year,
        )
        civ.set_traits(traits)
        cid = registry.spawn(civ, new_record(civ, rng))
        if cid is None:
            print(f"[World] cap {registry.max_civilizations} reached — "
                  f"{count - len(ids)} founder(s) not placed")
            break
        taken.append(pos)
        ids.append(cid)
        print(f"[World] Founded {civ.name} ({civ_type}) in the {biome.lower()} "
              f"at ({pos[0]:.0f}, {pos[1]:.0f})")
    return ids
