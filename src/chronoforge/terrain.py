# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
terrain.py — Default terrain/biome provider.

The engine only ever calls sample(position) and reads the result.  The
default RadialTerrain samples three Perlin fields (height, moisture,
temperature) through noise.pnoise2 at seeded offsets, and bands resource
density by distance from the world origin, so the heartland is richer than
the rim.
"""

import math
import random
from dataclasses import dataclass
from typing import Protocol

from noise import pnoise2

BIOMES = ('Plains', 'Forest', 'Mountains', 'Desert', 'Coast',
          'Tundra', 'Swamp', 'Rainforest')

# ── Resource density by distance from origin ──────────────────────────────
_DENSITY_BANDS = (
    (50.0,  1.5),
    (100.0, 1.2),
    (150.0, 1.0),
    (200.0, 0.8),
)
_DENSITY_RIM = 0.6

_NOISE_SCALE   = 1 / 60.0   # world units → noise space; lower = larger regions
_NOISE_OCTAVES = 4
_FIELDS        = ('height', 'moisture', 'temperature')


@dataclass(frozen=True)
class TerrainSample:
    height:           float
    moisture:         float
    temperature:      float
    resource_density: float
    biome_tag:        str


class TerrainProvider(Protocol):
    def sample(self, position) -> TerrainSample: ...


def density_for_distance(d: float) -> float:
    for limit, density in _DENSITY_BANDS:
        if d < limit:
            return density
    return _DENSITY_RIM


class RadialTerrain:
    """Seeded default terrain.  Pure lookups after construction."""

    def __init__(self, seed: int = 0):
        rng = random.Random(seed)
        self._offsets = {name: (rng.uniform(0, 1000), rng.uniform(0, 1000))
                         for name in _FIELDS}

    def _field(self, name: str, x: float, y: float) -> float:
        ox, oy = self._offsets[name]
        v = pnoise2(ox + x * _NOISE_SCALE, oy + y * _NOISE_SCALE,
                    octaves=_NOISE_OCTAVES)
        # pnoise2 is roughly [-0.7, 0.7]; recentre onto [0, 1]
        return min(1.0, max(0.0, 0.5 + v))

    def sample(self, position) -> TerrainSample:
        x, y = float(position[0]), float(position[1])
        h = self._field('height', x, y)
        m = self._field('moisture', x, y)
        t = self._field('temperature', x, y)
        return TerrainSample(
            height=h, moisture=m, temperature=t,
            resource_density=density_for_distance(math.hypot(x, y)),
            biome_tag=classify(h, m, t),
        )


def classify(height: float, moisture: float, temperature: float) -> str:
    if height < 0.2:
        return 'Coast'
    if height > 0.75:
        return 'Mountains'
    if temperature < 0.25:
        return 'Tundra'
    if moisture < 0.3:
        return 'Desert' if temperature > 0.5 else 'Plains'
    if moisture > 0.7:
        return 'Rainforest' if temperature > 0.6 else 'Swamp'
    return 'Forest' if moisture > 0.5 else 'Plains'


def environmental_multiplier(sample: TerrainSample) -> float:
    return sample.resource_density


def cultural_multiplier(civ) -> float:
    """Capacity boost from a strongly religious or cultured society."""
    if civ.religion > 7:
        return 1.3
    if civ.religion > 4:
        return 1.1
    if civ.culture > 7:
        return 1.2
    if civ.culture > 4:
        return 1.05
    return 1.0
