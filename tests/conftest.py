"""
conftest.py — shared fixtures for the Chronoforge test suite
=============================================================
Provides a scripted RNG for forcing branches, a flat terrain, and a factory
that wires civilizations into a registry plus a TickContext for pass tests.
"""

import random

import pytest

from chronoforge import dashboard_bridge
from chronoforge.config      import load_config
from chronoforge.engine      import TickContext
from chronoforge.naming      import ComponentNames
from chronoforge.personality import new_record, reset_warnings
from chronoforge.registry    import AgentRegistry
from chronoforge.terrain     import TerrainSample
from chronoforge.territory   import TerritoryStore


# ─────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────

class ScriptedRandom(random.Random):
    """random() answers from *script* first, then from the seeded stream.

    uniform(a, b) is a + (b - a) * random(), so scripted values also drive
    every uniform() draw.
    """

    def __init__(self, script=(), seed=0):
        super().__init__(seed)
        self._script = list(script)

    def random(self):
        if self._script:
            return self._script.pop(0)
        return super().random()

    @property
    def remaining(self) -> int:
        return len(self._script)


class FlatTerrain:
    """Plains everywhere, environmental multiplier exactly 1.0."""

    def sample(self, position):
        return TerrainSample(height=0.5, moisture=0.5, temperature=0.5,
                             resource_density=1.0, biome_tag='Plains')


@pytest.fixture(autouse=True)
def _fresh_module_state():
    reset_warnings()
    dashboard_bridge.reset_history()
    yield
    reset_warnings()
    dashboard_bridge.reset_history()


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def flat_terrain():
    return FlatTerrain()


@pytest.fixture
def make_ctx():
    """make_ctx(*civs, rng=None, year=10.0, overrides=None) → TickContext.

    Civilizations are spawned (with personality records) into a fresh
    registry.  ctx.civs holds the registry's own objects, so the test's
    references see every mutation a pass makes.
    """
    def _make(*civs, rng=None, year=10.0, overrides=None):
        cfg = load_config(overrides)
        registry = AgentRegistry(cfg['max_civilizations'])
        seed_rng = random.Random(0)
        for civ in civs:
            registry.spawn(civ, new_record(civ, seed_rng))
        return TickContext(registry.all(), rng or random.Random(1), year, cfg,
                           registry, TerritoryStore(), FlatTerrain(),
                           ComponentNames(1))
    return _make
