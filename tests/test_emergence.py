"""
test_emergence.py — pytest suite for emergence.py (pass 5)
===========================================================
Covers: the four pressure scores, split() population conservation and
child naming, and the registry-room guard in emergence_pass.
"""

import random

import pytest

from chronoforge.emergence import (EMERGENCE_POP, Emergence, civil_war_rate,
                                   emergence_pass, revolt_rate, schism_rate, split)
from chronoforge.registry import Civilization


# ─────────────────────────────────────────────────────
# Pressure scores
# ─────────────────────────────────────────────────────

class TestPressures:
    def test_calm_realm_has_no_revolt_pressure(self):
        assert revolt_rate(Civilization(population=10_000.0, resources=9_000.0)) == 0.0

    def test_huge_unstable_realm_revolts(self):
        civ = Civilization(population=40_000.0, stability=0.1)
        assert revolt_rate(civ) > 0.001

    def test_civil_war_from_instability(self):
        assert civil_war_rate(Civilization(stability=0.05)) == pytest.approx(0.2 * 0.004)

    def test_zealots_schism(self):
        assert schism_rate(Civilization(religion=9.0, culture=1.0)) > 0.0


# ─────────────────────────────────────────────────────
# split
# ─────────────────────────────────────────────────────

class TestSplit:
    @pytest.mark.parametrize("kind", list(Emergence))
    def test_population_conserved(self, kind):
        parent = Civilization(id=4, name="Varn", population=20_000.0, wealth=9_000.0)
        p0 = parent.population
        child, share = split(parent, kind, random.Random(5), year=30.0)
        assert child.population + parent.population == pytest.approx(p0)
        assert 0.15 <= share <= 0.35
        assert child.parent_id == 4
        assert child.founded_year == 30.0
        assert child.name.endswith("Varn")

    def test_schism_child_is_religious(self):
        parent = Civilization(population=20_000.0)
        child, _ = split(parent, Emergence.SCHISM, random.Random(1), year=0.0)
        assert child.civ_type == 'Religious'

    def test_parent_destabilised(self):
        parent = Civilization(population=20_000.0, stability=0.8, hatred=1.0)
        split(parent, Emergence.REVOLT, random.Random(2), year=0.0)
        assert parent.stability == pytest.approx(0.5)
        assert parent.hatred == pytest.approx(4.0)

    def test_child_stats_within_ranges(self):
        parent = Civilization(population=20_000.0, aggressiveness=9.5, hatred=9.0)
        child, _ = split(parent, Emergence.CIVIL_WAR, random.Random(3), year=0.0)
        assert all(0.0 <= v <= 10.0 for v in child.traits().values())
        assert 0.0 <= child.stability <= 1.0


# ─────────────────────────────────────────────────────
# emergence_pass
# ─────────────────────────────────────────────────────

class TestEmergencePass:
    def _restless(self):
        return Civilization(name="Kar", population=30_000.0, stability=0.1)

    def test_split_queued_with_record(self, make_ctx, scripted):
        civ = self._restless()
        ctx = make_ctx(civ, rng=scripted([0.0]))
        emergence_pass(ctx, 0.5)
        [(child, record)] = ctx.pending.spawns
        assert record is not None
        assert child.id == 0                      # ids are assigned on apply
        [draft] = ctx.drafts
        assert draft.category == 'Revolution'
        assert draft.significance == 8.0

    def test_no_room_no_split(self, make_ctx, scripted):
        civ = self._restless()
        other = Civilization(name="Oss")
        ctx = make_ctx(civ, other, rng=scripted([0.0]),
                       overrides={'max_civilizations': 2})
        emergence_pass(ctx, 0.5)
        assert ctx.pending.spawns == []
        assert ctx.drafts == []
        assert civ.population == 30_000.0

    def test_small_realms_never_split(self, make_ctx, scripted):
        rng = scripted([0.0] * 8)
        ctx = make_ctx(Civilization(population=EMERGENCE_POP - 1, stability=0.05), rng=rng)
        emergence_pass(ctx, 0.5)
        assert rng.remaining == 8

    def test_one_split_per_agent_per_tick(self, make_ctx, scripted):
        civ = self._restless()
        civ.religion, civ.culture = 9.0, 1.0
        ctx = make_ctx(civ, rng=scripted([0.0] * 8))
        emergence_pass(ctx, 0.5)
        assert len(ctx.pending.spawns) == 1
