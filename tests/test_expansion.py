"""
test_expansion.py — pytest suite for expansion.py (pass 9)
===========================================================
Covers: monument kind selection, building a monument and a wonder with
their effects on the builder, and the colony freeze near the registry cap.
"""

import pytest

from chronoforge.expansion import expansion_pass, monument_kind
from chronoforge.registry  import Civilization


def _builder(**kw):
    base = dict(name="Oss", population=5_000.0, wealth=4_000.0, stability=0.8,
                technology=3.0)
    base.update(kw)
    return Civilization(**base)


# ─────────────────────────────────────────────────────
# Monuments
# ─────────────────────────────────────────────────────

class TestMonuments:
    def test_kind_follows_dominant_stat(self):
        assert monument_kind(_builder(religion=6.0)) == ('Temple', 'Great Temple')
        assert monument_kind(_builder(military=7.0))[0] == 'Monument'
        assert monument_kind(_builder(technology=7.0))[0] == 'Academy'
        assert monument_kind(_builder(trade=7.0))[0] == 'Marketplace'
        assert monument_kind(_builder()) == ('Palace', 'Palace Complex')

    def test_religion_outranks_military(self):
        assert monument_kind(_builder(religion=6.0, military=9.0))[0] == 'Temple'

    def test_temple_built(self, make_ctx, scripted):
        civ = _builder(religion=6.0)
        rng = scripted([0.0, 0.5, 0.5])
        ctx = make_ctx(civ, rng=rng)

        expansion_pass(ctx, 1.0)

        [temple] = ctx.territories.territories
        assert temple.kind == 'Temple'
        assert temple.name == "Great Temple of Oss"
        assert temple.owner_id == civ.id
        assert temple.position == pytest.approx((0.0, 0.0))
        assert civ.wealth == pytest.approx(3_200.0)
        assert civ.culture == pytest.approx(2.0)
        assert civ.stability == pytest.approx(0.9)
        assert civ.prestige == pytest.approx(2.0)
        assert ctx.record(civ).cultural_achievements == 1
        assert ctx.drafts[0].category == 'Construction'
        assert ctx.drafts[0].significance == 2.5
        assert rng.remaining == 0

    def test_unstable_realm_builds_nothing(self, make_ctx, scripted):
        rng = scripted([0.0])
        ctx = make_ctx(_builder(stability=0.6), rng=rng)
        expansion_pass(ctx, 1.0)
        assert ctx.territories.territories == []
        assert rng.remaining == 1


# ─────────────────────────────────────────────────────
# Wonders
# ─────────────────────────────────────────────────────

class TestWonders:
    def test_wonder_built(self, make_ctx, scripted):
        civ = _builder(population=16_000.0, wealth=9_000.0, stability=0.9, technology=6.0)
        # colony 0.99, monument 0.9 (p = 0.5), wonder 0.0, then the jitter
        rng = scripted([0.99, 0.9, 0.0, 0.5, 0.5])
        rng.choice = lambda seq: 'Colossus'
        ctx = make_ctx(civ, rng=rng)

        expansion_pass(ctx, 0.5)

        [wonder] = ctx.territories.territories
        assert wonder.kind == 'Wonder'
        assert wonder.name == "Colossus of Oss"
        assert wonder.control_radius == 50.0
        assert civ.wealth == pytest.approx(4_500.0)
        assert civ.culture == pytest.approx(4.0)
        assert civ.technology == pytest.approx(7.0)
        assert civ.prestige == pytest.approx(5.0)
        assert ctx.drafts[0].title == "The Colossus of Oss"
        assert ctx.drafts[0].significance == 4.0
        assert ctx.pending.spawns == []


# ─────────────────────────────────────────────────────
# Colonies near the cap
# ─────────────────────────────────────────────────────

class TestColonyHeadroom:
    def test_no_colony_near_cap(self, make_ctx, scripted):
        rich = _builder(population=16_000.0, wealth=9_000.0, stability=0.9, technology=6.0)
        far  = Civilization(name="Ruun", position=(900.0, 0.0))
        # with room, the leading 0.0 would found a colony; here it raises a palace
        rng = scripted([0.0, 0.5, 0.5, 0.99])
        ctx = make_ctx(rich, far, rng=rng, overrides={'max_civilizations': 3})

        expansion_pass(ctx, 0.5)

        assert ctx.pending.spawns == []
        assert [t.kind for t in ctx.territories.territories] == ['Palace']
        assert [d.category for d in ctx.drafts] == ['Construction']
        assert rng.remaining == 0
